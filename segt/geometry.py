"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT

Fixed hardware parameters of a segmentation unit: granule, address width,
slots per bus master, the bus masters and target domains it knows about, and
where each field lives inside a slot register.
"""

# Standard Python deps
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Field:
    """
    Inclusive bit range [hi:lo] within a register.
    """
    hi: int
    lo: int

    @property
    def width( self ) -> int:
        return self.hi - self.lo + 1

    @property
    def mask( self ) -> int:
        return ((1 << self.width) - 1) << self.lo


@dataclass(frozen=True)
class RegisterLayout:
    """
    Bit positions of every field in a slot register. Anything not covered by a
    field is reserved and must be zero.
    """
    width: int
    read: Field
    write: Field
    execute: Field
    enable: Field
    valid: Field
    size: Field
    base: Field
    target: Field

    def fields( self ) -> Dict[str, Field]:
        return {
            "read": self.read,
            "write": self.write,
            "execute": self.execute,
            "enable": self.enable,
            "valid": self.valid,
            "size": self.size,
            "base": self.base,
            "target": self.target,
        }

    @property
    def reserved_mask( self ) -> int:
        used = 0
        for f in self.fields().values():
            used |= f.mask
        return ((1 << self.width) - 1) & ~used


@dataclass(frozen=True)
class AddressGeometry:
    """
    Constant table describing one SoC variant.
    """
    name: str
    granule_bits: int               # log2 of the smallest legal region
    address_bits: int               # total addressable span is 2**address_bits
    slots_per_master: int
    masters: Tuple[str, ...]
    targets: Tuple[str, ...]        # index in this tuple is the target code
    layout: RegisterLayout

    def __post_init__( self ):
        layout = self.layout
        used = 0
        for name,f in layout.fields().items():
            if f.lo < 0 or f.hi < f.lo or f.hi >= layout.width:
                raise ValueError(f"{self.name}: field {name} [{f.hi}:{f.lo}] does not fit in {layout.width} bits")
            if used & f.mask:
                raise ValueError(f"{self.name}: field {name} [{f.hi}:{f.lo}] overlaps another field")
            used |= f.mask
        for name in ("read", "write", "execute", "enable", "valid"):
            if getattr(layout, name).width != 1:
                raise ValueError(f"{self.name}: field {name} must be a single bit")
        if layout.base.width != self.address_bits - self.granule_bits:
            raise ValueError(f"{self.name}: base field must be {self.address_bits - self.granule_bits} bits wide")
        if len(self.targets) > (1 << layout.target.width):
            raise ValueError(f"{self.name}: {len(self.targets)} targets do not fit in the target field")
        if not self.targets:
            raise ValueError(f"{self.name}: at least one target is required")
        if len(set(self.masters)) != len(self.masters):
            raise ValueError(f"{self.name}: duplicate master identifiers")


    @property
    def granularity( self ) -> int:
        return 1 << self.granule_bits

    @property
    def span( self ) -> int:
        return 1 << self.address_bits

    @property
    def max_size( self ) -> int:
        """
        Largest size the size field can express, capped at the address span.
        """
        largest_exponent = self.granule_bits + (1 << self.layout.size.width) - 1
        return min(self.span, 1 << largest_exponent)

    @property
    def default_target( self ) -> str:
        return self.targets[0]


    def is_legal_size( self, size:int ) -> bool:
        return (
            size >= self.granularity
            and size <= self.max_size
            and size & (size - 1) == 0
        )

    def is_legal_base( self, base:int, size:int ) -> bool:
        return (
            size > 0
            and base >= 0
            and base % size == 0
            and base + size <= self.span
        )

    def slot_count( self ) -> int:
        return self.slots_per_master

    def is_known_master( self, master_id:str ) -> bool:
        return master_id in self.masters


"""
Microchip PolarFire SoC: 38-bit bus addresses, 4KB granule, 8 slots for each of
the 16 AXI masters on the switch.
"""
MPFS = AddressGeometry(
    name="mpfs",
    granule_bits=12,
    address_bits=38,
    slots_per_master=8,
    masters=(
        "e51", "u54_1", "u54_2", "u54_3", "u54_4",
        "fic0", "fic1", "fic2", "fic3",
        "crypto", "gem0", "gem1", "usb", "mmc", "scb", "trace",
    ),
    targets=(
        "system",
        "ddr_cached_32", "ddr_noncached_32", "ddr_wcb_32",
        "ddr_cached_64", "ddr_noncached_64", "ddr_wcb_64",
        "lsram", "fabric", "peripheral",
    ),
    layout=RegisterLayout(
        width=64,
        read=Field(0, 0),
        write=Field(1, 1),
        execute=Field(2, 2),
        enable=Field(3, 3),
        valid=Field(4, 4),
        size=Field(10, 5),
        base=Field(37, 12),
        target=Field(43, 40),
    ),
)


"""
Small 32-bit variant with a packed 32-bit register and a single reserved bit.
"""
GENERIC32 = AddressGeometry(
    name="generic32",
    granule_bits=12,
    address_bits=32,
    slots_per_master=4,
    masters=("cpu", "dma"),
    targets=("memory", "peripheral"),
    layout=RegisterLayout(
        width=32,
        read=Field(0, 0),
        write=Field(1, 1),
        execute=Field(2, 2),
        enable=Field(3, 3),
        valid=Field(4, 4),
        size=Field(9, 5),
        target=Field(10, 10),
        base=Field(31, 12),
    ),
)


PRESETS = {g.name: g for g in (MPFS, GENERIC32)}
