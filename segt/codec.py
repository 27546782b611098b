"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT
"""

# Standard Python deps
from typing import Optional

# Internal deps
from . import log
from .errors import IllegalRegion, IllegalSize, MalformedRegister, UnalignedBase
from .geometry import AddressGeometry
from .region import Access, MemoryRegion
from .register import Register


class RegisterCodec:
    """
    Packs a MemoryRegion into one slot register and unpacks it again, using the
    field positions of the geometry it was built with.

    The size field holds log2(size) - log2(granule) and the base field holds
    base >> log2(granule). A slot with the valid bit clear is the placeholder
    and must be all zeros.
    """
    def __init__( self, geometry:AddressGeometry ):
        self.geometry = geometry
        self.layout = geometry.layout
        self.placeholder = MemoryRegion.placeholder()


    def check( self, region:MemoryRegion ) -> None:
        """
        Raise if region cannot be encoded with this geometry.
        """
        g = self.geometry
        if not g.is_legal_size(region.size):
            raise IllegalSize(
                f"size {hex(region.size)} must be a power of two between "
                f"{hex(g.granularity)} and {hex(g.max_size)}"
            )
        if region.base < 0 or region.base % region.size:
            raise UnalignedBase(f"base {hex(region.base)} is not aligned to size {hex(region.size)}")
        if not g.is_legal_base(region.base, region.size):
            raise IllegalRegion(f"{hex(region.base)}+{hex(region.size)} exceeds the {g.address_bits}-bit address space")
        if not region.target in g.targets:
            raise IllegalRegion(f"unknown target {region.target!r}")


    def encode( self, region:MemoryRegion, name:str="slot" ) -> int:
        """
        Encode region as a register value.
        """
        if region.is_placeholder:
            log.debug(f"{name}=0x0 (placeholder)")
            return 0
        self.check(region)

        layout = self.layout
        reg = Register(name, layout.width)
        reg.field(layout.read.hi, layout.read.lo, "read", int(bool(region.permissions & Access.READ)))
        reg.field(layout.write.hi, layout.write.lo, "write", int(bool(region.permissions & Access.WRITE)))
        reg.field(layout.execute.hi, layout.execute.lo, "execute", int(bool(region.permissions & Access.EXECUTE)))
        reg.field(layout.enable.hi, layout.enable.lo, "enable", int(region.enabled))
        reg.field(layout.valid.hi, layout.valid.lo, "valid", 1)
        reg.field(layout.size.hi, layout.size.lo, "size", region.size.bit_length() - 1 - self.geometry.granule_bits)
        reg.field(layout.base.hi, layout.base.lo, "base", region.base >> self.geometry.granule_bits)
        reg.field(layout.target.hi, layout.target.lo, "target", self.geometry.targets.index(region.target))
        return reg.value()


    def decode( self, value:int, slot:Optional[int]=None, name:str="slot" ) -> MemoryRegion:
        """
        Decode a register value back into a MemoryRegion.
        """
        g = self.geometry
        layout = self.layout

        def malformed( msg:str ) -> MalformedRegister:
            return MalformedRegister(f"register {hex(value)}: {msg}", index=slot)

        if value < 0 or value >> layout.width:
            raise malformed(f"does not fit in {layout.width} bits")
        if value & layout.reserved_mask:
            raise malformed(f"reserved bits set ({hex(value & layout.reserved_mask)})")

        reg = Register(name, layout.width, raw=value)
        if not reg.read(layout.valid.hi, layout.valid.lo, "valid"):
            if value:
                raise malformed("unused slot has nonzero fields")
            return self.placeholder

        exponent = g.granule_bits + reg.read(layout.size.hi, layout.size.lo, "size")
        size = 1 << exponent
        if not g.is_legal_size(size):
            raise malformed(f"size field decodes to {hex(size)}, beyond {hex(g.max_size)}")

        base = reg.read(layout.base.hi, layout.base.lo, "base") << g.granule_bits
        if not g.is_legal_base(base, size):
            raise malformed(f"base {hex(base)} is unaligned or out of range for size {hex(size)}")

        code = reg.read(layout.target.hi, layout.target.lo, "target")
        if code >= len(g.targets):
            raise malformed(f"unknown target code {code}")

        permissions = Access.NONE
        if reg.read(layout.read.hi, layout.read.lo, "read"):
            permissions |= Access.READ
        if reg.read(layout.write.hi, layout.write.lo, "write"):
            permissions |= Access.WRITE
        if reg.read(layout.execute.hi, layout.execute.lo, "execute"):
            permissions |= Access.EXECUTE

        return MemoryRegion(
            base=base,
            size=size,
            permissions=permissions,
            target=g.targets[code],
            enabled=bool(reg.read(layout.enable.hi, layout.enable.lo, "enable")),
        )
