"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT
"""

# Standard Python deps
import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

# Internal deps
from .geometry import AddressGeometry

# External deps
from intervaltree import IntervalTree


"""
Target of a placeholder slot, which routes nowhere.
"""
NO_TARGET = ""


class Access(enum.Flag):
    """
    Permissions a bus master holds within a region.
    """
    NONE = 0
    READ = 1
    WRITE = 2
    EXECUTE = 4
    RW = READ | WRITE
    RX = READ | EXECUTE
    RWX = READ | WRITE | EXECUTE


    @classmethod
    def parse( cls, text:str ) -> "Access":
        """
        Parse an ls-style permission string such as "rwx", "r-x" or "rw".
        Raises ValueError on anything else.
        """
        access = cls.NONE
        for c in text.strip().lower():
            if c == "-":
                continue
            flag = {"r": cls.READ, "w": cls.WRITE, "x": cls.EXECUTE}.get(c)
            if flag is None or access & flag:
                raise ValueError(f"bad permission string: {text!r}")
            access |= flag
        return access


    def rwx( self ) -> str:
        return "".join(c if self & flag else "-" for c,flag in (
            ("r", Access.READ),
            ("w", Access.WRITE),
            ("x", Access.EXECUTE),
        ))


@dataclass(frozen=True)
class MemoryRegion:
    """
    Class representing a single slot's worth of policy for one bus master.
    """
    base: int               # base address, naturally aligned to size
    size: int               # length in bytes, a power of two
    permissions: Access
    target: str             # destination domain, opaque outside of the codec
    enabled: bool = True    # disabled regions hold their slot but grant nothing

    @classmethod
    def placeholder( cls ) -> "MemoryRegion":
        """
        Disabled zero-size entry that fills an unused slot. It has no target.
        """
        return cls(0, 0, Access.NONE, NO_TARGET, enabled=False)

    @property
    def is_placeholder( self ) -> bool:
        return self == MemoryRegion.placeholder()

    @property
    def end( self ) -> int:
        return self.base + self.size

    def copy( self, **kwargs ) -> "MemoryRegion":
        """
        Create a duplicate of this MemoryRegion.
        Use kwargs to override this region's corresponding properties.
        """
        return dataclasses.replace(self, **kwargs)

    def covers( self, address:int ) -> bool:
        return self.base <= address < self.end

    def __str__( self ) -> str:
        if self.is_placeholder:
            return "reserved"
        return "0x{:>010}-0x{:>010} {} {}{}".format(
            hex(self.base)[2:],
            hex(self.end - 1)[2:],
            self.permissions.rwx(),
            self.target,
            "" if self.enabled else " (disabled)",
        )


def interval_tree( regions:Sequence[MemoryRegion] ) -> IntervalTree:
    """
    Index regions by address range. Each interval's data is the region's index,
    which doubles as its priority (lower wins). Placeholders are left out.
    """
    tree = IntervalTree()
    for idx,r in enumerate(regions):
        if r.size > 0:
            tree.addi(r.base, r.end, idx)
    return tree


def resolve( regions:Sequence[MemoryRegion], address:int ) -> Optional[MemoryRegion]:
    """
    Return the highest priority region (earliest in the list) covering address,
    or None if no region covers it.
    """
    hits = interval_tree(regions)[address]
    if not hits:
        return None
    return regions[min(iv.data for iv in hits)]


@dataclass(frozen=True)
class MasterPolicy:
    """
    Ordered region list for one bus master. Order is priority.
    """
    master_id: str
    regions: Tuple[MemoryRegion, ...] = ()

    def __post_init__( self ):
        object.__setattr__(self, "regions", tuple(self.regions))

    def resolve( self, address:int ) -> Optional[MemoryRegion]:
        return resolve(self.regions, address)

    def access( self, address:int ) -> Access:
        """
        Effective permissions at address. A disabled region still wins the
        priority match but grants nothing.
        """
        r = self.resolve(address)
        if r is None or not r.enabled:
            return Access.NONE
        return r.permissions


@dataclass(frozen=True)
class PolicyConfiguration:
    """
    Policy for every bus master, keyed by master identifier.
    """
    masters: Mapping[str, MasterPolicy] = field(default_factory=dict)

    def __post_init__( self ):
        object.__setattr__(self, "masters", dict(self.masters))

    @classmethod
    def from_regions( cls, regions:Mapping[str, Iterable[MemoryRegion]] ) -> "PolicyConfiguration":
        return cls({m: MasterPolicy(m, tuple(rs)) for m,rs in regions.items()})

    def regions( self, master_id:str ) -> Tuple[MemoryRegion, ...]:
        return self.masters[master_id].regions

    def access( self, master_id:str, address:int ) -> Access:
        return self.masters[master_id].access(address)


@dataclass(frozen=True)
class RegisterImage:
    """
    Encoded slot registers in master-then-slot order.
    """
    slots: Tuple[int, ...] = ()

    def __post_init__( self ):
        object.__setattr__(self, "slots", tuple(self.slots))

    def master_slots( self, geometry:AddressGeometry, master_id:str ) -> Tuple[int, ...]:
        n = geometry.slot_count()
        start = geometry.masters.index(master_id) * n
        return self.slots[start:start + n]

    def by_master( self, geometry:AddressGeometry ) -> Dict[str, List[int]]:
        return {m: list(self.master_slots(geometry, m)) for m in geometry.masters}
