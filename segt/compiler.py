"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT
"""

# Standard Python deps
from typing import List, Mapping, Optional, Sequence, Tuple

# Internal deps
from . import log
from .codec import RegisterCodec
from .errors import MalformedRegister, SegmentError, UnknownMaster
from .geometry import AddressGeometry
from .region import Access, MasterPolicy, MemoryRegion, PolicyConfiguration, RegisterImage
from .validator import RegionValidator


class PolicyCompiler:
    """
    Turns a PolicyConfiguration into a RegisterImage and back.

    Both directions are all-or-nothing: the first bad master or slot aborts the
    call with an error tagged with that master.
    """
    def __init__( self, geometry:AddressGeometry, defaults:Optional[Mapping[str, Sequence[MemoryRegion]]]=None ):
        self.geometry = geometry
        self.codec = RegisterCodec(geometry)
        self.validator = RegionValidator(geometry)
        self._defaults = {m: tuple(rs) for m,rs in (defaults or {}).items()}
        for m in self._defaults:
            if not geometry.is_known_master(m):
                raise UnknownMaster(f"default policy given for unknown master {m!r}", master_id=m)


    def default_regions( self, master_id:str ) -> Tuple[MemoryRegion, ...]:
        """
        Fallback policy for a master missing from the configuration: unless
        overridden, one enabled RWX region spanning the whole address space.
        """
        if master_id in self._defaults:
            return self._defaults[master_id]
        return (MemoryRegion(0, self.geometry.span, Access.RWX, self.geometry.default_target),)


    def complete( self, config:PolicyConfiguration ) -> PolicyConfiguration:
        """
        Return config with every known master present, filling gaps with the
        default policy. Fails on masters the geometry does not know.
        """
        for master_id in config.masters:
            if not self.geometry.is_known_master(master_id):
                raise UnknownMaster(
                    f"not a bus master of {self.geometry.name} "
                    f"(known: {', '.join(self.geometry.masters)})",
                    master_id=master_id,
                )
        masters = {}
        for master_id in self.geometry.masters:
            if master_id in config.masters:
                masters[master_id] = MasterPolicy(master_id, config.masters[master_id].regions)
            else:
                log.debug(f"{master_id} not configured, using default policy")
                masters[master_id] = MasterPolicy(master_id, self.default_regions(master_id))
        return PolicyConfiguration(masters)


    def compile( self, config:PolicyConfiguration ) -> RegisterImage:
        config = self.complete(config)
        slots:List[int] = []
        for master_id in self.geometry.masters:
            regions = self.validator.validate(master_id, config.regions(master_id))

            """
            Unused slots get a placeholder so they encode to a harmless value.
            """
            padding = self.geometry.slot_count() - len(regions)
            if padding:
                log.debug(f"padding {master_id} with {padding} placeholder slot(s)")
            regions = regions + (self.codec.placeholder,) * padding

            for slot,r in enumerate(regions):
                try:
                    slots.append(self.codec.encode(r, name=f"{master_id}[{slot}]"))
                except SegmentError as e:
                    raise e.tag(master_id, slot)

        log.verbose(f"compiled {len(self.geometry.masters)} masters into {len(slots)} {self.geometry.name} slot registers")
        return RegisterImage(tuple(slots))


    def decompile( self, image:RegisterImage ) -> PolicyConfiguration:
        n = self.geometry.slot_count()
        expected = len(self.geometry.masters) * n
        if len(image.slots) != expected:
            raise MalformedRegister(f"image holds {len(image.slots)} slots, {self.geometry.name} has {expected}")

        masters = {}
        for m,master_id in enumerate(self.geometry.masters):
            regions = []
            for slot,value in enumerate(image.slots[m * n:(m + 1) * n]):
                try:
                    regions.append(self.codec.decode(value, slot=slot, name=f"{master_id}[{slot}]"))
                except SegmentError as e:
                    raise e.tag(master_id, slot)

            """
            Trailing placeholders are padding, not policy.
            """
            while regions and regions[-1].is_placeholder:
                regions.pop()
            masters[master_id] = MasterPolicy(master_id, tuple(regions))

        log.verbose(f"decompiled {len(image.slots)} {self.geometry.name} slot registers")
        return PolicyConfiguration(masters)
