"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT
"""

# Standard Python deps
from typing import Sequence, Tuple

# Internal deps
from . import log
from .codec import RegisterCodec
from .errors import DuplicateRegion, SegmentError, TooManyRegions
from .geometry import AddressGeometry
from .region import MemoryRegion

# External deps
from intervaltree import IntervalTree


class RegionValidator:
    """
    Checks one master's ordered region list is encodable.

    Overlap is allowed: list order is the hardware's match priority, so an
    earlier, narrower region carves an exception out of a later, broader one.
    Only exact (base, size) duplicates are rejected.
    """
    def __init__( self, geometry:AddressGeometry ):
        self.geometry = geometry
        self._codec = RegisterCodec(geometry)


    def validate( self, master_id:str, regions:Sequence[MemoryRegion] ) -> Tuple[MemoryRegion, ...]:
        regions = tuple(regions)
        log.debug()
        log.debug(f"validating {len(regions)} region(s) for {master_id}")

        """
        Every region needs a slot.
        """
        if len(regions) > self.geometry.slot_count():
            raise TooManyRegions(
                f"{len(regions)} regions but only {self.geometry.slot_count()} slots",
                master_id=master_id,
            )

        tree = IntervalTree()
        for idx,r in enumerate(regions):
            log.debug(f"checking region {idx}: {r}")

            """
            Reserved slots are left alone; they encode to zero.
            """
            if r.is_placeholder:
                continue

            """
            Disabled regions still need a legal encoding.
            """
            try:
                self._codec.check(r)
            except SegmentError as e:
                raise e.tag(master_id, idx)

            """
            Overlap with a higher priority region is a carve-out, an identical
            range is an authoring mistake.
            """
            for iv in sorted(tree[r.base:r.end]):
                if iv.begin == r.base and iv.end == r.end:
                    raise DuplicateRegion(
                        f"region {idx} repeats the range of region {iv.data} "
                        f"({hex(r.base)}+{hex(r.size)})",
                        master_id=master_id,
                        index=idx,
                    )
                log.debug(f"region {idx} is overridden by region {iv.data} in {hex(max(iv.begin, r.base))}-{hex(min(iv.end, r.end))}")
            tree.addi(r.base, r.end, idx)

        return regions
