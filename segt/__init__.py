"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT
"""

"""
Fixed hardware parameters: granule, address width, slots, masters, register
field positions.
"""
from .geometry import AddressGeometry, Field, RegisterLayout, PRESETS

"""
Region, policy and register image value objects plus first-match priority
resolution.
"""
from .region import Access, MemoryRegion, MasterPolicy, PolicyConfiguration, RegisterImage, resolve

"""
Everything that can go wrong, all derived from SegmentError.
"""
from .errors import (
    SegmentError,
    IllegalRegion,
    IllegalSize,
    UnalignedBase,
    TooManyRegions,
    DuplicateRegion,
    MalformedRegister,
    UnknownMaster,
    ApertureError,
    DocumentError,
)

"""
Pack a single region into a slot register and back.
"""
from .codec import RegisterCodec

"""
Check one master's region list against the geometry and itself.
"""
from .validator import RegionValidator

"""
Whole-configuration compile and decompile.
"""
from .compiler import PolicyCompiler

"""
PolarFire SoC DDR aperture seg registers.
"""
from .aperture import Aperture, ApertureMap, hw_start_to_seg, seg_to_hw_start
