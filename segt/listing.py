"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT

Human-readable listings of a register image and of the DDR apertures.
"""

# Internal deps
from .aperture import ApertureMap
from .codec import RegisterCodec
from .errors import SegmentError
from .geometry import AddressGeometry
from .region import RegisterImage


def _mib( n:int ) -> int:
    return n // (1024 ** 2)


def render_image( geometry:AddressGeometry, image:RegisterImage ) -> str:
    """
    One line per slot, decoded, with the raw register value on the right.
    """
    codec = RegisterCodec(geometry)
    digits = (geometry.layout.width + 3) // 4
    string = f"{geometry.name} segmentation registers\n"
    for master_id,values in image.by_master(geometry).items():
        margin = " " * 8
        string += f"{margin}{master_id}\n"
        for slot,value in enumerate(values):
            try:
                r = codec.decode(value, slot=slot)
            except SegmentError as e:
                raise e.tag(master_id, slot)
            string += "{}[#{:>2}] {:<48} 0x{:0>{}}\n".format(
                margin,
                slot,
                str(r),
                hex(value)[2:],
                digits,
            )
    return string


def render_apertures( amap:ApertureMap ) -> str:
    """
    Aperture table followed by a one-line summary of the seg registers.
    """
    total = amap.total_system_memory
    string = "Description        | bus address  | hw start     | hw end       | size\n"
    for a in amap.apertures:
        start = a.hw_start(total)
        end = a.hw_end(total)
        string += "{:<18} | {:#012x} | {:#012x} | {:#012x} | {} MiB\n".format(
            a.description,
            a.bus_addr,
            start,
            end,
            _mib(end - start),
        )
    segs = ", ".join(f"{name}: {hex(seg)}" for name,seg in amap.seg_registers().items())
    string += f"{{ {segs} }}\n"
    return string
