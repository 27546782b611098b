"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT

PolarFire SoC DDR apertures. Each aperture is a window onto DDR seen by the
masters at a fixed bus address; its seg register says which hardware address
the window starts at. The seg value encodes (bus - hw) in 16MB units as a
14-bit offset counted down from 0x4000, with bit 14 flagging a translated
aperture. A seg of zero means no translation.
"""

# Standard Python deps
import dataclasses
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

# Internal deps
from . import log
from .errors import ApertureError
from .register import Register


SEG_SHIFT = 24
SEG_OFFSET_LIMIT = 0x4000
DEFAULT_TOTAL_SYSTEM_MEMORY = 0x8000_0000


def hw_start_to_seg( hw_start:int, bus_addr:int ) -> int:
    """
    Encode the seg register value that maps bus_addr onto hw_start.
    """
    if hw_start == bus_addr:
        return 0x0
    delta = bus_addr - hw_start
    if delta < 0 or delta % (1 << SEG_SHIFT):
        raise ApertureError(
            f"hardware start {hex(hw_start)} must sit below bus address {hex(bus_addr)} "
            f"at a {hex(1 << SEG_SHIFT)} boundary"
        )
    offset = delta >> SEG_SHIFT
    if offset > SEG_OFFSET_LIMIT:
        raise ApertureError(f"hardware start {hex(hw_start)} is too far below bus address {hex(bus_addr)}")

    reg = Register("seg", width=16)
    reg.field(14, 14, "en", 1)
    reg.field(13, 0, "offset", SEG_OFFSET_LIMIT - offset)
    return reg.value()


def seg_to_hw_start( seg:int, bus_addr:int ) -> int:
    """
    Decode a seg register value back to the aperture's hardware start address.
    """
    reg = Register("seg", width=16, raw=seg)
    if not reg.read(14, 14, "en"):
        """
        Either 0x0, or invalid and treated as zero the way the bootloader does.
        """
        return bus_addr
    offset = SEG_OFFSET_LIMIT - reg.read(13, 0, "offset")
    if offset << SEG_SHIFT > bus_addr:
        raise ApertureError(f"seg {hex(seg)} maps bus address {hex(bus_addr)} below zero")
    return bus_addr - (offset << SEG_SHIFT)


@dataclass(frozen=True)
class Aperture:
    """
    Class representing one DDR aperture and its seg register.
    """
    description: str
    reg_name: str           # seg register name e.g. seg0_0, seg1_3
    bus_addr: int           # where the masters see the window
    hw_addr: int            # where the window lands in DDR
    size: int               # window length in bytes

    def copy( self, **kwargs ) -> "Aperture":
        """
        Create a duplicate of this Aperture.
        Use kwargs to override this aperture's corresponding properties.
        """
        return dataclasses.replace(self, **kwargs)

    def hw_start( self, total_memory:int ) -> int:
        if self.hw_addr > total_memory:
            raise ApertureError(f"{self.reg_name}: hardware start {hex(self.hw_addr)} is beyond installed memory {hex(total_memory)}")
        return self.hw_addr

    def hw_end( self, total_memory:int ) -> int:
        """
        The aperture ends at whichever comes first: its own end or the top of
        installed memory.
        """
        return min(self.hw_addr + self.size, total_memory)

    def with_hw_start( self, total_memory:int, new_start:int ) -> "Aperture":
        if new_start >= total_memory:
            raise ApertureError(
                f"{self.reg_name}: requested start {hex(new_start)} is not below "
                f"total system memory {hex(total_memory)}"
            )
        return self.copy(hw_addr=new_start)

    @property
    def seg( self ) -> int:
        try:
            return hw_start_to_seg(self.hw_addr, self.bus_addr)
        except ApertureError as e:
            raise e.tag(self.reg_name)


MPFS_APERTURES = (
    Aperture("64-bit cached",       "seg0_1", 0x10_0000_0000, 0x0, 0x4_0000_0000),
    Aperture("64-bit non-cached",   "seg1_3", 0x14_0000_0000, 0x0, 0x4000_0000),
    Aperture("64-bit WCB",          "seg1_5", 0x18_0000_0000, 0x0, 0x4000_0000),
    Aperture("32-bit cached",       "seg0_0", 0x8000_0000,    0x0, 0x4000_0000),
    Aperture("32-bit non-cached",   "seg1_2", 0xC000_0000,    0x0, 0x1000_0000),
    Aperture("32-bit WCB",          "seg1_4", 0xD000_0000,    0x0, 0x1000_0000),
)


@dataclass(frozen=True)
class ApertureMap:
    """
    All DDR apertures of the SoC plus the amount of DDR actually fitted.
    """
    total_system_memory: int = DEFAULT_TOTAL_SYSTEM_MEMORY
    apertures: Tuple[Aperture, ...] = MPFS_APERTURES

    def __post_init__( self ):
        object.__setattr__(self, "apertures", tuple(self.apertures))

    def __getitem__( self, reg_name:str ) -> Aperture:
        for a in self.apertures:
            if a.reg_name == reg_name:
                return a
        raise ApertureError(f"no aperture with seg register {reg_name!r}")

    def set_hw_start( self, reg_name:str, new_start:int ) -> "ApertureMap":
        updated = self[reg_name].with_hw_start(self.total_system_memory, new_start)
        log.debug(f"{reg_name} hardware start -> {hex(new_start)}")
        return dataclasses.replace(
            self,
            apertures=tuple(updated if a.reg_name == reg_name else a for a in self.apertures),
        )

    def seg_registers( self ) -> Dict[str, int]:
        segs = {}
        for a in self.apertures:
            a.hw_start(self.total_system_memory)
            segs[a.reg_name] = a.seg
            log.debug(f"{a.reg_name}={hex(segs[a.reg_name])}")
        return segs

    @classmethod
    def from_seg_registers( cls, segs:Mapping[str, int], total_system_memory:int=DEFAULT_TOTAL_SYSTEM_MEMORY,
                            template:Tuple[Aperture, ...]=MPFS_APERTURES ) -> "ApertureMap":
        """
        Rebuild the map from seg register values. Registers not mentioned keep
        the template's hardware start.
        """
        known = {a.reg_name for a in template}
        for reg_name in segs:
            if not reg_name in known:
                raise ApertureError(f"no aperture with seg register {reg_name!r}")
        return cls(
            total_system_memory,
            tuple(
                a.copy(hw_addr=seg_to_hw_start(segs[a.reg_name], a.bus_addr)) if a.reg_name in segs else a
                for a in template
            ),
        )
