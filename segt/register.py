"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT
"""

# Internal deps
from . import log


class Bitfield:
    """
    Class representing a bitfield in a segmentation register.
    """
    def __init__( self, hi:int, lo:int, value:int=0 ):
        self.hi = hi
        self.lo = lo
        self.mask = (1 << (hi - lo + 1)) - 1
        self.value = (value & self.mask) << lo


    def extract( self, raw:int ) -> int:
        """
        Pull this bitfield's value back out of a raw register value.
        """
        return (raw >> self.lo) & self.mask


    def __or__( self, other ):
        """
        Overload logical OR operator to use internal value.
        """
        return self.value | (other.value if type(other) is Bitfield else other)


    def __ror__( self, other ):
        """
        Reuse same overloaded logical OR operator when bitfield is right operand.
        """
        return self.__or__(other)


class Register:
    """
    Class representing a segmentation register, either being built up field by
    field for encoding or wrapping a raw value for decoding.
    """
    def __init__( self, name:str, width:int=64, raw:int=0 ):
        self.name = name
        self.width = width
        self.raw = raw
        self.fields = {}
        log.debug()
        log.debug(f"{name}" if not raw else f"{name}={hex(raw)}")


    def field( self, hi:int, lo:int, name:str, value:int ) -> None:
        """
        Add a bitfield to this register.
        """
        if hi >= self.width or lo < 0 or hi < lo:
            raise ValueError(f"{self.name}.{name} [{hi}:{lo}] does not fit in {self.width} bits")
        self.fields[name] = Bitfield(hi, lo, value)
        log.debug(f"{self.name}.{name}={value}")


    def read( self, hi:int, lo:int, name:str ) -> int:
        """
        Read a bitfield out of this register's raw value.
        """
        value = Bitfield(hi, lo).extract(self.raw)
        log.debug(f"{self.name}.{name}={value}")
        return value


    def value( self ) -> int:
        """
        Generate the runtime value for this register.
        """
        val = self.raw
        for f in self.fields.values():
            val = val | f
        log.debug(f"{self.name}={hex(val)}")
        return val
