"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT

Every failure the compiler can report. All of them are deterministic input
errors: they carry the offending master and, where there is one, the region or
slot index so the front end can point at the bad entry.
"""

# Standard Python deps
from typing import Optional


class SegmentError(Exception):
    """
    Base class for all region, register and document errors.
    """
    def __init__( self, msg:str, master_id:Optional[str]=None, index:Optional[int]=None ):
        super().__init__(msg)
        self.msg = msg
        self.master_id = master_id
        self.index = index


    def tag( self, master_id:str, index:Optional[int]=None ) -> "SegmentError":
        """
        Attach the master (and optionally an index) to an error raised deeper
        down, keeping anything already attached.
        """
        if self.master_id is None:
            self.master_id = master_id
        if self.index is None:
            self.index = index
        return self


    def __str__( self ) -> str:
        where = ""
        if self.master_id is not None:
            where = f"{self.master_id}"
            if self.index is not None:
                where += f"[{self.index}]"
            where += ": "
        elif self.index is not None:
            where = f"[{self.index}]: "
        return f"{where}{self.msg}"


class IllegalRegion(SegmentError):
    """
    A region that cannot be expressed by the hardware.
    """


class IllegalSize(IllegalRegion):
    """
    Region size is not a power of two or falls outside the encodable range.
    """


class UnalignedBase(IllegalRegion):
    """
    Region base is not a multiple of its size.
    """


class TooManyRegions(SegmentError):
    pass


class DuplicateRegion(SegmentError):
    pass


class MalformedRegister(SegmentError):
    pass


class UnknownMaster(SegmentError):
    pass


class ApertureError(SegmentError):
    pass


class DocumentError(SegmentError):
    pass
