"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT
"""


"""
Verbosity switches, flipped by the command line front end via configure().
"""
_verbose = False
_debug = False


def configure( verbose:bool=False, debug:bool=False ) -> None:
    global _verbose, _debug
    _verbose = verbose or debug
    _debug = debug

def info( msg:str="" ) -> None:
    print(f"[INFO] {msg if msg else ''}")

def verbose( msg:str="" ) -> None:
    if (_verbose):
        print(f"[VERBOSE] {msg if msg else ''}")

def debug( msg:str="" ) -> None:
    if (_debug):
        print(f"[DEBUG] {msg if msg else ''}")

def error( msg:str="" ) -> None:
    print(f"[ERROR] {msg if msg else ''}")

def is_verbose() -> bool:
    return _verbose
