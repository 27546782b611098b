"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT

Parse command-line arguments for generate.py. The core modules never import
this; the chosen geometry is handed to them explicitly.
"""

# Standard Python deps
import argparse
from typing import List, Optional

# Internal deps
from .geometry import PRESETS


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compile a bus master memory access policy into segmentation registers.",
    )

    parser.add_argument(
        "-i",
        metavar="SRC",
        help="input document (default: built-in policy)",
        type=str,
        default=None,
    )

    parser.add_argument(
        "-o",
        metavar="DST",
        help="output document (default: stdout)",
        type=str,
        default=None,
    )

    parser.add_argument(
        "-g",
        help="SoC geometry (default: mpfs)",
        type=str,
        choices=sorted(PRESETS),
        default="mpfs",
    )

    parser.add_argument(
        "-d",
        help="decompile: SRC is a register image, DST a policy",
        action="store_true",
    )

    parser.add_argument(
        "-mem",
        help="total system memory, overrides the input document",
        type=lambda v: int(v, 0),
        default=None,
    )

    parser.add_argument(
        "-v",
        help="-v for verbose, -vv for debug",
        action="count",
        default=0,
    )

    return parser


def parse( argv:Optional[List[str]]=None ) -> argparse.Namespace:
    args = _parser().parse_args(argv)
    args.geometry = PRESETS[args.g]
    args.verbose = args.v >= 1
    args.debug = args.v >= 2
    return args
