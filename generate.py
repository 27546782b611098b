"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT

Run the segmentation register compiler: load, compile (or decompile), write.
"""

from sys import version_info
if version_info < (3, 8):
    print("soc-segment-tool requires Python 3.8+")
    exit()

try:
    import intervaltree
except ModuleNotFoundError as e:
    print("soc-segment-tool requires intervaltree: `pip install intervaltree`")
    exit()

# Standard Python deps
import errno
import json
import os
import sys
from typing import List, Optional

# Internal deps
from segt import args as cli
from segt import document, listing, log
from segt.compiler import PolicyCompiler
from segt.errors import SegmentError


def _load( path:Optional[str] ) -> dict:
    """
    Read the input document, or start from an empty one when there is none so
    every master falls back to the built-in policy.
    """
    if path is None or not os.path.exists(path):
        log.info(f"no input{f' at {path}' if path else ''}, using built-in defaults")
        return {}
    with open(path, "r") as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as e:
            raise SegmentError(f"{path}: {e}") from None
    if not isinstance(doc, dict):
        raise SegmentError(f"{path}: top level must be an object")
    return doc


def _write( path:Optional[str], doc:dict ) -> None:
    text = json.dumps(doc, indent=4) + "\n"
    if path is None:
        sys.stdout.write(text)
        return
    with open(path, "w") as f:
        f.write(text)
    log.info(f"wrote {path}")


def run( options ) -> dict:
    geometry = options.geometry
    compiler = PolicyCompiler(geometry)
    doc = _load(options.i)

    if options.mem is not None:
        doc = dict(doc, total_system_memory=options.mem)

    if options.d:
        image = document.image_from_document(doc, geometry)
        out = document.config_to_document(compiler.decompile(image))
    else:
        config = document.config_from_document(doc, geometry)
        image = compiler.compile(config)
        out = document.image_to_document(image, geometry)

    if log.is_verbose():
        for line in listing.render_image(geometry, image).splitlines():
            log.verbose(line)

    """
    DDR apertures only exist on PolarFire SoC.
    """
    if geometry.name == "mpfs":
        if options.d and "segs" in doc:
            amap = document.apertures_from_segs(doc)
        else:
            amap = document.apertures_from_document(doc)
        if log.is_verbose():
            for line in listing.render_apertures(amap).splitlines():
                log.verbose(line)
        out.update(document.apertures_to_document(amap))
    return out


def main( argv:Optional[List[str]]=None ) -> int:
    options = cli.parse(argv)
    log.configure(verbose=options.verbose, debug=options.debug)
    try:
        _write(options.o, run(options))
    except SegmentError as e:
        log.error(str(e))
        return errno.EINVAL
    except OSError as e:
        log.error(f"failed to access document: {e}")
        return e.errno or errno.EIO
    return 0


if __name__ == "__main__":
    sys.exit(main())
