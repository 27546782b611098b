"""
Copyright (c) 2019 Ash Wilding. All rights reserved.

SPDX-License-Identifier: MIT

Conversion between the core's value objects and plain structured documents
(dicts, lists, strings, ints) as read from or written to disk by the front end.

A configuration document looks like:

    {
        "masters": {
            "e51": [
                {"base": "0x1000", "size": "4K", "permissions": "r--", "target": "ddr_cached_32"},
                {"base": "0x0", "size": "0x100000", "permissions": "rw-", "enabled": false},
                {"reserved": true}
            ]
        },
        "total_system_memory": "0x80000000",
        "apertures": {"seg0_0": "0x0"}
    }

and a register image document looks like:

    {"geometry": "mpfs", "registers": {"e51": ["0x...", ...], ...}}
"""

# Standard Python deps
import re
from typing import Any, Dict, List, Mapping

# Internal deps
from . import log
from .aperture import DEFAULT_TOTAL_SYSTEM_MEMORY, ApertureMap
from .errors import DocumentError, UnknownMaster
from .geometry import AddressGeometry
from .region import Access, MasterPolicy, MemoryRegion, PolicyConfiguration, RegisterImage


_REGION_KEYS = {"base", "size", "permissions", "target", "enabled", "reserved"}


def parse_int( value:Any, what:str ) -> int:
    """
    Accept an int, a decimal or 0x-prefixed hex string, or a length with a
    K/M/G/T suffix such as "64K" or "2G".
    """
    if isinstance(value, bool):
        raise DocumentError(f"bad {what}: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise DocumentError(f"bad {what}: {value!r}")
    text = value.strip()
    x = re.fullmatch(r"(\d+)\s*([KMGT])B?", text, re.IGNORECASE)
    if x:
        return int(x.group(1)) * 1024 ** ("KMGT".find(x.group(2).upper()) + 1)
    try:
        return int(text, base=(16 if text.lower().startswith("0x") else 10))
    except ValueError:
        raise DocumentError(f"bad {what}: {value!r}") from None


def _region_from_document( entry:Any, geometry:AddressGeometry, master_id:str, idx:int ) -> MemoryRegion:
    if not isinstance(entry, Mapping):
        raise DocumentError(f"region must be a mapping, got {entry!r}", master_id, idx)
    unexpected = set(entry) - _REGION_KEYS
    if unexpected:
        raise DocumentError(f"unexpected field(s): {', '.join(sorted(unexpected))}", master_id, idx)

    if entry.get("reserved", False):
        if len(entry) > 1:
            raise DocumentError("a reserved slot takes no other fields", master_id, idx)
        return MemoryRegion.placeholder()

    for key in ("base", "size"):
        if not key in entry:
            raise DocumentError(f"missing {key}", master_id, idx)
    try:
        base = parse_int(entry["base"], "base address")
        size = parse_int(entry["size"], "size")
    except DocumentError as e:
        raise e.tag(master_id, idx)

    permissions = entry.get("permissions", "rwx")
    try:
        if isinstance(permissions, str):
            access = Access.parse(permissions)
        elif isinstance(permissions, list):
            access = Access.NONE
            for p in permissions:
                access |= Access[str(p).upper()]
        else:
            raise ValueError(permissions)
    except (KeyError, ValueError):
        raise DocumentError(f"bad permissions: {permissions!r}", master_id, idx) from None

    enabled = entry.get("enabled", True)
    if not isinstance(enabled, bool):
        raise DocumentError(f"enabled must be true or false, got {enabled!r}", master_id, idx)

    return MemoryRegion(
        base=base,
        size=size,
        permissions=access,
        target=str(entry.get("target", geometry.default_target)),
        enabled=enabled,
    )


def config_from_document( doc:Mapping[str, Any], geometry:AddressGeometry ) -> PolicyConfiguration:
    """
    Build a PolicyConfiguration. Masters missing from the document are left
    out so the compiler substitutes its default policy for them.
    """
    masters = doc.get("masters", {})
    if not isinstance(masters, Mapping):
        raise DocumentError("masters must be a mapping of master id to region list")
    policies = {}
    for master_id,entries in masters.items():
        if not geometry.is_known_master(master_id):
            raise UnknownMaster(f"not a bus master of {geometry.name}", master_id=master_id)
        if not isinstance(entries, list):
            raise DocumentError("region list must be a list", master_id)
        regions = tuple(_region_from_document(e, geometry, master_id, idx) for idx,e in enumerate(entries))
        policies[master_id] = MasterPolicy(master_id, regions)
        log.debug(f"loaded {len(regions)} region(s) for {master_id}")
    return PolicyConfiguration(policies)


def _region_to_document( r:MemoryRegion ) -> Dict[str, Any]:
    if r.is_placeholder:
        return {"reserved": True}
    return {
        "base": hex(r.base),
        "size": hex(r.size),
        "permissions": r.permissions.rwx(),
        "target": r.target,
        "enabled": r.enabled,
    }


def config_to_document( config:PolicyConfiguration ) -> Dict[str, Any]:
    return {
        "masters": {
            master_id: [_region_to_document(r) for r in policy.regions]
            for master_id,policy in config.masters.items()
        }
    }


def image_to_document( image:RegisterImage, geometry:AddressGeometry ) -> Dict[str, Any]:
    return {
        "geometry": geometry.name,
        "registers": {
            master_id: [hex(v) for v in values]
            for master_id,values in image.by_master(geometry).items()
        },
    }


def image_from_document( doc:Mapping[str, Any], geometry:AddressGeometry ) -> RegisterImage:
    name = doc.get("geometry", geometry.name)
    if name != geometry.name:
        raise DocumentError(f"image was produced for {name}, not {geometry.name}")
    registers = doc.get("registers")
    if not isinstance(registers, Mapping):
        raise DocumentError("missing registers mapping")
    for master_id in registers:
        if not geometry.is_known_master(master_id):
            raise UnknownMaster(f"not a bus master of {geometry.name}", master_id=master_id)

    slots: List[int] = []
    for master_id in geometry.masters:
        values = registers.get(master_id)
        if not isinstance(values, list):
            raise DocumentError("missing register list", master_id)
        if len(values) != geometry.slot_count():
            raise DocumentError(f"{len(values)} registers, expected {geometry.slot_count()}", master_id)
        for slot,v in enumerate(values):
            try:
                slots.append(parse_int(v, "register value"))
            except DocumentError as e:
                raise e.tag(master_id, slot)
    return RegisterImage(tuple(slots))


def apertures_from_document( doc:Mapping[str, Any] ) -> ApertureMap:
    """
    Read the optional aperture settings: total fitted DDR and the hardware
    start address of any aperture that should be moved.
    """
    total = parse_int(doc.get("total_system_memory", DEFAULT_TOTAL_SYSTEM_MEMORY), "total system memory")
    amap = ApertureMap(total)
    starts = doc.get("apertures", {})
    if not isinstance(starts, Mapping):
        raise DocumentError("apertures must be a mapping of seg register to hardware start")
    for reg_name,start in starts.items():
        amap = amap.set_hw_start(reg_name, parse_int(start, f"{reg_name} hardware start"))
    return amap


def apertures_from_segs( doc:Mapping[str, Any] ) -> ApertureMap:
    """
    Rebuild the aperture map from the seg register values of a written image.
    """
    total = parse_int(doc.get("total_system_memory", DEFAULT_TOTAL_SYSTEM_MEMORY), "total system memory")
    segs = doc.get("segs", {})
    if not isinstance(segs, Mapping):
        raise DocumentError("segs must be a mapping of seg register to value")
    return ApertureMap.from_seg_registers(
        {reg_name: parse_int(v, reg_name) for reg_name,v in segs.items()},
        total,
    )


def apertures_to_document( amap:ApertureMap ) -> Dict[str, Any]:
    return {
        "total_system_memory": hex(amap.total_system_memory),
        "apertures": {a.reg_name: hex(a.hw_addr) for a in amap.apertures},
        "segs": {name: hex(seg) for name,seg in amap.seg_registers().items()},
    }
