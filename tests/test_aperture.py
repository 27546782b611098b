import pytest

from segt.aperture import (
    DEFAULT_TOTAL_SYSTEM_MEMORY,
    MPFS_APERTURES,
    Aperture,
    ApertureMap,
    hw_start_to_seg,
    seg_to_hw_start,
)
from segt.errors import ApertureError


def test_identity_mapping_is_zero():
    assert hw_start_to_seg(0x8000_0000, 0x8000_0000) == 0
    assert seg_to_hw_start(0, 0x8000_0000) == 0x8000_0000


def test_known_seg_values():
    assert hw_start_to_seg(0x0, 0x8000_0000) == 0x7F80
    assert hw_start_to_seg(0x0, 0x10_0000_0000) == 0x7000
    assert seg_to_hw_start(0x7F80, 0x8000_0000) == 0x0
    assert seg_to_hw_start(0x7000, 0x10_0000_0000) == 0x0


def test_seg_without_enable_bit_is_untranslated():
    assert seg_to_hw_start(0x3F80, 0xC000_0000) == 0xC000_0000


@pytest.mark.parametrize("hw_start,bus_addr", [
    (0x0, 0xC000_0000),
    (0x1000_0000, 0xD000_0000),
    (0x0200_0000, 0x10_0000_0000),
    (0x4000_0000, 0x18_0000_0000),
])
def test_seg_round_trip(hw_start, bus_addr):
    assert seg_to_hw_start(hw_start_to_seg(hw_start, bus_addr), bus_addr) == hw_start


def test_seg_rejects_bad_start():
    with pytest.raises(ApertureError):
        hw_start_to_seg(0x9000_0000, 0x8000_0000)
    with pytest.raises(ApertureError):
        hw_start_to_seg(0x10_0000, 0x8000_0000)


def test_seg_rejects_negative_start():
    with pytest.raises(ApertureError):
        seg_to_hw_start(0x4000, 0x8000_0000)


def test_hw_end_clamps_to_memory():
    a = Aperture("32-bit cached", "seg0_0", 0x8000_0000, 0x0, 0x4000_0000)
    assert a.hw_end(0x8000_0000) == 0x4000_0000
    assert a.hw_end(0x2000_0000) == 0x2000_0000


def test_hw_start_beyond_memory():
    a = Aperture("32-bit cached", "seg0_0", 0x8000_0000, 0x4000_0000, 0x4000_0000)
    assert a.hw_start(0x8000_0000) == 0x4000_0000
    with pytest.raises(ApertureError):
        a.hw_start(0x2000_0000)


def test_with_hw_start():
    a = MPFS_APERTURES[3]
    moved = a.with_hw_start(0x8000_0000, 0x2000_0000)
    assert moved.hw_addr == 0x2000_0000
    assert a.hw_addr == 0x0
    with pytest.raises(ApertureError):
        a.with_hw_start(0x8000_0000, 0x8000_0000)


def test_default_map():
    amap = ApertureMap()
    assert amap.total_system_memory == DEFAULT_TOTAL_SYSTEM_MEMORY
    segs = amap.seg_registers()
    assert set(segs) == {"seg0_0", "seg0_1", "seg1_2", "seg1_3", "seg1_4", "seg1_5"}
    assert segs["seg0_0"] == 0x7F80
    assert segs["seg0_1"] == 0x7000


def test_set_hw_start_and_rebuild():
    amap = ApertureMap().set_hw_start("seg1_2", 0x1000_0000)
    assert amap["seg1_2"].hw_addr == 0x1000_0000
    rebuilt = ApertureMap.from_seg_registers(amap.seg_registers(), amap.total_system_memory)
    assert rebuilt == amap


def test_unknown_seg_register():
    with pytest.raises(ApertureError):
        ApertureMap()["seg9_9"]
    with pytest.raises(ApertureError):
        ApertureMap.from_seg_registers({"seg9_9": 0})


def test_64bit_cached_window_ends_before_next_aperture():
    amap = ApertureMap(0x10_0000_0000)
    a = amap["seg0_1"]
    assert a.size == 0x4_0000_0000
    assert a.hw_end(amap.total_system_memory) == 0x4_0000_0000
    assert a.bus_addr + a.size == amap["seg1_3"].bus_addr
