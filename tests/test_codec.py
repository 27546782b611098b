import pytest

from segt.codec import RegisterCodec
from segt.errors import IllegalRegion, IllegalSize, MalformedRegister, UnalignedBase
from segt.geometry import GENERIC32, MPFS
from segt.region import Access, MemoryRegion


@pytest.fixture
def codec():
    return RegisterCodec(MPFS)


def test_encode_layout(codec):
    r = MemoryRegion(0x1000, 0x1000, Access.READ, "system")
    assert codec.encode(r) == 0x1019


def test_encode_full_span(codec):
    r = MemoryRegion(0x0, 1 << 38, Access.RWX, "system")
    assert codec.encode(r) == 0x35F


def test_encode_target_and_disabled(codec):
    r = MemoryRegion(0x8000_0000, 0x4000_0000, Access.RW, "ddr_cached_64", enabled=False)
    value = codec.encode(r)
    assert value == (4 << 40) | (0x80000 << 12) | (18 << 5) | 0x10 | 0x3


def test_encode_placeholder_is_zero(codec):
    assert codec.encode(MemoryRegion.placeholder()) == 0
    assert codec.decode(0) == MemoryRegion.placeholder()


@pytest.mark.parametrize("region", [
    MemoryRegion(0x0, 0x1000, Access.NONE, "system"),
    MemoryRegion(0x1000, 0x1000, Access.READ, "lsram"),
    MemoryRegion(0x2000_0000, 0x1000_0000, Access.RX, "fabric", enabled=False),
    MemoryRegion(0x10_0000_0000, 0x10_0000_0000, Access.RWX, "ddr_cached_64"),
    MemoryRegion((1 << 38) - 0x1000, 0x1000, Access.WRITE, "peripheral"),
    MemoryRegion(0x0, 1 << 38, Access.RWX, "system"),
])
def test_round_trip(codec, region):
    assert codec.decode(codec.encode(region)) == region


def test_round_trip_generic32():
    codec = RegisterCodec(GENERIC32)
    r = MemoryRegion(0xF000_0000, 0x1000_0000, Access.RW, "peripheral")
    value = codec.encode(r)
    assert value < 1 << 32
    assert codec.decode(value) == r


def test_encode_rejects_non_power_of_two(codec):
    with pytest.raises(IllegalSize):
        codec.encode(MemoryRegion(0x1000, 0x3000, Access.RW, "system"))


def test_illegal_size_is_illegal_region(codec):
    with pytest.raises(IllegalRegion):
        codec.encode(MemoryRegion(0x1000, 0x3000, Access.RW, "system"))


def test_encode_rejects_below_granule(codec):
    with pytest.raises(IllegalSize):
        codec.encode(MemoryRegion(0x0, 0x800, Access.RW, "system"))


def test_encode_rejects_above_max(codec):
    with pytest.raises(IllegalSize):
        codec.encode(MemoryRegion(0x0, 1 << 39, Access.RW, "system"))


def test_encode_rejects_unaligned_base(codec):
    with pytest.raises(UnalignedBase):
        codec.encode(MemoryRegion(0x1500, 0x1000, Access.RW, "system"))


def test_encode_rejects_out_of_range(codec):
    with pytest.raises(IllegalRegion):
        codec.encode(MemoryRegion(1 << 38, 0x1000, Access.RW, "system"))


def test_encode_rejects_unknown_target(codec):
    with pytest.raises(IllegalRegion):
        codec.encode(MemoryRegion(0x0, 0x1000, Access.RW, "nowhere"))


@pytest.mark.parametrize("value", [
    0x10 | 0x800,               # reserved bit 11
    0x10 | (1 << 63),           # reserved top bit
    1 << 64,                    # wider than the register
    0x8,                        # unused slot with enable set
    0x10 | (27 << 5),           # size beyond the address space
    0x10 | (15 << 40),          # no such target
    0x10 | (1 << 5) | (1 << 12),    # 8KB region at 4KB
])
def test_decode_rejects_malformed(codec, value):
    with pytest.raises(MalformedRegister):
        codec.decode(value, slot=3)


def test_decode_error_carries_slot(codec):
    with pytest.raises(MalformedRegister) as e:
        codec.decode(0x800, slot=5)
    assert e.value.index == 5
    assert "[5]" in str(e.value)


def test_encoding_is_deterministic(codec):
    r = MemoryRegion(0x4000, 0x4000, Access.RX, "ddr_wcb_32")
    assert codec.encode(r) == codec.encode(r.copy())
