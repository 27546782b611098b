import pytest

from segt.geometry import GENERIC32, MPFS, PRESETS, AddressGeometry, Field, RegisterLayout


def _layout(**overrides):
    fields = dict(
        width=32,
        read=Field(0, 0),
        write=Field(1, 1),
        execute=Field(2, 2),
        enable=Field(3, 3),
        valid=Field(4, 4),
        size=Field(9, 5),
        target=Field(10, 10),
        base=Field(31, 12),
    )
    fields.update(overrides)
    return RegisterLayout(**fields)


def test_mpfs_constants():
    assert MPFS.granularity == 0x1000
    assert MPFS.span == 1 << 38
    assert MPFS.slot_count() == 8
    assert MPFS.max_size == MPFS.span
    assert MPFS.default_target == "system"
    assert PRESETS["mpfs"] is MPFS
    assert PRESETS["generic32"] is GENERIC32


def test_legal_size():
    assert MPFS.is_legal_size(0x1000)
    assert MPFS.is_legal_size(0x100000)
    assert MPFS.is_legal_size(1 << 38)
    assert not MPFS.is_legal_size(0x3000)
    assert not MPFS.is_legal_size(0x800)
    assert not MPFS.is_legal_size(0)
    assert not MPFS.is_legal_size(1 << 39)


def test_legal_base():
    assert MPFS.is_legal_base(0x0, 0x1000)
    assert MPFS.is_legal_base(0x2000, 0x1000)
    assert not MPFS.is_legal_base(0x1500, 0x1000)
    assert not MPFS.is_legal_base(0x1000, 0x2000)
    assert not MPFS.is_legal_base(1 << 38, 0x1000)
    assert not MPFS.is_legal_base(0x0, 0)


def test_known_masters():
    assert MPFS.is_known_master("e51")
    assert MPFS.is_known_master("trace")
    assert not MPFS.is_known_master("cpu")
    assert GENERIC32.is_known_master("cpu")


def test_reserved_mask():
    assert GENERIC32.layout.reserved_mask == 0x800
    assert MPFS.layout.reserved_mask & 0x7FF == 0
    assert MPFS.layout.reserved_mask & (1 << 11)
    assert MPFS.layout.reserved_mask & (1 << 63)


def test_field_properties():
    f = Field(10, 5)
    assert f.width == 6
    assert f.mask == 0x7E0


def test_rejects_overlapping_fields():
    with pytest.raises(ValueError):
        AddressGeometry("bad", 12, 32, 4, ("cpu",), ("memory",), _layout(target=Field(9, 9)))


def test_rejects_wrong_base_width():
    with pytest.raises(ValueError):
        AddressGeometry("bad", 12, 33, 4, ("cpu",), ("memory",), _layout())


def test_rejects_too_many_targets():
    with pytest.raises(ValueError):
        AddressGeometry("bad", 12, 32, 4, ("cpu",), ("a", "b", "c"), _layout())


def test_rejects_field_past_width():
    with pytest.raises(ValueError):
        AddressGeometry("bad", 12, 33, 4, ("cpu",), ("memory",), _layout(base=Field(32, 12)))
