import pytest
from hypothesis import given
from hypothesis import strategies as st

from dxfm.patch import unpack_patch

seven_bit_voices = st.lists(st.integers(0, 127), min_size=128, max_size=128)


def sample_bulk():
    bulk = bytearray(range(128))
    bulk[118:128] = b"E.PIANO 1 "
    return bytes(bulk)


def test_length_and_operator_mask():
    patch = unpack_patch(sample_bulk())
    assert len(patch) == 156
    assert patch[155] == 0x3F


def test_name_and_transpose_copied():
    bulk = sample_bulk()
    patch = unpack_patch(bulk)
    assert patch[145:155] == b"E.PIANO 1 "
    assert patch[144] == bulk[117]


def test_accepts_list_and_bytearray():
    bulk = sample_bulk()
    assert unpack_patch(list(bulk)) == unpack_patch(bytearray(bulk))


def test_wrong_size_raises():
    with pytest.raises(ValueError):
        unpack_patch(bytes(127))
    with pytest.raises(ValueError):
        unpack_patch(bytes(156))


def test_curves_split():
    bulk = bytearray(128)
    bulk[11] = (2 << 2) | 1
    patch = unpack_patch(bulk)
    assert patch[11] == 1
    assert patch[12] == 2


@given(seven_bit_voices)
def test_operator_fields_recombine(values):
    bulk = bytes(values)
    patch = unpack_patch(bulk)
    for op in range(6):
        src = op * 17
        dst = op * 21
        assert patch[dst:dst + 11] == bulk[src:src + 11]
        assert patch[dst + 11] | (patch[dst + 12] << 2) == bulk[src + 11] & 0xF
        assert patch[dst + 13] | (patch[dst + 20] << 3) == bulk[src + 12]
        assert patch[dst + 14] | (patch[dst + 15] << 2) == bulk[src + 13]
        assert patch[dst + 16] == bulk[src + 14]
        assert patch[dst + 17] | (patch[dst + 18] << 1) == bulk[src + 15]
        assert patch[dst + 19] == bulk[src + 16]


@given(seven_bit_voices)
def test_global_fields_recombine(values):
    bulk = bytes(values)
    patch = unpack_patch(bulk)
    assert patch[126:135] == bulk[102:111]
    assert patch[135] | (patch[136] << 3) == bulk[111]
    assert patch[137:141] == bulk[112:116]
    assert patch[141] | (patch[142] << 1) | (patch[143] << 4) == bulk[116]
    assert patch[144:155] == bulk[117:128]
    assert patch[155] == 0x3F