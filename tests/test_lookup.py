import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dxfm.lookup import (
    FrequencyTable,
    exp2_lookup,
    log2_lookup,
    tanh_lookup,
)

ONE = 1 << 24


def test_exp2_of_integers_is_exact_power():
    assert exp2_lookup(0) == ONE
    assert exp2_lookup(ONE) == 2 * ONE
    assert exp2_lookup(-ONE) == ONE // 2
    assert exp2_lookup(3 * ONE) == 8 * ONE


@given(st.integers(min_value=-8 * ONE, max_value=5 * ONE))
def test_exp2_matches_float(x):
    expected = 2.0 ** (x / ONE)
    assert abs(exp2_lookup(x) / ONE - expected) <= expected * 1e-5 + 2.0 / ONE


@given(st.integers(min_value=-8 * ONE, max_value=5 * ONE - 1000))
def test_exp2_is_monotonic(x):
    assert exp2_lookup(x) <= exp2_lookup(x + 1000)


def test_tanh_at_zero_and_saturation():
    assert tanh_lookup(0) == 0
    assert tanh_lookup(9 * ONE) == ONE
    assert tanh_lookup(-9 * ONE) == ~ONE


@given(st.integers(min_value=-8 * ONE, max_value=8 * ONE))
def test_tanh_matches_float(x):
    assert abs(tanh_lookup(x) / ONE - math.tanh(x / ONE)) < 1e-4


@given(st.integers(min_value=1, max_value=8 * ONE))
def test_tanh_sign_symmetry(x):
    assert tanh_lookup(-x) == ~tanh_lookup(x - 1)


def test_log2_of_powers_of_two():
    assert log2_lookup(ONE) == 0
    assert log2_lookup(2 * ONE) == ONE
    assert log2_lookup(ONE // 4) == -2 * ONE


@given(st.integers(min_value=1 << 16, max_value=(1 << 32) - 1))
def test_log2_matches_float(x):
    expected = math.log2(x) - 24
    assert abs(log2_lookup(x) / ONE - expected) < 1e-5


@given(st.integers(min_value=-4 * ONE, max_value=6 * ONE))
def test_exp2_log2_round_trip(x):
    assert abs(log2_lookup(exp2_lookup(x)) - x) < (1 << 10)


def test_frequency_table_octaves():
    table = FrequencyTable(1 << 20)
    assert table.lookup(20 * ONE) == ONE
    assert table.lookup(0) == 16
    assert table.lookup(21 * ONE) == 2 * ONE


@given(st.integers(min_value=8 * ONE, max_value=14 * ONE))
def test_frequency_table_matches_float(logfreq):
    sample_rate = 44100.0
    table = FrequencyTable(sample_rate)
    expected = 2.0 ** (logfreq / ONE) / sample_rate * ONE
    assert abs(table.lookup(logfreq) - expected) <= expected * 1e-4 + 1


@pytest.mark.parametrize("rate", [0, -44100])
def test_frequency_table_rejects_bad_sample_rate(rate):
    with pytest.raises(ValueError):
        FrequencyTable(rate)