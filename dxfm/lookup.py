"""Fixed-point lookup tables: exp2, tanh, log2 and log-frequency to phase delta.

All values follow the Q24 convention: ``1 << 24`` stands for 1.0. Arithmetic
mirrors 32-bit signed integer behaviour so that results are bit-exact.
"""

from __future__ import annotations

import math

__all__ = [
    "LG_N",
    "N",
    "exp2_lookup",
    "tanh_lookup",
    "log2_lookup",
    "FrequencyTable",
]

# Block size used throughout the synth: samples are computed in blocks of N.
LG_N = 6
N = 1 << LG_N

_EXP2_LG_N_SAMPLES = 10
_EXP2_N_SAMPLES = 1 << _EXP2_LG_N_SAMPLES

_TANH_LG_N_SAMPLES = 10
_TANH_N_SAMPLES = 1 << _TANH_LG_N_SAMPLES

_LOG2_LG_N_SAMPLES = 9
_LOG2_N_SAMPLES = 1 << _LOG2_LG_N_SAMPLES

_FREQ_LG_N_SAMPLES = 10
_FREQ_N_SAMPLES = 1 << _FREQ_LG_N_SAMPLES
_FREQ_SAMPLE_SHIFT = 24 - _FREQ_LG_N_SAMPLES
_MAX_LOGFREQ_INT = 20


def _i32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def _shift_right(value: int, amount: int) -> int:
    """Arithmetic right shift; a negative amount shifts left with 32-bit wrap."""
    if amount >= 0:
        return value >> amount
    return _i32(value << -amount)


def _interleave_deltas(values: list[int], last_delta: int) -> list[int]:
    """Build a table of (delta, value) pairs from sampled values."""
    table: list[int] = []
    for current, following in zip(values, values[1:]):
        table.extend((_i32(following - current), current))
    table.extend((_i32(last_delta), values[-1]))
    return table


def _build_exp2_table() -> list[int]:
    inc = 2.0 ** (1.0 / _EXP2_N_SAMPLES)
    y = float(1 << 30)
    values = []
    for _ in range(_EXP2_N_SAMPLES):
        values.append(_i32(math.floor(y + 0.5)))
        y *= inc
    return _interleave_deltas(values, (1 << 31) - values[-1])


def _dtanh(y: float) -> float:
    return 1 - y * y


def _build_tanh_table() -> list[int]:
    step = 4.0 / _TANH_N_SAMPLES
    y = 0.0
    values = []
    for _ in range(_TANH_N_SAMPLES):
        values.append(int((1 << 24) * y + 0.5))
        # Fourth-order Runge-Kutta on tanh's differential equation.
        k1 = _dtanh(y)
        k2 = _dtanh(y + 0.5 * step * k1)
        k3 = _dtanh(y + 0.5 * step * k2)
        k4 = _dtanh(y + step * k3)
        y += (step / 6) * (k1 + k4 + 2 * (k2 + k3))
    lasty = int((1 << 24) * y + 0.5)
    return _interleave_deltas(values, lasty - values[-1])


def _build_log2_table() -> list[int]:
    mul = 1 / math.log(2)
    values = []
    for i in range(_LOG2_N_SAMPLES):
        y = mul * math.log(i + _LOG2_N_SAMPLES) + (7 - _LOG2_LG_N_SAMPLES)
        values.append(_i32(math.floor(y * (1 << 24) + 0.5)))
    return _interleave_deltas(values, (8 << 24) - values[-1])


_EXP2_TABLE = _build_exp2_table()
_TANH_TABLE = _build_tanh_table()
_LOG2_TABLE = _build_log2_table()


def exp2_lookup(x: int) -> int:
    """Return 2**x with x and the result in Q24."""
    x = _i32(x)
    shift = 24 - _EXP2_LG_N_SAMPLES
    lowbits = x & ((1 << shift) - 1)
    x_int = (x >> (shift - 1)) & ((_EXP2_N_SAMPLES - 1) << 1)
    dy = _EXP2_TABLE[x_int]
    y0 = _EXP2_TABLE[x_int + 1]
    y = _i32(y0 + ((dy * lowbits) >> shift))
    return _shift_right(y, 6 - (x >> 24))


def tanh_lookup(x: int) -> int:
    """Return tanh(x) with x and the result in Q24."""
    x = _i32(x)
    signum = x >> 31
    x ^= signum
    if x >= (4 << 24):
        if x >= (17 << 23):
            return signum ^ (1 << 24)
        sx = _i32((-48408812 * x) >> 24)
        return signum ^ _i32((1 << 24) - 2 * exp2_lookup(sx))
    shift = 26 - _TANH_LG_N_SAMPLES
    lowbits = x & ((1 << shift) - 1)
    x_int = (x >> (shift - 1)) & ((_TANH_N_SAMPLES - 1) << 1)
    dy = _TANH_TABLE[x_int]
    y0 = _TANH_TABLE[x_int + 1]
    y = _i32(y0 + ((dy * lowbits) >> shift))
    return y ^ signum


def log2_lookup(x: int) -> int:
    """Return log2(x) for an unsigned 32-bit x, both in Q24."""
    x &= 0xFFFFFFFF
    exp = 32 - (x | 1).bit_length()
    y = (x << exp) & 0xFFFFFFFF
    shift = 31 - _LOG2_LG_N_SAMPLES
    lowbits = y & ((1 << shift) - 1)
    y_int = (y >> (shift - 1)) & ((_LOG2_N_SAMPLES - 1) << 1)
    dz = _LOG2_TABLE[y_int]
    z0 = _LOG2_TABLE[y_int + 1]
    z = _i32(z0 + ((dz * lowbits) >> shift))
    return _i32(z - (exp << 24))


class FrequencyTable:
    """Resolves a Q24 log-frequency (1.0 = one octave) to a per-sample phase delta."""

    def __init__(self, sample_rate: float) -> None:
        if not sample_rate > 0:
            raise ValueError(f"sample rate must be positive, got {sample_rate!r}")
        self.sample_rate = sample_rate
        y = (1 << (24 + _MAX_LOGFREQ_INT)) / sample_rate
        inc = 2.0 ** (1.0 / _FREQ_N_SAMPLES)
        table = []
        for _ in range(_FREQ_N_SAMPLES + 1):
            table.append(_i32(math.floor(y + 0.5)))
            y *= inc
        self._table = table

    def lookup(self, logfreq: int) -> int:
        """Return the phase delta (Q24 per cycle) for ``logfreq``.

        Results lose accuracy once ``logfreq`` exceeds 20.0 octaves, far above
        the Nyquist rate.
        """
        logfreq = _i32(logfreq)
        ix = (logfreq & 0xFFFFFF) >> _FREQ_SAMPLE_SHIFT
        y0 = self._table[ix]
        y1 = self._table[ix + 1]
        lowbits = logfreq & ((1 << _FREQ_SAMPLE_SHIFT) - 1)
        y = _i32(y0 + ((_i32(y1 - y0) * lowbits) >> _FREQ_SAMPLE_SHIFT))
        hibits = logfreq >> 24
        return _shift_right(y, _MAX_LOGFREQ_INT - hibits)