"""Operator amplitude envelope with DX7-style rates and levels."""

from __future__ import annotations

from collections.abc import Sequence

from dxfm.lookup import LG_N

__all__ = ["scale_outlevel", "Envelope"]

_LEVEL_LUT = (
    0, 5, 9, 13, 17, 20, 23, 25, 27, 29, 31, 33, 35, 37, 39, 41, 42, 43, 45, 46,
)

_JUMP_TARGET = 1716
_MIN_LEVEL = 16


def _i32(value: int) -> int:
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def _four(values: Sequence[int], name: str) -> list[int]:
    items = [int(v) for v in values]
    if len(items) != 4:
        raise ValueError(f"{name} must hold exactly 4 values, got {len(items)}")
    return items


def scale_outlevel(outlevel: int) -> int:
    """Map a 0..99 output level to the envelope's internal level scale."""
    if outlevel < 0:
        raise ValueError(f"output level must not be negative, got {outlevel}")
    return 28 + outlevel if outlevel >= 20 else _LEVEL_LUT[outlevel]


class Envelope:
    """Four-stage envelope producing Q24 log-gain values, one per block.

    Rates and levels are DX7 parameters (0..99). ``outlevel`` is in microsteps
    (about 0.023 dB each, 99 * 32 being nominal full scale) and
    ``rate_scaling`` is in qRate units (0..63).
    """

    def __init__(
        self,
        rates: Sequence[int],
        levels: Sequence[int],
        outlevel: int,
        rate_scaling: int,
    ) -> None:
        self._rates = _four(rates, "rates")
        self._levels = _four(levels, "levels")
        self._outlevel = int(outlevel)
        self._rate_scaling = int(rate_scaling)
        self._level = 0
        self._down = True
        self._ix = 0
        self._target = 0
        self._rising = False
        self._inc = 0
        self._advance(0)

    def getsample(self) -> int:
        """Advance by one block and return the current level (Q24 per doubling)."""
        if self._ix < 3 or (self._ix < 4 and not self._down):
            if self._rising:
                if self._level < (_JUMP_TARGET << 16):
                    self._level = _JUMP_TARGET << 16
                step = ((17 << 24) - self._level) >> 24
                self._level = _i32(self._level + step * self._inc)
                if self._level >= self._target:
                    self._level = self._target
                    self._advance(self._ix + 1)
            else:
                self._level = _i32(self._level - self._inc)
                if self._level <= self._target:
                    self._level = self._target
                    self._advance(self._ix + 1)
        return self._level

    def keydown(self, down: bool) -> None:
        """Press (restart at stage 0) or release (jump to stage 3) the key."""
        down = bool(down)
        if self._down != down:
            self._down = down
            self._advance(0 if down else 3)

    def setparam(self, param: int, value: int) -> None:
        """Set rate ``param`` (0..3) or level ``param - 4`` (4..7); others are ignored."""
        if 0 <= param < 4:
            self._rates[param] = int(value)
        elif 4 <= param < 8:
            self._levels[param - 4] = int(value)

    def _advance(self, newix: int) -> None:
        self._ix = newix
        if self._ix < 4:
            actual = scale_outlevel(self._levels[self._ix]) >> 1
            actual = (actual << 6) + self._outlevel - 4256
            actual = max(actual, _MIN_LEVEL)
            self._target = actual << 16
            self._rising = self._target > self._level
            qrate = (self._rates[self._ix] * 41) >> 6
            qrate = min(qrate + self._rate_scaling, 63)
            self._inc = (4 + (qrate & 3)) << (2 + LG_N + (qrate >> 2))