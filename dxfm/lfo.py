"""Low-frequency oscillator compatible with the DX7."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from dxfm.lookup import N

__all__ = ["Lfo"]

_M32 = 0xFFFFFFFF
_HALF = 1 << 31
_SINE_WAVEFORM = 4


def _i32(value: int) -> int:
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


class Lfo:
    """LFO producing Q24 values in 0..1, one per block.

    ``sine`` is a Q24 sine lookup (phase with ``1 << 24`` per cycle, result
    in Q24); it is needed only for the sine waveform.
    """

    def __init__(
        self,
        sample_rate: float,
        sine: Callable[[int], int] | None = None,
    ) -> None:
        if not sample_rate > 0:
            raise ValueError(f"sample rate must be positive, got {sample_rate!r}")
        # 1 << 32 / 15.5 s / 11, scaled to one block.
        self._unit = _i32(int(N * 25190424 / sample_rate + 0.5)) & _M32
        self._sine = sine
        self._phase = 0
        self._delta = 0
        self._waveform = 0
        self._randstate = 0
        self._sync = False
        self._delaystate = 0
        self._delayinc = 0
        self._delayinc2 = 0

    def reset(self, params: Sequence[int]) -> None:
        """Load rate, delay, sync and waveform from the six LFO patch parameters."""
        params = [int(p) for p in params]
        if len(params) < 6:
            raise ValueError(f"LFO needs 6 parameters, got {len(params)}")
        if not 0 <= params[1] <= 99:
            raise ValueError(f"LFO delay must be in 0..99, got {params[1]}")
        waveform = params[5] & 0xFF
        if waveform == _SINE_WAVEFORM and self._sine is None:
            raise ValueError("the sine waveform needs a sine lookup")

        rate = params[0]
        sr = 1 if rate == 0 else (165 * rate) >> 6
        sr *= 11 if sr < 160 else 11 + ((sr - 160) >> 4)
        self._delta = (self._unit * sr) & _M32

        a = 99 - params[1]
        if a == 99:
            self._delayinc = _M32
            self._delayinc2 = _M32
        else:
            a = (16 + (a & 15)) << (1 + (a >> 4))
            self._delayinc = (self._unit * a) & _M32
            a = max(0x80, a & 0xFF80)
            self._delayinc2 = (self._unit * a) & _M32

        self._waveform = waveform
        self._sync = params[4] != 0

    def getsample(self) -> int:
        """Advance one block and return the waveform value (Q24, 0..1)."""
        self._phase = (self._phase + self._delta) & _M32
        phase = self._phase
        waveform = self._waveform
        if waveform == 0:  # triangle
            x = phase >> 7
            if phase >> 31:
                x ^= _M32
            return x & ((1 << 24) - 1)
        if waveform == 1:  # sawtooth down
            return ((~phase & _M32) ^ _HALF) >> 8
        if waveform == 2:  # sawtooth up
            return (phase ^ _HALF) >> 8
        if waveform == 3:  # square
            return ((~phase & _M32) >> 7) & (1 << 24)
        if waveform == _SINE_WAVEFORM and self._sine is not None:
            return _i32((1 << 23) + (self._sine(phase >> 8) >> 1))
        if waveform == 5:  # sample and hold
            if phase < self._delta:
                self._randstate = (self._randstate * 179 + 17) & 0xFF
            return ((self._randstate ^ 0x80) + 1) << 16
        return 1 << 23

    def getdelay(self) -> int:
        """Advance the delay ramp one block and return its value (Q24, 0..1)."""
        delta = self._delayinc if self._delaystate < _HALF else self._delayinc2
        d = (self._delaystate + delta) & _M32
        if d < self._delayinc:
            return 1 << 24
        self._delaystate = d
        if d < _HALF:
            return 0
        return (d >> 7) & ((1 << 24) - 1)

    def keydown(self) -> None:
        """Restart the delay ramp, and the phase too when key sync is on."""
        if self._sync:
            self._phase = _HALF - 1
        self._delaystate = 0