"""FIR filtering (convolution): a direct-form filter and a two-phase fast form."""

from __future__ import annotations

from collections.abc import Sequence
from operator import mul

__all__ = ["MAX_HALF_RATE_TAPS", "SimpleFirFilter", "HalfRateFirFilter"]

MAX_HALF_RATE_TAPS = 256


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(map(mul, a, b), 0.0)


class SimpleFirFilter:
    """Direct convolution with a fixed kernel.

    Output sample ``i`` is ``sum(kernel[nk - 1 - j] * samples[i + j])``, so
    ``process`` needs ``n + len(kernel) - 1`` input samples for ``n`` outputs.
    """

    def __init__(self, kernel: Sequence[float]) -> None:
        taps = [float(v) for v in kernel]
        if not taps:
            raise ValueError("kernel must hold at least one tap")
        self._taps = taps[::-1]

    @property
    def size(self) -> int:
        """Number of taps in the kernel."""
        return len(self._taps)

    def process(self, samples: Sequence[float], n: int | None = None) -> list[float]:
        """Filter ``samples`` and return ``n`` output samples."""
        nk = len(self._taps)
        if n is None:
            n = len(samples) - nk + 1
        if n < 0:
            raise ValueError(f"output length must not be negative, got {n}")
        needed = n + nk - 1 if n else 0
        if len(samples) < needed:
            raise ValueError(
                f"{n} outputs need {needed} input samples, got {len(samples)}"
            )
        data = [float(v) for v in samples[:needed]]
        return [_dot(self._taps, data[i:i + nk]) for i in range(n)]


class HalfRateFirFilter:
    """The same convolution as :class:`SimpleFirFilter`, computed as three
    half-length filters running at half rate (two-parallel fast FIR).

    The kernel is taken in pairs; for an odd-length kernel the last tap is
    not used. Output comes in pairs, so an odd ``n`` yields ``n - 1`` samples.
    """

    def __init__(self, kernel: Sequence[float]) -> None:
        taps = [float(v) for v in kernel]
        if len(taps) < 2:
            raise ValueError("kernel must hold at least two taps")
        if len(taps) > MAX_HALF_RATE_TAPS:
            raise ValueError(
                f"kernel may hold at most {MAX_HALF_RATE_TAPS} taps, got {len(taps)}"
            )
        self._nk = len(taps)
        even = taps[0:len(taps) - 1:2]
        odd = taps[1::2]
        half = self._nk >> 1
        even = even[:half]
        odd = odd[:half]
        self._k2 = odd
        self._f0 = SimpleFirFilter(even)
        self._f1 = SimpleFirFilter([a + b for a, b in zip(even, odd)])
        self._f2 = SimpleFirFilter(odd)

    @property
    def size(self) -> int:
        """Number of taps the filter was given."""
        return self._nk

    def process(self, samples: Sequence[float], n: int | None = None) -> list[float]:
        """Filter ``samples`` and return ``2 * (n // 2)`` output samples."""
        nk2 = self._nk >> 1
        if n is None:
            n = len(samples) - 2 * nk2 + 1
        if n < 0:
            raise ValueError(f"output length must not be negative, got {n}")
        n2 = n >> 1
        if n2 == 0:
            return []
        n2in = n2 + nk2 - 1
        needed = 2 * n2in + 1
        if len(samples) < needed:
            raise ValueError(
                f"{n} outputs need {needed} input samples, got {len(samples)}"
            )
        data = [float(v) for v in samples[:needed]]

        odd_in = data[1::2][:n2in]
        even_in = data[2::2][:n2in]
        sum_in = [a + b for a, b in zip(odd_in, even_in)]
        i2 = [data[0], *even_in]

        y0 = self._f0.process(odd_in, n2)
        y1 = self._f1.process(sum_in, n2)
        y2 = self._f2.process(even_in, n2)

        z2m2 = _dot(self._k2[::-1], i2[:nk2])
        out: list[float] = []
        for m0, m1, m2 in zip(y0, y1, y2):
            out.append(m0 + z2m2)
            out.append(m1 - m0 - m2)
            z2m2 = m2
        return out