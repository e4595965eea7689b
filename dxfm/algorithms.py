"""The 32 DX7 operator routing algorithms."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

__all__ = [
    "ALGORITHM_COUNT",
    "OperatorFlags",
    "Algorithm",
    "get_algorithm",
    "dump",
]


class OperatorFlags(IntFlag):
    """Routing flags of one operator within an algorithm."""

    OUT_BUS_ONE = 1 << 0
    OUT_BUS_TWO = 1 << 1
    OUT_BUS_ADD = 1 << 2
    IN_BUS_ONE = 1 << 4
    IN_BUS_TWO = 1 << 5
    FB_IN = 1 << 6
    FB_OUT = 1 << 7


_ALGORITHM_TABLE = (
    (0xC1, 0x11, 0x11, 0x14, 0x01, 0x14),  # 1
    (0x01, 0x11, 0x11, 0x14, 0xC1, 0x14),  # 2
    (0xC1, 0x11, 0x14, 0x01, 0x11, 0x14),  # 3
    (0x41, 0x11, 0x94, 0x01, 0x11, 0x14),  # 4
    (0xC1, 0x14, 0x01, 0x14, 0x01, 0x14),  # 5
    (0x41, 0x94, 0x01, 0x14, 0x01, 0x14),  # 6
    (0xC1, 0x11, 0x05, 0x14, 0x01, 0x14),  # 7
    (0x01, 0x11, 0xC5, 0x14, 0x01, 0x14),  # 8
    (0x01, 0x11, 0x05, 0x14, 0xC1, 0x14),  # 9
    (0x01, 0x05, 0x14, 0xC1, 0x11, 0x14),  # 10
    (0xC1, 0x05, 0x14, 0x01, 0x11, 0x14),  # 11
    (0x01, 0x05, 0x05, 0x14, 0xC1, 0x14),  # 12
    (0xC1, 0x05, 0x05, 0x14, 0x01, 0x14),  # 13
    (0xC1, 0x05, 0x11, 0x14, 0x01, 0x14),  # 14
    (0x01, 0x05, 0x11, 0x14, 0xC1, 0x14),  # 15
    (0xC1, 0x11, 0x02, 0x25, 0x05, 0x14),  # 16
    (0x01, 0x11, 0x02, 0x25, 0xC5, 0x14),  # 17
    (0x01, 0x11, 0x11, 0xC5, 0x05, 0x14),  # 18
    (0xC1, 0x14, 0x14, 0x01, 0x11, 0x14),  # 19
    (0x01, 0x05, 0x14, 0xC1, 0x14, 0x14),  # 20
    (0x01, 0x14, 0x14, 0xC1, 0x14, 0x14),  # 21
    (0xC1, 0x14, 0x14, 0x14, 0x01, 0x14),  # 22
    (0xC1, 0x14, 0x14, 0x01, 0x14, 0x04),  # 23
    (0xC1, 0x14, 0x14, 0x14, 0x04, 0x04),  # 24
    (0xC1, 0x14, 0x14, 0x04, 0x04, 0x04),  # 25
    (0xC1, 0x05, 0x14, 0x01, 0x14, 0x04),  # 26
    (0x01, 0x05, 0x14, 0xC1, 0x14, 0x04),  # 27
    (0x04, 0xC1, 0x11, 0x14, 0x01, 0x14),  # 28
    (0xC1, 0x14, 0x01, 0x14, 0x04, 0x04),  # 29
    (0x04, 0xC1, 0x11, 0x14, 0x04, 0x04),  # 30
    (0xC1, 0x14, 0x04, 0x04, 0x04, 0x04),  # 31
    (0xC4, 0x04, 0x04, 0x04, 0x04, 0x04),  # 32
)

ALGORITHM_COUNT = len(_ALGORITHM_TABLE)


def _bus_name(flags: int, one: OperatorFlags, two: OperatorFlags) -> str:
    if flags & one:
        return "1"
    if flags & two:
        return "2"
    return "0"


def _describe_op(flags: OperatorFlags) -> str:
    text = "[" if flags & OperatorFlags.FB_IN else ""
    text += _bus_name(flags, OperatorFlags.IN_BUS_ONE, OperatorFlags.IN_BUS_TWO)
    text += "->"
    text += _bus_name(flags, OperatorFlags.OUT_BUS_ONE, OperatorFlags.OUT_BUS_TWO)
    if flags & OperatorFlags.OUT_BUS_ADD:
        text += "+"
    if flags & OperatorFlags.FB_OUT:
        text += "]"
    return text


@dataclass(frozen=True)
class Algorithm:
    """One routing of the six operators, listed from operator 6 down to 1."""

    number: int
    ops: tuple[OperatorFlags, ...]

    def output_count(self) -> int:
        """Number of operators that add straight into the output."""
        return sum(1 for flags in self.ops if (flags & 7) == OperatorFlags.OUT_BUS_ADD)

    def describe(self) -> str:
        """One-line summary of the bus routing, e.g. ``"1: [0->1] 1->0+ ... 2"``."""
        ops = " ".join(_describe_op(flags) for flags in self.ops)
        return f"{self.number}: {ops} {self.output_count()}"


_ALGORITHMS = tuple(
    Algorithm(number, tuple(OperatorFlags(v) for v in ops))
    for number, ops in enumerate(_ALGORITHM_TABLE, start=1)
)


def get_algorithm(index: int) -> Algorithm:
    """Return the algorithm stored in a patch as ``index`` (0..31)."""
    if not 0 <= index < ALGORITHM_COUNT:
        raise ValueError(
            f"algorithm index must be in 0..{ALGORITHM_COUNT - 1}, got {index}"
        )
    return _ALGORITHMS[index]


def dump() -> str:
    """Describe every algorithm, one per line."""
    return "\n".join(algorithm.describe() for algorithm in _ALGORITHMS)