"""Unpacking of 128-byte packed voice data into the 156-byte voice layout."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["PACKED_SIZE", "UNPACKED_SIZE", "unpack_patch"]

PACKED_SIZE = 128
UNPACKED_SIZE = 156


def _signed(byte: int) -> int:
    byte &= 0xFF
    return byte - 256 if byte & 0x80 else byte


def unpack_patch(bulk: Iterable[int]) -> bytes:
    """Expand one packed 128-byte voice into its 156-byte parameter form."""
    data = [_signed(b) for b in bulk]
    if len(data) != PACKED_SIZE:
        raise ValueError(
            f"packed voice must be {PACKED_SIZE} bytes, got {len(data)}"
        )
    patch = [0] * UNPACKED_SIZE
    for op in range(6):
        src = op * 17
        dst = op * 21
        # Envelope rates and levels, break point, depths.
        patch[dst:dst + 11] = data[src:src + 11]
        curves = data[src + 11]
        patch[dst + 11] = curves & 3
        patch[dst + 12] = (curves >> 2) & 3
        detune_rs = data[src + 12]
        patch[dst + 13] = detune_rs & 7
        patch[dst + 20] = detune_rs >> 3
        kvs_ams = data[src + 13]
        patch[dst + 14] = kvs_ams & 3
        patch[dst + 15] = kvs_ams >> 2
        patch[dst + 16] = data[src + 14]  # output level
        coarse_mode = data[src + 15]
        patch[dst + 17] = coarse_mode & 1
        patch[dst + 18] = coarse_mode >> 1
        patch[dst + 19] = data[src + 16]  # fine frequency
    patch[126:135] = data[102:111]  # pitch envelope, algorithm
    oks_fb = data[111]
    patch[135] = oks_fb & 7
    patch[136] = oks_fb >> 3
    patch[137:141] = data[112:116]  # LFO
    lfo_bits = data[116]
    patch[141] = lfo_bits & 1
    patch[142] = (lfo_bits >> 1) & 7
    patch[143] = lfo_bits >> 4
    patch[144:155] = data[117:128]  # transpose, name
    patch[155] = 0x3F  # all operators on
    return bytes(v & 0xFF for v in patch)