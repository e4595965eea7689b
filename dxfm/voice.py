"""A single DX7 voice: patch scaling, envelopes and per-block operator parameters."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import lru_cache

from dxfm.algorithms import Algorithm, get_algorithm
from dxfm.envelope import Envelope, scale_outlevel
from dxfm.lookup import LG_N, FrequencyTable, exp2_lookup
from dxfm.pitchenv import PitchEnvelope

__all__ = [
    "CONTROLLER_PITCH",
    "PITCH_BEND_CENTER",
    "midinote_to_logfreq",
    "osc_freq",
    "scale_velocity",
    "scale_rate",
    "scale_curve",
    "scale_level",
    "Controllers",
    "OperatorParams",
    "Dx7Note",
]

CONTROLLER_PITCH = 128
PITCH_BEND_CENTER = 0x2000

_M32 = 0xFFFFFFFF
_MIN_PATCH_SIZE = 155

_COARSE_MUL = (
    -16777216, 0, 16777216, 26591258, 33554432, 38955489, 43368474, 47099600,
    50331648, 53182516, 55732705, 58039632, 60145690, 62083076, 63876816,
    65546747, 67108864, 68576247, 69959732, 71268397, 72509921, 73690858,
    74816848, 75892776, 76922906, 77910978, 78860292, 79773775, 80654032,
    81503396, 82323963, 83117622,
)

_VELOCITY_DATA = (
    0, 70, 86, 97, 106, 114, 121, 126, 132, 138, 142, 148, 152, 156, 160, 163,
    166, 170, 173, 174, 178, 181, 184, 186, 189, 190, 194, 196, 198, 200, 202,
    205, 206, 209, 211, 214, 216, 218, 220, 222, 224, 225, 227, 229, 230, 232,
    233, 235, 237, 238, 240, 241, 242, 243, 244, 246, 246, 248, 249, 250, 251,
    252, 253, 254,
)

_EXP_SCALE_DATA = (
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 11, 14, 16, 19, 23, 27, 33, 39, 47, 56, 66,
    80, 94, 110, 126, 142, 158, 174, 190, 206, 222, 238, 250,
)

_PITCH_MOD_SENS = (0, 10, 20, 33, 55, 92, 153, 255)


def _i32(value: int) -> int:
    return ((value + 0x80000000) & _M32) - 0x80000000


def _signed_char(value: int) -> int:
    return ((int(value) + 128) & 0xFF) - 128


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


@lru_cache(maxsize=8)
def _frequency_table(sample_rate: float) -> FrequencyTable:
    return FrequencyTable(sample_rate)


def midinote_to_logfreq(midinote: int) -> int:
    """Return the Q24 log2 frequency (in Hz) of a MIDI note."""
    base = 50857777  # (1 << 24) * (log2(440) - 69 / 12)
    step = (1 << 24) // 12
    return _i32(base + step * midinote)


def osc_freq(midinote: int, mode: int, coarse: int, fine: int, detune: int) -> int:
    """Return an oscillator's Q24 log frequency.

    ``mode`` 0 is ratio mode (relative to the note); any other value is fixed
    frequency mode.
    """
    if mode == 0:
        logfreq = midinote_to_logfreq(midinote) + _COARSE_MUL[coarse & 31]
        if fine:
            # (1 << 24) / log(2)
            logfreq += math.floor(24204406.323123 * math.log(1 + 0.01 * fine) + 0.5)
        # Measured at 7.213 Hz per count at 9600 Hz; close enough across notes.
        logfreq += 12606 * (detune - 7)
    else:
        # ((1 << 24) * log(10) / log(2) * .01) << 3
        logfreq = (4458616 * ((coarse & 3) * 100 + fine)) >> 3
        if detune > 7:
            logfreq += 13457 * (detune - 7)
    return _i32(logfreq)


def scale_velocity(velocity: int, sensitivity: int) -> int:
    """Return the output level change, in microsteps, for a key velocity."""
    clamped = max(0, min(127, velocity))
    vel_value = _VELOCITY_DATA[clamped >> 1] - 239
    return ((sensitivity * vel_value + 7) >> 3) << 4


def scale_rate(midinote: int, sensitivity: int) -> int:
    """Return the envelope rate increase (qRate units) for keyboard rate scaling."""
    x = min(31, max(0, _cdiv(midinote, 3) - 7))
    return (sensitivity * x) >> 3


def scale_curve(group: int, depth: int, curve: int) -> int:
    """Apply one side of keyboard level scaling.

    Curves 0 and 3 are linear, 1 and 2 exponential; 0 and 1 lower the level.
    """
    if curve in (0, 3):
        scale = (group * depth * 329) >> 12
    else:
        raw_exp = _EXP_SCALE_DATA[min(group, len(_EXP_SCALE_DATA) - 1)]
        scale = (raw_exp * depth * 329) >> 15
    return -scale if curve < 2 else scale


def scale_level(
    midinote: int,
    break_pt: int,
    left_depth: int,
    right_depth: int,
    left_curve: int,
    right_curve: int,
) -> int:
    """Return the keyboard level scaling for ``midinote`` around a break point."""
    offset = midinote - break_pt - 17
    if offset >= 0:
        return scale_curve(offset // 3, right_depth, right_curve)
    return scale_curve((-offset) // 3, left_depth, left_curve)


def _default_controller_values() -> list[int]:
    values = [0] * (CONTROLLER_PITCH + 1)
    values[CONTROLLER_PITCH] = PITCH_BEND_CENTER
    return values


@dataclass
class Controllers:
    """State of the MIDI controllers; index 128 holds the 14-bit pitch bend."""

    values: list[int] = field(default_factory=_default_controller_values)

    def __post_init__(self) -> None:
        if len(self.values) != CONTROLLER_PITCH + 1:
            raise ValueError(
                f"controllers need {CONTROLLER_PITCH + 1} values, got {len(self.values)}"
            )

    @property
    def pitch_bend(self) -> int:
        """Current pitch bend (0..0x3fff, centre 0x2000)."""
        return self.values[CONTROLLER_PITCH]

    @pitch_bend.setter
    def pitch_bend(self, value: int) -> None:
        self.values[CONTROLLER_PITCH] = int(value)


@dataclass(frozen=True)
class OperatorParams:
    """One operator's parameters for one block.

    The gain ramps linearly from ``gain_start`` to ``gain_end`` across the
    block; ``phase`` is the phase at the start of the block and ``freq`` the
    phase increment per sample (both Q24 per cycle).
    """

    gain_start: int
    gain_end: int
    freq: int
    phase: int


class Dx7Note:
    """One sounding note built from an unpacked 156-byte voice."""

    def __init__(
        self,
        patch: Sequence[int],
        midinote: int,
        velocity: int,
        sample_rate: float,
    ) -> None:
        data = [_signed_char(v) for v in patch]
        if len(data) < _MIN_PATCH_SIZE:
            raise ValueError(
                f"voice must hold at least {_MIN_PATCH_SIZE} bytes, got {len(data)}"
            )
        self._algorithm = get_algorithm(data[134])
        self._freqlut = _frequency_table(sample_rate)

        self._envs: list[Envelope] = []
        self._basepitch: list[int] = []
        for op in range(6):
            off = op * 21
            rates = data[off:off + 4]
            levels = data[off + 4:off + 8]
            outlevel = scale_outlevel(data[off + 16])
            outlevel += scale_level(midinote, *data[off + 8:off + 13])
            outlevel = min(127, outlevel) << 5
            outlevel += scale_velocity(velocity, data[off + 15])
            outlevel = max(0, outlevel)
            rate_scaling = scale_rate(midinote, data[off + 13])
            self._envs.append(Envelope(rates, levels, outlevel, rate_scaling))
            self._basepitch.append(osc_freq(midinote, *data[off + 17:off + 21]))

        self._phases = [0] * 6
        self._freqs = [0] * 6
        self._gains = [0] * 6

        self._pitchenv = PitchEnvelope(data[126:130], data[130:134], sample_rate)
        feedback = data[135]
        self._fb_shift = 8 - feedback if feedback != 0 else 16
        self._pitchmoddepth = (data[139] * 165) >> 6
        self._pitchmodsens = _PITCH_MOD_SENS[data[143] & 7]

    @property
    def algorithm(self) -> Algorithm:
        """The operator routing this note uses."""
        return self._algorithm

    @property
    def feedback_shift(self) -> int:
        """Right shift applied to the feedback signal; 16 means no feedback."""
        return self._fb_shift

    def step(
        self,
        lfo_val: int,
        lfo_delay: int,
        controllers: Controllers | None = None,
    ) -> tuple[OperatorParams, ...]:
        """Advance one block and return the six operators' parameters for it.

        ``lfo_val`` and ``lfo_delay`` are the LFO's Q24 outputs for the block.
        """
        if controllers is None:
            controllers = Controllers()
        # Phases move on by the previous block's frequencies.
        self._phases = [
            _i32(phase + (freq << LG_N)) for phase, freq in zip(self._phases, self._freqs)
        ]

        pitchmod = self._pitchenv.getsample()
        pmd = (self._pitchmoddepth * lfo_delay) & _M32  # Q32
        senslfo = _i32(self._pitchmodsens * (lfo_val - (1 << 23)))
        pitchmod += (pmd * senslfo) >> 39
        # Pitch bend range is fixed at 3 semitones.
        pitchmod += (controllers.pitch_bend - PITCH_BEND_CENTER) << 9
        pitchmod = _i32(pitchmod)

        result = []
        for op, env in enumerate(self._envs):
            gain_start = self._gains[op]
            level = env.getsample()
            gain = exp2_lookup(level - (14 << 24))
            freq = self._freqlut.lookup(self._basepitch[op] + pitchmod)
            self._gains[op] = gain
            self._freqs[op] = freq
            result.append(OperatorParams(gain_start, gain, freq, self._phases[op]))
        return tuple(result)

    def keyup(self) -> None:
        """Release the key: every envelope moves to its release stage."""
        for env in self._envs:
            env.keydown(False)
        self._pitchenv.keydown(False)