# dxfm

Fixed-point building blocks for six-operator FM synthesis, working on DX7
voice data. The arithmetic follows 32-bit integer behaviour so that results
are bit-exact. Covered here: operator amplitude envelopes, the pitch
envelope, the LFO, the 32 operator routing algorithms, keyboard and velocity
scaling, per-block operator parameters for a note, unpacking of 128-byte
packed voices, and FIR filtering.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `dxfm.lookup`: Q24 fixed-point functions `exp2_lookup`, `tanh_lookup`
  and `log2_lookup`, and `FrequencyTable`, which turns a Q24 log-frequency
  (1.0 is one octave) into a per-sample phase increment for a sample rate.
  Also the block size constants `LG_N` (6) and `N` (64).
- `dxfm.envelope`: `Envelope`, a four-stage operator envelope giving one
  Q24 log-gain value per block (`getsample`, `keydown`, `setparam`), and
  `scale_outlevel`.
- `dxfm.pitchenv`: `PitchEnvelope`, giving a Q24-per-octave pitch offset
  per block, and `pitch_env_unit`.
- `dxfm.lfo`: `Lfo` with triangle, sawtooth down/up, square, sine and
  sample-and-hold waveforms (`getsample`) and a delay ramp (`getdelay`).
  The sine waveform needs a sine lookup passed in as `sine`; without one,
  `reset` rejects waveform 4.
- `dxfm.patch`: `unpack_patch` expands one packed 128-byte voice into the
  156-byte voice layout, returned as `bytes`.
- `dxfm.fir`: `SimpleFirFilter` (direct convolution) and
  `HalfRateFirFilter` (the same convolution computed as three half-length
  filters; kernels of 2 to 256 taps, output in pairs).
- `dxfm.algorithms`: the 32 routing algorithms as `Algorithm` objects
  (`output_count`, `describe`) built from `OperatorFlags`, looked up with
  `get_algorithm(index)` for index 0..31; `dump()` returns a text line per
  algorithm.
- `dxfm.voice`: `Dx7Note`, one note built from a 156-byte voice, plus the
  scaling helpers `midinote_to_logfreq`, `osc_freq`, `scale_velocity`,
  `scale_rate`, `scale_curve`, `scale_level`, the `Controllers` state
  (with `pitch_bend`) and `OperatorParams`.

## Example

```python
from dxfm.algorithms import dump
from dxfm.patch import unpack_patch
from dxfm.voice import Controllers, Dx7Note

with open("bank.syx", "rb") as fh:
    bank = fh.read()

patch = unpack_patch(bank[6:6 + 128])          # first voice of a bulk dump
note = Dx7Note(patch, midinote=60, velocity=100, sample_rate=44100)
controllers = Controllers()

params = note.step(lfo_val=1 << 23, lfo_delay=0, controllers=controllers)
for op in params:
    print(op.gain_start, op.gain_end, op.freq, op.phase)

note.keyup()
print(note.algorithm.describe())
print(dump())
```

`Dx7Note.step` advances the note by one block of 64 samples and returns the
six operators' parameters for that block: a gain ramp from `gain_start` to
`gain_end`, the phase increment per sample `freq`, and the starting `phase`
(both Q24 per cycle). The operators are listed from operator 6 down to 1,
in the same order as `Algorithm.ops`.

## What this package does not do

- It does not render audio samples. There is no sine table and no operator
  kernel that turns `OperatorParams` into a waveform, so feeding the
  routing of an `Algorithm` through operators is left to the caller.
- It has no MIDI handling, no polyphony or voice allocation, and no audio
  output.
- It has no command-line program.