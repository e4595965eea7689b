import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dxfm.pitchenv import PitchEnvelope, pitch_env_unit

RATE = 44100


def run(env, n):
    return [env.getsample() for _ in range(n)]


def test_unit_positive_and_shrinks_with_rate():
    assert pitch_env_unit(22050) > pitch_env_unit(44100) > pitch_env_unit(96000) > 0


def test_unit_rejects_nonpositive_rate():
    with pytest.raises(ValueError):
        pitch_env_unit(0)


def test_centre_levels_give_no_pitch_change():
    env = PitchEnvelope([99, 99, 99, 99], [50, 50, 50, 50], RATE)
    assert set(run(env, 100)) == {0}
    env.keydown(False)
    assert set(run(env, 100)) == {0}


def test_rises_to_top_then_sustains():
    env = PitchEnvelope([80, 80, 80, 80], [99, 50, 50, 0], RATE)
    samples = run(env, 3000)
    assert samples[0] < 0
    peak = samples.index(max(samples))
    assert samples[: peak + 1] == sorted(samples[: peak + 1])
    assert max(samples) == 127 << 19
    assert samples[-1] == 0


def test_release_goes_to_final_level():
    env = PitchEnvelope([80, 80, 80, 80], [99, 50, 50, 0], RATE)
    run(env, 3000)
    env.keydown(False)
    release = run(env, 3000)
    assert release == sorted(release, reverse=True)
    assert release[-1] == -128 << 19


def test_repeated_keydown_has_no_effect():
    a = PitchEnvelope([30, 40, 50, 60], [99, 20, 70, 0], RATE)
    b = PitchEnvelope([30, 40, 50, 60], [99, 20, 70, 0], RATE)
    run(a, 10)
    run(b, 10)
    b.keydown(True)
    assert run(a, 500) == run(b, 500)


def test_higher_sample_rate_moves_slower():
    fast = PitchEnvelope([60, 60, 60, 60], [99, 99, 99, 0], 22050)
    slow = PitchEnvelope([60, 60, 60, 60], [99, 99, 99, 0], 96000)
    assert fast.getsample() > slow.getsample()


def test_wrong_lengths_raise():
    with pytest.raises(ValueError):
        PitchEnvelope([1, 2, 3], [1, 2, 3, 4], RATE)
    with pytest.raises(ValueError):
        PitchEnvelope([1, 2, 3, 4], [1, 2], RATE)


@settings(max_examples=40, deadline=None)
@given(
    rates=st.lists(st.integers(0, 99), min_size=4, max_size=4),
    levels=st.lists(st.integers(0, 99), min_size=4, max_size=4),
)
def test_samples_stay_within_table_range(rates, levels):
    env = PitchEnvelope(rates, levels, RATE)
    samples = run(env, 200)
    env.keydown(False)
    samples += run(env, 200)
    assert all((-128 << 19) <= s <= (127 << 19) for s in samples)