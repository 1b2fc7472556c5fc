"""Tests for dynamic EQ gain derivation."""

import pytest

from eq_designer.config import Band, BandType, FrequencyPoint
from eq_designer.analysis.curve import log_frequencies
from eq_designer.analysis.dynamics import (
    SILENCE_DB,
    apply_dynamics,
    dynamic_gain,
    gain_offsets,
    level_at,
    spectrum_index,
)

F_MIN, F_MAX, POINTS = 20.0, 20000.0, 100


def _band(gain, dynamic_range=6.0, band_id=1, freq=1000.0, **kwargs):
    return Band(id=band_id, frequency=freq, gain=gain, q=2.0, type=BandType.PEAK,
                is_dynamic=True, dynamic_range=dynamic_range, **kwargs)


def _flat_spectrum(level):
    return [FrequencyPoint(f, level) for f in log_frequencies(F_MIN, F_MAX, POINTS)]


def test_spectrum_index_bounds():
    assert spectrum_index(20.0, F_MIN, F_MAX, POINTS) == 0
    assert spectrum_index(20000.0, F_MIN, F_MAX, POINTS) == POINTS - 1
    assert spectrum_index(1000.0, F_MIN, F_MAX, POINTS) == 56


def test_level_at_missing_entries():
    assert level_at(None, 3) == SILENCE_DB
    assert level_at([], 0) == SILENCE_DB
    assert level_at([None], 0) == SILENCE_DB
    assert level_at([FrequencyPoint(100.0, -20.0)], 0) == -20.0


def test_boost_is_compressed_toward_zero():
    band = _band(6.0)
    assert dynamic_gain(band, -60.0) == 6.0
    assert dynamic_gain(band, -50.0) == 6.0
    assert dynamic_gain(band, -25.0) == pytest.approx(3.0)
    assert dynamic_gain(band, 0.0) == pytest.approx(0.0)
    # Never flips into a cut
    assert dynamic_gain(band, 30.0) == 0.0


def test_cut_is_expanded_without_floor():
    assert dynamic_gain(_band(-6.0), 0.0) == pytest.approx(-12.0)
    assert dynamic_gain(_band(-28.0, dynamic_range=12.0), 0.0) == pytest.approx(-40.0)


def test_zero_gain_is_unchanged():
    assert dynamic_gain(_band(0.0), 0.0) == 0.0


def test_missing_dynamic_range_uses_default():
    band = _band(6.0, dynamic_range=None)
    assert dynamic_gain(band, 0.0) == pytest.approx(0.0)


def test_apply_dynamics_only_touches_enabled_dynamic_bands():
    static = Band(id=2, frequency=1000.0, gain=6.0, q=2.0, type=BandType.PEAK)
    disabled = _band(6.0, band_id=3, enabled=False)
    dynamic = _band(6.0, band_id=1)
    bands = [dynamic, static, disabled]

    derived = apply_dynamics(bands, _flat_spectrum(-25.0), F_MIN, F_MAX)
    assert derived[0].gain == pytest.approx(3.0)
    assert derived[1] is static
    assert derived[2] is disabled
    # Inputs are untouched
    assert dynamic.gain == 6.0


def test_apply_dynamics_without_spectrum():
    bands = [_band(6.0)]
    assert apply_dynamics(bands, [], F_MIN, F_MAX) == bands


def test_gain_offsets():
    bands = [_band(6.0, band_id=1), _band(-6.0, band_id=2)]
    derived = apply_dynamics(bands, _flat_spectrum(0.0), F_MIN, F_MAX)
    offsets = gain_offsets(bands, derived)
    assert offsets[1] == pytest.approx(-6.0)
    assert offsets[2] == pytest.approx(-6.0)


def test_zero_dynamic_range_uses_default():
    band = _band(6.0, dynamic_range=0.0)
    assert band.effective_dynamic_range == 6.0
    assert dynamic_gain(band, 0.0) == pytest.approx(0.0)
