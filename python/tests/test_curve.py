"""Tests for the response curve engine."""

import numpy as np
import pytest

from eq_designer.config import Band, BandType, default_bands
from eq_designer.analysis.curve import (
    band_contribution,
    compute_response,
    log_frequencies,
    peak_contribution,
    response_db,
)


def _peak(gain=12.0, freq=1000.0, q=4.0, band_id=1, **kwargs):
    return Band(id=band_id, frequency=freq, gain=gain, q=q, type=BandType.PEAK, **kwargs)


def _shelf(band_type, gain=6.0, freq=100.0, q=1.0, band_id=1):
    return Band(id=band_id, frequency=freq, gain=gain, q=q, type=band_type)


def test_log_frequencies_endpoints_and_count():
    freqs = log_frequencies(20.0, 20000.0, 500)
    assert len(freqs) == 500
    assert freqs[0] == pytest.approx(20.0)
    assert freqs[-1] == pytest.approx(20000.0)
    assert np.all(np.diff(freqs) > 0)

    # Equal ratio between neighbours
    ratios = freqs[1:] / freqs[:-1]
    assert np.allclose(ratios, ratios[0])


def test_default_bands_give_flat_response():
    points = compute_response(default_bands(), 0.0, 20.0, 20000.0, 500)
    assert len(points) == 500
    assert all(p.gain == 0.0 for p in points)


def test_master_gain_offsets_flat_curve():
    points = compute_response(default_bands(), -4.5, 20.0, 20000.0, 50)
    assert all(p.gain == pytest.approx(-4.5) for p in points)


def test_single_peak_at_center_and_two_octaves_away():
    bands = [_peak(gain=12.0, freq=1000.0, q=4.0)]
    gains = response_db([1000.0, 4000.0], bands, 0.0)
    assert gains[0] == pytest.approx(12.0)
    assert gains[1] == pytest.approx(12.0 / 17.0)


def test_peak_is_symmetric_in_octaves():
    band = _peak(gain=-9.0, freq=1000.0, q=2.0)
    below, above = peak_contribution([500.0, 2000.0], band)
    assert below == pytest.approx(above)
    assert below < 0


def test_peak_below_min_q_contributes_nothing():
    band = _peak(gain=12.0, q=0.15)
    assert np.all(peak_contribution(log_frequencies(20.0, 20000.0, 20), band) == 0.0)


def test_low_shelf_scenario():
    band = _shelf(BandType.LOW_SHELF, gain=6.0, freq=100.0, q=1.0)
    low, cutoff, high = band_contribution([20.0, 100.0, 15000.0], band)
    assert low == pytest.approx(6.0, abs=0.1)
    assert low <= 6.0
    assert cutoff == pytest.approx(3.0)
    assert high == pytest.approx(0.0, abs=1e-3)


def test_shelves_are_monotonic():
    freqs = log_frequencies(20.0, 20000.0, 200)
    low = band_contribution(freqs, _shelf(BandType.LOW_SHELF, gain=8.0, freq=200.0))
    high = band_contribution(freqs, _shelf(BandType.HIGH_SHELF, gain=8.0, freq=5000.0))
    assert np.all(np.diff(low) <= 0)
    assert np.all(np.diff(high) >= 0)


def test_disabled_and_zero_gain_bands_contribute_nothing():
    freqs = log_frequencies(20.0, 20000.0, 30)
    assert np.all(band_contribution(freqs, _peak(gain=10.0, enabled=False)) == 0.0)
    assert np.all(band_contribution(freqs, _peak(gain=0.0)) == 0.0)
    assert np.all(band_contribution(freqs, _shelf(BandType.HIGH_SHELF, gain=0.0)) == 0.0)


def test_contributions_are_additive():
    freqs = log_frequencies(20.0, 20000.0, 100)
    a = _peak(gain=6.0, freq=300.0, band_id=1)
    b = _shelf(BandType.HIGH_SHELF, gain=-4.0, freq=4000.0, band_id=2)
    combined = response_db(freqs, [a, b], 1.5)
    expected = 1.5 + band_contribution(freqs, a) + band_contribution(freqs, b)
    assert np.allclose(combined, expected)


def test_response_is_not_clamped():
    bands = [_peak(gain=30.0, band_id=i) for i in range(1, 4)]
    gains = response_db([1000.0], bands, 12.0)
    assert gains[0] == pytest.approx(102.0)


def test_response_is_deterministic():
    bands = default_bands()
    bands[3] = _peak(gain=5.0, freq=1000.0, q=1.3, band_id=4)
    first = compute_response(bands, 2.0, 20.0, 20000.0, 500)
    second = compute_response(bands, 2.0, 20.0, 20000.0, 500)
    assert first == second


def test_low_shelf_at_60_hz():
    band = _shelf(BandType.LOW_SHELF, gain=6.0, freq=60.0, q=4.0)
    low, high = response_db([20.0, 15000.0], [band], 0.0)
    assert low == pytest.approx(6.0, abs=1e-3)
    assert low <= 6.0
    assert high == pytest.approx(0.0, abs=1e-6)
