"""
Frequency response curve for the parametric band set.

This is a visual model, not a biquad response: Peak bands use an inverse
quadratic bell over octave distance and shelves use a logistic ramp in
log-frequency. Band contributions are summed in dB on top of the master gain.
"""
import numpy as np
from scipy.special import expit

from eq_designer.config import Band, BandType, FrequencyPoint

# Practical Q floor used inside the formulas
Q_FLOOR = 0.1
# Peak bands below this Q are treated as degenerate and contribute nothing
PEAK_MIN_Q = 0.2
# Bell width: octave distance is divided by (1/Q * PEAK_SPREAD)
PEAK_SPREAD = 2.0
# Shelf transition width in octaves is SHELF_WIDTH / Q
SHELF_WIDTH = 1.5
# Steepness of the logistic shelf ramp
SHELF_SLOPE = 3.0


def log_frequencies(f_min, f_max, num_points):
    """
    Generate logarithmically-spaced frequency points, both ends included.

    Point i is at 10 ** (log_min + (log_max - log_min) * i / (num_points - 1)).
    """
    log_min = np.log10(f_min)
    log_max = np.log10(f_max)
    if num_points == 1:
        return np.array([10.0 ** log_min])
    steps = np.arange(num_points) / (num_points - 1)
    return 10.0 ** (log_min + (log_max - log_min) * steps)


def peak_contribution(freqs, band: Band):
    """Bell-shaped gain of a Peak band, symmetric in octave distance."""
    freqs = np.asarray(freqs, dtype=float)
    if band.gain == 0 or band.q < PEAK_MIN_Q:
        return np.zeros_like(freqs)

    bandwidth = 1.0 / max(Q_FLOOR, band.q)
    octaves = np.abs(np.log2(freqs) - np.log2(band.frequency))
    attenuation = (octaves / (bandwidth * PEAK_SPREAD)) ** 2
    return band.gain / (1.0 + attenuation)


def shelf_contribution(freqs, band: Band, low_shelf: bool):
    """
    Logistic shelf ramp.

    A low shelf approaches full gain below the cutoff, a high shelf above it.
    At the cutoff itself the contribution is exactly half the gain.
    """
    freqs = np.asarray(freqs, dtype=float)
    if band.gain == 0:
        return np.zeros_like(freqs)

    width = SHELF_WIDTH / max(Q_FLOOR, band.q)
    position = (np.log2(freqs) - np.log2(band.frequency)) / width
    if low_shelf:
        position = -position
    return band.gain * expit(SHELF_SLOPE * position)


def band_contribution(freqs, band: Band):
    """Gain in dB that one band adds at each frequency (0 if disabled)."""
    freqs = np.asarray(freqs, dtype=float)
    if not band.enabled:
        return np.zeros_like(freqs)

    if band.type is BandType.PEAK:
        return peak_contribution(freqs, band)
    elif band.type is BandType.LOW_SHELF:
        return shelf_contribution(freqs, band, low_shelf=True)
    elif band.type is BandType.HIGH_SHELF:
        return shelf_contribution(freqs, band, low_shelf=False)
    raise ValueError(f"Unhandled band type: {band.type!r}")


def response_db(freqs, bands, master_gain: float):
    """
    Combined response in dB at the given frequencies.

    The sum is intentionally not clamped to the gain domain: overlapping
    bands may push the curve past +/-30 dB.
    """
    freqs = np.asarray(freqs, dtype=float)
    total = np.full_like(freqs, float(master_gain))
    for band in bands:
        if not band.enabled:
            continue
        total = total + band_contribution(freqs, band)
    return total


def compute_response(bands, master_gain, f_min, f_max, num_points):
    """
    Sample the response curve on a log-frequency grid.

    Args:
        bands: Band set (disabled bands are skipped)
        master_gain: Gain in dB added at every frequency
        f_min, f_max: Grid limits in Hz (inclusive)
        num_points: Number of samples

    Returns:
        List of FrequencyPoint in ascending frequency order
    """
    freqs = log_frequencies(f_min, f_max, num_points)
    gains = response_db(freqs, bands, master_gain)
    return [FrequencyPoint(float(f), float(g)) for f, g in zip(freqs, gains)]
