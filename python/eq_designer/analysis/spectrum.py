"""
Simulated real-time spectrum analyzer (RTA) feed.

There is no audio input: each tick is a pink-noise-like floor plus random
jitter, shaped by the current EQ curve and smoothed against the previous
tick with meter-style ballistics (fast attack, slow release).
"""
import numpy as np

from eq_designer.config import FrequencyPoint
from .curve import compute_response

# Floor level at 100 Hz and its downward slope (dB per octave)
NOISE_FLOOR_DB = -12.0
NOISE_FLOOR_REF_HZ = 100.0
NOISE_SLOPE_DB_PER_OCT = 1.5

# Jitter is drawn uniformly from [-JITTER_DB, +JITTER_DB)
JITTER_DB = 6.0

# Smoothing is capped so the display never freezes completely
MAX_SMOOTHING = 0.98
MIN_ATTACK_ALPHA = 0.05
MIN_DECAY_ALPHA = 0.01
ATTACK_SCALE = 0.9
DECAY_SCALE = 0.2

# Display limits of the analyzer
SPECTRUM_MIN_DB = -100.0
SPECTRUM_MAX_DB = 30.0


def noise_floor_db(freqs):
    """Gentle downward pink-noise slope in dB."""
    freqs = np.asarray(freqs, dtype=float)
    return NOISE_FLOOR_DB - np.log2(freqs / NOISE_FLOOR_REF_HZ) * NOISE_SLOPE_DB_PER_OCT


def smoothing_alphas(smoothing: float) -> tuple[float, float]:
    """
    Interpolation factors for rising and falling signal.

    smoothing 0 -> speed 1.0 (fast), smoothing 0.9 -> speed 0.1 (slow).

    Returns:
        (attack_alpha, decay_alpha)
    """
    s = max(0.0, min(MAX_SMOOTHING, smoothing))
    speed = 1.0 - s
    attack_alpha = max(MIN_ATTACK_ALPHA, speed * ATTACK_SCALE)
    decay_alpha = max(MIN_DECAY_ALPHA, speed * DECAY_SCALE)
    return attack_alpha, decay_alpha


def _previous_levels(previous, num_points):
    """Previous tick as (levels, has_value) arrays aligned to the grid."""
    levels = np.zeros(num_points)
    has_value = np.zeros(num_points, dtype=bool)
    if previous:
        count = min(len(previous), num_points)
        for i in range(count):
            point = previous[i]
            if point is not None:
                levels[i] = point.gain
                has_value[i] = True
    return levels, has_value


def next_spectrum_tick(bands, master_gain, f_min, f_max, num_points,
                       previous=None, smoothing=0.5, rng=None):
    """
    Produce one tick of synthetic analyzer data.

    Args:
        bands: Effective band set used to shape the noise
        master_gain: Effective master gain in dB
        f_min, f_max: Grid limits in Hz
        num_points: Number of analyzer points
        previous: Last tick returned by this function, or None
        smoothing: 0.0 (instant) to 1.0 (slow); capped at 0.98
        rng: numpy Generator for the jitter (a fresh one if None)

    Returns:
        List of FrequencyPoint; keep it and pass it back as `previous`.
    """
    if rng is None:
        rng = np.random.default_rng()

    # EQ curve on the same grid as the analyzer
    eq_curve = compute_response(bands, master_gain, f_min, f_max, num_points)
    freqs = np.array([p.frequency for p in eq_curve])
    eq_gain = np.array([p.gain for p in eq_curve])

    jitter = rng.uniform(-JITTER_DB, JITTER_DB, size=num_points)
    target = noise_floor_db(freqs) + jitter + eq_gain

    prev_levels, has_prev = _previous_levels(previous, num_points)
    if has_prev.any():
        attack_alpha, decay_alpha = smoothing_alphas(smoothing)
        alpha = np.where(target > prev_levels, attack_alpha, decay_alpha)
        smoothed = prev_levels + (target - prev_levels) * alpha
        target = np.where(has_prev, smoothed, target)

    levels = np.clip(target, SPECTRUM_MIN_DB, SPECTRUM_MAX_DB)
    return [FrequencyPoint(float(f), float(g)) for f, g in zip(freqs, levels)]
