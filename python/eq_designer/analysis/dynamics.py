"""
Dynamic EQ: per-tick gain adjustment from the simulated input level.

Boosts are compressed toward 0 dB when the band's frequency is loud; cuts are
deepened (expanded). The result is a derived band set used only for the
displayed curve; stored bands are never modified.
"""
import math
from dataclasses import replace

# Level where dynamic action starts, and the span to full intensity (0 dB)
DYNAMIC_THRESHOLD_DB = -50.0
DYNAMIC_SPAN_DB = 50.0
# Level assumed when the analyzer has no value at the band's index
SILENCE_DB = -100.0


def spectrum_index(frequency, f_min, f_max, num_points):
    """Nearest analyzer index for a frequency, clamped to the valid range."""
    log_min = math.log10(f_min)
    log_max = math.log10(f_max)
    fraction = (math.log10(frequency) - log_min) / (log_max - log_min)
    index = math.floor(fraction * num_points)
    return max(0, min(num_points - 1, index))


def level_at(spectrum, index):
    """Analyzer level at index, or SILENCE_DB if there is none."""
    if spectrum is None or not 0 <= index < len(spectrum):
        return SILENCE_DB
    point = spectrum[index]
    if point is None:
        return SILENCE_DB
    return point.gain


def dynamic_gain(band, level):
    """Effective gain of a dynamic band for the given input level in dB."""
    intensity = max(0.0, (level - DYNAMIC_THRESHOLD_DB) / DYNAMIC_SPAN_DB)
    offset = intensity * band.effective_dynamic_range

    if band.gain > 0:
        # Boost: compress toward (not below) 0 dB
        return max(0.0, band.gain - offset)
    elif band.gain < 0:
        # Cut: expand, deliberately unbounded below
        return band.gain - offset
    return band.gain


def apply_dynamics(bands, spectrum, f_min, f_max):
    """
    Derive the band set for this tick's displayed curve.

    Only enabled bands with dynamics on are changed; the spectrum must be on
    the same log grid as f_min..f_max.
    """
    num_points = len(spectrum) if spectrum else 0
    derived = []
    for band in bands:
        if not band.enabled or not band.is_dynamic or num_points == 0:
            derived.append(band)
            continue
        index = spectrum_index(band.frequency, f_min, f_max, num_points)
        level = level_at(spectrum, index)
        derived.append(replace(band, gain=dynamic_gain(band, level)))
    return derived


def gain_offsets(static_bands, dynamic_bands):
    """Per-band dynamic movement in dB (dynamic - static), keyed by band id."""
    static_by_id = {band.id: band.gain for band in static_bands}
    return {
        band.id: band.gain - static_by_id[band.id]
        for band in dynamic_bands
        if band.id in static_by_id
    }
