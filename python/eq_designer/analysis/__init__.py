"""
Signal model for the EQ editor.

Provides the response curve engine, the simulated spectrum analyzer and the
dynamic EQ gain model.
"""
from .curve import (
    log_frequencies,
    band_contribution,
    response_db,
    compute_response
)
from .spectrum import (
    next_spectrum_tick,
    smoothing_alphas
)
from .dynamics import (
    spectrum_index,
    dynamic_gain,
    apply_dynamics,
    gain_offsets
)

__all__ = [
    # Response curve
    'log_frequencies',
    'band_contribution',
    'response_db',
    'compute_response',
    # Analyzer simulation
    'next_spectrum_tick',
    'smoothing_alphas',
    # Dynamic EQ
    'spectrum_index',
    'dynamic_gain',
    'apply_dynamics',
    'gain_offsets'
]
