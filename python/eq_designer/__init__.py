"""
EQ Designer - Interactive parametric EQ editor

Edit seven parametric bands on a frequency/gain graph with a live response
curve, a simulated spectrum analyzer and dynamic EQ.
"""

__version__ = "1.0.0"

from .config import (
    Band,
    BandType,
    BandPatch,
    EQPreset,
    FrequencyPoint,
    PresetStore,
    PresetValidationError,
    apply_patch,
    default_bands,
    BUILTIN_PRESETS,
)
from .analysis import (
    compute_response,
    next_spectrum_tick,
    apply_dynamics,
)
from .simulation import (
    EQSession,
    SimulationLoop,
    TickResult,
    resolve_effective_bands,
    simulate_tick,
)

__all__ = [
    "Band",
    "BandType",
    "BandPatch",
    "EQPreset",
    "FrequencyPoint",
    "PresetStore",
    "PresetValidationError",
    "apply_patch",
    "default_bands",
    "BUILTIN_PRESETS",
    "compute_response",
    "next_spectrum_tick",
    "apply_dynamics",
    "EQSession",
    "SimulationLoop",
    "TickResult",
    "resolve_effective_bands",
    "simulate_tick",
]
