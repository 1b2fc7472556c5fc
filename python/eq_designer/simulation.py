"""
Simulation loop for the EQ editor.

Each tick resolves the effective band set (bypass / solo), generates the
next analyzer tick, applies dynamic EQ and computes the displayed response
curve. The editable state lives in EQSession; the only state the loop carries
between ticks is the previous analyzer output.
"""
import os
import time
from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np
from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from eq_designer.config import (
    MIN_FREQ,
    MAX_FREQ,
    NUM_FREQUENCY_POINTS,
    NUM_SPECTRUM_POINTS,
    MASTER_GAIN_RANGE,
    SMOOTHING_RANGE,
    DEFAULT_SMOOTHING,
    Band,
    BandPatch,
    EQPreset,
    FrequencyPoint,
    apply_patch,
    clamp,
    default_bands,
    find_band,
)
from eq_designer.analysis import (
    compute_response,
    next_spectrum_tick,
    apply_dynamics,
)

DEBUG = os.environ.get("EQ_DESIGNER_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}

# ~60 FPS, stands in for display refresh
TICK_INTERVAL_MS = 16


def _debug_log(message: str) -> None:
    if DEBUG:
        print(message)


def resolve_effective_bands(bands: list[Band], bypass: bool) -> list[Band]:
    """
    Apply global bypass and solo to the raw band set.

    Bypass disables every band. Otherwise, if any band is soloed, each band's
    enabled flag follows its own solo flag. The raw set is not modified.
    """
    if bypass:
        return [replace(band, enabled=False) for band in bands]

    if any(band.solo for band in bands):
        return [replace(band, enabled=bool(band.solo)) for band in bands]

    return list(bands)


def effective_master_gain(master_gain: float, bypass: bool) -> float:
    """Master gain actually applied this tick (0 dB under bypass)."""
    return 0.0 if bypass else master_gain


@dataclass
class TickResult:
    """Output of one simulation tick, published to the renderer."""
    response: list[FrequencyPoint]
    spectrum: list[FrequencyPoint]
    dynamic_bands: list[Band] = field(default_factory=list)


def simulate_tick(bands, master_gain, bypass, previous_spectrum, smoothing, rng=None) -> TickResult:
    """
    Run the full per-tick pipeline as a pure function.

    Args:
        bands: Raw (user-edited) band set
        master_gain: User master gain in dB
        bypass: Global bypass state
        previous_spectrum: Spectrum from the previous tick, or None
        smoothing: Analyzer smoothing (0.0 - 1.0)
        rng: Optional numpy Generator for the analyzer jitter

    Returns:
        TickResult with the displayed curve, the new spectrum tick and the
        band set after dynamic EQ.
    """
    effective = resolve_effective_bands(bands, bypass)
    gain = effective_master_gain(master_gain, bypass)

    spectrum = next_spectrum_tick(
        effective,
        gain,
        MIN_FREQ,
        MAX_FREQ,
        NUM_SPECTRUM_POINTS,
        previous_spectrum,
        smoothing,
        rng=rng,
    )
    dynamic_bands = apply_dynamics(effective, spectrum, MIN_FREQ, MAX_FREQ)
    response = compute_response(
        dynamic_bands,
        gain,
        MIN_FREQ,
        MAX_FREQ,
        NUM_FREQUENCY_POINTS,
    )
    return TickResult(response=response, spectrum=spectrum, dynamic_bands=dynamic_bands)


class EQSession:
    """
    Editable EQ state shared by the UI and the simulation loop.

    Holds the raw band set (what the user edited), master gain, bypass,
    analyzer settings and the selected / hovered band. All setters clamp
    their input to the valid domain.
    """

    def __init__(self, bands: Optional[list[Band]] = None, master_gain: float = 0.0,
                 smoothing: float = DEFAULT_SMOOTHING):
        self.bands = list(bands) if bands is not None else default_bands()
        self.master_gain = clamp(master_gain, *MASTER_GAIN_RANGE)
        self.bypass = False
        self.smoothing = clamp(smoothing, *SMOOTHING_RANGE)
        self.show_analyzer = True
        self.selected_band_id: Optional[int] = None
        self.hovered_band_id: Optional[int] = None

    @property
    def selected_band(self) -> Optional[Band]:
        return find_band(self.bands, self.selected_band_id)

    def update_band(self, band_id: int, patch: BandPatch) -> None:
        """Merge a patch into one band; unknown ids are ignored."""
        self.bands = apply_patch(self.bands, band_id, patch)

    def select_band(self, band_id: Optional[int]) -> None:
        self.selected_band_id = band_id

    def hover_band(self, band_id: Optional[int]) -> None:
        self.hovered_band_id = band_id

    def set_master_gain(self, gain_db: float) -> None:
        self.master_gain = clamp(float(gain_db), *MASTER_GAIN_RANGE)

    def set_bypass(self, bypass: bool) -> None:
        self.bypass = bool(bypass)

    def set_smoothing(self, smoothing: float) -> None:
        self.smoothing = clamp(float(smoothing), *SMOOTHING_RANGE)

    def set_show_analyzer(self, show: bool) -> None:
        self.show_analyzer = bool(show)

    def reset_bands(self) -> None:
        """Restore the flat default band set."""
        self.bands = default_bands()

    def effective_bands(self) -> list[Band]:
        return resolve_effective_bands(self.bands, self.bypass)

    def capture_preset(self, name: str) -> EQPreset:
        """Snapshot the current bands and master gain."""
        return EQPreset.capture(name, self.bands, self.master_gain)

    def load_preset(self, preset: EQPreset) -> None:
        """Replace bands and master gain with an independent copy of the preset."""
        snapshot = EQPreset.capture(preset.name, preset.bands, preset.master_gain)
        self.bands = snapshot.bands
        self.master_gain = clamp(snapshot.master_gain, *MASTER_GAIN_RANGE)
        if find_band(self.bands, self.selected_band_id) is None:
            self.selected_band_id = None


class SimulationLoop(QObject):
    """
    Timer-driven tick loop.

    Owns the previous analyzer tick and publishes a TickResult per tick.
    Ticks run on the Qt event loop thread; stop() only prevents further ticks.
    """

    tick_completed = pyqtSignal(object)  # TickResult

    def __init__(self, session: EQSession, interval_ms: int = TICK_INTERVAL_MS, rng=None, parent=None):
        super().__init__(parent)
        self.session = session
        self.previous_spectrum: Optional[list[FrequencyPoint]] = None
        self.last_result: Optional[TickResult] = None
        self._rng = rng if rng is not None else np.random.default_rng()
        self._disposed = False
        self._tick_count = 0

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.step)

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        """Start scheduling ticks (no-op once disposed)."""
        if self._disposed:
            return
        _debug_log(f"[LOOP] Starting simulation loop ({self._timer.interval()} ms)")
        self._timer.start()

    def stop(self) -> None:
        """Stop scheduling further ticks."""
        if self._timer.isActive():
            _debug_log(f"[LOOP] Stopping simulation loop after {self._tick_count} ticks")
        self._timer.stop()

    def dispose(self) -> None:
        """Tear down: stop ticking and refuse to restart."""
        self.stop()
        self._disposed = True

    def step(self) -> TickResult:
        """Run one tick against the current session state."""
        started = time.perf_counter()
        result = simulate_tick(
            self.session.bands,
            self.session.master_gain,
            self.session.bypass,
            self.previous_spectrum,
            self.session.smoothing,
            rng=self._rng,
        )
        self.previous_spectrum = result.spectrum
        self.last_result = result
        self._tick_count += 1

        if DEBUG and self._tick_count % 300 == 0:
            elapsed_ms = (time.perf_counter() - started) * 1000
            _debug_log(f"[LOOP] tick {self._tick_count}: {elapsed_ms:.2f} ms")

        self.tick_completed.emit(result)
        return result
