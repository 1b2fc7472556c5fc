"""
Configuration, band model and preset management for EQ Designer

Holds the fixed domain constants, the Band / BandPatch data model, presets
and their JSON persistence.
"""

import copy
import json
import math
import os
import uuid
from enum import Enum
from pathlib import Path
from dataclasses import dataclass, field, fields, replace
from typing import NamedTuple, Optional


class PresetValidationError(Exception):
    """Raised when stored preset data fails validation."""
    pass


# Frequency / gain / Q domains
MIN_FREQ = 20.0
MAX_FREQ = 20000.0
MIN_GAIN = -30.0
MAX_GAIN = 30.0
MIN_Q = 0.1
MAX_Q = 10.0

# Graph and analyzer resolution (log-spaced points)
NUM_FREQUENCY_POINTS = 500
NUM_SPECTRUM_POINTS = 100

MASTER_GAIN_RANGE = (-12.0, 12.0)
DYNAMIC_RANGE_LIMITS = (0.0, 12.0)
DEFAULT_DYNAMIC_RANGE = 6.0

# Analyzer smoothing: 0 = instant, 0.95 = very slow
SMOOTHING_RANGE = (0.0, 0.95)
DEFAULT_SMOOTHING = 0.5

DEFAULT_Q = 4.0

# Namespace key of the preset list in the key-value store
PRESETS_STORAGE_KEY = "eq-designer-presets"


# Validation ranges for band parameters
VALIDATION_RANGES = {
    'frequency': (MIN_FREQ, MAX_FREQ),
    'gain': (MIN_GAIN, MAX_GAIN),
    'q': (MIN_Q, MAX_Q),
    'dynamic_range': DYNAMIC_RANGE_LIMITS,
    'master_gain': MASTER_GAIN_RANGE,
}


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def parse_bounded(text, min_val: float, max_val: float, fallback: float) -> float:
    """
    Parse user text entry into a bounded value.

    Non-numeric (or non-finite) text is ignored and the fallback (last valid
    value) is returned; numeric text is clamped to the range.
    """
    try:
        value = float(str(text).strip())
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(value):
        return fallback
    return clamp(value, min_val, max_val)


def _validate_range(value, min_val: float, max_val: float, param_name: str, section: str) -> float:
    """Validate and clamp a stored value, raising error if way out of bounds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise PresetValidationError(
            f"Invalid {param_name} in {section}: {value!r} (expected a number)"
        )
    # Allow small tolerance (10%) beyond range before rejecting
    tolerance = (max_val - min_val) * 0.1
    if value < min_val - tolerance or value > max_val + tolerance:
        raise PresetValidationError(
            f"Invalid {param_name} in {section}: {value} "
            f"(must be between {min_val} and {max_val})"
        )
    return clamp(float(value), min_val, max_val)


class BandType(str, Enum):
    """Filter shape of a band."""
    PEAK = "Peak"
    LOW_SHELF = "Low-Shelf"
    HIGH_SHELF = "High-Shelf"


class FrequencyPoint(NamedTuple):
    """One (frequency Hz, gain dB) sample of a curve or analyzer tick."""
    frequency: float
    gain: float


@dataclass(frozen=True)
class Band:
    """
    One parametric filter band.

    Bands are immutable values; edits produce new bands via apply_patch().
    Construction does not clamp, so derived bands (dynamic EQ) may carry
    gains outside the editable domain.
    """
    id: int
    frequency: float
    gain: float
    q: float
    type: BandType
    enabled: bool = True
    color: str = "#ffffff"
    is_dynamic: bool = False
    dynamic_range: Optional[float] = None  # None or 0 = DEFAULT_DYNAMIC_RANGE
    solo: bool = False

    def __post_init__(self):
        # Raises ValueError for unknown tags
        object.__setattr__(self, 'type', BandType(self.type))

    @property
    def effective_dynamic_range(self) -> float:
        # Unset and zero both mean the default range
        return self.dynamic_range or DEFAULT_DYNAMIC_RANGE

    def to_dict(self) -> dict:
        """Convert band to its JSON form."""
        return {
            'id': self.id,
            'frequency': self.frequency,
            'gain': self.gain,
            'q': self.q,
            'type': self.type.value,
            'enabled': self.enabled,
            'color': self.color,
            'isDynamic': self.is_dynamic,
            'dynamicRange': self.dynamic_range,
            'solo': self.solo,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Band':
        """Create band from its JSON form, validating every numeric field."""
        try:
            band_id = data['id']
            if isinstance(band_id, bool) or not isinstance(band_id, int):
                raise PresetValidationError(f"Invalid band id: {band_id!r}")
            section = f"band {band_id}"
            dynamic_range = data.get('dynamicRange')
            if dynamic_range is not None:
                dynamic_range = _validate_range(
                    dynamic_range, *VALIDATION_RANGES['dynamic_range'], 'dynamicRange', section
                )
            return cls(
                id=band_id,
                frequency=_validate_range(
                    data['frequency'], *VALIDATION_RANGES['frequency'], 'frequency', section
                ),
                gain=_validate_range(
                    data['gain'], *VALIDATION_RANGES['gain'], 'gain', section
                ),
                q=_validate_range(
                    data['q'], *VALIDATION_RANGES['q'], 'q', section
                ),
                type=BandType(data['type']),
                enabled=bool(data.get('enabled', True)),
                color=str(data.get('color', '#ffffff')),
                is_dynamic=bool(data.get('isDynamic', False)),
                dynamic_range=dynamic_range,
                solo=bool(data.get('solo', False)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            if isinstance(e, PresetValidationError):
                raise
            raise PresetValidationError(f"Band data is invalid or corrupted: {e}")


@dataclass
class BandPatch:
    """
    Partial update for a band: only fields that are not None are applied.

    Numeric fields are clamped to their domain on construction, so an
    out-of-range write never reaches the band set.
    """
    frequency: Optional[float] = None
    gain: Optional[float] = None
    q: Optional[float] = None
    type: Optional[BandType] = None
    enabled: Optional[bool] = None
    color: Optional[str] = None
    is_dynamic: Optional[bool] = None
    dynamic_range: Optional[float] = None
    solo: Optional[bool] = None

    def __post_init__(self):
        for name in ('frequency', 'gain', 'q', 'dynamic_range'):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, clamp(float(value), *VALIDATION_RANGES[name]))
        if self.type is not None:
            self.type = BandType(self.type)

    def fields(self) -> dict:
        """Return only the fields present in this patch."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.fields()


def apply_patch(bands: list[Band], band_id: int, patch: BandPatch) -> list[Band]:
    """
    Return a new band list with the patch merged into the band with band_id.

    Unknown ids leave the set unchanged (no error).
    """
    changes = patch.fields()
    return [
        replace(band, **changes) if band.id == band_id and changes else band
        for band in bands
    ]


def find_band(bands: list[Band], band_id: Optional[int]) -> Optional[Band]:
    """Look up a band by id, or None."""
    for band in bands:
        if band.id == band_id:
            return band
    return None


# Default 7-band layout: (type, frequency, color)
DEFAULT_BAND_LAYOUT = [
    (BandType.LOW_SHELF, 60.0, '#ef4444'),     # red
    (BandType.PEAK, 150.0, '#f97316'),         # orange
    (BandType.PEAK, 400.0, '#eab308'),         # yellow
    (BandType.PEAK, 1000.0, '#22c55e'),        # green
    (BandType.PEAK, 2500.0, '#06b6d4'),        # cyan
    (BandType.PEAK, 6000.0, '#3b82f6'),        # blue
    (BandType.HIGH_SHELF, 12000.0, '#a855f7'), # purple
]


def default_bands() -> list[Band]:
    """Create the flat 7-band starting configuration (ids 1-7)."""
    return [
        Band(
            id=i + 1,
            frequency=freq,
            gain=0.0,
            q=DEFAULT_Q,
            type=band_type,
            enabled=True,
            color=color,
            is_dynamic=False,
            dynamic_range=DEFAULT_DYNAMIC_RANGE,
            solo=False,
        )
        for i, (band_type, freq, color) in enumerate(DEFAULT_BAND_LAYOUT)
    ]


@dataclass
class EQPreset:
    """Named snapshot of the full band set plus master gain."""
    id: str
    name: str
    bands: list[Band] = field(default_factory=list)
    master_gain: float = 0.0

    @classmethod
    def capture(cls, name: str, bands: list[Band], master_gain: float) -> 'EQPreset':
        """Snapshot the live band set into an independent preset."""
        return cls(
            id=uuid.uuid4().hex,
            name=name,
            bands=copy.deepcopy(list(bands)),
            master_gain=float(master_gain),
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'bands': [band.to_dict() for band in self.bands],
            'masterGain': self.master_gain,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'EQPreset':
        """Create preset from dictionary with validation."""
        try:
            raw_bands = data['bands']
            if not isinstance(raw_bands, list):
                raise PresetValidationError("Invalid bands in preset: expected a list")
            bands = [Band.from_dict(b) for b in raw_bands]
            ids = [b.id for b in bands]
            if len(set(ids)) != len(ids):
                raise PresetValidationError(f"Duplicate band ids in preset: {ids}")
            return cls(
                id=str(data['id']),
                name=str(data.get('name', 'Unnamed')),
                bands=bands,
                master_gain=_validate_range(
                    data.get('masterGain', 0.0),
                    *VALIDATION_RANGES['master_gain'],
                    'masterGain', 'preset'
                ),
            )
        except PresetValidationError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PresetValidationError(f"Preset data is invalid or corrupted: {e}")


def get_config_dir() -> Path:
    """Get the application config directory, creating it if necessary."""
    if os.name == 'nt':  # Windows
        base = Path(os.environ.get('APPDATA', Path.home()))
    else:
        base = Path.home() / '.config'

    config_dir = base / 'EQDesigner'
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file() -> Path:
    """Get the main config file path."""
    return get_config_dir() / 'config.json'


class PresetStore:
    """
    Key-value store for the user preset list.

    The whole list lives under one namespace key (one JSON file per key).
    Loading never raises; saving is best effort and overwrites the list.
    """

    def __init__(self, storage_dir: Optional[Path] = None, key: str = PRESETS_STORAGE_KEY):
        self._storage_dir = Path(storage_dir) if storage_dir is not None else None
        self.key = key

    @property
    def path(self) -> Path:
        storage_dir = self._storage_dir if self._storage_dir is not None else get_config_dir()
        return storage_dir / f"{self.key}.json"

    def load(self) -> Optional[list[EQPreset]]:
        """
        Load the stored preset list.

        Returns:
            The presets, or None when nothing is stored or the data is
            unreadable. Invalid entries are skipped.
        """
        try:
            filepath = self.path
            if not filepath.exists():
                return None
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            print(f"Preset load failed: {type(e).__name__}: {e}")
            return None

        if not isinstance(data, list):
            print(f"Preset load failed: expected a list under '{self.key}', got {type(data).__name__}")
            return None

        presets = []
        for i, entry in enumerate(data):
            try:
                if not isinstance(entry, dict):
                    raise PresetValidationError(f"expected an object, got {type(entry).__name__}")
                presets.append(EQPreset.from_dict(entry))
            except PresetValidationError as e:
                # Skip invalid entries
                print(f"Preset load failed: entry {i}: {e}")
        return presets

    def save(self, presets: list[EQPreset]) -> bool:
        """Overwrite the stored list. Returns False (and logs) on failure."""
        try:
            filepath = self.path
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump([preset.to_dict() for preset in presets], f, indent=2)
            return True
        except (OSError, TypeError, ValueError) as e:
            print(f"Preset save failed: {type(e).__name__}: {e}")
            return False


@dataclass
class AppConfig:
    """Application configuration (persisted settings)."""
    show_analyzer: bool = True
    analyzer_smoothing: float = DEFAULT_SMOOTHING
    master_gain: float = 0.0
    last_preset: str = ""
    window_geometry: Optional[dict] = None

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            'show_analyzer': self.show_analyzer,
            'analyzer_smoothing': self.analyzer_smoothing,
            'master_gain': self.master_gain,
            'last_preset': self.last_preset,
            'window_geometry': self.window_geometry,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AppConfig':
        """Create config from dictionary, clamping numeric settings."""
        geometry = data.get('window_geometry')
        return cls(
            show_analyzer=bool(data.get('show_analyzer', True)),
            analyzer_smoothing=clamp(
                float(data.get('analyzer_smoothing', DEFAULT_SMOOTHING)), *SMOOTHING_RANGE
            ),
            master_gain=clamp(float(data.get('master_gain', 0.0)), *MASTER_GAIN_RANGE),
            last_preset=str(data.get('last_preset', '')),
            window_geometry=geometry if isinstance(geometry, dict) else None,
        )


def save_config(config: AppConfig) -> None:
    """Save application configuration."""
    filepath = get_config_file()
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)


def load_config() -> AppConfig:
    """Load application configuration, returning defaults if not found."""
    filepath = get_config_file()

    if not filepath.exists():
        return AppConfig()

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return AppConfig.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        print(f"Config load failed: {type(e).__name__}: {e}")
        return AppConfig()


def _builtin(name: str, gains: list[float], qs: Optional[list[float]] = None,
             master_gain: float = 0.0) -> EQPreset:
    """Build a factory preset over the default band layout."""
    bands = default_bands()
    if qs is None:
        qs = [DEFAULT_Q] * len(bands)
    bands = [replace(band, gain=gain, q=q) for band, gain, q in zip(bands, gains, qs)]
    slug = name.lower().replace(' ', '_').replace('&', 'and')
    return EQPreset(id=f"builtin:{slug}", name=name, bands=bands, master_gain=master_gain)


# Built-in presets (7 gains: LS 60, 150, 400, 1k, 2.5k, 6k, HS 12k)
BUILTIN_PRESETS = {
    'flat': _builtin("Flat", [0.0] * 7),
    'warmth': _builtin(
        "Low-End Warmth",
        [4.0, 2.0, -2.0, 0.0, 0.0, 0.0, -1.0],
        [1.0, 2.0, 3.0, 4.0, 4.0, 4.0, 1.0],  # Broad shelves, focused mud cut
    ),
    'vocal': _builtin(
        "Vocal Presence",
        [-6.0, -2.0, -1.5, 1.0, 3.5, 2.0, 1.0],
        [1.5, 3.0, 4.0, 2.0, 2.5, 3.0, 1.0],
    ),
    'air': _builtin(
        "Air & Sparkle",
        [0.0, 0.0, 0.0, 0.0, 1.0, 2.5, 5.0],
        [DEFAULT_Q, DEFAULT_Q, DEFAULT_Q, DEFAULT_Q, 3.0, 2.0, 0.8],
        master_gain=-1.0,
    ),
}
