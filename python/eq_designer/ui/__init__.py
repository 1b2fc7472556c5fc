"""EQ Designer UI components"""

from .layout_constants import *  # Shared spacing, colors and typography
from .main_window import MainWindow, run_app
from .eq_graph import EQGraphWidget, GraphGeometry
from .band_panel import BandPanel, BandStrip
from .value_slider import ValueSlider
from .preset_dialog import PresetDialog

__all__ = [
    "MainWindow",
    "run_app",
    "EQGraphWidget",
    "GraphGeometry",
    "BandPanel",
    "BandStrip",
    "ValueSlider",
    "PresetDialog",
]
