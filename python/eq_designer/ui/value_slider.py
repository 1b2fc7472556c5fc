"""
Bounded value editor: a slider paired with a numeric text entry.
"""

import math

from PyQt6.QtWidgets import QWidget, QVBoxLayout, QLabel, QSlider, QLineEdit
from PyQt6.QtCore import Qt, pyqtSignal

from ..config import clamp, parse_bounded
from .layout_constants import SPACING_TIGHT, VALUE_LABEL_STYLE

SLIDER_STEPS = 1000


class ValueSlider(QWidget):
    """
    Vertical label / slider / text entry for one bounded parameter.

    Text is only committed on Enter or focus loss; non-numeric text reverts
    to the last valid value and numbers are clamped to the range.
    """

    value_changed = pyqtSignal(float)

    def __init__(self, label: str, min_val: float, max_val: float, value: float,
                 decimals: int = 1, suffix: str = "", log_scale: bool = False, parent=None):
        super().__init__(parent)
        self.min_val = min_val
        self.max_val = max_val
        self.decimals = decimals
        self.log_scale = log_scale
        self._value = clamp(value, min_val, max_val)
        self._setup_ui(label, suffix)
        self._sync_widgets()

    def _setup_ui(self, label: str, suffix: str):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(SPACING_TIGHT)

        title = QLabel(label)
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet(VALUE_LABEL_STYLE)
        layout.addWidget(title)

        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, SLIDER_STEPS)
        self.slider.setMinimumWidth(110)
        self.slider.valueChanged.connect(self._on_slider_changed)
        layout.addWidget(self.slider)

        self.entry = QLineEdit()
        self.entry.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.entry.setMaximumWidth(70)
        self.entry.editingFinished.connect(self._on_entry_committed)
        layout.addWidget(self.entry, alignment=Qt.AlignmentFlag.AlignCenter)

        if suffix:
            suffix_label = QLabel(suffix)
            suffix_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            suffix_label.setStyleSheet(VALUE_LABEL_STYLE)
            layout.addWidget(suffix_label)

    def value(self) -> float:
        return self._value

    def _to_position(self, value: float) -> int:
        if self.log_scale:
            lo, hi = math.log10(self.min_val), math.log10(self.max_val)
            fraction = (math.log10(value) - lo) / (hi - lo)
        else:
            fraction = (value - self.min_val) / (self.max_val - self.min_val)
        return int(round(fraction * SLIDER_STEPS))

    def _from_position(self, position: int) -> float:
        fraction = position / SLIDER_STEPS
        if self.log_scale:
            lo, hi = math.log10(self.min_val), math.log10(self.max_val)
            value = 10 ** (lo + (hi - lo) * fraction)
        else:
            value = self.min_val + (self.max_val - self.min_val) * fraction
        return clamp(value, self.min_val, self.max_val)

    def _format(self, value: float) -> str:
        return f"{value:.{self.decimals}f}"

    def _sync_widgets(self):
        self.slider.blockSignals(True)
        self.slider.setValue(self._to_position(self._value))
        self.slider.blockSignals(False)
        self.entry.setText(self._format(self._value))

    def _on_slider_changed(self, position: int):
        self._value = self._from_position(position)
        self.entry.setText(self._format(self._value))
        self.value_changed.emit(self._value)

    def _on_entry_committed(self):
        new_value = parse_bounded(self.entry.text(), self.min_val, self.max_val, self._value)
        changed = new_value != self._value
        self._value = new_value
        self._sync_widgets()
        if changed:
            self.value_changed.emit(self._value)

    def set_value(self, value: float):
        """Set value programmatically (no signal)."""
        self._value = clamp(value, self.min_val, self.max_val)
        self._sync_widgets()
