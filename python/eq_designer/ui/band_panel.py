"""
Selected-band inspector and band selection strip
"""

from PyQt6.QtWidgets import (
    QWidget,
    QHBoxLayout,
    QVBoxLayout,
    QGroupBox,
    QLabel,
    QCheckBox,
    QPushButton,
    QComboBox,
    QFrame,
)
from PyQt6.QtCore import Qt, pyqtSignal

from ..config import (
    MIN_FREQ,
    MAX_FREQ,
    MIN_GAIN,
    MAX_GAIN,
    MIN_Q,
    MAX_Q,
    DYNAMIC_RANGE_LIMITS,
    DEFAULT_DYNAMIC_RANGE,
    BandPatch,
    BandType,
)
from .value_slider import ValueSlider
from .layout_constants import (
    SPACING_NORMAL,
    SPACING_SECTION,
    MARGIN_PANEL,
    BAND_TITLE_STYLE,
    COLOR_DISABLED_BAND,
    COLOR_SOLO,
)


class BandPanel(QGroupBox):
    """Editor for the currently selected band."""

    band_changed = pyqtSignal(int, object)  # (band_id, BandPatch)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.band_id = None
        self._setup_ui()
        self.setVisible(False)

    def _setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(MARGIN_PANEL, MARGIN_PANEL, MARGIN_PANEL, MARGIN_PANEL)
        layout.setSpacing(SPACING_SECTION)

        # Band info / toggles
        info_layout = QVBoxLayout()
        info_layout.setSpacing(SPACING_NORMAL)

        self.title_label = QLabel("Band")
        self.title_label.setStyleSheet(BAND_TITLE_STYLE)
        info_layout.addWidget(self.title_label)

        toggles = QHBoxLayout()
        self.enabled_checkbox = QCheckBox("On")
        self.enabled_checkbox.toggled.connect(
            lambda checked: self._emit(BandPatch(enabled=checked))
        )
        toggles.addWidget(self.enabled_checkbox)

        self.solo_button = QPushButton("S")
        self.solo_button.setCheckable(True)
        self.solo_button.setFixedWidth(32)
        self.solo_button.setToolTip("Solo band")
        self.solo_button.toggled.connect(
            lambda checked: self._emit(BandPatch(solo=checked))
        )
        toggles.addWidget(self.solo_button)
        info_layout.addLayout(toggles)

        self.dynamic_checkbox = QCheckBox("Dyn")
        self.dynamic_checkbox.setToolTip("Dynamic EQ: gain follows the input level")
        self.dynamic_checkbox.toggled.connect(self._on_dynamic_toggled)
        info_layout.addWidget(self.dynamic_checkbox)

        self.type_combo = QComboBox()
        for band_type in BandType:
            self.type_combo.addItem(band_type.value, band_type.value)
        self.type_combo.currentIndexChanged.connect(self._on_type_changed)
        info_layout.addWidget(self.type_combo)

        layout.addLayout(info_layout)

        separator = QFrame()
        separator.setFrameShape(QFrame.Shape.VLine)
        layout.addWidget(separator)

        # Parameter sliders
        self.freq_slider = ValueSlider("Freq", MIN_FREQ, MAX_FREQ, 1000.0,
                                       decimals=0, suffix="Hz", log_scale=True)
        self.freq_slider.value_changed.connect(
            lambda v: self._emit(BandPatch(frequency=v))
        )
        layout.addWidget(self.freq_slider)

        self.gain_slider = ValueSlider("Gain", MIN_GAIN, MAX_GAIN, 0.0, decimals=1, suffix="dB")
        self.gain_slider.value_changed.connect(
            lambda v: self._emit(BandPatch(gain=v))
        )
        layout.addWidget(self.gain_slider)

        self.q_slider = ValueSlider("Q", MIN_Q, MAX_Q, 1.0, decimals=2)
        self.q_slider.value_changed.connect(
            lambda v: self._emit(BandPatch(q=v))
        )
        layout.addWidget(self.q_slider)

        # Only shown while dynamics are on
        self.range_slider = ValueSlider("Range", *DYNAMIC_RANGE_LIMITS, DEFAULT_DYNAMIC_RANGE,
                                        decimals=1, suffix="dB")
        self.range_slider.value_changed.connect(
            lambda v: self._emit(BandPatch(dynamic_range=v))
        )
        layout.addWidget(self.range_slider)

    def _emit(self, patch: BandPatch):
        if self.band_id is not None:
            self.band_changed.emit(self.band_id, patch)

    def _on_dynamic_toggled(self, checked):
        self.range_slider.setVisible(checked)
        self._emit(BandPatch(is_dynamic=checked))

    def _on_type_changed(self, index):
        band_type = self.type_combo.itemData(index)
        if band_type is not None:
            self._emit(BandPatch(type=band_type))

    def set_band(self, band):
        """Show a band (or hide the panel when band is None) without emitting."""
        if band is None:
            self.band_id = None
            self.setVisible(False)
            return

        self.band_id = band.id
        self.title_label.setText(f"Band {band.id}")
        self.title_label.setStyleSheet(f"{BAND_TITLE_STYLE} color: {band.color};")

        for widget, setter, value in (
            (self.enabled_checkbox, self.enabled_checkbox.setChecked, band.enabled),
            (self.solo_button, self.solo_button.setChecked, band.solo),
            (self.dynamic_checkbox, self.dynamic_checkbox.setChecked, band.is_dynamic),
            (self.type_combo, self.type_combo.setCurrentIndex,
             self.type_combo.findData(band.type.value)),
        ):
            widget.blockSignals(True)
            setter(value)
            widget.blockSignals(False)

        self.freq_slider.set_value(band.frequency)
        self.gain_slider.set_value(band.gain)
        self.q_slider.set_value(band.q)
        self.range_slider.set_value(band.effective_dynamic_range)
        self.range_slider.setVisible(band.is_dynamic)

        # Parameters are greyed out while the band is off
        for slider in (self.freq_slider, self.gain_slider, self.q_slider, self.range_slider):
            slider.setEnabled(band.enabled)

        self.setVisible(True)


class BandStrip(QWidget):
    """Row of small numbered buttons, one per band."""

    band_selected = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(SPACING_NORMAL)
        # Buttons are inserted between the two stretches (centered)
        self._layout.addStretch()
        self._layout.addStretch()
        self.buttons = {}

    def set_bands(self, bands, selected_band_id=None, hovered_band_id=None):
        """Create buttons on first use and refresh their look."""
        for band in bands:
            button = self.buttons.get(band.id)
            if button is None:
                button = QPushButton(str(band.id))
                button.setFixedSize(28, 28)
                button.clicked.connect(lambda _checked, band_id=band.id: self.band_selected.emit(band_id))
                self._layout.insertWidget(self._layout.count() - 1, button)
                self.buttons[band.id] = button

            background = band.color if band.enabled else COLOR_DISABLED_BAND
            if band.id == selected_band_id:
                border = "2px solid white"
            elif band.id == hovered_band_id:
                border = "1px solid white"
            elif band.solo:
                border = f"2px solid {COLOR_SOLO}"
            else:
                border = "1px solid transparent"
            button.setStyleSheet(
                f"QPushButton {{ background-color: {background}; color: white; "
                f"border: {border}; border-radius: 14px; font-weight: bold; }}"
            )
            button.setToolTip("Soloed" if band.solo else "")
