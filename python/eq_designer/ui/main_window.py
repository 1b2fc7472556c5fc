"""
Main window for EQ Designer

Hosts the response graph, the band strip and inspector, and the header
controls (presets, analyzer, smoothing, output gain, bypass). The simulation
loop ticks at ~60 FPS and pushes each result into the graph.
"""

import os
import sys

from PyQt6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QStatusBar,
    QMessageBox,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction

from .. import __version__
from ..config import (
    MASTER_GAIN_RANGE,
    BUILTIN_PRESETS,
    AppConfig,
    PresetStore,
    BandPatch,
    load_config,
    save_config,
)
from ..analysis import gain_offsets
from ..simulation import EQSession, SimulationLoop, TickResult
from .eq_graph import EQGraphWidget
from .band_panel import BandPanel, BandStrip
from .preset_dialog import PresetDialog
from .layout_constants import (
    SPACING_NORMAL,
    SPACING_SECTION,
    MARGIN_PANEL,
    PRIMARY_LABEL_STYLE,
    INFO_LABEL_STYLE,
)

DEBUG = os.environ.get("EQ_DESIGNER_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}

# Header sliders work in integer steps
GAIN_SLIDER_SCALE = 10        # 0.1 dB
SMOOTHING_SLIDER_SCALE = 100  # 0.01


class MainWindow(QMainWindow):
    """Main application window for EQ Designer."""

    def __init__(self, config: AppConfig = None, store: PresetStore = None, autostart: bool = True):
        super().__init__()
        self.setWindowTitle("EQ Designer")

        self.config = config if config is not None else load_config()
        self.store = store if store is not None else PresetStore()
        self.presets = self.store.load() or []

        self.session = EQSession()
        self.loop = SimulationLoop(self.session, parent=self)
        self.loop.tick_completed.connect(self._on_tick)

        self._setup_ui()
        self._setup_menubar()
        self._setup_statusbar()

        self.resize(1100, 700)
        self.setMinimumSize(800, 520)

        self._restore_from_config()
        self._refresh_band_views()

        if autostart:
            self.loop.start()

    def _setup_ui(self):
        """Set up the user interface."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(MARGIN_PANEL, MARGIN_PANEL, MARGIN_PANEL, MARGIN_PANEL)
        layout.setSpacing(SPACING_SECTION)

        layout.addLayout(self._create_header())

        self.graph = EQGraphWidget()
        self.graph.band_changed.connect(self._on_band_changed)
        self.graph.band_selected.connect(self._on_band_selected)
        self.graph.band_hovered.connect(self._on_band_hovered)
        layout.addWidget(self.graph, stretch=1)

        self.band_strip = BandStrip()
        self.band_strip.band_selected.connect(self._on_band_selected)
        layout.addWidget(self.band_strip)

        self.band_panel = BandPanel()
        self.band_panel.band_changed.connect(self._on_band_changed)
        layout.addWidget(self.band_panel, alignment=Qt.AlignmentFlag.AlignHCenter)

    def _create_header(self):
        header = QHBoxLayout()
        header.setSpacing(SPACING_NORMAL)

        title = QLabel("<b>EQ</b> Designer")
        title.setStyleSheet(PRIMARY_LABEL_STYLE)
        header.addWidget(title)
        header.addStretch()

        presets_btn = QPushButton("Presets")
        presets_btn.clicked.connect(self._show_presets)
        header.addWidget(presets_btn)

        self.analyzer_button = QPushButton("Analyzer")
        self.analyzer_button.setCheckable(True)
        self.analyzer_button.setChecked(True)
        self.analyzer_button.toggled.connect(self._on_analyzer_toggled)
        header.addWidget(self.analyzer_button)

        smooth_label = QLabel("Smooth")
        smooth_label.setStyleSheet(INFO_LABEL_STYLE)
        header.addWidget(smooth_label)
        self.smoothing_slider = QSlider(Qt.Orientation.Horizontal)
        self.smoothing_slider.setRange(0, 95)
        self.smoothing_slider.setSingleStep(5)
        self.smoothing_slider.setFixedWidth(80)
        self.smoothing_slider.setToolTip("Analyzer smoothing")
        self.smoothing_slider.valueChanged.connect(self._on_smoothing_changed)
        header.addWidget(self.smoothing_slider)

        output_label = QLabel("Output")
        output_label.setStyleSheet(INFO_LABEL_STYLE)
        header.addWidget(output_label)
        self.master_gain_slider = QSlider(Qt.Orientation.Horizontal)
        self.master_gain_slider.setRange(
            int(MASTER_GAIN_RANGE[0] * GAIN_SLIDER_SCALE),
            int(MASTER_GAIN_RANGE[1] * GAIN_SLIDER_SCALE),
        )
        self.master_gain_slider.setFixedWidth(100)
        self.master_gain_slider.valueChanged.connect(self._on_master_gain_changed)
        header.addWidget(self.master_gain_slider)
        self.master_gain_label = QLabel("0.0")
        self.master_gain_label.setMinimumWidth(36)
        header.addWidget(self.master_gain_label)

        self.bypass_button = QPushButton("Bypass")
        self.bypass_button.setCheckable(True)
        self.bypass_button.setToolTip("Global bypass")
        self.bypass_button.toggled.connect(self._on_bypass_toggled)
        header.addWidget(self.bypass_button)

        return header

    def _setup_menubar(self):
        """Set up the menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        presets_action = QAction("&Presets...", self)
        presets_action.setShortcut("Ctrl+P")
        presets_action.triggered.connect(self._show_presets)
        file_menu.addAction(presets_action)

        reset_action = QAction("&Reset Bands", self)
        reset_action.triggered.connect(self._reset_bands)
        file_menu.addAction(reset_action)

        file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        help_menu = menubar.addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _setup_statusbar(self):
        """Set up the status bar."""
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready - drag a band handle, scroll over it to change Q")

    def _restore_from_config(self):
        """Restore analyzer, output gain, last preset and geometry from config."""
        self.session.set_smoothing(self.config.analyzer_smoothing)
        self.session.set_show_analyzer(self.config.show_analyzer)
        self.session.set_master_gain(self.config.master_gain)

        if self.config.last_preset:
            preset = self._find_preset(self.config.last_preset)
            if preset is not None:
                self.session.load_preset(preset)
            elif DEBUG:
                print(f"[MAIN] Last preset '{self.config.last_preset}' not found")

        self._sync_header()

        geometry = self.config.window_geometry
        if geometry:
            try:
                self.setGeometry(geometry['x'], geometry['y'], geometry['width'], geometry['height'])
            except (KeyError, TypeError) as e:
                print(f"Geometry restore failed: {type(e).__name__}: {e}")

    def _find_preset(self, preset_id: str):
        for preset in list(BUILTIN_PRESETS.values()) + self.presets:
            if preset.id == preset_id:
                return preset
        return None

    def _sync_header(self):
        """Push session values into the header widgets without feedback."""
        for widget, value in (
            (self.smoothing_slider, int(round(self.session.smoothing * SMOOTHING_SLIDER_SCALE))),
            (self.master_gain_slider, int(round(self.session.master_gain * GAIN_SLIDER_SCALE))),
        ):
            widget.blockSignals(True)
            widget.setValue(value)
            widget.blockSignals(False)
        self.master_gain_label.setText(f"{self.session.master_gain:+.1f}")

        self.analyzer_button.blockSignals(True)
        self.analyzer_button.setChecked(self.session.show_analyzer)
        self.analyzer_button.blockSignals(False)
        self.smoothing_slider.setEnabled(self.session.show_analyzer)

        self.bypass_button.blockSignals(True)
        self.bypass_button.setChecked(self.session.bypass)
        self.bypass_button.blockSignals(False)

    def _refresh_band_views(self):
        """Redraw handles, strip and inspector from the raw band set."""
        session = self.session
        self.graph.set_bands(session.bands, session.selected_band_id, session.bypass)
        self.band_strip.set_bands(session.bands, session.selected_band_id, session.hovered_band_id)
        self.band_panel.set_band(session.selected_band)

    def _on_tick(self, result: TickResult):
        spectrum = result.spectrum if self.session.show_analyzer else []
        offsets = gain_offsets(self.session.bands, result.dynamic_bands)
        self.graph.set_tick(result.response, spectrum, offsets)

    def _on_band_changed(self, band_id: int, patch: BandPatch):
        self.session.update_band(band_id, patch)
        self._refresh_band_views()

    def _on_band_selected(self, band_id):
        self.session.select_band(band_id)
        self._refresh_band_views()

    def _on_band_hovered(self, band_id):
        self.session.hover_band(band_id)
        self.band_strip.set_bands(
            self.session.bands, self.session.selected_band_id, self.session.hovered_band_id
        )

    def _on_analyzer_toggled(self, checked):
        self.session.set_show_analyzer(checked)
        self.config.show_analyzer = checked
        self.smoothing_slider.setEnabled(checked)

    def _on_smoothing_changed(self, value: int):
        self.session.set_smoothing(value / SMOOTHING_SLIDER_SCALE)
        self.config.analyzer_smoothing = self.session.smoothing

    def _on_master_gain_changed(self, value: int):
        self.session.set_master_gain(value / GAIN_SLIDER_SCALE)
        self.config.master_gain = self.session.master_gain
        self.master_gain_label.setText(f"{self.session.master_gain:+.1f}")

    def _on_bypass_toggled(self, checked):
        self.session.set_bypass(checked)
        self._refresh_band_views()
        self.status_bar.showMessage("Bypass ON" if checked else "Bypass OFF", 2000)

    def _reset_bands(self):
        self.session.reset_bands()
        self._refresh_band_views()
        self.status_bar.showMessage("Bands reset to flat", 2000)

    def _show_presets(self):
        dialog = PresetDialog(self.presets, self)
        dialog.save_requested.connect(self._save_preset)
        dialog.load_requested.connect(self._load_preset)
        dialog.delete_requested.connect(self._delete_preset)
        dialog.exec()

    def _save_preset(self, name: str):
        """Snapshot the current bands and store the whole preset list."""
        preset = self.session.capture_preset(name)
        self.presets.append(preset)
        if self.store.save(self.presets):
            self.status_bar.showMessage(f"Preset saved: {name}")
        else:
            self.status_bar.showMessage(f"Preset '{name}' could not be written to disk")

    def _load_preset(self, preset):
        self.session.load_preset(preset)
        self.config.last_preset = preset.id
        self.config.master_gain = self.session.master_gain
        self._sync_header()
        self._refresh_band_views()
        self.status_bar.showMessage(f"Loaded preset: {preset.name}")

    def _delete_preset(self, preset_id: str):
        self.presets = [p for p in self.presets if p.id != preset_id]
        self.store.save(self.presets)
        if self.config.last_preset == preset_id:
            self.config.last_preset = ""
        self.status_bar.showMessage("Preset deleted", 2000)

    def _show_about(self):
        """Show about dialog."""
        QMessageBox.about(
            self,
            "About EQ Designer",
            f"<h2>EQ Designer v{__version__}</h2>"
            "<p>Interactive parametric EQ editor</p>"
            "<p>The analyzer shows simulated pink noise shaped by the EQ curve; "
            "no audio is processed.</p>"
        )

    def closeEvent(self, event):
        """Handle window close."""
        self.loop.dispose()

        self.config.window_geometry = {
            'x': self.x(),
            'y': self.y(),
            'width': self.width(),
            'height': self.height()
        }
        try:
            save_config(self.config)
        except (IOError, OSError) as e:
            print(f"Config save failed: {type(e).__name__}: {e}")

        event.accept()


def run_app():
    """Run the EQ Designer application."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    window = MainWindow()
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(run_app())
