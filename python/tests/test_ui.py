"""Tests for graph geometry, editors and main window wiring (offscreen Qt)."""

from dataclasses import replace

import pytest
from PyQt6.QtCore import QPoint, Qt
from PyQt6.QtTest import QTest

from eq_designer.config import (
    BUILTIN_PRESETS,
    AppConfig,
    BandPatch,
    EQPreset,
    PresetStore,
    default_bands,
)
from eq_designer.ui.eq_graph import EQGraphWidget, GraphGeometry, wheel_q
from eq_designer.ui.band_panel import BandPanel, BandStrip
from eq_designer.ui.value_slider import ValueSlider
from eq_designer.ui.main_window import MainWindow
from eq_designer.ui.preset_dialog import PresetDialog


def test_graph_geometry_maps_domain_to_plot_area():
    geo = GraphGeometry(800, 400)
    assert geo.freq_to_x(20.0) == pytest.approx(GraphGeometry.MARGIN_LEFT)
    assert geo.freq_to_x(20000.0) == pytest.approx(800 - GraphGeometry.MARGIN_RIGHT)
    assert geo.db_to_y(30.0) == pytest.approx(GraphGeometry.MARGIN_TOP)
    assert geo.db_to_y(-30.0) == pytest.approx(400 - GraphGeometry.MARGIN_BOTTOM)

    x = geo.freq_to_x(1234.0)
    assert geo.x_to_freq(x) == pytest.approx(1234.0)
    assert geo.y_to_db(geo.db_to_y(-7.5)) == pytest.approx(-7.5)


def test_pointer_values_are_clamped():
    geo = GraphGeometry(800, 400)
    assert geo.point_to_band_values(-100, -100) == (20.0, 30.0)
    assert geo.point_to_band_values(5000, 5000) == (20000.0, -30.0)


def test_wheel_q_steps_and_clamps():
    assert wheel_q(4.0, 120) == 4.5
    assert wheel_q(4.0, -120) == 3.5
    assert wheel_q(0.3, -120) == 0.1
    assert wheel_q(10.0, 120) == 10.0
    assert wheel_q(2.0, 0) == 2.0


def test_value_slider_text_entry(qapp):
    slider = ValueSlider("Gain", -30.0, 30.0, 0.0)
    emitted = []
    slider.value_changed.connect(emitted.append)

    slider.entry.setText("abc")
    slider._on_entry_committed()
    assert slider.value() == 0.0
    assert slider.entry.text() == "0.0"
    assert emitted == []

    slider.entry.setText("99")
    slider._on_entry_committed()
    assert slider.value() == 30.0
    assert emitted == [30.0]

    slider.set_value(-5.0)
    assert slider.value() == -5.0
    assert emitted == [30.0]


def test_value_slider_log_scale_positions(qapp):
    slider = ValueSlider("Freq", 20.0, 20000.0, 20.0, decimals=0, log_scale=True)
    slider.set_value(20000.0)
    assert slider.slider.value() == slider.slider.maximum()
    slider.set_value(632.456)
    assert slider.slider.value() == 500


def test_graph_handle_hit_testing(qapp):
    widget = EQGraphWidget()
    widget.resize(800, 400)
    bands = default_bands()
    widget.set_bands(bands)

    geo = widget.geometry_model()
    x, y = geo.freq_to_x(1000.0), geo.db_to_y(0.0)
    assert widget.handle_at(x, y) == 4
    assert widget.handle_at(x + 5, y - 5) == 4
    assert widget.handle_at(x, geo.db_to_y(20.0)) is None

    bands[3] = replace(bands[3], enabled=False)
    widget.set_bands(bands)
    assert widget.handle_at(x, y) is None


def test_graph_click_selects_and_background_deselects(qapp):
    widget = EQGraphWidget()
    widget.resize(800, 400)
    widget.set_bands(default_bands())
    selected = []
    widget.band_selected.connect(selected.append)

    geo = widget.geometry_model()
    handle = QPoint(int(geo.freq_to_x(1000.0)), int(geo.db_to_y(0.0)))
    QTest.mouseClick(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, handle)
    QTest.mouseClick(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(400, 30))
    assert selected == [4, None]


def test_band_panel_shows_band_without_emitting(qapp):
    panel = BandPanel()
    changes = []
    panel.band_changed.connect(lambda band_id, patch: changes.append((band_id, patch)))

    band = default_bands()[2]
    panel.set_band(band)
    assert not panel.isHidden()
    assert panel.gain_slider.value() == band.gain
    assert panel.range_slider.isHidden()
    assert changes == []

    panel.enabled_checkbox.setChecked(False)
    assert changes == [(3, BandPatch(enabled=False))]

    panel.set_band(None)
    assert panel.isHidden()


def test_band_strip_emits_selection(qapp):
    strip = BandStrip()
    strip.set_bands(default_bands(), selected_band_id=2)
    assert len(strip.buttons) == 7
    selected = []
    strip.band_selected.connect(selected.append)
    strip.buttons[5].click()
    assert selected == [5]


def _window(tmp_path):
    return MainWindow(config=AppConfig(), store=PresetStore(tmp_path), autostart=False)


def test_main_window_tick_updates_graph(qapp, tmp_path):
    window = _window(tmp_path)
    window.loop.step()
    assert len(window.graph.response) == 500
    assert len(window.graph.spectrum) == 100

    window.analyzer_button.setChecked(False)
    window.loop.step()
    assert window.graph.spectrum == []
    window.loop.dispose()


def test_main_window_band_edits_and_bypass(qapp, tmp_path):
    window = _window(tmp_path)
    window._on_band_selected(4)
    window._on_band_changed(4, BandPatch(gain=6.0))
    assert window.session.bands[3].gain == 6.0
    assert window.band_panel.band_id == 4
    assert window.band_panel.gain_slider.value() == 6.0

    window.bypass_button.setChecked(True)
    result = window.loop.step()
    assert all(p.gain == 0.0 for p in result.response)
    # Bypass never alters the stored bands
    assert window.session.bands[3].gain == 6.0
    window.loop.dispose()


def test_main_window_preset_save_load_delete(qapp, tmp_path):
    window = _window(tmp_path)
    window._on_band_changed(2, BandPatch(gain=-4.0))
    window._save_preset("Mine")
    stored = PresetStore(tmp_path).load()
    assert [p.name for p in stored] == ["Mine"]

    window._reset_bands()
    assert window.session.bands[1].gain == 0.0
    window._load_preset(stored[0])
    assert window.session.bands[1].gain == -4.0
    assert window.config.last_preset == stored[0].id

    window._delete_preset(stored[0].id)
    assert PresetStore(tmp_path).load() == []
    assert window.config.last_preset == ""
    window.loop.dispose()


def test_band_panel_greys_out_disabled_band(qapp):
    panel = BandPanel()
    band = replace(default_bands()[3], enabled=False, is_dynamic=True)
    panel.set_band(band)
    for slider in (panel.freq_slider, panel.gain_slider, panel.q_slider, panel.range_slider):
        assert not slider.isEnabled()

    panel.set_band(replace(band, enabled=True))
    assert panel.range_slider.isEnabled()


def test_preset_dialog_lists_builtins_and_protects_them(qapp):
    user = EQPreset.capture("Mine", default_bands(), 0.0)
    dialog = PresetDialog([user])
    assert dialog.preset_list.count() == len(BUILTIN_PRESETS) + 1
    assert dialog.empty_label.isHidden()

    deleted = []
    dialog.delete_requested.connect(deleted.append)
    dialog.preset_list.setCurrentRow(0)
    dialog._on_delete()
    assert deleted == []

    dialog.preset_list.setCurrentRow(len(BUILTIN_PRESETS))
    dialog._on_delete()
    assert deleted == [user.id]
    assert dialog.preset_list.count() == len(BUILTIN_PRESETS)


def test_main_window_passes_dynamic_movement_to_graph(qapp, tmp_path):
    window = _window(tmp_path)
    window._on_band_changed(4, BandPatch(gain=-6.0, is_dynamic=True, dynamic_range=12.0))
    window.loop.step()

    # Analyzer level near 1 kHz is above the -50 dB threshold, so the cut deepens
    assert window.graph.dynamic_offsets[4] < 0
    assert window.graph.dynamic_offsets[1] == 0.0

    window.graph.resize(800, 400)
    assert not window.graph.grab().isNull()

    window.bypass_button.setChecked(True)
    window.loop.step()
    assert all(offset == 0.0 for offset in window.graph.dynamic_offsets.values())
    window.loop.dispose()
