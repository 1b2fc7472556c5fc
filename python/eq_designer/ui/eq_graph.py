"""
Interactive frequency response graph for the parametric EQ
"""

import math
from typing import Optional

from PyQt6.QtWidgets import QWidget
from PyQt6.QtGui import QPainter, QPen, QColor, QBrush, QPainterPath, QFont
from PyQt6.QtCore import Qt, QPointF, QRectF, pyqtSignal

from ..config import (
    MIN_FREQ,
    MAX_FREQ,
    MIN_GAIN,
    MAX_GAIN,
    MIN_Q,
    MAX_Q,
    BandPatch,
    clamp,
)
from .layout_constants import (
    COLOR_GRAPH_BACKGROUND,
    COLOR_GRID,
    COLOR_GRID_ZERO,
    COLOR_GRID_LABEL,
    COLOR_CURVE,
    COLOR_CURVE_FILL,
    COLOR_SPECTRUM,
    COLOR_BYPASS,
)

# Mouse wheel Q step per notch
WHEEL_Q_STEP = 0.5
HANDLE_RADIUS = 9
HANDLE_HIT_RADIUS = 14

GRID_FREQUENCIES = [20, 50, 100, 200, 500, 1000, 2000, 5000, 10000, 20000]
GRID_GAINS = [-24, -18, -12, -6, 0, 6, 12, 18, 24]


class GraphGeometry:
    """
    Mapping between (frequency Hz, gain dB) and widget pixels.

    x is logarithmic from MIN_FREQ to MAX_FREQ, y is linear from MAX_GAIN
    (top) to MIN_GAIN (bottom).
    """

    MARGIN_LEFT = 40
    MARGIN_RIGHT = 10
    MARGIN_TOP = 10
    MARGIN_BOTTOM = 20

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.plot_width = max(1.0, width - self.MARGIN_LEFT - self.MARGIN_RIGHT)
        self.plot_height = max(1.0, height - self.MARGIN_TOP - self.MARGIN_BOTTOM)
        self._log_min = math.log10(MIN_FREQ)
        self._log_max = math.log10(MAX_FREQ)

    def freq_to_x(self, freq: float) -> float:
        """Convert frequency (Hz) to x pixel coordinate (log scale)."""
        normalized = (math.log10(freq) - self._log_min) / (self._log_max - self._log_min)
        return self.MARGIN_LEFT + normalized * self.plot_width

    def x_to_freq(self, x: float) -> float:
        normalized = (x - self.MARGIN_LEFT) / self.plot_width
        return 10 ** (self._log_min + normalized * (self._log_max - self._log_min))

    def db_to_y(self, db: float) -> float:
        """Convert dB to y pixel coordinate (higher dB = lower y)."""
        normalized = (MAX_GAIN - db) / (MAX_GAIN - MIN_GAIN)
        return self.MARGIN_TOP + normalized * self.plot_height

    def y_to_db(self, y: float) -> float:
        normalized = (y - self.MARGIN_TOP) / self.plot_height
        return MAX_GAIN - normalized * (MAX_GAIN - MIN_GAIN)

    def pixels_per_octave(self) -> float:
        octaves = math.log2(MAX_FREQ / MIN_FREQ)
        return self.plot_width / octaves

    def point_to_band_values(self, x: float, y: float) -> tuple[float, float]:
        """Pointer position to (frequency, gain), clamped to the band domains."""
        freq = clamp(self.x_to_freq(x), MIN_FREQ, MAX_FREQ)
        gain = clamp(self.y_to_db(y), MIN_GAIN, MAX_GAIN)
        return freq, gain


def wheel_q(q: float, angle_delta_y: int) -> float:
    """New Q after a wheel notch: up narrows (raises Q), down widens."""
    if angle_delta_y == 0:
        return q
    direction = 1 if angle_delta_y > 0 else -1
    return clamp(q + direction * WHEEL_Q_STEP, MIN_Q, MAX_Q)


class EQGraphWidget(QWidget):
    """
    Frequency/gain graph showing the analyzer, the response curve and one
    draggable handle per enabled band.
    """

    band_changed = pyqtSignal(int, object)   # (band_id, BandPatch)
    band_selected = pyqtSignal(object)       # band_id or None
    band_hovered = pyqtSignal(object)        # band_id or None

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMinimumHeight(260)
        self.setMouseTracking(True)

        self.response = []
        self.spectrum = []
        self.dynamic_offsets = {}
        self.bands = []
        self.selected_band_id: Optional[int] = None
        self.hovered_band_id: Optional[int] = None
        self.bypass = False

        self._drag_band_id: Optional[int] = None

    def geometry_model(self) -> GraphGeometry:
        return GraphGeometry(self.width(), self.height())

    def set_tick(self, response, spectrum, dynamic_offsets=None):
        """
        Update the curve and analyzer data and redraw.

        dynamic_offsets maps band id to this tick's dynamic gain movement in dB.
        """
        self.response = response
        self.spectrum = spectrum
        self.dynamic_offsets = dynamic_offsets or {}
        self.update()

    def set_bands(self, bands, selected_band_id=None, bypass=False):
        """Update the raw band set used for handles."""
        self.bands = bands
        self.selected_band_id = selected_band_id
        self.bypass = bypass
        self.update()

    def handle_at(self, x: float, y: float) -> Optional[int]:
        """Id of the enabled band whose handle is under (x, y), if any."""
        geo = self.geometry_model()
        best_id = None
        best_dist = HANDLE_HIT_RADIUS
        for band in self.bands:
            if not band.enabled:
                continue
            dx = geo.freq_to_x(band.frequency) - x
            dy = geo.db_to_y(band.gain) - y
            dist = math.hypot(dx, dy)
            if dist <= best_dist:
                best_id = band.id
                best_dist = dist
        return best_id

    def _band(self, band_id):
        for band in self.bands:
            if band.id == band_id:
                return band
        return None

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        pos = event.position()
        band_id = self.handle_at(pos.x(), pos.y())
        self._drag_band_id = band_id
        # Press on background deselects
        self.band_selected.emit(band_id)

    def mouseMoveEvent(self, event):
        pos = event.position()
        if self._drag_band_id is not None:
            freq, gain = self.geometry_model().point_to_band_values(pos.x(), pos.y())
            self.band_changed.emit(self._drag_band_id, BandPatch(frequency=freq, gain=gain))
            return

        hovered = self.handle_at(pos.x(), pos.y())
        if hovered != self.hovered_band_id:
            self.hovered_band_id = hovered
            self.band_hovered.emit(hovered)
            self.setCursor(
                Qt.CursorShape.OpenHandCursor if hovered is not None else Qt.CursorShape.ArrowCursor
            )

    def mouseReleaseEvent(self, event):
        self._drag_band_id = None

    def leaveEvent(self, event):
        if self.hovered_band_id is not None:
            self.hovered_band_id = None
            self.band_hovered.emit(None)

    def wheelEvent(self, event):
        pos = event.position()
        band_id = self.handle_at(pos.x(), pos.y())
        band = self._band(band_id)
        if band is None:
            event.ignore()
            return
        event.accept()
        new_q = wheel_q(band.q, event.angleDelta().y())
        if new_q != band.q:
            self.band_changed.emit(band.id, BandPatch(q=new_q))

    def paintEvent(self, event):
        """Draw grid, analyzer, response curve and band handles."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        geo = self.geometry_model()

        painter.fillRect(0, 0, self.width(), self.height(), QColor(COLOR_GRAPH_BACKGROUND))

        self._draw_grid(painter, geo)
        if self.spectrum:
            self._draw_spectrum(painter, geo)
        if self.response:
            self._draw_curve(painter, geo)
        self._draw_handles(painter, geo)

        if self.bypass:
            painter.setPen(QColor(*COLOR_BYPASS))
            font = QFont()
            font.setPointSize(28)
            font.setBold(True)
            painter.setFont(font)
            painter.drawText(
                QRectF(0, 0, self.width(), self.height() / 3),
                Qt.AlignmentFlag.AlignCenter,
                "BYPASS"
            )

        painter.end()

    def _draw_grid(self, painter, geo):
        bottom = self.height() - geo.MARGIN_BOTTOM
        right = self.width() - geo.MARGIN_RIGHT
        label_pen = QPen(QColor(COLOR_GRID_LABEL))

        for db in GRID_GAINS:
            y = geo.db_to_y(db)
            color = COLOR_GRID_ZERO if db == 0 else COLOR_GRID
            painter.setPen(QPen(QColor(color), 1))
            painter.drawLine(QPointF(geo.MARGIN_LEFT, y), QPointF(right, y))
            painter.setPen(label_pen)
            painter.drawText(QPointF(5, y + 4), "0 dB" if db == 0 else f"{db:+d}")

        for freq in GRID_FREQUENCIES:
            x = geo.freq_to_x(freq)
            painter.setPen(QPen(QColor(COLOR_GRID), 1))
            painter.drawLine(QPointF(x, geo.MARGIN_TOP), QPointF(x, bottom))
            painter.setPen(label_pen)
            label = f"{freq // 1000}k" if freq >= 1000 else str(freq)
            painter.drawText(QPointF(x - 10, self.height() - 5), label)

    def _draw_spectrum(self, painter, geo):
        bottom = self.height() - geo.MARGIN_BOTTOM
        path = QPainterPath()
        first = self.spectrum[0]
        path.moveTo(geo.freq_to_x(first.frequency), bottom)
        for point in self.spectrum:
            y = min(bottom, geo.db_to_y(point.gain))
            path.lineTo(geo.freq_to_x(point.frequency), y)
        path.lineTo(geo.freq_to_x(self.spectrum[-1].frequency), bottom)
        path.closeSubpath()

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(*COLOR_SPECTRUM)))
        painter.drawPath(path)

    def _draw_curve(self, painter, geo):
        zero_y = geo.db_to_y(0.0)
        line = QPainterPath()
        area = QPainterPath()
        for i, point in enumerate(self.response):
            x = geo.freq_to_x(point.frequency)
            y = geo.db_to_y(point.gain)
            if i == 0:
                line.moveTo(x, y)
                area.moveTo(x, zero_y)
            else:
                line.lineTo(x, y)
            area.lineTo(x, y)
        area.lineTo(geo.freq_to_x(self.response[-1].frequency), zero_y)
        area.closeSubpath()

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(*COLOR_CURVE_FILL)))
        painter.drawPath(area)

        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.setPen(QPen(QColor(COLOR_CURVE), 2.5))
        painter.drawPath(line)

    def _draw_handles(self, painter, geo):
        octave_px = geo.pixels_per_octave()
        for band in self.bands:
            if not band.enabled:
                continue
            x = geo.freq_to_x(band.frequency)
            y = geo.db_to_y(band.gain)
            color = QColor(band.color)
            center = QPointF(x, y)

            # Q width indicator
            half_width = (octave_px / max(MIN_Q, band.q)) * 0.7 / 2
            q_color = QColor(color)
            q_color.setAlpha(120)
            painter.setPen(QPen(q_color, 3, Qt.PenStyle.SolidLine, Qt.PenCapStyle.RoundCap))
            painter.drawLine(QPointF(x - half_width, y), QPointF(x + half_width, y))

            painter.setBrush(Qt.BrushStyle.NoBrush)
            if band.is_dynamic:
                pen = QPen(QColor(255, 255, 255, 130), 1, Qt.PenStyle.DashLine)
                painter.setPen(pen)
                painter.drawEllipse(center, HANDLE_RADIUS + 8, HANDLE_RADIUS + 8)
                self._draw_dynamic_marker(painter, geo, band, x, y)

            if band.id == self.selected_band_id or band.id == self.hovered_band_id:
                painter.setPen(QPen(QColor("white"), 1))
                painter.drawEllipse(center, HANDLE_RADIUS + 4, HANDLE_RADIUS + 4)

            painter.setPen(QPen(QColor("white"), 1.5))
            painter.setBrush(QBrush(color))
            painter.drawEllipse(center, HANDLE_RADIUS, HANDLE_RADIUS)

            painter.setPen(QColor("white"))
            painter.drawText(
                QRectF(x - HANDLE_RADIUS, y - HANDLE_RADIUS, 2 * HANDLE_RADIUS, 2 * HANDLE_RADIUS),
                Qt.AlignmentFlag.AlignCenter,
                str(band.id)
            )

    def _draw_dynamic_marker(self, painter, geo, band, x, y):
        """Line from the static handle to the gain dynamic EQ applies this tick."""
        offset = self.dynamic_offsets.get(band.id, 0.0)
        if abs(offset) < 0.05:
            return
        target_y = geo.db_to_y(clamp(band.gain + offset, MIN_GAIN, MAX_GAIN))
        marker_color = QColor(band.color)
        painter.setPen(QPen(marker_color, 1, Qt.PenStyle.DotLine))
        painter.drawLine(QPointF(x, y), QPointF(x, target_y))
        painter.setPen(QPen(marker_color, 2))
        painter.drawLine(QPointF(x - 6, target_y), QPointF(x + 6, target_y))
        painter.setPen(QColor("white"))
        painter.drawText(QPointF(x + HANDLE_RADIUS + 10, target_y + 4), f"{offset:+.1f}")
