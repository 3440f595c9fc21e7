"""Circular progress ring widget rendered with QPainter.

The ring shows the engine's progress fraction as an arc that starts at
12 o'clock and runs clockwise, with the time and status text centred
inside.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QRectF
from PyQt6.QtGui import QPainter, QPen, QColor, QFont
from PyQt6.QtWidgets import QWidget


class ProgressRing(QWidget):
    """Custom-painted circular timer ring."""

    RING_DIAMETER = 260
    RING_THICKNESS = 12

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(self.RING_DIAMETER + 20, self.RING_DIAMETER + 20)

        self._fraction: float = 1.0
        self._time_text: str = "25:00"
        self._status_text: str = ""

        self._arc_color = QColor("#FF6B6B")
        self._track_color = QColor("#E9ECEF")
        self._text_color = QColor("#1F2937")
        self._muted_color = QColor("#6B7280")

    # ── public API ──────────────────────────────────────────────────────

    @property
    def fraction(self) -> float:
        return self._fraction

    @property
    def time_text(self) -> str:
        return self._time_text

    @property
    def status_text(self) -> str:
        return self._status_text

    def set_fraction(self, fraction: float) -> None:
        self._fraction = max(0.0, min(1.0, fraction))
        self.update()

    def set_time_text(self, text: str) -> None:
        self._time_text = text
        self.update()

    def set_status_text(self, text: str) -> None:
        self._status_text = text
        self.update()

    def set_colors(self, arc: str, track: str) -> None:
        self._arc_color = QColor(arc)
        self._track_color = QColor(track)
        self.update()

    # ── painting ───────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:  # type: ignore[override]
        side = min(self.width(), self.height()) - self.RING_THICKNESS * 2
        rect = QRectF(
            (self.width() - side) / 2,
            (self.height() - side) / 2,
            side,
            side,
        )

        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)

        # Track
        pen = QPen(self._track_color, self.RING_THICKNESS)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        p.setPen(pen)
        p.drawEllipse(rect)

        # Arc — Qt angles are 1/16 degree, counter-clockwise positive
        if self._fraction > 0:
            pen.setColor(self._arc_color)
            p.setPen(pen)
            span = -int(round(self._fraction * 360 * 16))
            p.drawArc(rect, 90 * 16, span)

        # Time
        time_font = QFont(self.font())
        time_font.setPointSize(max(12, int(side / 6)))
        time_font.setBold(True)
        p.setFont(time_font)
        p.setPen(self._text_color)
        time_rect = QRectF(rect.x(), rect.y(), rect.width(), rect.height() * 0.62)
        p.drawText(time_rect, Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom,
                   self._time_text)

        # Status
        status_font = QFont(self.font())
        status_font.setPointSize(max(9, int(side / 20)))
        p.setFont(status_font)
        p.setPen(self._muted_color)
        status_rect = QRectF(rect.x(), rect.y() + rect.height() * 0.64,
                             rect.width(), rect.height() * 0.2)
        p.drawText(status_rect, Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop,
                   self._status_text)
        p.end()
