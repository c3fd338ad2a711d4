# -*- coding: utf-8 -*-
########################
# breath_harness.py
########################
# Purpose:
# - Qt window that plays a GameSession.
# - Drives GameSession.tick from a 16 ms timer, routes mouse press and release, and paints the
#   breathing circle, floating feedback text and HUD from SessionSnapshot.
#
# Design notes:
# - No game logic here. Everything drawn comes from GameSession.snapshot() and summary().
# - The driving clock is time.monotonic() in milliseconds, relative to window creation.
# - Feedback entry positions are relative to the circle centre.
#
########################
# Interfaces:
# Public dataclasses:
# - HarnessPalette(background, breath_in, breath_out, text)
#
# Public classes:
# - class BreathWidget(PyQt6.QtWidgets.QWidget)
#   - session() -> GameSession
#   - restart() -> None
# - class BreathHarnessWindow(PyQt6.QtWidgets.QMainWindow)
#
# Public functions:
# - run_gui(app_config: AppConfig, *, fullscreen: bool = False) -> int
#
# Inputs:
# - Left mouse button press and release.
#
# Outputs:
# - Painted game visuals.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Optional, Tuple

from PyQt6.QtCore import QPointF, QRectF, Qt, QTimer
from PyQt6.QtGui import QBrush, QColor, QFont, QMouseEvent, QPainter, QPen
from PyQt6.QtWidgets import QApplication, QMainWindow, QWidget

from breath_models import BreathDirection, SessionSnapshot, SessionState
from config import AppConfig
from game_session import GameSession

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class HarnessPalette:
    background: RGB = (222, 246, 249)
    breath_in: RGB = (232, 166, 143)
    breath_out: RGB = (192, 116, 103)
    text: RGB = (60, 60, 70)


def _qcolor(rgb: RGB) -> QColor:
    return QColor(int(rgb[0]), int(rgb[1]), int(rgb[2]))


class BreathWidget(QWidget):
    def __init__(
        self,
        app_config: AppConfig,
        *,
        palette: Optional[HarnessPalette] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._app_config = app_config
        self._palette = palette or HarnessPalette()
        self._session = GameSession(app_config)
        self._epoch = time.monotonic()

        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(16)
        self._tick_timer.timeout.connect(self._on_tick)
        self._tick_timer.start()

    def session(self) -> GameSession:
        return self._session

    def restart(self) -> None:
        self._session = GameSession(self._app_config)
        self._epoch = time.monotonic()

    def _now_ms(self) -> float:
        return (time.monotonic() - self._epoch) * 1000.0

    def _on_tick(self) -> None:
        self._session.tick(self._now_ms())
        self.update()

    # -----------------
    # Input
    # -----------------

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(event)
        if self._session.state() == SessionState.ENDED:
            self.restart()
            return
        self._session.press()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            return super().mouseReleaseEvent(event)
        self._session.release()

    # -----------------
    # Painting
    # -----------------

    def _circle_center(self) -> QPointF:
        return QPointF(float(self.width()) / 2.0, float(self.height()) * 0.333)

    def paintEvent(self, event) -> None:  # type: ignore[override]
        snapshot = self._session.snapshot()

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QBrush(_qcolor(self._palette.background)))

        center = self._circle_center()
        self._paint_circle(painter, center, snapshot)
        self._paint_feedback(painter, center, snapshot)
        self._paint_hud(painter, snapshot)

        if snapshot.state == SessionState.NOT_STARTED:
            self._paint_banner(painter, "Click to begin")
        elif snapshot.state == SessionState.ENDED:
            summary = self._session.summary()
            self._paint_banner(painter, f"Final score {summary.total_score}  (best combo {summary.max_combo})")

        painter.end()

    def _paint_circle(self, painter: QPainter, center: QPointF, snapshot: SessionSnapshot) -> None:
        display = self._app_config.display
        if snapshot.phase.direction == BreathDirection.INHALING:
            colour = _qcolor(self._palette.breath_in)
        else:
            colour = _qcolor(self._palette.breath_out)

        outer_radius = (float(display.inner_radius) + float(display.breath_radius) * snapshot.phase.value) / 2.0
        inner_radius = float(display.inner_radius) / 2.0

        painter.save()
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(colour))
        painter.drawEllipse(center, outer_radius, outer_radius)

        painter.setPen(QPen(_qcolor(self._palette.background), 2.0))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawEllipse(center, inner_radius, inner_radius)
        painter.restore()

    def _paint_feedback(self, painter: QPainter, center: QPointF, snapshot: SessionSnapshot) -> None:
        painter.save()
        painter.setPen(QPen(_qcolor(self._palette.text)))
        for entry in snapshot.feedback_entries:
            size = 16
            if entry.combo_length is not None:
                size = min(40, 16 + 2 * int(entry.combo_length))
            painter.setFont(QFont("Arial", size, weight=QFont.Weight.Bold))
            x = float(center.x()) + float(entry.x)
            y = float(center.y()) + float(entry.y)
            painter.drawText(QRectF(x - 150.0, y - 20.0, 300.0, 40.0), int(Qt.AlignmentFlag.AlignCenter), entry.text)
        painter.restore()

    def _paint_hud(self, painter: QPainter, snapshot: SessionSnapshot) -> None:
        remaining_seconds = snapshot.remaining_ms / 1000.0
        hud_text = (
            f"Score {snapshot.total_score}  Combo {snapshot.combo_length} ({snapshot.combo_sum})"
            f"  Time {remaining_seconds:.1f}s"
        )
        painter.save()
        painter.setPen(QPen(_qcolor(self._palette.text)))
        painter.setFont(QFont("Arial", 12))
        painter.drawText(QRectF(10.0, 10.0, float(self.width()) - 20.0, 22.0), int(Qt.AlignmentFlag.AlignLeft), hud_text)
        painter.restore()

    def _paint_banner(self, painter: QPainter, text: str) -> None:
        painter.save()
        painter.setPen(QPen(_qcolor(self._palette.text)))
        painter.setFont(QFont("Arial", 22, weight=QFont.Weight.Bold))
        painter.drawText(
            QRectF(0.0, float(self.height()) * 0.7, float(self.width()), 40.0),
            int(Qt.AlignmentFlag.AlignHCenter),
            text,
        )
        painter.restore()


class BreathHarnessWindow(QMainWindow):
    def __init__(self, app_config: AppConfig) -> None:
        super().__init__()
        self.setWindowTitle("Breathe")
        self._breath_widget = BreathWidget(app_config, parent=self)
        self.setCentralWidget(self._breath_widget)
        self.resize(int(app_config.display.width), int(app_config.display.height))

    @property
    def breath_widget(self) -> BreathWidget:
        return self._breath_widget


def run_gui(app_config: AppConfig, *, fullscreen: bool = False) -> int:
    import sys

    qt_application = QApplication(sys.argv)
    window = BreathHarnessWindow(app_config)
    window.show()
    if fullscreen:
        window.showFullScreen()
    return int(qt_application.exec())
