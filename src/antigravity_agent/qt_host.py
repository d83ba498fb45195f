"""
PyQt6 implementation of the WindowHost protocol
"""

import threading
from typing import Callable

from PyQt6.QtCore import QEvent, QObject, pyqtSignal
from PyQt6.QtWidgets import QWidget

from .errors import WindowHostError
from .window_state import WindowGeometry


class QtWindowHost(QObject):
    """Tracks a top-level widget's geometry for readers on other threads

    Geometry is cached on the GUI thread whenever Qt reports a move,
    resize or window-state change. Writes requested from other threads
    are delivered to the GUI thread through queued signals.
    """

    moved = pyqtSignal()
    resized = pyqtSignal()
    _apply_requested = pyqtSignal(object)
    _hide_requested = pyqtSignal()

    def __init__(self, widget: QWidget, close_handler: Callable[[], bool] | None = None):
        super().__init__(widget)
        self.widget = widget
        self.close_handler = close_handler
        self._lock = threading.Lock()
        self._cached: tuple[int, int, int, int, bool] | None = None

        self._apply_requested.connect(self._apply)
        self._hide_requested.connect(self.widget.hide)
        widget.installEventFilter(self)

    def eventFilter(self, obj, event):
        if obj is self.widget:
            etype = event.type()
            if etype == QEvent.Type.Move:
                self._record()
                self.moved.emit()
            elif etype in (QEvent.Type.Resize, QEvent.Type.WindowStateChange):
                self._record()
                self.resized.emit()
            elif etype == QEvent.Type.Close and self.close_handler is not None:
                if not self.close_handler():
                    event.ignore()
                    return True
        return super().eventFilter(obj, event)

    def _record(self) -> None:
        # position includes the frame; size is the client size so resize() round-trips
        frame = self.widget.frameGeometry()
        size = self.widget.size()
        with self._lock:
            self._cached = (
                frame.x(),
                frame.y(),
                size.width(),
                size.height(),
                self.widget.isMaximized(),
            )

    def _snapshot(self) -> tuple[int, int, int, int, bool]:
        with self._lock:
            cached = self._cached
        if cached is None:
            raise WindowHostError("window geometry not known yet")
        return cached

    def outer_position(self) -> tuple[float, float]:
        x, y, _, _, _ = self._snapshot()
        return float(x), float(y)

    def outer_size(self) -> tuple[float, float]:
        _, _, width, height, _ = self._snapshot()
        if width <= 0 or height <= 0:
            raise WindowHostError("window has no size")
        return float(width), float(height)

    def is_maximized(self) -> bool:
        return self._snapshot()[4]

    def apply_geometry(self, geometry: WindowGeometry) -> None:
        self._apply_requested.emit(geometry)

    def hide(self) -> None:
        self._hide_requested.emit()

    def _apply(self, geometry: WindowGeometry) -> None:
        self.widget.move(int(geometry.x), int(geometry.y))
        self.widget.resize(int(geometry.width), int(geometry.height))
        if geometry.maximized:
            self.widget.showMaximized()
