"""
Restoring and saving the companion window's geometry
"""

import asyncio
import json
import logging
import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Protocol

from .errors import WindowHostError
from .state_guard import SETTLE_DELAY, StateSaveGuard

logger = logging.getLogger(__name__)

WINDOW_STATE_FILENAME = "window_state.json"


@dataclass
class WindowGeometry:
    """Outer position and size of the window, plus its maximized/tray flags"""

    x: float
    y: float
    width: float
    height: float
    maximized: bool = False
    tray_enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "WindowGeometry | None":
        """Parse a stored record; None if it is malformed"""
        if not isinstance(data, dict):
            return None
        try:
            values = [float(data[key]) for key in ("x", "y", "width", "height")]
        except (KeyError, TypeError, ValueError):
            return None
        if not all(math.isfinite(v) for v in values):
            return None
        x, y, width, height = values
        if width <= 0 or height <= 0:
            return None
        return cls(
            x=x,
            y=y,
            width=width,
            height=height,
            maximized=bool(data.get("maximized", False)),
            tray_enabled=bool(data.get("tray_enabled", False)),
        )


class WindowHost(Protocol):
    """The GUI window whose geometry is tracked

    Reads raise WindowHostError when the value is unavailable.
    """

    def outer_position(self) -> tuple[float, float]: ...

    def outer_size(self) -> tuple[float, float]: ...

    def is_maximized(self) -> bool: ...

    def apply_geometry(self, geometry: WindowGeometry) -> None: ...

    def hide(self) -> None: ...


class WindowStateStore(Protocol):
    async def load(self) -> WindowGeometry | None: ...

    async def save(self, geometry: WindowGeometry) -> None: ...


class JsonWindowStateStore:
    """WindowStateStore keeping one JSON record in a file"""

    def __init__(self, path: Path):
        self.path = Path(path)

    async def load(self) -> WindowGeometry | None:
        return await asyncio.to_thread(self._read)

    async def save(self, geometry: WindowGeometry) -> None:
        await asyncio.to_thread(self._write, geometry)

    def _read(self) -> WindowGeometry | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable window state %s: %s", self.path, e)
            return None
        return WindowGeometry.from_dict(data)

    def _write(self, geometry: WindowGeometry) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(geometry.to_dict(), f, indent=2)


class WindowStateController:
    """Connects host window events, the save guard and the state store

    restore() runs once at startup. Every move/resize event should start
    its own save_if_allowed() task; the guard decides which of them write.
    """

    def __init__(
        self,
        host: WindowHost,
        store: WindowStateStore,
        guard: StateSaveGuard | None = None,
        settle_delay: float = SETTLE_DELAY,
        tray_enabled: Callable[[], bool] = lambda: False,
        restore_on_start: bool = True,
    ):
        self.host = host
        self.store = store
        self.guard = guard or StateSaveGuard()
        self.settle_delay = settle_delay
        self.tray_enabled = tray_enabled
        self.restore_on_start = restore_on_start

    async def restore(self) -> bool:
        """Apply the stored geometry, then let saves through after the settle delay

        The guard is activated once this task finishes and the delay has
        passed, whether or not anything was restored.
        """
        restored = False
        try:
            if self.restore_on_start:
                geometry = await self.store.load()
                if geometry is not None:
                    logger.info(
                        "Restoring window: position (%.1f, %.1f), size %.1fx%.1f, maximized=%s",
                        geometry.x,
                        geometry.y,
                        geometry.width,
                        geometry.height,
                        geometry.maximized,
                    )
                    self.host.apply_geometry(geometry)
                    restored = True
        except (OSError, WindowHostError) as e:
            logger.warning("Window state restore failed: %s", e)
        finally:
            await self.guard.settle(self.settle_delay)
        return restored

    def capture(self) -> WindowGeometry | None:
        """Current host geometry, or None if any of the reads fail"""
        try:
            x, y = self.host.outer_position()
            width, height = self.host.outer_size()
            maximized = self.host.is_maximized()
        except WindowHostError as e:
            logger.debug("Skipping window state save: %s", e)
            return None
        return WindowGeometry(
            x=float(x),
            y=float(y),
            width=float(width),
            height=float(height),
            maximized=bool(maximized),
            tray_enabled=self.tray_enabled(),
        )

    async def save_if_allowed(self) -> bool:
        """Handle one move/resize event; True if geometry was written"""
        if not self.guard.attempt_save():
            return False
        return await self.save_now()

    async def save_now(self) -> bool:
        """Write the current geometry without consulting the guard"""
        geometry = self.capture()
        if geometry is None:
            return False
        try:
            await self.store.save(geometry)
        except OSError as e:
            logger.warning("Failed to save window state: %s", e)
            return False
        return True

    def prepare_close(self) -> bool:
        """Decide a close request: False hides the window to the tray instead"""
        if self.tray_enabled():
            logger.info("Tray enabled, hiding window instead of closing")
            self.host.hide()
            return False
        return True
