"""
Antigravity Agent - desktop companion for the Antigravity app
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

from .async_runner import AsyncRunner
from .commands import Commands
from .config import Settings, configure_logging
from .main_window import MainWindow
from .qt_host import QtWindowHost
from .state_guard import StateSaveGuard
from .system_tray import SystemTrayIcon
from .window_state import WINDOW_STATE_FILENAME, JsonWindowStateStore, WindowStateController

logger = logging.getLogger(__name__)

# how long closing the app may wait for the final geometry write
EXIT_SAVE_TIMEOUT = 2.0


class AgentApplication:
    """Owns the long-lived objects and the wiring between them"""

    def __init__(self, app: QApplication, settings: Settings):
        self.app = app
        self.settings = settings
        self.quitting = False

        self.runner = AsyncRunner()
        self.runner.start()

        self.commands = Commands(settings=settings)
        self.main_window = MainWindow(self.commands, self.runner, settings)

        self.host = QtWindowHost(self.main_window, close_handler=self.handle_close)
        self.controller = WindowStateController(
            self.host,
            JsonWindowStateStore(settings.config_dir / WINDOW_STATE_FILENAME),
            StateSaveGuard(debounce_interval=settings.debounce_interval),
            settle_delay=settings.settle_delay,
            tray_enabled=lambda: self.tray is not None,
            restore_on_start=settings.get("window.restore_on_start", True),
        )
        self.host.moved.connect(self.on_geometry_changed)
        self.host.resized.connect(self.on_geometry_changed)

        self.tray = None
        self.apply_tray(settings.tray_enabled)
        self.main_window.tray_toggled.connect(self.set_tray_enabled)

        app.aboutToQuit.connect(self.runner.stop)

    def set_tray_enabled(self, enabled: bool) -> None:
        """Save the hide-to-tray choice and show or remove the tray icon"""
        self.settings.set("tray.enabled", enabled)
        self.apply_tray(enabled)

    def apply_tray(self, enabled: bool) -> None:
        if enabled and self.tray is None:
            if QSystemTrayIcon.isSystemTrayAvailable():
                self.tray = SystemTrayIcon(self.main_window, self.quit)
            else:
                logger.warning("System tray is not available, closing will quit")
        elif not enabled and self.tray is not None:
            self.tray.hide()
            self.tray.deleteLater()
            self.tray = None
        # with a tray icon, hiding the last window must not end the app
        self.app.setQuitOnLastWindowClosed(self.tray is None)

    def start(self) -> None:
        self.main_window.show()
        self.runner.submit(self.controller.restore())

    def on_geometry_changed(self) -> None:
        # one task per event; the guard drops restores and bursts
        self.runner.submit(self.controller.save_if_allowed())

    def handle_close(self) -> bool:
        if not self.quitting and not self.controller.prepare_close():
            return False
        self.save_before_exit()
        return True

    def save_before_exit(self) -> None:
        try:
            self.runner.run(self.controller.save_now(), timeout=EXIT_SAVE_TIMEOUT)
        except Exception as e:
            logger.warning("Could not save window state on exit: %s", e)

    def quit(self) -> None:
        self.quitting = True
        self.save_before_exit()
        self.app.quit()


def main():
    """Main application entry point"""
    app = QApplication(sys.argv)
    app.setApplicationName("Antigravity Agent")
    app.setApplicationVersion("0.1.0")
    app.setOrganizationName("Antigravity Agent")
    app.setStyle("Fusion")

    settings = Settings()
    configure_logging(settings.get("logging.level", "INFO"))

    agent = AgentApplication(app, settings)
    agent.start()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
