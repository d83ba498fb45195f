"""
System tray icon for the Antigravity companion
"""

from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon


class SystemTrayIcon(QSystemTrayIcon):
    """Tray icon with Show / Hide / Quit"""

    def __init__(self, main_window, on_quit, parent=None):
        super().__init__(parent)
        self.main_window = main_window
        self.on_quit = on_quit

        self.set_icon()
        self.create_context_menu()
        self.activated.connect(self.on_activated)
        self.show()

    def set_icon(self):
        style = QApplication.style()
        self.setIcon(style.standardIcon(QStyle.StandardPixmap.SP_ComputerIcon))
        self.setToolTip("Antigravity Agent")

    def create_context_menu(self):
        menu = QMenu()

        show_action = QAction("Show Window", self)
        show_action.triggered.connect(self.show_main_window)
        menu.addAction(show_action)

        menu.addSeparator()

        hide_action = QAction("Hide Window", self)
        hide_action.triggered.connect(self.main_window.hide)
        menu.addAction(hide_action)

        menu.addSeparator()

        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.on_quit)
        menu.addAction(quit_action)

        # keep a reference, Qt does not own the menu
        self._menu = menu
        self.setContextMenu(menu)

    def on_activated(self, reason):
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self.show_main_window()

    def show_main_window(self):
        self.main_window.show()
        self.main_window.raise_()
        self.main_window.activateWindow()
