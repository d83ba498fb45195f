"""
Main window for the Antigravity companion
"""

import concurrent.futures
import logging

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from .async_runner import AsyncRunner
from .commands import Commands
from .config import Settings

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Shows where Antigravity lives and offers the lifecycle actions"""

    # (command name, result or exception)
    command_finished = pyqtSignal(str, object)
    tray_toggled = pyqtSignal(bool)

    def __init__(self, commands: Commands, runner: AsyncRunner, settings: Settings):
        super().__init__()
        self.commands = commands
        self.runner = runner
        self.settings = settings

        self.setWindowTitle("Antigravity Agent")
        self.resize(720, 480)

        self.init_ui()
        self.setup_status_bar()
        self.command_finished.connect(self.on_command_finished)

        self.refresh()

    def init_ui(self):
        """Initialize the user interface"""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)

        platform_group = QGroupBox("Platform")
        form = QFormLayout(platform_group)
        self.os_label = QLabel("-")
        self.arch_label = QLabel("-")
        self.available_label = QLabel("-")
        self.running_label = QLabel("-")
        self.executable_label = QLabel("-")
        self.executable_label.setWordWrap(True)
        form.addRow("Operating system:", self.os_label)
        form.addRow("Architecture:", self.arch_label)
        form.addRow("Antigravity data:", self.available_label)
        form.addRow("Antigravity running:", self.running_label)
        form.addRow("Executable:", self.executable_label)
        layout.addWidget(platform_group)

        db_group = QGroupBox("State databases")
        db_layout = QVBoxLayout(db_group)
        self.db_list = QListWidget()
        db_layout.addWidget(self.db_list)
        layout.addWidget(db_group)

        buttons = QHBoxLayout()
        refresh_button = QPushButton("Refresh")
        refresh_button.clicked.connect(self.refresh)
        buttons.addWidget(refresh_button)

        self.resolve_button = QPushButton("Find Executable")
        self.resolve_button.clicked.connect(self.resolve_executable)
        buttons.addWidget(self.resolve_button)

        self.choose_button = QPushButton("Choose Executable...")
        self.choose_button.clicked.connect(self.choose_executable)
        buttons.addWidget(self.choose_button)

        self.kill_button = QPushButton("Close Antigravity")
        self.kill_button.clicked.connect(self.close_antigravity)
        buttons.addWidget(self.kill_button)
        layout.addLayout(buttons)

        self.tray_checkbox = QCheckBox("Hide to tray when the window is closed")
        self.tray_checkbox.setChecked(self.settings.tray_enabled)
        self.tray_checkbox.toggled.connect(self.tray_toggled)
        layout.addWidget(self.tray_checkbox)

        # the executable cache only exists where the install location is ambiguous
        cache_supported = self.commands.resolver.platform.caches_executable_path
        self.resolve_button.setEnabled(cache_supported)
        self.choose_button.setEnabled(cache_supported)

    def setup_status_bar(self):
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

    def run_command(self, name: str, coro):
        """Run a command coroutine in the background and report back on the GUI thread"""
        future = self.runner.submit(coro)

        def done(f: concurrent.futures.Future):
            if f.cancelled():
                return
            error = f.exception()
            self.command_finished.emit(name, error if error is not None else f.result())

        future.add_done_callback(done)

    def refresh(self):
        self.status_bar.showMessage("Refreshing...")
        self.run_command("info", self.commands.get_platform_info())
        self.run_command("running", self.commands.is_process_running())

    def resolve_executable(self):
        self.run_command("resolve", self.commands.resolve_executable_path())

    def choose_executable(self):
        path, _ = QFileDialog.getOpenFileName(
            self,
            "Select the Antigravity executable",
            "",
            "Executables (*.exe);;All files (*)",
        )
        if path:
            self.run_command("persist", self.commands.persist_executable_path(path))

    def close_antigravity(self):
        reply = QMessageBox.question(
            self,
            "Close Antigravity",
            "Force-close every running Antigravity process?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.run_command("kill", self.commands.terminate_target())

    def on_command_finished(self, name: str, result):
        if isinstance(result, Exception):
            logger.warning("%s failed: %s", name, result)
            self.status_bar.showMessage(f"{name} failed: {result}")
            if name in ("persist", "kill"):
                QMessageBox.warning(self, "Antigravity Agent", str(result))
            return

        if name == "info":
            self.os_label.setText(f"{result['os']} ({result['family']})")
            self.arch_label.setText(result["arch"])
            self.available_label.setText("found" if result["target_available"] else "not found")
            self.db_list.clear()
            self.db_list.addItems(result["target_db_paths"])
            self.status_bar.showMessage("Ready")
        elif name == "running":
            self.running_label.setText("yes" if result else "no")
        elif name == "resolve":
            self.executable_label.setText(result or "not found")
            self.status_bar.showMessage(
                "Executable found" if result else "Executable not found, choose it manually"
            )
        elif name == "persist":
            self.status_bar.showMessage("Saved Antigravity executable path")
            self.resolve_executable()
        elif name == "kill":
            self.status_bar.showMessage(result)
            self.run_command("running", self.commands.is_process_running())
