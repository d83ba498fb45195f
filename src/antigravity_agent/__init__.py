"""
Antigravity Agent - locate, inspect and control the Antigravity desktop app
"""

__version__ = "0.1.0"
__author__ = "Antigravity Agent Team"
__description__ = "Locate, inspect and control the Antigravity desktop app"

from .errors import (
    AgentError,
    ConfigError,
    ProcessEnumerationError,
    TerminationError,
    UnsupportedPlatformError,
    ValidationError,
    WindowHostError,
)
from .platform_profile import OsKind, PlatformProfile
from .paths import PathResolver, SystemDirectories
from .path_store import AgentConfig, PersistedPathStore
from .processes import ProcessController, ProcessMatch
from .installation import InstallCandidate, InstallationResolver
from .state_guard import GuardState, StateSaveGuard
from .window_state import WindowGeometry, WindowStateController
from .commands import CommandError, Commands

__all__ = [
    "AgentError",
    "ConfigError",
    "ProcessEnumerationError",
    "TerminationError",
    "UnsupportedPlatformError",
    "ValidationError",
    "WindowHostError",
    "OsKind",
    "PlatformProfile",
    "PathResolver",
    "SystemDirectories",
    "AgentConfig",
    "PersistedPathStore",
    "ProcessController",
    "ProcessMatch",
    "InstallCandidate",
    "InstallationResolver",
    "GuardState",
    "StateSaveGuard",
    "WindowGeometry",
    "WindowStateController",
    "CommandError",
    "Commands",
]
