"""
Per-OS behaviour for locating and controlling the Antigravity app

Each supported OS gets one class; the running process picks one through
platform_for() and every caller stays platform-agnostic.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

from .platform_profile import OsKind, PlatformProfile, detect

if TYPE_CHECKING:
    from .paths import SystemDirectories

APP_NAME = "Antigravity"
DATABASE_FILENAME = "state.vscdb"
EXECUTABLE_NAME = "Antigravity.exe"

# pkill -f regexes. The name must not run on into "-agent", "_agent" or more
# letters, so the companion's own command line never matches; the bracketed
# first letter keeps a pattern from matching its own text in a parent shell.
PKILL_PATTERNS = (
    "[A]ntigravity($|[^-_a-zA-Z])",
    "[a]ntigravity($|[^-_a-zA-Z])",
)


def global_storage(root: Path | None) -> Path | None:
    """<root>/Antigravity/User/globalStorage, or None when root is unknown"""
    if root is None:
        return None
    return root / APP_NAME / "User" / "globalStorage"


class PlatformSupport:
    """Defaults shared by every OS; subclasses override what differs"""

    os_kind = OsKind.OTHER
    # exact process names looked up in the process table
    process_names: tuple[str, ...] = ("Antigravity", "antigravity")
    # patterns handed to the kill tool, tried in order
    kill_patterns: tuple[str, ...] = PKILL_PATTERNS
    kill_tool: str | None = None
    # only one OS has an installer location worth caching
    caches_executable_path = False

    def data_dir(self, dirs: "SystemDirectories") -> Path | None:
        return global_storage(dirs.data_dir)

    def executable_candidates(
        self, dirs: "SystemDirectories", environ: Mapping[str, str] | None = None
    ) -> list[Path]:
        return []

    def kill_command(self, pattern: str) -> list[str] | None:
        """Argument vector that kills processes matching pattern, None if unsupported"""
        return None

    def describe_kill_success(self, pattern: str) -> str:
        return f"Closed Antigravity process (pattern: {pattern})"

    def describe_kill_failure(self, pattern: str, stderr: str) -> str:
        return f"Failed to close process (pattern: {pattern}): {stderr!r}"


class WindowsPlatform(PlatformSupport):
    os_kind = OsKind.WINDOWS
    process_names = (EXECUTABLE_NAME, APP_NAME)
    kill_patterns = (EXECUTABLE_NAME, APP_NAME)
    kill_tool = "taskkill"
    caches_executable_path = True

    def data_dir(self, dirs: "SystemDirectories") -> Path | None:
        # %APPDATA%\Antigravity\User\globalStorage
        return global_storage(dirs.config_dir)

    def executable_candidates(
        self, dirs: "SystemDirectories", environ: Mapping[str, str] | None = None
    ) -> list[Path]:
        """Well-known install locations, most common first"""
        if environ is None:
            environ = os.environ
        candidates = []
        if dirs.home_dir is not None:
            candidates.append(
                dirs.home_dir / "AppData" / "Local" / "Programs" / APP_NAME / EXECUTABLE_NAME
            )
            candidates.append(
                dirs.home_dir
                / "AppData"
                / "Roaming"
                / "Local"
                / "Programs"
                / APP_NAME
                / EXECUTABLE_NAME
            )
        if dirs.data_local_dir is not None:
            candidates.append(dirs.data_local_dir / "Programs" / APP_NAME / EXECUTABLE_NAME)

        program_files = environ.get("ProgramFiles") or r"C:\Program Files"
        program_files_x86 = environ.get("ProgramFiles(x86)") or r"C:\Program Files (x86)"
        candidates.append(Path(program_files) / APP_NAME / EXECUTABLE_NAME)
        candidates.append(Path(program_files_x86) / APP_NAME / EXECUTABLE_NAME)
        return candidates

    def kill_command(self, pattern: str) -> list[str] | None:
        return ["taskkill", "/F", "/IM", pattern]

    def describe_kill_success(self, pattern: str) -> str:
        return f"Closed Antigravity process ({pattern})"

    def describe_kill_failure(self, pattern: str, stderr: str) -> str:
        return f"Failed to close process {pattern}: {stderr!r}"


class MacPlatform(PlatformSupport):
    os_kind = OsKind.MACOS
    kill_tool = "pkill"

    def data_dir(self, dirs: "SystemDirectories") -> Path | None:
        # ~/Library/Application Support/Antigravity/User/globalStorage
        return global_storage(dirs.data_dir)

    def kill_command(self, pattern: str) -> list[str] | None:
        return ["pkill", "-f", pattern]


class LinuxPlatform(PlatformSupport):
    os_kind = OsKind.LINUX
    kill_tool = "pkill"

    def data_dir(self, dirs: "SystemDirectories") -> Path | None:
        # ~/.config first, ~/.local/share when there is no config dir
        return global_storage(dirs.config_dir) or global_storage(dirs.data_dir)

    def kill_command(self, pattern: str) -> list[str] | None:
        return ["pkill", "-f", pattern]


class OtherPlatform(PlatformSupport):
    pass


_PLATFORMS: dict[OsKind, type[PlatformSupport]] = {
    OsKind.WINDOWS: WindowsPlatform,
    OsKind.MACOS: MacPlatform,
    OsKind.LINUX: LinuxPlatform,
    OsKind.OTHER: OtherPlatform,
}


def support_for(profile: PlatformProfile) -> PlatformSupport:
    """Fresh strategy instance for an arbitrary profile"""
    return _PLATFORMS[profile.os_kind]()


@lru_cache(maxsize=1)
def current_platform() -> PlatformSupport:
    """Strategy for the running OS, selected once per process"""
    return support_for(detect())
