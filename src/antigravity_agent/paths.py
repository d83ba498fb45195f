"""
Location of the Antigravity data directory, state database and search roots
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import platformdirs

from .platform_profile import PlatformProfile
from .platforms import APP_NAME, DATABASE_FILENAME, PlatformSupport, current_platform, support_for

logger = logging.getLogger(__name__)

COMPANION_NAME = "antigravity-agent"
CONFIG_DIR_ENV = "ANTIGRAVITY_AGENT_CONFIG_DIR"


@dataclass(frozen=True)
class SystemDirectories:
    """Per-user base directories; any of them may be unknown on a given OS"""

    config_dir: Path | None = None
    data_dir: Path | None = None
    data_local_dir: Path | None = None
    home_dir: Path | None = None

    @classmethod
    def detect(cls) -> "SystemDirectories":
        try:
            home = Path.home()
        except RuntimeError:
            home = None
        return cls(
            config_dir=Path(platformdirs.user_config_dir(roaming=True)),
            data_dir=Path(platformdirs.user_data_dir(roaming=True)),
            data_local_dir=Path(platformdirs.user_data_dir(roaming=False)),
            home_dir=home,
        )

    def as_dict(self) -> dict[str, str | None]:
        return {
            "config_dir": _as_str(self.config_dir),
            "data_dir": _as_str(self.data_dir),
            "home_dir": _as_str(self.home_dir),
        }


def _as_str(path: Path | None) -> str | None:
    return None if path is None else str(path)


def companion_config_dir(dirs: SystemDirectories) -> Path:
    """Directory holding config.json, settings.yaml and window_state.json"""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(os.path.expanduser(override))
    base = dirs.config_dir if dirs.config_dir is not None else Path(".")
    return base / COMPANION_NAME


class PathResolver:
    """Computes where the Antigravity app keeps its data on this OS

    A missing base directory never raises: the affected result is None
    (or simply left out of a list), which callers read as "not found".
    """

    def __init__(self, platform: PlatformSupport, dirs: SystemDirectories):
        self.platform = platform
        self.dirs = dirs

    @classmethod
    def for_profile(
        cls, profile: PlatformProfile, dirs: SystemDirectories | None = None
    ) -> "PathResolver":
        return cls(support_for(profile), dirs or SystemDirectories.detect())

    @classmethod
    def current(cls) -> "PathResolver":
        return cls(current_platform(), SystemDirectories.detect())

    def data_dir(self) -> Path | None:
        return self.platform.data_dir(self.dirs)

    def database_path(self) -> Path | None:
        data_dir = self.data_dir()
        if data_dir is None:
            return None
        return data_dir / DATABASE_FILENAME

    def search_directories(self) -> list[Path]:
        """Install roots: <data-dir>/Antigravity then <config-dir>/Antigravity"""
        roots: list[Path] = []
        for base in (self.dirs.data_dir, self.dirs.config_dir):
            if base is None:
                continue
            root = base / APP_NAME
            # macOS reports the same directory for both
            if root not in roots:
                roots.append(root)
        return roots

    def stray_databases(self) -> list[Path]:
        """state.vscdb files sitting directly inside an existing install root"""
        found = []
        for root in self.search_directories():
            if not root.is_dir():
                continue
            try:
                entries = sorted(root.iterdir())
            except OSError as e:
                logger.warning("Could not scan %s: %s", root, e)
                continue
            for entry in entries:
                if entry.name == DATABASE_FILENAME and entry.is_file():
                    found.append(entry)
        return found
