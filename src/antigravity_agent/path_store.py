"""
On-disk cache of the user-confirmed Antigravity executable path
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError, ValidationError
from .platforms import PlatformSupport

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
PATH_KEY = "antigravityPath"


@dataclass
class AgentConfig:
    """Contents of config.json; keys this version does not know are kept in extra"""

    antigravity_path: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AgentConfig":
        extra = {k: v for k, v in data.items() if k != PATH_KEY}
        value = data.get(PATH_KEY)
        return cls(antigravity_path=value if isinstance(value, str) else None, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data[PATH_KEY] = self.antigravity_path
        return data


def is_regular_file(path: str | os.PathLike) -> bool:
    """True if path exists and is a regular file (symlinks are followed)"""
    try:
        return Path(path).is_file()
    except OSError:
        return False


class PersistedPathStore:
    """Reads and writes config.json

    When disabled (every OS but the one with an ambiguous install location)
    load() returns an empty config and save()/persist() do nothing.
    """

    def __init__(self, config_file: Path, enabled: bool = True):
        self.config_file = Path(config_file)
        self.enabled = enabled

    @classmethod
    def for_platform(cls, platform: PlatformSupport, config_dir: Path) -> "PersistedPathStore":
        return cls(Path(config_dir) / CONFIG_FILENAME, enabled=platform.caches_executable_path)

    def load(self) -> AgentConfig:
        """Current config; a missing or unreadable file counts as empty"""
        if not self.enabled or not self.config_file.exists():
            return AgentConfig()
        try:
            with open(self.config_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
            return AgentConfig()
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level is not an object", self.config_file)
            return AgentConfig()
        return AgentConfig.from_dict(data)

    def save(self, config: AgentConfig) -> None:
        """Overwrite config.json with config, atomically"""
        if not self.enabled:
            return
        try:
            content = json.dumps(config.to_dict(), indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Failed to serialize config: {e}") from e

        tmp_name = None
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.config_file.parent,
                prefix=f".{self.config_file.name}.",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
            os.replace(tmp_name, self.config_file)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ConfigError(f"Failed to write config {self.config_file}: {e}") from e

    @staticmethod
    def validate(path: str | os.PathLike) -> bool:
        return is_regular_file(path)

    def load_valid_path(self) -> Path | None:
        """Persisted executable path, if there is one and it still validates"""
        value = self.load().antigravity_path
        if value and self.validate(value):
            return Path(value)
        return None

    def persist(self, path: str | os.PathLike) -> None:
        """Validate path and record it, keeping every other key of the file"""
        if not self.enabled:
            return
        if not self.validate(path):
            raise ValidationError(path)
        config = self.load()
        config.antigravity_path = str(path)
        self.save(config)
        logger.info("Saved Antigravity executable path %s", path)
