"""
Companion settings stored as YAML
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from .paths import SystemDirectories, companion_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.yaml"


class Settings:
    """User-editable settings with dotted-key access"""

    defaults: dict[str, Any] = {
        "window": {
            "settle_delay_ms": 500,
            "debounce_ms": 1000,
            "restore_on_start": True,
        },
        "tray": {
            "enabled": False,
        },
        "logging": {
            "level": "INFO",
        },
    }

    def __init__(self, config_dir: Path | None = None):
        if config_dir is None:
            config_dir = companion_config_dir(SystemDirectories.detect())
        self.config_dir = Path(config_dir)
        self.settings_file = self.config_dir / SETTINGS_FILENAME
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.settings = self.load_settings()

    def load_settings(self) -> dict[str, Any]:
        """Load settings from file, writing the defaults on first run"""
        if not self.settings_file.exists():
            self.save_settings(self.defaults)
            return copy.deepcopy(self.defaults)

        try:
            with open(self.settings_file, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Error loading settings %s: %s", self.settings_file, e)
            return copy.deepcopy(self.defaults)

        if not isinstance(loaded, dict):
            loaded = {}
        return self._merge(self.defaults, loaded)

    def save_settings(self, settings: dict[str, Any] | None = None) -> None:
        if settings is None:
            settings = self.settings
        try:
            with open(self.settings_file, "w", encoding="utf-8") as f:
                yaml.safe_dump(settings, f, default_flow_style=False)
        except OSError as e:
            logger.warning("Error saving settings %s: %s", self.settings_file, e)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value using dot notation, e.g. "window.debounce_ms" """
        value = self.settings
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value using dot notation and write the file"""
        keys = key.split(".")
        node = self.settings
        for k in keys[:-1]:
            if not isinstance(node.get(k), dict):
                node[k] = {}
            node = node[k]
        node[keys[-1]] = value
        self.save_settings()

    @property
    def settle_delay(self) -> float:
        return self.get("window.settle_delay_ms", 500) / 1000.0

    @property
    def debounce_interval(self) -> float:
        return self.get("window.debounce_ms", 1000) / 1000.0

    @property
    def tray_enabled(self) -> bool:
        return bool(self.get("tray.enabled", False))

    def _merge(self, defaults: dict[str, Any], user: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge user settings over defaults"""
        result = copy.deepcopy(defaults)
        for key, value in user.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging once for the application or CLI"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # basicConfig leaves an already-configured root alone, so set the level directly
    logging.getLogger().setLevel(level)
