"""
Config file model.

The config is a small JSON object written by the setup wizard:

    {
      "character_slot": 0,
      "enable_web_ui": true,
      "enable_text_file": false,
      "web_port": 8080,
      "save_path": "C:/Users/me/AppData/Roaming/EldenRing/7656.../ER0000.sl2"
    }

save_path is optional; when absent the default save directory is probed.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ConfigError
from .save.layout import NUM_SLOTS

CONFIG_FILE_NAME = "config.json"
TEXT_FILE_NAME = "death.txt"
DEFAULT_PORT = 8080


@dataclass
class Config:
    """Runtime settings. The monitored slot is fixed for the process lifetime."""

    character_slot: int = 0
    enable_web_ui: bool = True
    enable_text_file: bool = False
    web_port: int = DEFAULT_PORT
    save_path: Optional[str] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError if any field is out of range or the wrong type."""
        # bool is an int subclass; reject it for the numeric fields
        if not isinstance(self.character_slot, int) or isinstance(self.character_slot, bool):
            raise ConfigError(f"character_slot must be an integer, got {self.character_slot!r}")
        if not 0 <= self.character_slot < NUM_SLOTS:
            raise ConfigError(f"character_slot must be between 0 and {NUM_SLOTS - 1}, got {self.character_slot}")

        if not isinstance(self.web_port, int) or isinstance(self.web_port, bool):
            raise ConfigError(f"web_port must be an integer, got {self.web_port!r}")
        if not 1 <= self.web_port <= 65535:
            raise ConfigError(f"web_port must be between 1 and 65535, got {self.web_port}")

        for name in ("enable_web_ui", "enable_text_file"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false")

        if self.save_path is not None and not isinstance(self.save_path, str):
            raise ConfigError(f"save_path must be a string, got {self.save_path!r}")
        if self.save_path == "":
            self.save_path = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build from a parsed JSON object. Missing fields take defaults."""
        if not isinstance(data, dict):
            raise ConfigError("config must be a JSON object")
        defaults = cls()
        return cls(
            character_slot=data.get("character_slot", defaults.character_slot),
            enable_web_ui=data.get("enable_web_ui", defaults.enable_web_ui),
            enable_text_file=data.get("enable_text_file", defaults.enable_text_file),
            web_port=data.get("web_port", defaults.web_port),
            save_path=data.get("save_path"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "character_slot": self.character_slot,
            "enable_web_ui": self.enable_web_ui,
            "enable_text_file": self.enable_text_file,
            "web_port": self.web_port,
        }
        if self.save_path:
            data["save_path"] = self.save_path
        return data


def load_config(path: Union[str, Path]) -> Config:
    """
    Load and validate a config file.

    Raises:
        ConfigError: File missing, unreadable, not JSON, or invalid
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"config {path} is not valid JSON: {e}") from e

    return Config.from_dict(data)


def save_config(config: Config, path: Union[str, Path]) -> None:
    """Write the config as indented JSON, replacing any existing file."""
    Path(path).write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
