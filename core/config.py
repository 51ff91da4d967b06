"""
Settings for Pathfinder.

Loads the optional YAML configuration file. A missing or unreadable file
falls back to the defaults, which reproduce the plain explorer behaviour.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = "~/.config/pathfinder/config.yaml"


class Settings:
    """
    Configuration for the explorer.

    Values live in a nested dictionary shaped like the YAML file; the
    properties below are the only keys the application reads.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file, merged over the defaults."""
        config = self._default_config()

        if not self.config_path.exists():
            return config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return config

        if not isinstance(loaded, dict):
            return config

        loaded = loaded.get("pathfinder", loaded)
        if isinstance(loaded, dict):
            for section, values in loaded.items():
                if isinstance(values, dict) and isinstance(config.get(section), dict):
                    config[section].update(values)

        return config

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return copy.deepcopy({
            "display": {
                "directory_style": "bold blue",
                "clear_screen": True,
            },
            "search": {
                "pause_after_results": True,
            },
            "audit": {
                "enabled": True,
                "log_path": "~/.local/state/pathfinder/audit_log.jsonl",
            },
        })

    @property
    def directory_style(self) -> str:
        return str(self.config["display"]["directory_style"])

    @property
    def clear_screen(self) -> bool:
        return bool(self.config["display"]["clear_screen"])

    @property
    def pause_after_search(self) -> bool:
        return bool(self.config["search"]["pause_after_results"])

    @property
    def audit_enabled(self) -> bool:
        return bool(self.config["audit"]["enabled"])

    @property
    def audit_log_path(self) -> str:
        return str(self.config["audit"]["log_path"])

    def reset(self) -> None:
        """Replace the loaded values with the defaults."""
        self.config = self._default_config()

    def save(self) -> None:
        """Save current configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump({"pathfinder": self.config}, f, default_flow_style=False)
