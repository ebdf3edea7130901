"""
Ruby LSP Bundle Updater - Configuration
Loads the updater's own settings from a JSON file.
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ruby-lsp-update" / "config.json"


@dataclass
class UpdaterConfig:
    """Settings for the updater itself (not Bundler's)."""
    bundle_command: list[str] = field(default_factory=lambda: ["bundle"])
    log_file: Optional[str] = None
    log_level: str = "INFO"


def _default_config() -> UpdaterConfig:
    """Return default configuration."""
    return UpdaterConfig()


def load_config(config_path: Optional[Path] = None) -> UpdaterConfig:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Path to a JSON config file. Defaults to
                     ~/.config/ruby-lsp-update/config.json.
    """
    config_path = config_path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return _default_config()

    try:
        with open(config_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load config: {e}")
        return _default_config()

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {config_path}: expected a JSON object")
        return _default_config()

    known = {f.name for f in fields(UpdaterConfig)}
    for key in data:
        if key not in known:
            logger.debug(f"Ignoring unknown config key: {key}")

    config = _default_config()
    command = data.get("bundle_command")
    if isinstance(command, str):
        config.bundle_command = command.split()
    elif isinstance(command, list) and command and all(isinstance(c, str) for c in command):
        config.bundle_command = command
    elif command is not None:
        logger.warning(f"Invalid bundle_command in config: {command!r}")

    if data.get("log_file"):
        config.log_file = str(data["log_file"])
    if data.get("log_level"):
        config.log_level = str(data["log_level"]).upper()

    return config
