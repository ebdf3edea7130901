"""
Ruby LSP Bundle Updater - Bundler Settings
Reads Bundler's layered configuration (global, environment, local)
into a single merged view keyed by environment-variable names.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional
import logging

import yaml

from lsp_update.context import ProjectContext
from lsp_update.errors import GemfileNotFound, SettingsError

logger = logging.getLogger(__name__)

ENV_PREFIX = "BUNDLE_"
LOCAL_CONFIG_DIR = ".bundle"
ARRAY_SEPARATOR = ":"


def key_for(name: str) -> str:
    """
    Convert a Bundler setting name to its environment-variable form.

    Examples:
        path           -> BUNDLE_PATH
        mirror.https://rubygems.org -> BUNDLE_MIRROR__HTTPS://RUBYGEMS__ORG
        gems-path      -> BUNDLE_GEMS___PATH
    """
    name = str(name)
    if name.upper().startswith(ENV_PREFIX):
        name = name[len(ENV_PREFIX):]
    name = name.replace(".", "__").replace("-", "___").upper()
    return f"{ENV_PREFIX}{name}"


def to_env_value(value) -> str:
    """Serialize a setting value the way Bundler exports it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ARRAY_SEPARATOR.join(to_env_value(v) for v in value)
    if value is None:
        return ""
    return str(value)


def load_config_file(path: Path) -> dict[str, str]:
    """
    Load one Bundler config file.

    A missing file is an empty layer.

    Raises:
        SettingsError: if the file exists but cannot be parsed.
    """
    if not path.is_file():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as e:
        raise SettingsError(f"Could not read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise SettingsError(f"Bundler config must be a YAML mapping: {path}")

    return {key_for(k): to_env_value(v) for k, v in payload.items()}


def global_config_path(environ: Mapping) -> Path:
    """Location of the user-wide Bundler config file."""
    if environ.get("BUNDLE_USER_CONFIG"):
        return Path(environ["BUNDLE_USER_CONFIG"]).expanduser()
    if environ.get("BUNDLE_USER_HOME"):
        return Path(environ["BUNDLE_USER_HOME"]).expanduser() / "config"
    return Path.home() / ".bundle" / "config"


class BundlerSettings:
    """
    Merged Bundler settings.

    Precedence follows Bundler: local config over BUNDLE_* environment
    variables over the global config.
    """

    def __init__(self, local_dir: Optional[Path], environ: Optional[Mapping] = None):
        """
        Initialize the settings reader.

        Args:
            local_dir: Directory holding the local config file (usually
                       <root>/.bundle). None disables the local layer.
            environ: Environment to read BUNDLE_* variables from.
                     Defaults to os.environ.
        """
        self.local_dir = local_dir
        self.environ = dict(os.environ if environ is None else environ)

    @classmethod
    def for_context(cls, context: ProjectContext, environ: Optional[Mapping] = None) -> "BundlerSettings":
        """
        Pick the settings for a project.

        The project's own .bundle directory is preferred. Without it,
        Bundler's app config directory next to the Gemfile is used.

        Raises:
            GemfileNotFound: if there is no local .bundle and no Gemfile.
        """
        environ = os.environ if environ is None else environ
        local_dir = context.project_root / LOCAL_CONFIG_DIR
        if local_dir.is_dir():
            return cls(local_dir, environ)

        if context.gemfile is None:
            raise GemfileNotFound("Cannot locate Bundler settings without a Gemfile")

        app_root = context.gemfile.parent
        app_config = environ.get("BUNDLE_APP_CONFIG")
        if app_config:
            return cls(app_root / Path(app_config).expanduser(), environ)
        return cls(app_root / LOCAL_CONFIG_DIR, environ)

    def global_layer(self) -> dict[str, str]:
        return load_config_file(global_config_path(self.environ))

    def env_layer(self) -> dict[str, str]:
        return {
            key: value
            for key, value in self.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    def local_layer(self) -> dict[str, str]:
        if self.local_dir is None:
            return {}
        return load_config_file(self.local_dir / "config")

    def all(self) -> dict[str, str]:
        """
        Return every configured setting.

        Raises:
            SettingsError: if a config file is malformed.
        """
        merged: dict[str, str] = {}
        merged.update(self.global_layer())
        merged.update(self.env_layer())
        merged.update(self.local_layer())
        return merged
