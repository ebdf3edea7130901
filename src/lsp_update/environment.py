"""
Ruby LSP Bundle Updater - Environment Composer
Turns the project's Bundler settings into environment variables for
the update run.
"""

import os
import re
from collections.abc import Mapping
from typing import Optional
import logging

from lsp_update.context import ProjectContext
from lsp_update.errors import GemfileNotFound, SettingsError
from lsp_update.settings import BundlerSettings

logger = logging.getLogger(__name__)

# BUNDLE_PATH, BUNDLE_CACHE_PATH, BUNDLE_FOO_PATH, ...
PATH_KEY_PATTERN = re.compile(r"^BUNDLE_(?:\w*_)?PATH$")

GEMFILE_VAR = "BUNDLE_GEMFILE"
VERSION_VAR = "BUNDLER_VERSION"


def is_path_key(key: str) -> bool:
    return PATH_KEY_PATTERN.match(key) is not None


def absolutize_paths(env: Mapping, project_root) -> dict[str, str]:
    """
    Rewrite relative path settings against the project root.

    The update runs against the Gemfile in .ruby-lsp, so relative paths
    recorded in the project's config would otherwise point at the wrong
    place. Absolute values are returned unchanged.
    """
    root = os.fspath(project_root)
    result = {}
    for key, value in env.items():
        if is_path_key(key) and value and not os.path.isabs(value):
            value = os.path.normpath(os.path.join(root, os.path.expanduser(value)))
        result[key] = value
    return result


def bundler_settings_as_env(context: ProjectContext, environ: Optional[Mapping] = None) -> dict[str, str]:
    """
    Read the merged Bundler settings for the project.

    Failures are logged and produce an empty set of settings.
    """
    try:
        settings = BundlerSettings.for_context(context, environ)
        env = settings.all()
    except (GemfileNotFound, SettingsError) as e:
        logger.warning(f"Could not read Bundler settings, using defaults: {e}")
        return {}

    return absolutize_paths(env, context.project_root)


def compose_environment(
    context: ProjectContext,
    bundler_version: Optional[str] = None,
    environ: Optional[Mapping] = None,
) -> dict[str, str]:
    """
    Build the environment overlay for an update.

    Args:
        context: The project being updated.
        bundler_version: Version from the lockfile, if any.
        environ: Environment to read BUNDLE_* settings from (defaults to
                 os.environ).

    Returns:
        Mapping of variable names to values.
    """
    env = bundler_settings_as_env(context, environ)
    env[GEMFILE_VAR] = str(context.custom_gemfile)
    if bundler_version:
        env[VERSION_VAR] = bundler_version
    return env


REDACTED = "[REDACTED]"

# BUNDLE_GEMS__CONTRIBSYS__COM, BUNDLE_RUBYGEMS__PKG__GITHUB__COM, ...
CREDENTIAL_KEY_PATTERN = re.compile(r"^BUNDLE_(?!MIRROR__|BUILD__)\w*__\w+$")
URL_USERINFO_PATTERN = re.compile(r"(?P<scheme>[a-z][a-z0-9+.-]*://)(?P<user>[^:@/]*)(?::[^@/]*)?@", re.I)


def mask_value(key: str, value: str) -> str:
    """
    Hide secrets in a value before it is displayed.

    Host credentials are shown as user:[REDACTED] (token-only values are
    fully redacted), and passwords embedded in URLs are removed.
    """
    if CREDENTIAL_KEY_PATTERN.match(key):
        user, sep, _ = value.partition(":")
        return f"{user}:{REDACTED}" if sep else REDACTED
    return URL_USERINFO_PATTERN.sub(rf"\g<scheme>\g<user>:{REDACTED}@", value)
