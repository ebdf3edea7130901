"""
Ruby LSP Bundle Updater - Bundler Version Pin
Reads the Bundler version a lockfile was generated with.
"""

from pathlib import Path
from typing import Optional
import logging

from packaging.version import Version, InvalidVersion

from lsp_update.context import ProjectContext
from lsp_update.errors import VersionPinWarning

logger = logging.getLogger(__name__)

BUNDLED_WITH_HEADER = "BUNDLED WITH"


def parse_bundled_with(lockfile_text: str) -> Optional[str]:
    """
    Extract the version listed under BUNDLED WITH.

    Args:
        lockfile_text: Full contents of a Gemfile.lock.

    Returns:
        The version string, or None if the lockfile has no such section.

    Raises:
        VersionPinWarning: if the section exists but holds no valid version.
    """
    lines = lockfile_text.splitlines()
    for index, line in enumerate(lines):
        if line.strip() != BUNDLED_WITH_HEADER:
            continue

        # Section body is the next indented line
        for body in lines[index + 1:]:
            if not body.strip():
                continue
            if not body[:1].isspace():
                break
            candidate = body.strip()
            try:
                Version(candidate)
            except InvalidVersion:
                raise VersionPinWarning(f"Invalid BUNDLED WITH version: {candidate!r}")
            return candidate

        raise VersionPinWarning("BUNDLED WITH section has no version")

    return None


def read_bundled_with(lockfile: Path) -> Optional[str]:
    """Read a lockfile from disk and return its BUNDLED WITH version."""
    try:
        text = lockfile.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise VersionPinWarning(f"Could not read {lockfile}: {e}") from e
    return parse_bundled_with(text)


def resolve_bundler_version(context: ProjectContext) -> Optional[str]:
    """
    Determine which Bundler version should run the update.

    Any problem reading the lockfile is logged and results in no pin.
    """
    lockfile = context.lockfile
    if lockfile is None or not lockfile.exists():
        return None

    try:
        version = read_bundled_with(lockfile)
    except VersionPinWarning as e:
        logger.warning(f"Ignoring Bundler version pin: {e}")
        return None

    if version:
        logger.debug(f"Lockfile {lockfile.name} was bundled with {version}")
    return version
