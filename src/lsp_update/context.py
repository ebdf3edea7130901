"""
Ruby LSP Bundle Updater - Project Context
Locates the composed .ruby-lsp bundle and the Gemfile for a project.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from lsp_update.errors import GemfileNotFound

logger = logging.getLogger(__name__)

CUSTOM_DIR_NAME = ".ruby-lsp"
DEFAULT_GEMFILE_NAME = "Gemfile"

# Bundler checks gems.rb before Gemfile in each directory
GEMFILE_NAMES = ("gems.rb", "Gemfile")


@dataclass(frozen=True)
class ProjectContext:
    """Paths for one update invocation."""
    project_root: Path
    custom_dir: Path                 # <root>/.ruby-lsp
    gemfile: Optional[Path]          # Discovered project Gemfile, if any
    gemfile_name: str                # Basename used inside custom_dir
    custom_gemfile: Path             # <custom_dir>/<gemfile_name>

    @property
    def lockfile(self) -> Optional[Path]:
        """Lockfile that sits beside the discovered Gemfile."""
        if self.gemfile is None:
            return None
        if self.gemfile.name == "gems.rb":
            return self.gemfile.with_name("gems.locked")
        return self.gemfile.with_name(f"{self.gemfile.name}.lock")

    @property
    def bundle_ready(self) -> bool:
        """Check if the composed bundle has been set up."""
        return self.custom_dir.is_dir() and self.custom_gemfile.is_file()


def find_default_gemfile(start: Path) -> Path:
    """
    Find the Gemfile Bundler would use by default.

    BUNDLE_GEMFILE wins when set; otherwise directories are searched
    from start upward.

    Raises:
        GemfileNotFound: if no Gemfile can be located.
    """
    configured = os.environ.get("BUNDLE_GEMFILE")
    if configured:
        path = Path(configured).expanduser()
        if not path.is_absolute():
            path = start / path
        if path.is_file():
            return path
        raise GemfileNotFound(f"{configured} not found")

    for directory in (start, *start.parents):
        for name in GEMFILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate

    raise GemfileNotFound(f"Could not locate Gemfile or gems.rb from {start}")


def resolve_project_context(project_path) -> ProjectContext:
    """
    Build the ProjectContext for a project directory.

    Args:
        project_path: Path to the project root.

    Returns:
        ProjectContext with the composed bundle paths filled in.
    """
    root = Path(project_path).expanduser().resolve()
    custom_dir = root / CUSTOM_DIR_NAME

    try:
        gemfile = find_default_gemfile(root)
    except GemfileNotFound as e:
        logger.debug(f"No default Gemfile: {e}")
        gemfile = None

    gemfile_name = gemfile.name if gemfile else DEFAULT_GEMFILE_NAME

    return ProjectContext(
        project_root=root,
        custom_dir=custom_dir,
        gemfile=gemfile,
        gemfile_name=gemfile_name,
        custom_gemfile=custom_dir / gemfile_name,
    )
