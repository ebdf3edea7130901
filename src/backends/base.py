"""
Ruby LSP Bundle Updater - Backend Base
Abstract base class for the tools that perform a bundle update.
"""

from abc import ABC, abstractmethod
from typing import Sequence
import logging

logger = logging.getLogger(__name__)


class UpdateBackend(ABC):
    """
    Abstract base class for update backends.

    A backend runs the package manager's update routine in the current
    process environment and writes all of the tool's output to
    sys.stdout / sys.stderr as they are at call time, so callers can
    capture it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the backend (e.g., 'Bundler')."""
        pass

    def is_available(self) -> bool:
        """Check if the backend's tooling is installed."""
        return True

    @abstractmethod
    def update(self, gems: Sequence[str], conservative: bool = True) -> int:
        """
        Update the given gems in the bundle selected by the environment.

        Args:
            gems: Gem names to update.
            conservative: Only move the named gems and what they require.

        Returns:
            The tool's exit status.

        Raises:
            BundlerError: or one of its subclasses when the tool reports
                          a known failure.
        """
        pass
