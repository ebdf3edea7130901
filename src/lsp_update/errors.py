"""
Ruby LSP Bundle Updater - Exceptions
Error types raised while preparing and running a bundle update.
"""

from typing import Optional


class UpdateServerError(Exception):
    """Base exception for update-related errors."""
    pass


class UsageError(UpdateServerError):
    """The composed Ruby LSP bundle has not been set up yet."""
    pass


class GemfileNotFound(UpdateServerError):
    """No Gemfile could be discovered for the project."""
    pass


class SettingsError(UpdateServerError):
    """A Bundler configuration file could not be read."""
    pass


class VersionPinWarning(UpdateServerError):
    """The lockfile could not be read; the update continues without a pin."""
    pass


class BundlerError(UpdateServerError):
    """
    Bundler exited with an error.

    status_code mirrors the exit status Bundler assigns to its own
    exception classes.
    """
    status_code: Optional[int] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class VersionConflict(BundlerError):
    """Bundler could not resolve a consistent set of versions."""
    status_code = 6


class GemNotFound(BundlerError):
    """A requested gem does not exist in any configured source."""
    status_code = 7


class GitError(BundlerError):
    """A git-sourced gem could not be fetched or checked out."""
    status_code = 11


BUNDLER_ERRORS_BY_STATUS = {
    cls.status_code: cls
    for cls in (VersionConflict, GemNotFound, GitError)
}
