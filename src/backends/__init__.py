"""
Ruby LSP Bundle Updater - Backends Package
"""

from backends.base import UpdateBackend
from backends.bundler import BundlerCLIBackend

__all__ = [
    "UpdateBackend",
    "BundlerCLIBackend",
]
