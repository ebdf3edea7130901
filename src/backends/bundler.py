"""
Ruby LSP Bundle Updater - Bundler Backend
Runs `bundle update` for the composed Ruby LSP bundle.
"""

import os
import shutil
import subprocess
import sys
from typing import Optional, Sequence
import logging

from lsp_update.errors import BUNDLER_ERRORS_BY_STATUS, BundlerError

from .base import UpdateBackend

logger = logging.getLogger(__name__)


class BundlerCLIBackend(UpdateBackend):
    """Backend that drives the `bundle` executable."""

    def __init__(self, command: Optional[Sequence[str]] = None, cwd=None):
        """
        Initialize the Bundler backend.

        Args:
            command: argv prefix used to invoke Bundler (default ["bundle"]).
            cwd: Working directory for the child process.
        """
        self.command = list(command or ["bundle"])
        self.cwd = cwd

    @property
    def name(self) -> str:
        return "Bundler"

    def is_available(self) -> bool:
        """Check if the bundle executable can be found."""
        return shutil.which(self.command[0]) is not None

    def build_command(self, gems: Sequence[str], conservative: bool = True) -> list[str]:
        args = self.command + ["update"]
        if conservative:
            args.append("--conservative")
        return args + list(gems)

    def update(self, gems: Sequence[str], conservative: bool = True) -> int:
        """Run bundle update and stream its output to sys.stdout."""
        cmd = self.build_command(gems, conservative)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=self.cwd,
                env=dict(os.environ),
            )
        except FileNotFoundError as e:
            raise BundlerError(f"Bundler executable not found: {self.command[0]}") from e
        except OSError as e:
            raise BundlerError(f"Could not start Bundler: {e}") from e

        lines = []
        with process:
            try:
                for line in process.stdout:
                    lines.append(line)
                    sys.stdout.write(line)
            except (OSError, ValueError) as e:
                process.kill()
                process.wait()
                raise BundlerError(f"Could not read Bundler output: {e}") from e
            returncode = process.wait()

        sys.stdout.flush()
        logger.debug(f"bundle update exited with {returncode}")

        error_class = BUNDLER_ERRORS_BY_STATUS.get(returncode)
        if error_class is not None:
            # Bundler prints the error message last
            tail = [line.strip() for line in lines if line.strip()]
            message = tail[-1] if tail else f"bundle update exited with status {returncode}"
            raise error_class(message)

        return returncode
