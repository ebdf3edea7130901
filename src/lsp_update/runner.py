"""
Ruby LSP Bundle Updater - Update Runner
Runs a conservative update of the Ruby LSP gems inside the composed
bundle and reports a classified outcome.
"""

import sys
from typing import Optional
import logging

from backends.base import UpdateBackend
from lsp_update.context import ProjectContext
from lsp_update.environment import compose_environment, mask_value
from lsp_update.errors import (
    BundlerError,
    GemNotFound,
    GitError,
    UsageError,
    VersionConflict,
)
from lsp_update.outcome import OutcomeKind, UpdateOutcome, classify_output
from lsp_update.scope import capture_output, overlay_environment
from lsp_update.version_pin import resolve_bundler_version

logger = logging.getLogger(__name__)

# Gems the composed bundle adds on top of the project's own
UPDATED_GEMS = ("ruby-lsp", "debug", "prism")

# Relaxed for the update call only
FROZEN_VAR = "BUNDLE_FROZEN"

USAGE_MESSAGE = (
    "No composed Ruby LSP bundle found. "
    "Run the Ruby LSP server to set it up first"
)

_RECLASSIFIED_ERRORS = (
    (GemNotFound, OutcomeKind.GEM_NOT_FOUND),
    (GitError, OutcomeKind.GIT_ERROR),
    (VersionConflict, OutcomeKind.VERSION_CONFLICT),
)


class UpdateRunner:
    """
    Coordinates one update of the composed Ruby LSP bundle.

    Only one runner may be updating per process at a time: the update
    temporarily replaces os.environ and the standard streams.
    """

    def __init__(
        self,
        context: ProjectContext,
        backend: Optional[UpdateBackend] = None,
        out=None,
    ):
        """
        Initialize the runner.

        Args:
            context: Paths of the project to update.
            backend: Backend performing the update (defaults to the
                     bundle executable).
            out: Stream for progress lines (defaults to sys.stdout at
                 the time of each call).
        """
        self.context = context
        if backend is None:
            from backends.bundler import BundlerCLIBackend
            backend = BundlerCLIBackend(cwd=context.project_root)
        self.backend = backend
        self._out = out

    def _say(self, message: str) -> None:
        print(message, file=self._out or sys.stdout)

    def check_preconditions(self) -> None:
        """
        Raises:
            UsageError: if the composed bundle has not been set up.
        """
        if not self.context.bundle_ready:
            raise UsageError(USAGE_MESSAGE)

    def build_environment(self) -> dict[str, str]:
        version = resolve_bundler_version(self.context)
        return compose_environment(self.context, version)

    def update(self) -> UpdateOutcome:
        """
        Update the Ruby LSP gems.

        Returns:
            UpdateOutcome describing success or the kind of failure.
        """
        try:
            self.check_preconditions()
        except UsageError as e:
            self._say(f"Error: {e}")
            logger.error(str(e))
            return UpdateOutcome(OutcomeKind.USAGE_ERROR, str(e))

        self._say("Updating Ruby LSP server dependencies...")
        env = self.build_environment()

        self._say("Using environment:")
        for key, value in sorted(env.items()):
            self._say(f"  {key}={mask_value(key, value)}")

        outcome = self._run(env)

        if outcome.success:
            logger.info(outcome.message)
        else:
            logger.error(outcome.describe())
        self._say(outcome.describe())
        return outcome

    def _run(self, env: dict[str, str]) -> UpdateOutcome:
        """Run the backend with env applied and classify the result."""
        overlay = dict(env)
        overlay[FROZEN_VAR] = "false"

        output = ""
        with overlay_environment(overlay):
            try:
                with capture_output() as buffer:
                    try:
                        self.backend.update(UPDATED_GEMS, conservative=True)
                    finally:
                        output = buffer.getvalue()
            except BundlerError as e:
                if output:
                    logger.debug(f"{self.backend.name} output:\n{output}")
                return self._reclassify(e)

        if output:
            logger.debug(f"{self.backend.name} output:\n{output}")
        return classify_output(output)

    @staticmethod
    def _reclassify(error: BundlerError) -> UpdateOutcome:
        """Map a backend error onto an outcome without reading its output."""
        for error_class, kind in _RECLASSIFIED_ERRORS:
            if isinstance(error, error_class):
                return UpdateOutcome(kind, str(error))
        return UpdateOutcome.update_failure(str(error))
