"""
Ruby LSP Bundle Updater - Scoped Process State
Context managers that change process-wide state and always put it back.
"""

import io
import os
from collections.abc import Mapping
from contextlib import contextmanager, redirect_stderr, redirect_stdout
import logging

logger = logging.getLogger(__name__)


@contextmanager
def overlay_environment(overrides: Mapping):
    """
    Apply overrides to os.environ for the duration of the block.

    The full environment is snapshotted first and restored on every
    exit path. Only one overlay may be active per process.
    """
    snapshot = dict(os.environ)
    try:
        os.environ.update(overrides)
        yield
    finally:
        os.environ.clear()
        os.environ.update(snapshot)
        logger.debug("Restored process environment")


@contextmanager
def capture_output():
    """
    Redirect sys.stdout and sys.stderr into one ordered text buffer.

    Yields:
        The io.StringIO receiving everything written to either stream.
    """
    buffer = io.StringIO()
    with redirect_stdout(buffer), redirect_stderr(buffer):
        yield buffer
