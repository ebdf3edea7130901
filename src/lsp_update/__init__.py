"""
Ruby LSP Bundle Updater - Core Package
"""

from lsp_update.context import ProjectContext, resolve_project_context
from lsp_update.outcome import OutcomeKind, UpdateOutcome, classify_output
from lsp_update.runner import UpdateRunner

__all__ = [
    "ProjectContext",
    "resolve_project_context",
    "OutcomeKind",
    "UpdateOutcome",
    "classify_output",
    "UpdateRunner",
]
