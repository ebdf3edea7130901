"""
Ruby LSP Bundle Updater - Update Outcome
Result type for an update and the classifier that reads Bundler output.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "Bundle updated!"

GENERIC_FAILURE_REASON = "Bundler did not report a successful update"

_VERSION = r"\d+(?:\.[0-9A-Za-z]+)*"

CONSTRAINT_PATTERN = re.compile(
    r'could not find compatible versions for gem "(?P<gem_name>[^"\s]+)"'
    r".*?Required by.*?"
    rf"(?P<constraint>(?:~>|>=|<=|!=|=|>|<)\s*{_VERSION})"
    r".*?The latest version is\s+"
    rf"(?P<available_version>{_VERSION})",
    re.DOTALL,
)


class OutcomeKind(Enum):
    """Kind of result produced by an update."""
    SUCCESS = "success"
    DEPENDENCY_CONSTRAINT_VIOLATION = "dependency_constraint_violation"
    UPDATE_FAILURE = "update_failure"
    GEM_NOT_FOUND = "gem_not_found"
    GIT_ERROR = "git_error"
    VERSION_CONFLICT = "version_conflict"
    USAGE_ERROR = "usage_error"


@dataclass
class UpdateOutcome:
    """Result of an update run."""
    kind: OutcomeKind
    message: str = ""
    fields: dict = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def succeeded(cls) -> "UpdateOutcome":
        return cls(OutcomeKind.SUCCESS, "Ruby LSP dependencies updated successfully")

    @classmethod
    def constraint_violation(cls, gem_name: str, constraint: str, available_version: str) -> "UpdateOutcome":
        return cls(
            OutcomeKind.DEPENDENCY_CONSTRAINT_VIOLATION,
            f"Unable to update {gem_name} due to version constraint: {constraint}. "
            f"Latest available version: {available_version}",
            {
                "gem_name": gem_name,
                "constraint": constraint,
                "available_version": available_version,
            },
        )

    @classmethod
    def update_failure(cls, reason: str = GENERIC_FAILURE_REASON) -> "UpdateOutcome":
        return cls(OutcomeKind.UPDATE_FAILURE, reason, {"reason": reason})

    def describe(self) -> str:
        """One-line summary for the console."""
        if self.success:
            return self.message
        label = self.kind.value.replace("_", " ").capitalize()
        return f"{label}: {self.message}"


def find_constraint_violation(text: str) -> Optional[dict]:
    """
    Look for Bundler's incompatible-versions report.

    Returns:
        Dict with gem_name, constraint and available_version, or None.
    """
    match = CONSTRAINT_PATTERN.search(text)
    if not match:
        return None
    fields = match.groupdict()
    # Normalize "~>2.0" and "~>  2.0" to "~> 2.0"
    fields["constraint"] = re.sub(r"^([~><=!]+)\s*", r"\1 ", fields["constraint"])
    return fields


def classify_output(text: str) -> UpdateOutcome:
    """
    Decide the outcome of an update from its captured output.

    The success marker wins over anything else in the text; otherwise a
    recognised constraint report is extracted; anything else is a
    generic failure.
    """
    if SUCCESS_MARKER in text:
        return UpdateOutcome.succeeded()

    violation = find_constraint_violation(text)
    if violation:
        logger.debug(f"Constraint violation detected: {violation}")
        return UpdateOutcome.constraint_violation(**violation)

    return UpdateOutcome.update_failure()
