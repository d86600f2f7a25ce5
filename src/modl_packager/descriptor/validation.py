"""Descriptor validation helpers.

Two independent checks run before a bundle is assembled:

1. Required fields: ``id``, ``name`` and ``version`` must be present and
   non-blank.  Failure is fatal.
2. Scopes: every archive, hook and dependency should carry one of the
   scopes in :data:`VALID_SCOPES`.  Problems are reported as warnings and
   never stop packaging.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from modl_packager.descriptor.model import VALID_SCOPES, ModuleDescriptor, ScopedEntry
from modl_packager.errors import MissingRequiredFieldError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("id", "name", "version")


class ScopeIssueType(str, Enum):
    """Kind of problem found on a scoped entry."""

    INVALID = "invalid"
    MISSING = "missing"


@dataclass(frozen=True)
class ScopeIssue:
    """A single scope problem on one archive, hook or dependency.

    Attributes
    ----------
    issue_type:
        Whether the scope is absent or outside the valid set.
    kind:
        Entry kind label: ``"jar"``, ``"hook"`` or ``"dependency"``.
    value:
        The offending entry's path, class name or module id.
    scope:
        The scope as written, or ``None`` when missing.
    """

    issue_type: ScopeIssueType
    kind: str
    value: str | None
    scope: str | None

    @property
    def message(self) -> str:
        """Return the human-readable warning text for this issue."""
        valid = ", ".join(sorted(VALID_SCOPES))
        if self.issue_type is ScopeIssueType.MISSING:
            return (
                f"No scope specified for {self.kind} '{self.value}'. "
                f"Valid scopes are: {valid}"
            )
        return (
            f"Invalid scope '{self.scope}' for {self.kind} '{self.value}'. "
            f"Valid scopes are: {valid}"
        )


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_required_fields(descriptor: ModuleDescriptor) -> None:
    """Raise if ``id``, ``name`` or ``version`` is missing.

    Fields are checked in manifest order, so the first missing one is
    reported.

    Raises
    ------
    MissingRequiredFieldError
        If a required field is ``None`` or whitespace only.
    """
    for field_name in REQUIRED_FIELDS:
        if _is_blank(getattr(descriptor, field_name)):
            raise MissingRequiredFieldError(field_name)


def _scope_issue(entry: ScopedEntry) -> ScopeIssue | None:
    if entry.scope is None:
        issue_type = ScopeIssueType.MISSING
    elif entry.scope not in VALID_SCOPES:
        issue_type = ScopeIssueType.INVALID
    else:
        return None
    return ScopeIssue(
        issue_type=issue_type,
        kind=entry.kind.label,
        value=entry.value,
        scope=entry.scope,
    )


def check_scopes(descriptor: ModuleDescriptor) -> list[ScopeIssue]:
    """Return every scope problem in the descriptor, in manifest order."""
    issues: list[ScopeIssue] = []
    for entry in descriptor.scoped_entries():
        issue = _scope_issue(entry)
        if issue is not None:
            issues.append(issue)
    return issues


def validate_scopes(descriptor: ModuleDescriptor) -> list[ScopeIssue]:
    """Check scopes and log one warning per problem.

    Returns
    -------
    list[ScopeIssue]
        The issues that were logged.  An empty list means every entry has
        a valid scope.
    """
    issues = check_scopes(descriptor)
    for issue in issues:
        logger.warning("%s", issue.message)
    return issues


__all__ = [
    "REQUIRED_FIELDS",
    "ScopeIssue",
    "ScopeIssueType",
    "check_scopes",
    "validate_required_fields",
    "validate_scopes",
]
