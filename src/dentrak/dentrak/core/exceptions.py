from __future__ import annotations

from datetime import date
from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class BlockedDayError(ValidationError):
    """Raised when attendance would be staged on a blocked day."""

    def __init__(self, days: Sequence[date]):
        self.days = list(days)
        listed = ", ".join(d.isoformat() for d in self.days)
        super().__init__(f"Cannot add attendance: {listed} blocked or pending block")


class RecordNotFoundError(DomainError):
    """Raised by a record store when an id does not exist."""

    def __init__(self, kind, record_id: int):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{getattr(kind, 'value', kind)} record {record_id} does not exist")


class CommitError(DomainError):
    """Raised when one or more store operations of a commit failed.

    The pending change set is left untouched; `failures` is informational only.
    """

    def __init__(self, failures: Sequence[BaseException], *, attempted: int):
        self.failures = list(failures)
        self.attempted = attempted
        super().__init__(f"{len(self.failures)} of {attempted} store operations failed")


class CommitInProgressError(DomainError):
    """Raised when an editor is changed while its commit is still running."""


class NoPendingConflictError(DomainError):
    """Raised when a conflict resolution is requested but nothing is parked."""
