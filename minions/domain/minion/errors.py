"""Error taxonomy for dependency graph operations.

Validation errors are raised before anything is written. Partial write
and store errors come from the persistence layer and carry enough
context to tell the user which minion's update failed.
"""

from enum import Enum


class InvalidReason(str, Enum):
    """Why a proposed relationship was rejected."""

    SELF_DEPENDENCY = "self-dependency"
    CYCLE_DETECTED = "cycle-detected"
    CANDIDATE_UNAVAILABLE = "candidate-unavailable"
    NOT_FOUND = "not-found"
    LIMIT_EXCEEDED = "limit-exceeded"


REASON_MESSAGES: dict[InvalidReason, str] = {
    InvalidReason.SELF_DEPENDENCY: "A minion cannot depend on itself",
    InvalidReason.CYCLE_DETECTED: "Circular dependency detected",
    InvalidReason.CANDIDATE_UNAVAILABLE: "Cannot depend on archived or deleted minions",
    InvalidReason.NOT_FOUND: "Minion not found",
    InvalidReason.LIMIT_EXCEEDED: "Maximum dependencies reached",
}


class MinionError(Exception):
    """Base class for all minion graph errors."""


class ValidationError(MinionError):
    """A requested mutation was rejected; nothing was written."""

    reason: InvalidReason = InvalidReason.NOT_FOUND

    def __init__(self, message: str | None = None) -> None:
        self.message = message or REASON_MESSAGES[self.reason]
        super().__init__(self.message)


class SelfDependencyError(ValidationError):
    reason = InvalidReason.SELF_DEPENDENCY


class CycleDetectedError(ValidationError):
    reason = InvalidReason.CYCLE_DETECTED


class CandidateUnavailableError(ValidationError):
    reason = InvalidReason.CANDIDATE_UNAVAILABLE


class NotFoundError(ValidationError):
    reason = InvalidReason.NOT_FOUND


class LimitExceededError(ValidationError):
    reason = InvalidReason.LIMIT_EXCEEDED


_ERRORS_BY_REASON: dict[InvalidReason, type[ValidationError]] = {
    InvalidReason.SELF_DEPENDENCY: SelfDependencyError,
    InvalidReason.CYCLE_DETECTED: CycleDetectedError,
    InvalidReason.CANDIDATE_UNAVAILABLE: CandidateUnavailableError,
    InvalidReason.NOT_FOUND: NotFoundError,
    InvalidReason.LIMIT_EXCEEDED: LimitExceededError,
}


def error_for(reason: InvalidReason, message: str | None = None) -> ValidationError:
    """Build the ValidationError subclass matching a rejection reason."""
    return _ERRORS_BY_REASON[reason](message)


class StoreError(MinionError):
    """The task store failed to complete an operation.

    Attributes:
        operation: Store operation name (list, get, create, update, delete).
        minion_id: Minion the operation targeted, if any.
    """

    def __init__(self, operation: str, minion_id: str | None, message: str) -> None:
        self.operation = operation
        self.minion_id = minion_id
        target = f" {minion_id}" if minion_id else ""
        super().__init__(f"{operation}{target} failed: {message}")


class PartialWriteError(MinionError):
    """One side of a bidirectional edge write succeeded and the other failed.

    The committed half is not rolled back. Run a reconciliation pass to
    rebuild the inverse lists.
    """

    def __init__(self, committed_id: str, failed_id: str, cause: StoreError) -> None:
        self.committed_id = committed_id
        self.failed_id = failed_id
        self.cause = cause
        super().__init__(
            f"Updated {committed_id} but failed to update {failed_id}: {cause}. "
            "Run reconcile to repair back-references."
        )


class ParseError(MinionError, ValueError):
    """A version string is not three dot-separated non-negative integers."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid version string: {value!r}")
