"""Result monad for explicit error handling in domain operations.

Validators return a Result instead of raising, so callers that only
need a yes/no answer (candidate lists) and callers that must surface a
reason (the dependency manager) share one code path.

Example usage:
    >>> def check_not_self(owner_id: str, candidate_id: str) -> Result[None, str]:
    ...     if owner_id == candidate_id:
    ...         return Err("self-dependency")
    ...     return Ok(None)
    ...
    >>> result = check_not_self("a", "b")
    >>> is_ok(result)
    True
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error.

    Attributes:
        error: The error value of type E.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Err[E]) -> bool:
    """Check if a result is successful."""
    return isinstance(result, Ok)

