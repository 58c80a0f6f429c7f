"""Shared domain utilities.

- Result monad for explicit error handling
- Base domain event
"""

from minions.domain.shared.events import DomainEvent
from minions.domain.shared.result import (
    Err,
    Ok,
    Result,
    is_ok,
)

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    "is_ok",
    # Domain events
    "DomainEvent",
]
