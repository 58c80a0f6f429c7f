"""Base domain event infrastructure.

Events are immutable records of something that happened to the minion
set. The task store publishes them to subscribers after each committed
mutation, so views can refresh without polling.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all domain events.

    Each event has a unique ID and a UTC timestamp of when it occurred.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}
