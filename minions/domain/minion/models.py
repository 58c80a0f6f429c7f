"""Minion domain models.

Pure domain models for the minion set. Uses Pydantic for serialization;
Python code uses snake_case field names while JSON documents keep the
camelCase keys the web client writes (``parentId``, ``dependentOn``,
``currentVersion`` ...). Both spellings are accepted on input.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class MinionStatus(str, Enum):
    """Lifecycle status of a minion."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"


class Priority(str, Enum):
    """Priority of a minion."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Display ordering for option lists, most pressing first
PRIORITY_ORDER: dict[Priority, int] = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MinionVersion(_CamelModel):
    """Three-part version of a minion.

    Components are non-negative integers stored as strings. ``user`` is
    bumped by hand; ``major`` and ``minor`` are bumped by edits.
    """

    user: str = "0"
    major: str = "0"
    minor: str = "0"

    @field_validator("user", "major", "minor", mode="before")
    @classmethod
    def _coerce_int(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class Dependency(_CamelModel):
    """A pinned-version edge between two minions.

    In ``Minion.dependencies`` the record reads "``minion_id`` depends on
    ``id``". The mirrored record in the target's ``dependent_on`` has the
    roles swapped: ``id`` is the depending minion and ``minion_id`` the
    owner of the list.

    Attributes:
        id: The minion on the other end of the edge.
        minion_id: The minion whose list holds this record.
        version: Pinned ``user.major.minor`` version.
        current_version: Snapshot of the target's version when the edge
            was added or last re-pinned.
    """

    id: str
    minion_id: str
    version: str = "0.0.0"
    current_version: str = "0.0.0"


class Recurring(_CamelModel):
    """Recurrence rule for repeating minions."""

    frequency: Literal["daily", "weekly", "monthly", "yearly"]
    interval: int = 1
    end_date: datetime | None = None
    occurrences: int | None = None


class Comment(_CamelModel):
    text: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Minion(_CamelModel):
    """A task in the minion set.

    ``children`` is the denormalized inverse of ``parent_id`` and
    ``dependent_on`` the denormalized inverse of ``dependencies``. The
    forward fields are authoritative; see ``reconcile`` for rebuilding
    the inverses.
    """

    id: str
    type: str = "task"
    title: str = ""
    description: str = ""
    status: MinionStatus = MinionStatus.NOT_STARTED
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    estimated_time: float | None = None
    time_spent: float = 0
    tags: list[str] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)
    parent_id: str | None = None
    children: list[str] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)
    dependent_on: list[Dependency] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    version: MinionVersion = Field(default_factory=MinionVersion)
    recurring: Recurring | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    deleted_at: datetime | None = None
    archived: bool = False
    favorite: bool = False

    def is_available(self) -> bool:
        """Check if the minion may take part in new relationships.

        Archived and soft-deleted minions are excluded from every
        dependency and parent candidate pool.
        """
        return not self.archived and self.deleted_at is None

    def dependency_ids(self) -> list[str]:
        return [dep.id for dep in self.dependencies]

    def find_dependency(self, minion_id: str) -> Dependency | None:
        for dep in self.dependencies:
            if dep.id == minion_id:
                return dep
        return None


def index_minions(minions: list[Minion]) -> dict[str, Minion]:
    """Index a minion snapshot by id."""
    return {minion.id: minion for minion in minions}
