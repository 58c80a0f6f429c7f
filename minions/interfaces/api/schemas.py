"""Request/Response schemas for the Minions API.

These Pydantic models define the API contract for request bodies.
Responses reuse the domain models directly.
"""

from typing import Optional

from pydantic import BaseModel


class AddDependencyRequest(BaseModel):
    """Request to add a dependency."""

    candidate_id: str
    max_dependencies: Optional[int] = None


class ReplaceDependenciesRequest(BaseModel):
    """Request to replace a minion's whole dependency list."""

    dependencies: list[str]


class ChangeVersionRequest(BaseModel):
    """Request to re-pin a dependency."""

    version: str


class SetParentRequest(BaseModel):
    parent_id: Optional[str] = None
