"""Scenario records as seen by the duplicate detector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

CANCELLED_STATUS = "CANCELLED"


@dataclass
class ScenarioCandidate:
    """A scenario about to be created (or edited) that is checked for duplicates.

    ``exclude_id`` names the record being edited so it is not matched
    against itself.
    """

    title: str
    description: str = ""
    exclude_id: Optional[str] = None

    def __post_init__(self):
        self.title = self.title or ""
        self.description = self.description or ""


@dataclass
class StoredScenario:
    """A persisted scenario, flattened by the repository gateway.

    Attributes:
        id: Opaque unique identifier.
        title: Human-authored prediction title.
        description: Free-text description, ``""`` when the row has none.
        status: Lifecycle status (``CANCELLED`` rows are never compared).
        created_at: Creation timestamp as returned by the database.
        content_hash: Fingerprint of (title, description); ``None`` until backfilled.
        current_price: Current steal price, when known.
        holder_username: Username of the current holder, already unwrapped.
    """

    id: str
    title: str
    description: str = ""
    status: str = "ACTIVE"
    created_at: Optional[str] = None
    content_hash: Optional[str] = None
    current_price: Optional[float] = None
    holder_username: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return (self.status or "").upper() == CANCELLED_STATUS

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "StoredScenario":
        """Build a record from a database row, unwrapping the ``holder`` embed.

        The holder join comes back as an object or as a one-element list
        depending on how the relationship cardinality is inferred.
        """
        holder_username = row.get("holder_username")
        holder = row.get("holder")
        if isinstance(holder, list):
            holder = holder[0] if holder else None
        if isinstance(holder, dict) and holder.get("username"):
            holder_username = holder["username"]

        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            description=row.get("description") or "",
            status=row.get("status") or "",
            created_at=row.get("created_at"),
            content_hash=row.get("content_hash"),
            current_price=row.get("current_price"),
            holder_username=holder_username,
        )
