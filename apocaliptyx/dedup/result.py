"""Data classes for duplicate detection results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SimilarScenario:
    """An existing scenario resembling the candidate.

    Attributes:
        id: Identifier of the existing scenario.
        title: Its title.
        description: Its description.
        similarity: Integer percentage (0-100).
        status: Its lifecycle status.
        created_at: Its creation timestamp, for display.
        current_price: Current steal price, when known.
        holder_username: Username of the current holder, when known.
    """

    id: str
    title: str
    description: str
    similarity: int
    status: str
    created_at: Optional[str] = None
    current_price: Optional[float] = None
    holder_username: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "similarity": self.similarity,
            "status": self.status,
            "created_at": self.created_at,
        }
        if self.current_price is not None:
            data["current_price"] = self.current_price
        if self.holder_username is not None:
            data["holder_username"] = self.holder_username
        return data


@dataclass
class DuplicateCheckResult:
    """Result of a duplicate check for a candidate scenario.

    Attributes:
        is_duplicate: Whether the candidate should be treated as a duplicate.
        content_hash: Fingerprint computed for the candidate.
        exact_match: Whether the verdict comes from a content-hash match.
        similar_scenarios: Matches, highest similarity first.
        strategy_name: Strategy that produced the verdict, ``None`` for the
            empty fallback.
        candidates_available: ``False`` when the comparison corpus could not be
            fetched and the check degraded to "no duplicates".
    """

    is_duplicate: bool
    content_hash: str
    exact_match: bool = False
    similar_scenarios: List[SimilarScenario] = field(default_factory=list)
    strategy_name: Optional[str] = None
    candidates_available: bool = True

    @property
    def best_similarity(self) -> int:
        return max((s.similarity for s in self.similar_scenarios), default=0)

    def to_dict(self) -> Dict[str, Any]:
        """Caller-facing representation."""
        return {
            "isDuplicate": self.is_duplicate,
            "exactMatch": self.exact_match,
            "similarScenarios": [s.to_dict() for s in self.similar_scenarios],
            "contentHash": self.content_hash,
        }
