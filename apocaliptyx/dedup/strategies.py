"""Individual duplicate-detection strategies.

Each strategy implements the ``DedupStrategy`` protocol: an async ``check``
method that receives the candidate scenario and its content hash and returns
either a ``DuplicateCheckResult`` (a verdict) or ``None`` to let the next
strategy in the chain decide.  Strategies are ordered from cheapest (one
indexed hash lookup) to most expensive (scoring the whole corpus).
"""

from __future__ import annotations

import abc
import asyncio
from typing import Awaitable, List, Optional, TypeVar

from apocaliptyx.config import Config
from apocaliptyx.dedup.fingerprint import same_content
from apocaliptyx.dedup.result import DuplicateCheckResult, SimilarScenario
from apocaliptyx.dedup.text import candidate_score
from apocaliptyx.models import ScenarioCandidate, StoredScenario
from apocaliptyx.repository.base import RepositoryError, ScenarioRepository
from apocaliptyx.utils.logger import (
    log_debug,
    log_duplicate_detection,
    log_info,
    log_repository_failure,
    log_warning,
)

T = TypeVar("T")


async def fetch_with_timeout(awaitable: Awaitable[T], timeout: float) -> T:
    """Await a repository call, turning a timeout into ``asyncio.TimeoutError``."""
    return await asyncio.wait_for(awaitable, timeout=timeout)


# ---------------------------------------------------------------------------
# Base protocol
# ---------------------------------------------------------------------------


class DedupStrategy(abc.ABC):
    """Abstract base for duplicate-detection strategies."""

    def __init__(self, repository: ScenarioRepository, config: Config):
        self.repository = repository
        self.config = config

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short machine-readable name for logs."""

    @abc.abstractmethod
    async def check(
        self, candidate: ScenarioCandidate, content_hash: str
    ) -> Optional[DuplicateCheckResult]:
        """Run the strategy.

        Args:
            candidate: The scenario being checked.
            content_hash: Its precomputed fingerprint.

        Returns:
            A ``DuplicateCheckResult`` when this strategy reaches a verdict,
            ``None`` to defer to the next strategy in the chain.
        """


# ---------------------------------------------------------------------------
# Strategy 1 – Exact content hash (1 indexed lookup)
# ---------------------------------------------------------------------------


class ExactHashMatch(DedupStrategy):
    """Fast path: scenarios whose stored fingerprint equals the candidate's.

    A hash hit is reported as an exact duplicate with similarity 100.  With
    ``dedup_confirm_exact_match`` enabled, hits whose trimmed, lower-cased
    text differs from the candidate are treated as collisions and dropped.
    """

    @property
    def name(self) -> str:
        return "exact_hash_match"

    async def check(
        self, candidate: ScenarioCandidate, content_hash: str
    ) -> Optional[DuplicateCheckResult]:
        try:
            matches = await fetch_with_timeout(
                self.repository.find_by_hash(content_hash, candidate.exclude_id),
                self.config.dedup_fetch_timeout,
            )
        except (RepositoryError, asyncio.TimeoutError) as e:
            log_repository_failure("exact hash lookup", e, content_hash=content_hash)
            return None

        if self.config.dedup_confirm_exact_match:
            confirmed = [
                m for m in matches
                if same_content(candidate.title, candidate.description, m.title, m.description)
            ]
            if len(confirmed) < len(matches):
                log_warning(
                    "Discarded content hash collisions",
                    content_hash=content_hash,
                    collisions=len(matches) - len(confirmed),
                )
            matches = confirmed

        if not matches:
            return None

        log_duplicate_detection(100, matches[0].id, exact=True, match_count=len(matches))
        return DuplicateCheckResult(
            is_duplicate=True,
            exact_match=True,
            content_hash=content_hash,
            similar_scenarios=[
                _to_similar(m, 100) for m in matches[: self.config.dedup_max_results]
            ],
            strategy_name=self.name,
        )


# ---------------------------------------------------------------------------
# Strategy 2 – Similarity scan (1 bulk fetch, scores every active scenario)
# ---------------------------------------------------------------------------


class SimilarityScan(DedupStrategy):
    """Score the candidate against every non-cancelled scenario.

    Scenarios scoring above the inclusion threshold are listed (best first,
    capped); the check is a duplicate when any listed score reaches the
    duplicate threshold.  This strategy always returns a verdict.
    """

    @property
    def name(self) -> str:
        return "similarity_scan"

    async def check(
        self, candidate: ScenarioCandidate, content_hash: str
    ) -> Optional[DuplicateCheckResult]:
        try:
            scenarios = await fetch_with_timeout(
                self.repository.find_active(exclude_id=candidate.exclude_id),
                self.config.dedup_fetch_timeout,
            )
        except (RepositoryError, asyncio.TimeoutError) as e:
            log_repository_failure("candidate fetch", e)
            return DuplicateCheckResult(
                is_duplicate=False,
                content_hash=content_hash,
                strategy_name=self.name,
                candidates_available=False,
            )

        similar = self.score(candidate, scenarios)
        top = similar[: self.config.dedup_max_results]
        is_duplicate = any(
            s.similarity >= self.config.dedup_duplicate_threshold for s in top
        )

        if is_duplicate:
            log_duplicate_detection(top[0].similarity, top[0].id, exact=False)
        else:
            log_debug(
                "No duplicate above threshold",
                compared=len(scenarios),
                similar=len(top),
            )

        return DuplicateCheckResult(
            is_duplicate=is_duplicate,
            content_hash=content_hash,
            similar_scenarios=top,
            strategy_name=self.name,
        )

    def score(
        self, candidate: ScenarioCandidate, scenarios: List[StoredScenario]
    ) -> List[SimilarScenario]:
        """Score and filter scenarios, best first (ties keep fetch order)."""
        similar: List[SimilarScenario] = []
        for scenario in scenarios:
            if scenario.is_cancelled or scenario.id == candidate.exclude_id:
                continue
            score = candidate_score(
                candidate.title,
                candidate.description,
                scenario.title,
                scenario.description,
                title_weight=self.config.dedup_title_weight,
                description_weight=self.config.dedup_description_weight,
            )
            if score > self.config.dedup_inclusion_threshold:
                similar.append(
                    _to_similar(
                        scenario,
                        score,
                        current_price=scenario.current_price or self.config.default_scenario_price,
                        holder_username=scenario.holder_username or self.config.default_holder_label,
                    )
                )

        similar.sort(key=lambda s: s.similarity, reverse=True)
        if similar:
            log_info("Similar scenarios found", count=len(similar), best=similar[0].similarity)
        return similar


def _to_similar(
    scenario: StoredScenario,
    similarity: int,
    current_price: Optional[float] = None,
    holder_username: Optional[str] = None,
) -> SimilarScenario:
    return SimilarScenario(
        id=scenario.id,
        title=scenario.title,
        description=scenario.description,
        similarity=similarity,
        status=scenario.status,
        created_at=scenario.created_at,
        current_price=current_price,
        holder_username=holder_username,
    )
