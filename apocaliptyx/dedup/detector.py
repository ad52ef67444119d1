"""Orchestrator for the duplicate-detection chain.

The ``DuplicateDetector`` runs strategies in order from cheapest to most
expensive and returns the first verdict.  The exact-hash lookup must finish
before the corpus fetch is issued, since a hash hit makes the fetch
unnecessary.
"""

from __future__ import annotations

from typing import List, Optional

from apocaliptyx.config import Config, get_config
from apocaliptyx.dedup.fingerprint import compute_content_hash
from apocaliptyx.dedup.result import DuplicateCheckResult
from apocaliptyx.dedup.strategies import DedupStrategy, ExactHashMatch, SimilarityScan
from apocaliptyx.models import ScenarioCandidate
from apocaliptyx.repository.base import ScenarioRepository
from apocaliptyx.utils.logger import log_debug


def build_default_strategies(
    repository: ScenarioRepository, config: Config
) -> List[DedupStrategy]:
    """Build the default ordered chain of dedup strategies.

    The order matters, cheapest first:
      1. ExactHashMatch  – 1 indexed lookup
      2. SimilarityScan  – 1 bulk fetch + scoring every active scenario
    """
    return [
        ExactHashMatch(repository, config),
        SimilarityScan(repository, config),
    ]


class DuplicateDetector:
    """Orchestrate duplicate detection through a chain of strategies.

    Args:
        repository: Gateway to the stored scenarios.
        config: Settings; defaults to ``get_config()``.
        strategies: Ordered list of strategies to run.  Defaults to
            ``build_default_strategies()`` if *None*.

    Usage::

        detector = DuplicateDetector(repository)
        result = await detector.check("Bitcoin reaches 100k", "Price prediction")
        if result.exact_match:
            # block submission
            ...
    """

    def __init__(
        self,
        repository: ScenarioRepository,
        config: Optional[Config] = None,
        strategies: Optional[List[DedupStrategy]] = None,
    ):
        self.repository = repository
        self.config = config or get_config()
        self.strategies = (
            strategies
            if strategies is not None
            else build_default_strategies(repository, self.config)
        )

    async def check(
        self,
        title: str,
        description: Optional[str] = "",
        exclude_id: Optional[str] = None,
    ) -> DuplicateCheckResult:
        """Run each strategy in order; return the first verdict.

        Args:
            title: Candidate title.
            description: Candidate description (may be empty).
            exclude_id: Id of the scenario being edited, never matched.

        Returns:
            ``DuplicateCheckResult``.  Repository failures never propagate:
            they degrade to a non-duplicate result.
        """
        candidate = ScenarioCandidate(title=title, description=description, exclude_id=exclude_id)
        content_hash = compute_content_hash(candidate.title, candidate.description)

        log_debug(
            "Starting duplicate detection chain",
            strategy_count=len(self.strategies),
            content_hash=content_hash,
        )

        for strategy in self.strategies:
            result = await strategy.check(candidate, content_hash)
            if result is not None:
                return result

        log_debug("No strategy reached a verdict")
        return DuplicateCheckResult(is_duplicate=False, content_hash=content_hash)
