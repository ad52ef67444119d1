"""Live "did you mean" suggestions while a title is being typed."""

from __future__ import annotations

import asyncio
from typing import List, Optional

from apocaliptyx.config import Config, get_config
from apocaliptyx.dedup.result import SimilarScenario
from apocaliptyx.dedup.strategies import fetch_with_timeout
from apocaliptyx.dedup.text import levenshtein_similarity, to_percent
from apocaliptyx.repository.base import RepositoryError, ScenarioRepository
from apocaliptyx.utils.logger import log_debug, log_repository_failure


class SuggestionFeed:
    """Title-only Levenshtein matching against a bounded sample of scenarios.

    Favors latency over completeness: only ``dedup_suggestion_sample_size``
    scenarios are fetched, and descriptions are ignored.
    """

    def __init__(self, repository: ScenarioRepository, config: Optional[Config] = None):
        self.repository = repository
        self.config = config or get_config()

    async def get_suggestions(self, partial_title: Optional[str]) -> List[SimilarScenario]:
        partial_title = partial_title or ""
        if len(partial_title) < self.config.dedup_suggestion_min_length:
            return []

        try:
            scenarios = await fetch_with_timeout(
                self.repository.find_active(limit=self.config.dedup_suggestion_sample_size),
                self.config.dedup_fetch_timeout,
            )
        except (RepositoryError, asyncio.TimeoutError) as e:
            log_repository_failure("suggestion fetch", e)
            return []

        suggestions: List[SimilarScenario] = []
        for scenario in scenarios:
            if scenario.is_cancelled:
                continue
            similarity = to_percent(levenshtein_similarity(partial_title, scenario.title))
            if similarity > self.config.dedup_suggestion_threshold:
                suggestions.append(
                    SimilarScenario(
                        id=scenario.id,
                        title=scenario.title,
                        description=scenario.description,
                        similarity=similarity,
                        status=scenario.status,
                        created_at=scenario.created_at,
                    )
                )

        suggestions.sort(key=lambda s: s.similarity, reverse=True)
        log_debug("Suggestions computed", sampled=len(scenarios), matched=len(suggestions))
        return suggestions[: self.config.dedup_max_results]
