"""Single entry point used by the scenario-creation workflow."""

from __future__ import annotations

from typing import List, Optional

from apocaliptyx.config import Config, get_config
from apocaliptyx.dedup.detector import DuplicateDetector
from apocaliptyx.dedup.fingerprint import compute_content_hash
from apocaliptyx.dedup.maintenance import HashMaintenance
from apocaliptyx.dedup.result import DuplicateCheckResult, SimilarScenario
from apocaliptyx.dedup.suggestions import SuggestionFeed
from apocaliptyx.repository import ScenarioRepository, create_repository


class DuplicateDetectionService:
    """Wires a repository into the detector, suggestion feed and hash maintenance.

    Args:
        repository: Scenario store; defaults to the backend selected by
            ``SCENARIO_BACKEND``.
        config: Settings; defaults to ``get_config()``.
    """

    def __init__(
        self,
        repository: Optional[ScenarioRepository] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or get_config()
        self.repository = repository if repository is not None else create_repository(self.config)
        self.detector = DuplicateDetector(self.repository, self.config)
        self.suggestions = SuggestionFeed(self.repository, self.config)
        self.maintenance = HashMaintenance(self.repository, self.config)

    @staticmethod
    def generate_content_hash(title: str, description: Optional[str] = "") -> str:
        return compute_content_hash(title, description)

    async def check_for_duplicates(
        self, title: str, description: Optional[str] = "", exclude_id: Optional[str] = None
    ) -> DuplicateCheckResult:
        return await self.detector.check(title, description, exclude_id)

    async def get_suggestions(self, partial_title: str) -> List[SimilarScenario]:
        return await self.suggestions.get_suggestions(partial_title)

    async def update_content_hash(
        self, scenario_id: str, title: str, description: Optional[str] = ""
    ) -> bool:
        return await self.maintenance.update_content_hash(scenario_id, title, description)

    async def mark_as_duplicate(self, scenario_id: str, original_id: str) -> bool:
        return await self.maintenance.mark_as_duplicate(scenario_id, original_id)

    async def update_all_hashes(self) -> int:
        return await self.maintenance.update_all_hashes()
