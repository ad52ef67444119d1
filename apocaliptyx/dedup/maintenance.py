"""Keeping stored content fingerprints current."""

from __future__ import annotations

import asyncio
from typing import Optional

from apocaliptyx.config import Config, get_config
from apocaliptyx.dedup.fingerprint import compute_content_hash
from apocaliptyx.dedup.strategies import fetch_with_timeout
from apocaliptyx.models import CANCELLED_STATUS
from apocaliptyx.repository.base import RepositoryError, ScenarioRepository
from apocaliptyx.utils.logger import log_info, log_repository_failure


class HashMaintenance:
    """Writes fingerprints and duplicate markers back to the scenario store.

    Every operation reports failure through its return value and the log;
    none of them raise on repository errors.
    """

    def __init__(self, repository: ScenarioRepository, config: Optional[Config] = None):
        self.repository = repository
        self.config = config or get_config()

    async def update_content_hash(
        self, scenario_id: str, title: str, description: Optional[str] = ""
    ) -> bool:
        """Store the fingerprint of *title*/*description* and flag the row as checked."""
        content_hash = compute_content_hash(title, description)
        try:
            await self.repository.update_by_id(
                scenario_id,
                {"content_hash": content_hash, "duplicate_checked": True},
            )
        except RepositoryError as e:
            log_repository_failure("content hash update", e, scenario_id=scenario_id)
            return False
        return True

    async def mark_as_duplicate(self, scenario_id: str, original_id: str) -> bool:
        """Point *scenario_id* at *original_id* and cancel it."""
        try:
            await self.repository.update_by_id(
                scenario_id,
                {"duplicate_of": original_id, "status": CANCELLED_STATUS},
            )
        except RepositoryError as e:
            log_repository_failure("duplicate marking", e, scenario_id=scenario_id, original_id=original_id)
            return False

        log_info("Scenario marked as duplicate", scenario_id=scenario_id, original_id=original_id)
        return True

    async def update_all_hashes(self) -> int:
        """Backfill fingerprints for every scenario lacking one.

        Returns:
            Number of scenarios successfully updated.  Re-running only
            touches scenarios still missing a hash.
        """
        try:
            scenarios = await fetch_with_timeout(
                self.repository.find_missing_hash(),
                self.config.dedup_fetch_timeout,
            )
        except (RepositoryError, asyncio.TimeoutError) as e:
            log_repository_failure("backfill fetch", e)
            return 0

        updated = 0
        for scenario in scenarios:
            if await self.update_content_hash(scenario.id, scenario.title, scenario.description or ""):
                updated += 1

        log_info("Content hash backfill finished", pending=len(scenarios), updated=updated)
        return updated
