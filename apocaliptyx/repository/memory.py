"""In-memory scenario repository for tests and local runs."""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from apocaliptyx.models import StoredScenario
from apocaliptyx.utils.logger import log_info
from .base import RepositoryError, ScenarioRepository


class InMemoryScenarioRepository(ScenarioRepository):
    """Dict-backed repository preserving insertion order."""

    def __init__(self, scenarios: Optional[Iterable[StoredScenario]] = None, name: str = "memory"):
        super().__init__(name)
        self.scenarios: Dict[str, StoredScenario] = {}
        self._lock = asyncio.Lock()
        for scenario in scenarios or []:
            self.scenarios[scenario.id] = scenario

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryScenarioRepository":
        """Seed a repository from a JSON list of scenario rows."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                rows = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RepositoryError(f"Cannot load scenario fixtures from {path}: {e}", "load") from e

        if not isinstance(rows, list):
            raise RepositoryError(f"Scenario fixtures in {path} must be a JSON list", "load")

        try:
            repo = cls([StoredScenario.from_row(row) for row in rows])
        except (KeyError, TypeError, AttributeError) as e:
            raise RepositoryError(f"Malformed scenario fixture in {path}: {e!r}", "load") from e

        log_info("Loaded scenario fixtures", path=str(path), count=len(repo.scenarios))
        return repo

    async def find_by_hash(
        self, content_hash: str, exclude_id: Optional[str] = None
    ) -> List[StoredScenario]:
        async with self._lock:
            return [
                s for s in self.scenarios.values()
                if s.content_hash == content_hash and s.id != exclude_id
            ]

    async def find_active(
        self, exclude_id: Optional[str] = None, limit: Optional[int] = None
    ) -> List[StoredScenario]:
        async with self._lock:
            active = [
                s for s in self.scenarios.values()
                if not s.is_cancelled and s.id != exclude_id
            ]
        return active[:limit] if limit is not None else active

    async def find_missing_hash(self) -> List[StoredScenario]:
        async with self._lock:
            return [s for s in self.scenarios.values() if s.content_hash is None]

    async def update_by_id(self, scenario_id: str, fields: Dict[str, Any]) -> None:
        async with self._lock:
            scenario = self.scenarios.get(scenario_id)
            if scenario is None:
                raise RepositoryError(f"Scenario {scenario_id} not found", "update")
            # Columns the detector does not model (duplicate_checked, duplicate_of)
            # are kept alongside the record.
            for key, value in fields.items():
                setattr(scenario, key, value)
