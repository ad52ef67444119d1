"""Scenario repositories the duplicate detector reads candidates through.

``create_repository`` picks the backend named by ``SCENARIO_BACKEND``.
"""

from typing import Optional

from apocaliptyx.config import Config, get_config
from apocaliptyx.utils.logger import log_info
from .base import RepositoryError, ScenarioRepository
from .memory import InMemoryScenarioRepository
from .supabase import SupabaseScenarioRepository


def create_repository(config: Optional[Config] = None) -> ScenarioRepository:
    """Create the repository backend selected in configuration."""
    config = config or get_config()
    backend_type = config.scenario_backend

    if backend_type == "memory":
        if config.scenario_fixture_file:
            repo = InMemoryScenarioRepository.from_json_file(config.scenario_fixture_file)
        else:
            repo = InMemoryScenarioRepository()
    else:
        repo = SupabaseScenarioRepository(
            url=config.supabase_url,
            key=config.supabase_key,
            table=config.scenarios_table,
            timeout=config.supabase_timeout,
        )

    log_info("Scenario repository created", backend=repo.name)
    return repo


__all__ = [
    "RepositoryError",
    "ScenarioRepository",
    "InMemoryScenarioRepository",
    "SupabaseScenarioRepository",
    "create_repository",
]
