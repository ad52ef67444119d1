"""Pytest configuration and fixtures for apocaliptyx-dedup tests."""

import pytest

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import apocaliptyx.api as api_module
import apocaliptyx.config as config_module
from apocaliptyx.config import Config
from apocaliptyx.dedup.fingerprint import compute_content_hash
from apocaliptyx.dedup.service import DuplicateDetectionService
from apocaliptyx.models import StoredScenario
from apocaliptyx.repository.memory import InMemoryScenarioRepository


@pytest.fixture(autouse=True)
def reset_globals():
    """Drop cached configuration and service between tests."""
    yield
    config_module._config = None
    api_module._service = None


@pytest.fixture
def test_config():
    """Configuration with the default thresholds and the memory backend."""
    return Config(
        _env_file=None,
        scenario_backend="memory",
        scenario_fixture_file="",
        supabase_url="",
        supabase_key="",
        dedup_inclusion_threshold=50,
        dedup_duplicate_threshold=70,
        dedup_suggestion_threshold=40,
        dedup_max_results=5,
        dedup_suggestion_min_length=5,
        dedup_suggestion_sample_size=50,
        dedup_title_weight=0.7,
        dedup_description_weight=0.3,
        dedup_fetch_timeout=1.0,
        dedup_confirm_exact_match=False,
        default_scenario_price=11,
        default_holder_label="creador",
        log_level="INFO",
    )


def make_scenario(scenario_id, title, description="", status="ACTIVE", hashed=True, **kwargs):
    """Build a stored scenario, hashed the way the web client stores it."""
    return StoredScenario(
        id=scenario_id,
        title=title,
        description=description,
        status=status,
        created_at=kwargs.pop("created_at", "2025-01-15T10:00:00Z"),
        content_hash=compute_content_hash(title, description) if hashed else None,
        **kwargs,
    )


@pytest.fixture
def scenario_factory():
    return make_scenario


@pytest.fixture
def sample_scenarios():
    """A small corpus covering active, cancelled and legacy rows."""
    return [
        make_scenario("sc-1", "Bitcoin reaches 100k", "", current_price=25, holder_username="satoshi"),
        make_scenario("sc-2", "Bitcoin hits ATH", "New all time high this year"),
        make_scenario("sc-3", "Soccer match today", "Real Madrid vs Barcelona"),
        make_scenario("sc-4", "Bitcoin reaches 100k in 2025", "Old duplicate", status="CANCELLED"),
    ]


@pytest.fixture
def memory_repository(sample_scenarios):
    return InMemoryScenarioRepository(sample_scenarios)


@pytest.fixture
def service(memory_repository, test_config):
    return DuplicateDetectionService(repository=memory_repository, config=test_config)


@pytest.fixture
def service_factory(test_config):
    """Build a service around an arbitrary repository."""
    def _build(repository):
        return DuplicateDetectionService(repository=repository, config=test_config)
    return _build
