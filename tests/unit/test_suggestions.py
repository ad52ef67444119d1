"""Unit tests for the live title suggestion feed."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from apocaliptyx.dedup.suggestions import SuggestionFeed
from apocaliptyx.repository.base import RepositoryError, ScenarioRepository
from apocaliptyx.repository.memory import InMemoryScenarioRepository

pytestmark = [pytest.mark.unit, pytest.mark.similarity]


class TestSuggestionFeed:
    """Test title-only suggestions."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("partial", [None, "", "Bitc", "    "])
    async def test_short_input_skips_repository(self, partial, test_config):
        repo = MagicMock(spec=ScenarioRepository)
        repo.find_active = AsyncMock(return_value=[])

        assert await SuggestionFeed(repo, test_config).get_suggestions(partial) == []
        repo.find_active.assert_not_called()

    @pytest.mark.asyncio
    async def test_matches_title_only(self, scenario_factory, test_config):
        repo = InMemoryScenarioRepository([
            scenario_factory("sc-1", "Bitcoin hits ATH", "Long description that is ignored"),
            scenario_factory("sc-2", "Soccer match today", ""),
        ])
        results = await SuggestionFeed(repo, test_config).get_suggestions("Bitcoin")

        assert [s.id for s in results] == ["sc-1"]
        assert results[0].similarity == 44

    @pytest.mark.asyncio
    async def test_sorted_best_first(self, memory_repository, test_config):
        results = await SuggestionFeed(memory_repository, test_config).get_suggestions("Bitcoin hits")

        assert [(s.id, s.similarity) for s in results] == [("sc-2", 75), ("sc-1", 45)]

    @pytest.mark.asyncio
    async def test_no_display_fallbacks(self, memory_repository, test_config):
        results = await SuggestionFeed(memory_repository, test_config).get_suggestions("Soccer match")

        [match] = results
        assert match.id == "sc-3"
        assert match.similarity == 67
        assert match.current_price is None
        assert match.holder_username is None
        assert "current_price" not in match.to_dict()

    @pytest.mark.asyncio
    async def test_samples_bounded_corpus(self, test_config):
        repo = MagicMock(spec=ScenarioRepository)
        repo.find_active = AsyncMock(return_value=[])

        await SuggestionFeed(repo, test_config).get_suggestions("Bitcoin")
        repo.find_active.assert_awaited_once_with(limit=50)

    @pytest.mark.asyncio
    async def test_capped_at_max_results(self, scenario_factory, test_config):
        repo = InMemoryScenarioRepository(
            [scenario_factory(f"sc-{i}", f"Bitcoin {i}", "") for i in range(10)]
        )
        results = await SuggestionFeed(repo, test_config).get_suggestions("Bitcoin")
        assert len(results) == 5

    @pytest.mark.asyncio
    async def test_repository_failure_returns_empty(self, test_config):
        repo = MagicMock(spec=ScenarioRepository)
        repo.find_active = AsyncMock(side_effect=RepositoryError("db down", "find_active"))

        assert await SuggestionFeed(repo, test_config).get_suggestions("Bitcoin reaches") == []
