"""
Tests for the recipe import service (selector lookup and learning).
"""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from larder.recipe_import import (
    DomainSelectorSet,
    InMemoryDomainSelectorRepository,
    InvalidRecipeUrl,
    RetrievalFailure,
    import_recipe,
)

PANCAKES_URL = "https://www.pancakes.example.com/recipes/buttermilk"
PASTA_URL = "https://pasta.example.com/weeknight-pasta"


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


class TestImportRecipe:
    """Tests for selector learning across imports."""

    def test_learns_selectors_on_first_import(self, repository, selector_html):
        outcome = run(import_recipe(PANCAKES_URL, selector_html, repository=repository))

        assert outcome.used_custom_selectors is False
        assert outcome.learned_selectors["ingredients"] == ".ingredients li"
        assert outcome.learned_selectors["title"] == 'h1[class*="recipe"]'
        assert "nutrition" not in outcome.learned_selectors
        assert "cuisine" not in outcome.learned_selectors

        saved = run(repository.find_domain_selector("pancakes.example.com"))
        assert saved.ingredients == ".ingredients li"

    def test_uses_learned_selectors_on_second_import(self, repository, selector_html):
        run(import_recipe(PANCAKES_URL, selector_html, repository=repository))
        outcome = run(import_recipe(PANCAKES_URL, selector_html, repository=repository))

        assert outcome.used_custom_selectors is True
        assert outcome.learned_selectors == {}
        assert outcome.data.title == "Buttermilk Pancakes"
        assert outcome.results.ingredients.selector == ".ingredients li"

    def test_existing_set_is_not_overwritten(self, selector_html):
        repository = InMemoryDomainSelectorRepository(
            [DomainSelectorSet(domain="pancakes.example.com", title="h1")]
        )
        repository.upsert_domain_selectors = AsyncMock()

        outcome = run(import_recipe(PANCAKES_URL, selector_html, repository=repository))

        assert outcome.used_custom_selectors is True
        assert outcome.results.title.selector == "h1"
        repository.upsert_domain_selectors.assert_not_called()

    def test_nothing_learned_from_structured_data(self, repository, ld_json_html):
        outcome = run(import_recipe(PASTA_URL, ld_json_html, repository=repository))

        assert outcome.learned_selectors == {}
        assert outcome.stats.from_ld_json == 10
        assert run(repository.find_domain_selector("pasta.example.com")) is None

    def test_fetches_when_no_html(self, repository, mock_http, fetch_settings, ld_json_html):
        client = mock_http(lambda request: httpx.Response(200, text=ld_json_html))
        outcome = run(
            import_recipe(PASTA_URL, repository=repository, client=client, settings=fetch_settings)
        )
        assert outcome.data.title == "Weeknight Pasta"
        assert outcome.stats.successful == 10

    def test_retrieval_failure_propagates(self, repository, mock_http, fetch_settings):
        client = mock_http(lambda request: httpx.Response(403))
        with pytest.raises(RetrievalFailure):
            run(import_recipe(PASTA_URL, repository=repository, client=client, settings=fetch_settings))

    def test_invalid_url(self, repository, selector_html):
        with pytest.raises(InvalidRecipeUrl):
            run(import_recipe("pancakes.example.com/recipes", selector_html, repository=repository))
