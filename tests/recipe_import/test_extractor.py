"""
Tests for recipe extraction orchestration.
"""

import asyncio

import httpx
import pytest

from larder.recipe_import import (
    ExtractionSource,
    InvalidRecipeUrl,
    RecipeData,
    scrape_recipe,
    scrape_recipe_from_html,
)
from larder.recipe_import.extractor import _validate_url

PASTA_URL = "https://pasta.example.com/weeknight-pasta"
PANCAKES_URL = "https://pancakes.example.com/recipes/buttermilk"


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


class TestScrapeRecipeFromHtml:
    """Extraction from already-fetched HTML."""

    def test_ld_json_page(self, ld_json_html):
        outcome = scrape_recipe_from_html(ld_json_html, PASTA_URL)
        data = outcome.data

        assert isinstance(data, RecipeData)
        assert data.title == "Weeknight Pasta"
        assert data.description == "Garlicky tomato pasta."
        assert data.source_url == PASTA_URL
        assert data.prep_time == "10"
        assert data.cook_time == "20"
        assert data.servings == "4"
        assert data.cuisine == "Italian"
        assert data.image_url == "https://example.com/pasta.jpg"
        assert data.nutrition == {"calories": "450 kcal", "protein": "14 g"}
        assert len(data.instructions) == 3

    def test_ingredients_are_normalized(self, ld_json_html):
        data = scrape_recipe_from_html(ld_json_html, PASTA_URL).data
        assert data.ingredients == [
            "8 oz spaghetti",
            "6 tsp olive oil",
            "3 cloves garlic, minced",
            "1 can crushed tomatoes (14 oz can)",
            "salt to taste",
        ]

    def test_tablespoons_keep_their_quantity(self):
        html = (
            '<script type="application/ld+json">'
            '{"@type": "Recipe", "name": "Toast", "recipeIngredient": ["3 tbsp butter", "5 tbsp sugar"]}'
            "</script>"
        )
        data = scrape_recipe_from_html(html, PASTA_URL).data
        assert data.ingredients == ["9 tsp butter", "15 tsp sugar"]

    def test_ld_json_fields_take_precedence(self, ld_json_html):
        results = scrape_recipe_from_html(ld_json_html, PASTA_URL).results
        assert results.title.source is ExtractionSource.LD_JSON
        assert results.title.selector is None
        stats = results.stats()
        assert stats.total == 10
        assert stats.successful == 10
        assert stats.from_ld_json == 10
        assert stats.from_selectors == 0

    def test_selector_page(self, selector_html):
        outcome = scrape_recipe_from_html(selector_html, PANCAKES_URL)
        data = outcome.data

        assert data.title == "Buttermilk Pancakes"
        assert data.ingredients == ["96 tsp flour", "6 tsp sugar", "96 tsp buttermilk", "2 eggs"]
        assert data.servings == "4"
        assert data.cuisine == ""
        assert data.image_url == "https://pancakes.example.com/images/pancakes.jpg"
        assert data.nutrition == {"calories": "320 kcal", "protein": "9 g"}

        stats = outcome.results.stats()
        assert stats.successful == 9
        assert stats.from_selectors == 9

    def test_custom_selectors(self):
        html = '<h2 class="dish">Fried Rice</h2><div class="ingr-box"><p>1 cup rice</p><p>2 eggs</p></div>'
        outcome = scrape_recipe_from_html(
            html, PANCAKES_URL, {"title": [".dish"], "ingredients": [".ingr-box p"]}
        )
        assert outcome.data.title == "Fried Rice"
        assert outcome.data.ingredients == ["48 tsp rice", "2 eggs"]
        assert outcome.results.ingredients.selector == ".ingr-box p"

    def test_empty_page(self):
        outcome = scrape_recipe_from_html("<html><body></body></html>", PANCAKES_URL)
        assert outcome.data.title == ""
        assert outcome.data.ingredients == []
        assert outcome.data.nutrition is None
        assert outcome.results.stats().successful == 0

    def test_normalization_failure_keeps_raw_lines(self, selector_html, monkeypatch):
        def broken(lines, options):
            raise RuntimeError("boom")

        monkeypatch.setattr("larder.recipe_import.extractor.normalize_ingredients", broken)
        data = scrape_recipe_from_html(selector_html, PANCAKES_URL).data
        assert data.ingredients[0] == "2 cups flour"

    def test_invalid_url(self, ld_json_html):
        with pytest.raises(InvalidRecipeUrl):
            scrape_recipe_from_html(ld_json_html, "pasta.example.com")


class TestScrapeRecipe:
    """Fetch plus extraction."""

    def test_fetches_and_extracts(self, mock_http, fetch_settings, ld_json_html):
        client = mock_http(lambda request: httpx.Response(200, text=ld_json_html))
        outcome = run(scrape_recipe(PASTA_URL, client=client, settings=fetch_settings))
        assert outcome.data.title == "Weeknight Pasta"

    def test_amp_fallback(self, mock_http, fetch_settings, selector_html):
        requested = []

        def handler(request):
            requested.append(request.url)
            if request.url.path.endswith("/amp"):
                return httpx.Response(200, text=selector_html)
            return httpx.Response(403)

        outcome = run(scrape_recipe(PANCAKES_URL, client=mock_http(handler), settings=fetch_settings))
        assert outcome.data.title == "Buttermilk Pancakes"
        assert outcome.data.source_url == PANCAKES_URL
        assert any(url.path.endswith("/amp") for url in requested)
        assert not any(url.host == "reader.test" for url in requested)

    def test_readable_text_fallback(self, mock_http, fetch_settings, readable_text):
        def handler(request):
            if request.url.host == "reader.test":
                return httpx.Response(200, text=readable_text)
            return httpx.Response(403)

        outcome = run(scrape_recipe(PANCAKES_URL, client=mock_http(handler), settings=fetch_settings))
        assert outcome.data.title == "Simple Pancakes"
        assert outcome.data.ingredients == ["48 tsp flour", "2 eggs", "48 tsp milk"]
        assert len(outcome.data.instructions) == 2
        assert outcome.results.ingredients.source is ExtractionSource.SELECTOR
        assert outcome.results.ingredients.selector is None

    def test_invalid_url_not_fetched(self, mock_http, fetch_settings):
        requested = []

        def handler(request):
            requested.append(request)
            return httpx.Response(200, text="<html></html>")

        with pytest.raises(InvalidRecipeUrl):
            run(scrape_recipe("ftp://site.example.com/r", client=mock_http(handler), settings=fetch_settings))
        assert requested == []


class TestValidateUrl:
    """Tests for URL validation."""

    def test_valid_https_url(self):
        assert _validate_url("https://example.com/recipe") is None

    def test_valid_http_url(self):
        assert _validate_url("http://example.com/recipe") is None

    def test_missing_protocol(self):
        error = _validate_url("example.com/recipe")
        assert error is not None
        assert "http" in error.lower()

    def test_empty_url(self):
        assert _validate_url("") is not None

    def test_none_url(self):
        assert _validate_url(None) is not None

    def test_whitespace_only(self):
        assert _validate_url("   ") is not None
