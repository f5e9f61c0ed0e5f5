"""
Tests for LD+JSON structured data extraction.
"""

import json

import pytest
from bs4 import BeautifulSoup

from larder.recipe_import import ExtractionSource, MalformedStructuredData
from larder.recipe_import.json_ld import extract_from_json_ld, find_recipes, parse_json_ld_block


def _page(*blocks) -> BeautifulSoup:
    scripts = "".join(
        f'<script type="application/ld+json">{block if isinstance(block, str) else json.dumps(block)}</script>'
        for block in blocks
    )
    return BeautifulSoup(f"<html><head>{scripts}</head><body></body></html>", "lxml")


class TestParseJsonLdBlock:
    def test_valid_json(self):
        assert parse_json_ld_block('{"@type": "Recipe"}') == {"@type": "Recipe"}

    def test_repairs_concatenated_objects(self):
        data = parse_json_ld_block('{"@type": "Organization"}{"@type": "Recipe", "name": "Soup"}')
        assert isinstance(data, list)
        assert data[1]["name"] == "Soup"

    def test_raw_newlines_and_tabs_in_strings(self):
        data = parse_json_ld_block('{"@type": "Recipe", "description": "Line one\nLine two\tend"}')
        assert data["description"] == "Line one\nLine two\tend"

    def test_repairs_concatenated_objects_with_raw_newlines(self):
        data = parse_json_ld_block('{"@type": "Organization"}{"@type": "Recipe", "name": "Soup\nof the day"}')
        assert data[1]["name"] == "Soup\nof the day"

    def test_unrepairable_raises(self):
        with pytest.raises(MalformedStructuredData):
            parse_json_ld_block("{not json")


class TestFindRecipes:
    def test_graph_container(self):
        data = {"@graph": [{"@type": "WebPage"}, {"@type": "Recipe", "name": "Soup"}]}
        assert [r["name"] for r in find_recipes(data)] == ["Soup"]

    def test_type_list(self):
        data = [{"@type": ["Recipe", "NewsArticle"], "name": "Stew"}]
        assert [r["name"] for r in find_recipes(data)] == ["Stew"]

    def test_non_recipe_ignored(self):
        assert find_recipes({"@type": "Organization"}) == []


class TestExtractFromJsonLd:
    """Tests for field extraction across blocks."""

    def test_skips_non_recipe_block(self):
        soup = _page(
            {"@type": "Organization", "name": "Test Kitchen"},
            {
                "@type": "Recipe",
                "name": "Lentil Soup",
                "recipeYield": "4 servings",
                "prepTime": "PT15M",
                "cookTime": "PT1H30M",
            },
        )
        results = extract_from_json_ld(soup)
        assert results["title"].value == "Lentil Soup"
        assert results["servings"].value == "4"
        assert results["prep_time"].value == "15"
        assert results["cook_time"].value == "90"
        assert results["title"].source is ExtractionSource.LD_JSON
        assert results["title"].selector is None

    def test_full_recipe(self, ld_json_html):
        results = extract_from_json_ld(BeautifulSoup(ld_json_html, "lxml"))
        assert results["ingredients"].value[0] == "8 oz spaghetti"
        assert len(results["instructions"].value) == 3
        assert results["image"].value == "https://example.com/pasta.jpg"
        assert results["cuisine"].value == "Italian"
        assert results["nutrition"].value == ["calories: 450 kcal", "protein: 14 g"]

    def test_first_non_empty_value_wins(self):
        soup = _page(
            {"@type": "Recipe", "name": "First"},
            {"@type": "Recipe", "name": "Second", "recipeIngredient": ["1 cup rice"]},
        )
        results = extract_from_json_ld(soup)
        assert results["title"].value == "First"
        assert results["ingredients"].value == ["1 cup rice"]

    def test_filters_invalid_ingredients(self):
        soup = _page(
            {"@type": "Recipe", "recipeIngredient": ["Ingredients", "2 cups flour", "2 cups flour"]}
        )
        assert extract_from_json_ld(soup)["ingredients"].value == ["2 cups flour"]

    def test_empty_ingredients_not_reported(self):
        soup = _page({"@type": "Recipe", "name": "Soup", "recipeIngredient": []})
        assert "ingredients" not in extract_from_json_ld(soup)

    def test_malformed_block_skipped(self):
        soup = _page("{not json", {"@type": "Recipe", "name": "Soup"})
        assert extract_from_json_ld(soup)["title"].value == "Soup"

    def test_no_blocks(self):
        soup = BeautifulSoup("<html><body><h1>Hi</h1></body></html>", "lxml")
        assert extract_from_json_ld(soup) == {}
