"""JSON-LD/Schema.org structured data extraction."""

import json
import logging
import re

from bs4 import BeautifulSoup

from .errors import MalformedStructuredData
from .models import ExtractionSource, SelectorResult
from .normalizer import (
    coerce_ingredient_list,
    extract_image_url,
    extract_instructions_text,
    first_text,
    parse_servings,
    parse_time_to_minutes,
)
from .validators import (
    clean_text,
    is_valid_ingredient,
    is_valid_instruction,
    remove_duplicates,
)

logger = logging.getLogger(__name__)

_CONCATENATED_OBJECTS = re.compile(r"}\s*{")

NUTRITION_FIELDS = [
    ("calories", "calories"),
    ("proteinContent", "protein"),
    ("fatContent", "fat"),
    ("saturatedFatContent", "saturated fat"),
    ("transFatContent", "trans fat"),
    ("fiberContent", "fiber"),
    ("sugarContent", "sugar"),
    ("sodiumContent", "sodium"),
]


def parse_json_ld_block(raw: str) -> dict | list:
    """
    Parse one LD+JSON block.

    Raw control characters inside strings are accepted.
    Some sites emit several root objects back to back ("{...}{...}"); those
    are repaired into an array before giving up.

    Raises:
        MalformedStructuredData: If neither the raw nor the repaired text parses
    """
    try:
        return json.loads(raw, strict=False)
    except json.JSONDecodeError:
        pass

    repaired = "[" + _CONCATENATED_OBJECTS.sub("},{", raw) + "]"
    try:
        return json.loads(repaired, strict=False)
    except json.JSONDecodeError as e:
        raise MalformedStructuredData(f"Unparseable LD+JSON block: {e}") from e


def _is_recipe(item: dict) -> bool:
    item_type = item.get("@type", "")
    return item_type == "Recipe" or (isinstance(item_type, list) and "Recipe" in item_type)


def find_recipes(data: dict | list) -> list[dict]:
    """Flatten roots and @graph containers, keeping Recipe objects only."""
    roots = data if isinstance(data, list) else [data]
    candidates = []
    for item in roots:
        if not isinstance(item, dict):
            continue
        graph = item.get("@graph")
        if isinstance(graph, list):
            candidates.extend(g for g in graph if isinstance(g, dict))
        else:
            candidates.append(item)
    return [c for c in candidates if _is_recipe(c)]


def _nutrition_lines(nutrition: dict | None) -> list[str]:
    if not isinstance(nutrition, dict):
        return []
    lines = []
    for key, label in NUTRITION_FIELDS:
        value = nutrition.get(key)
        if value not in (None, ""):
            lines.append(f"{label}: {clean_text(str(value))}")
    return lines


def _recipe_fields(recipe: dict) -> dict[str, str | list[str]]:
    """Field values for one Recipe object. Empty values mean "not found"."""
    ingredients = remove_duplicates(
        [
            cleaned
            for cleaned in (
                clean_text(i) for i in coerce_ingredient_list(recipe.get("recipeIngredient"))
            )
            if is_valid_ingredient(cleaned)
        ]
    )
    instructions = remove_duplicates(
        [
            cleaned
            for cleaned in (
                clean_text(s)
                for s in extract_instructions_text(recipe.get("recipeInstructions"))
            )
            if is_valid_instruction(cleaned)
        ]
    )
    servings = parse_servings(recipe.get("recipeYield"))

    name = recipe.get("name")
    description = recipe.get("description")

    return {
        "title": clean_text(name) if isinstance(name, str) else "",
        "description": clean_text(description) if isinstance(description, str) else "",
        "ingredients": ingredients,
        "instructions": instructions,
        "prep_time": parse_time_to_minutes(recipe.get("prepTime")) or "",
        "cook_time": parse_time_to_minutes(recipe.get("cookTime")) or "",
        "servings": str(servings) if servings is not None else "",
        "image": extract_image_url(recipe.get("image")) or "",
        "cuisine": clean_text(first_text(recipe.get("recipeCuisine"))),
        "nutrition": _nutrition_lines(recipe.get("nutrition")),
    }


def extract_from_json_ld(soup: BeautifulSoup) -> dict[str, SelectorResult]:
    """
    Extract recipe fields from every LD+JSON block in the document.

    For each field the first non-empty value across all Recipe objects wins;
    a later block never overrides a field that is already filled.

    Returns:
        Mapping of field name to SelectorResult, only for fields found
    """
    results: dict[str, SelectorResult] = {}

    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text() or ""
        if not raw.strip():
            continue

        try:
            data = parse_json_ld_block(raw)
        except MalformedStructuredData as e:
            logger.debug(f"Skipping LD+JSON block: {e}")
            continue

        for recipe in find_recipes(data):
            for name, value in _recipe_fields(recipe).items():
                if name in results or not value:
                    continue
                results[name] = SelectorResult(
                    value=value, selector=None, source=ExtractionSource.LD_JSON
                )

    if results:
        logger.info(f"LD+JSON filled fields: {', '.join(sorted(results))}")

    return results
