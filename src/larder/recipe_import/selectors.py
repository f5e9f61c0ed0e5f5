"""
Larder - CSS Selector Extraction.

Fallback extractor for fields the LD+JSON pass left empty. Each field has a
priority-ranked selector list; the first selector that yields an accepted
value wins. A per-domain override replaces a field's whole list.
"""

import logging
import re
from typing import Callable

from bs4 import BeautifulSoup, NavigableString, Tag
from soupsieve import SelectorSyntaxError

from .errors import SelectorEvaluationError
from .models import ExtractionSource, SelectorResult
from .normalizer import extract_image_url, parse_servings, parse_time_to_minutes
from .validators import (
    MAX_CUISINE_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    clean_text,
    is_valid_ingredient,
    is_valid_instruction,
    is_valid_label,
    remove_duplicates,
)

logger = logging.getLogger(__name__)

DEFAULT_SELECTORS: dict[str, list[str]] = {
    "title": [
        '[itemprop="name"]',
        'h1[class*="recipe"]',
        'h1[class*="title"]',
        ".recipe-title",
        ".entry-title",
        "h1",
    ],
    "description": [
        '[itemprop="description"]',
        ".recipe-description",
        ".recipe-summary",
        ".entry-summary",
        'meta[name="description"]',
    ],
    "ingredients": [
        '[itemprop="recipeIngredient"]',
        ".recipe-ingredients li",
        ".ingredients li",
        ".recipe-ingredient",
        ".ingredient",
        '[class*="ingredient"]:not([class*="group"]):not([class*="section"])',
        ".ingredients p",
        ".ingredient-list li",
        ".wprm-recipe-ingredients li",
        ".wprm-recipe-ingredient",
        ".tasty-recipes-ingredients li",
        ".mv-ingredients li",
        ".sp-recipe-ingredients li",
        ".recipe-card-ingredient",
    ],
    "instructions": [
        '[itemprop="recipeInstructions"]',
        ".recipe-instructions li",
        ".instructions li",
        ".recipe-instruction",
        ".instruction",
        ".directions li",
        ".recipe-directions li",
        '[class*="instruction"]:not([class*="group"]):not([class*="section"])',
        ".instructions p",
        ".directions p",
        ".method li",
        ".recipe-method li",
        ".wprm-recipe-instructions li",
        ".wprm-recipe-instruction",
        ".tasty-recipes-instructions li",
        ".mv-instructions li",
        ".sp-recipe-instructions li",
    ],
    "prep_time": [
        '[itemprop="prepTime"]',
        ".prep-time",
        ".recipe-prep-time",
        '[class*="prep"]',
    ],
    "cook_time": [
        '[itemprop="cookTime"]',
        ".cook-time",
        ".recipe-cook-time",
        '[class*="cook"]',
    ],
    "servings": [
        '[itemprop="recipeYield"]',
        ".servings",
        ".recipe-servings",
        ".yield",
        '[class*="serving"]',
    ],
    "image": [
        '[itemprop="image"]',
        ".recipe-image img",
        ".featured-image img",
        ".entry-image img",
        'img[class*="recipe"]',
        'meta[property="og:image"]',
        'meta[name="twitter:image"]',
    ],
    "cuisine": [
        '[itemprop="recipeCuisine"]',
        ".cuisine",
        ".recipe-cuisine",
        '[class*="cuisine"]',
    ],
    "nutrition": [
        '[itemprop="nutrition"]',
        ".nutrition-facts",
        ".recipe-nutrition",
        ".nutritional-info",
        '[class*="nutrition"]',
        ".nutrition-table",
        ".nutrition-info",
    ],
    "calories": [
        '[itemprop="calories"]',
        ".calories",
        '[class*="calorie"]',
        ".nutrition-calories",
    ],
    "protein": ['[itemprop="proteinContent"]', ".protein", '[class*="protein"]'],
    "fat": ['[itemprop="fatContent"]', ".fat", '[class*="fat"]'],
    "fiber": ['[itemprop="fiberContent"]', ".fiber", '[class*="fiber"]'],
    "sugar": ['[itemprop="sugarContent"]', ".sugar", '[class*="sugar"]'],
    "sodium": ['[itemprop="sodiumContent"]', ".sodium", '[class*="sodium"]'],
}

NUTRIENTS = ["calories", "protein", "fat", "fiber", "sugar", "sodium"]

LIST_FIELDS = ("ingredients", "instructions")
SINGLE_FIELDS = (
    "title",
    "description",
    "prep_time",
    "cook_time",
    "servings",
    "image",
    "cuisine",
)

_LINE_BREAKS = re.compile(r"\r?\n|\u2028|\u2029")
_SOURCE_WHITESPACE = re.compile(r"[\r\n\t]+")
_LEADING_BULLET = re.compile(r"^\s*[•·▪▫◦●□▢■☐-]\s*")
_HAS_DIGIT = re.compile(r"\d")
_MAX_NUTRIENT_LENGTH = 40


def resolve_selectors(
    overrides: dict[str, list[str] | str] | None = None,
) -> dict[str, list[str]]:
    """
    Merge per-domain overrides over the default selector lists.

    An override replaces that field's list entirely; other fields keep
    their defaults.
    """
    resolved = {name: list(selectors) for name, selectors in DEFAULT_SELECTORS.items()}
    for name, selectors in (overrides or {}).items():
        if isinstance(selectors, str):
            selectors = [selectors]
        if selectors:
            resolved[name] = list(selectors)
    return resolved


def select_all(root: BeautifulSoup | Tag, selector: str) -> list[Tag]:
    """
    Evaluate a CSS selector.

    Raises:
        SelectorEvaluationError: If the selector cannot be parsed
    """
    try:
        return root.select(selector)
    except (SelectorSyntaxError, ValueError, NotImplementedError) as e:
        raise SelectorEvaluationError(selector, e) from e


def _element_lines(element: Tag) -> list[str]:
    """Element text split on <br> and unicode line separators only."""
    parts = []
    for node in element.descendants:
        if isinstance(node, Tag) and node.name == "br":
            parts.append("\n")
        elif type(node) is NavigableString:
            parts.append(_SOURCE_WHITESPACE.sub(" ", str(node)))
    return _LINE_BREAKS.split("".join(parts))


def _list_candidates(elements: list[Tag], field: str) -> list[str]:
    if field == "ingredients":
        lines = [
            clean_text(_LEADING_BULLET.sub("", line))
            for element in elements
            for line in _element_lines(element)
        ]
        accepted = [line for line in lines if line and is_valid_ingredient(line)]
    else:
        texts = [clean_text(element.get_text(" ")) for element in elements]
        accepted = [text for text in texts if text and is_valid_instruction(text)]
    return remove_duplicates(accepted)


def _raw_value(element: Tag, field: str) -> str:
    if element.name == "meta":
        return element.get("content") or ""

    if field == "image":
        image = element if element.name == "img" else element.find("img")
        for source in (element, image):
            if source is None:
                continue
            for attr in ("content", "src", "data-src", "href"):
                if source.get(attr):
                    return source[attr]
        return ""

    if field in ("prep_time", "cook_time"):
        return element.get("content") or element.get("datetime") or element.get_text(" ")

    return element.get("content") or element.get_text(" ")


def _label_validator(max_length: int) -> Callable[[str], str | None]:
    def validate(text: str) -> str | None:
        cleaned = clean_text(text)
        return cleaned if is_valid_label(cleaned, max_length) else None

    return validate


def _time_value(text: str) -> str | None:
    if not _HAS_DIGIT.search(text):
        return None
    return parse_time_to_minutes(clean_text(text))


def _servings_value(text: str) -> str | None:
    servings = parse_servings(clean_text(text))
    return str(servings) if servings is not None else None


_SINGLE_VALIDATORS: dict[str, Callable[[str], str | None]] = {
    "title": _label_validator(MAX_TITLE_LENGTH),
    "description": _label_validator(MAX_DESCRIPTION_LENGTH),
    "cuisine": _label_validator(MAX_CUISINE_LENGTH),
    "prep_time": _time_value,
    "cook_time": _time_value,
    "servings": _servings_value,
}


def _single_value(elements: list[Tag], field: str, base_url: str | None) -> str | None:
    for element in elements:
        raw = _raw_value(element, field)
        if not raw or not raw.strip():
            continue
        if field == "image":
            value = extract_image_url(raw, base_url)
        else:
            value = _SINGLE_VALIDATORS[field](raw)
        if value:
            return value
    return None


def _try_selectors(
    root: BeautifulSoup | Tag,
    selectors: list[str],
    evaluate: Callable[[list[Tag]], str | list[str] | None],
) -> tuple[str | list[str] | None, str | None]:
    """Evaluate selectors in order; the first accepted value wins."""
    for selector in selectors:
        try:
            elements = select_all(root, selector)
        except SelectorEvaluationError as e:
            logger.debug(f"Skipping selector: {e}")
            continue
        if not elements:
            continue
        value = evaluate(elements)
        if value:
            return value, selector
    return None, None


def _extract_nutrition(soup: BeautifulSoup, selectors: dict[str, list[str]]) -> list[str]:
    """Nutrient lines, searched inside the nutrition panel when one is found."""
    root: BeautifulSoup | Tag = soup
    for selector in selectors.get("nutrition", []):
        try:
            matches = select_all(soup, selector)
        except SelectorEvaluationError as e:
            logger.debug(f"Skipping selector: {e}")
            continue
        if matches:
            root = matches[0]
            break

    def nutrient_value(elements: list[Tag]) -> str | None:
        for element in elements:
            text = clean_text(element.get("content") or element.get_text(" "))
            if _HAS_DIGIT.search(text) and len(text) <= _MAX_NUTRIENT_LENGTH:
                return text
        return None

    lines = []
    for nutrient in NUTRIENTS:
        value, _ = _try_selectors(root, selectors.get(nutrient, []), nutrient_value)
        if value:
            lines.append(f"{nutrient}: {value}")
    return lines


def extract_with_selectors(
    soup: BeautifulSoup,
    selectors: dict[str, list[str]],
    *,
    skip: set[str] | frozenset[str] = frozenset(),
    base_url: str | None = None,
) -> dict[str, SelectorResult]:
    """
    Extract recipe fields with CSS selectors.

    Args:
        soup: Parsed page
        selectors: Field -> selector list (see resolve_selectors)
        skip: Fields already filled by structured data
        base_url: Page URL, used to resolve relative image URLs

    Returns:
        Mapping of field name to SelectorResult, only for fields found
    """
    results: dict[str, SelectorResult] = {}

    for field in LIST_FIELDS:
        if field in skip:
            continue
        value, selector = _try_selectors(
            soup,
            selectors.get(field, []),
            lambda elements, field=field: _list_candidates(elements, field),
        )
        if value:
            logger.debug(f"{field}: {len(value)} lines via {selector!r}")
            results[field] = SelectorResult(
                value=value, selector=selector, source=ExtractionSource.SELECTOR
            )

    for field in SINGLE_FIELDS:
        if field in skip:
            continue
        value, selector = _try_selectors(
            soup,
            selectors.get(field, []),
            lambda elements, field=field: _single_value(elements, field, base_url),
        )
        if value:
            logger.debug(f"{field}: {value!r} via {selector!r}")
            results[field] = SelectorResult(
                value=value, selector=selector, source=ExtractionSource.SELECTOR
            )

    if "nutrition" not in skip:
        nutrition = _extract_nutrition(soup, selectors)
        if nutrition:
            results["nutrition"] = SelectorResult(
                value=nutrition, selector=None, source=ExtractionSource.SELECTOR
            )

    return results
