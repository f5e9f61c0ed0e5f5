"""Main recipe extraction orchestration."""

import logging
import re
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from larder.config import LarderSettings
from larder.ingredients import DEFAULT_OPTIONS, normalize_ingredients

from .errors import InvalidRecipeUrl
from .fetch import create_http_client, fetch_page
from .json_ld import extract_from_json_ld
from .models import (
    ContentMode,
    RecipeData,
    ScrapeOutcome,
    ScrapingResults,
    SelectorResult,
)
from .readable import parse_readable_text
from .selectors import extract_with_selectors, resolve_selectors

logger = logging.getLogger(__name__)

_NUTRITION_LINE = re.compile(r"^\s*([^:]+):\s*(.+)$")


async def scrape_recipe(
    url: str,
    selectors: dict[str, list[str]] | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    settings: LarderSettings | None = None,
) -> ScrapeOutcome:
    """
    Fetch and extract a recipe from a URL.

    Extraction pipeline:
    1. Validate URL format
    2. Retrieve the page through the fetch strategy chain
    3. HTML: LD+JSON first, then CSS selectors for the fields still empty
       Readable text (reader fallback): heading-based text parsing
    4. Assemble recipe data and normalize ingredient lines

    Args:
        url: The URL of the recipe page
        selectors: Per-domain selector overrides, field -> selector list
        client: HTTP client (one is created for the call if omitted)
        settings: Fetch configuration

    Returns:
        ScrapeOutcome with the assembled data and per-field results

    Raises:
        InvalidRecipeUrl: If the URL is malformed
        RetrievalFailure: If the page could not be retrieved
    """
    validation_error = _validate_url(url)
    if validation_error:
        raise InvalidRecipeUrl(validation_error)
    url = url.strip()

    if client is None:
        async with create_http_client(settings) as owned_client:
            page = await fetch_page(url, client=owned_client, settings=settings)
    else:
        page = await fetch_page(url, client=client, settings=settings)

    if page.mode is ContentMode.READABLE_TEXT:
        logger.info(f"Parsing readable text for {url}")
        results = _extract_from_readable_text(page.content)
    else:
        results = _extract_from_html(page.content, url, selectors)

    return ScrapeOutcome(data=_assemble(results, url), results=results)


def scrape_recipe_from_html(
    html: str,
    url: str,
    selectors: dict[str, list[str]] | None = None,
) -> ScrapeOutcome:
    """
    Extract a recipe from already-fetched HTML.

    Same extraction as scrape_recipe, without retrieval.

    Raises:
        InvalidRecipeUrl: If the URL is malformed
    """
    validation_error = _validate_url(url)
    if validation_error:
        raise InvalidRecipeUrl(validation_error)
    url = url.strip()

    results = _extract_from_html(html, url, selectors)
    return ScrapeOutcome(data=_assemble(results, url), results=results)


def _extract_from_html(
    html: str, url: str, selectors: dict[str, list[str]] | None
) -> ScrapingResults:
    soup = BeautifulSoup(html, "lxml")
    results = ScrapingResults()

    structured = extract_from_json_ld(soup)
    results.update(structured)

    found = extract_with_selectors(
        soup,
        resolve_selectors(selectors),
        skip=frozenset(structured),
        base_url=url,
    )
    results.update(found)

    stats = results.stats()
    logger.info(
        f"Extracted {stats.successful}/{stats.total} fields from {url} "
        f"({stats.from_ld_json} LD+JSON, {stats.from_selectors} selectors)"
    )
    return results


def _extract_from_readable_text(text: str) -> ScrapingResults:
    readable = parse_readable_text(text)
    results = ScrapingResults()
    if readable.title:
        results.title = SelectorResult(value=readable.title)
    if readable.ingredients:
        results.ingredients = SelectorResult(value=readable.ingredients)
    if readable.instructions:
        results.instructions = SelectorResult(value=readable.instructions)
    return results


def _as_list(value: str | list[str]) -> list[str]:
    if isinstance(value, list):
        return list(value)
    return [value] if value else []


def _as_text(value: str | list[str]) -> str:
    if isinstance(value, list):
        return value[0] if value else ""
    return value


def _nutrition_dict(result: SelectorResult) -> dict[str, str] | None:
    nutrition = {}
    for line in _as_list(result.value):
        match = _NUTRITION_LINE.match(line)
        if match:
            nutrition[match.group(1).strip()] = match.group(2).strip()
    return nutrition or None


def _assemble(results: ScrapingResults, url: str) -> RecipeData:
    """Build RecipeData from field results and normalize the ingredients."""
    data = RecipeData(
        title=_as_text(results.title.value),
        source_url=url,
        description=_as_text(results.description.value),
        ingredients=_as_list(results.ingredients.value),
        instructions=_as_list(results.instructions.value),
        prep_time=_as_text(results.prep_time.value) or None,
        cook_time=_as_text(results.cook_time.value) or None,
        servings=_as_text(results.servings.value) or None,
        image_url=_as_text(results.image.value),
        cuisine=_as_text(results.cuisine.value),
        nutrition=_nutrition_dict(results.nutrition),
    )

    try:
        normalized = normalize_ingredients(data.ingredients, DEFAULT_OPTIONS)
        data.ingredients = [item.display for item in normalized]
    except Exception as e:
        logger.warning(f"Ingredient normalization failed for {url}, keeping raw lines: {e}")

    return data


def _validate_url(url: str) -> str | None:
    """
    Validate URL format.

    Returns error message if invalid, None if valid.
    """
    if not url or not url.strip():
        return "URL is required"

    url = url.strip()

    # Basic URL pattern check
    if not re.match(r"^https?://", url, re.IGNORECASE):
        return "URL must start with http:// or https://"

    try:
        parsed = urlparse(url)
    except ValueError:
        return "Invalid URL format"

    if not parsed.netloc:
        return "Invalid URL format"

    return None