"""Recipe import service: selector lookup, scraping and selector learning."""

import logging

import httpx

from larder.config import LarderSettings

from .domain_selectors import DomainSelectorRepository, extract_domain, learn_selectors
from .extractor import scrape_recipe, scrape_recipe_from_html
from .models import ImportOutcome

logger = logging.getLogger(__name__)


async def import_recipe(
    url: str,
    html: str | None = None,
    *,
    repository: DomainSelectorRepository,
    client: httpx.AsyncClient | None = None,
    settings: LarderSettings | None = None,
) -> ImportOutcome:
    """
    Import a recipe using any selectors learned for its domain.

    Flow:
    1. Look up the domain's selector set (once)
    2. Scrape, from the given HTML when provided, else from the URL
    3. If the domain had no selector set, save the selectors that worked
    4. Compute extraction stats

    Args:
        url: Recipe page URL
        html: Pre-fetched page HTML, skips retrieval
        repository: Domain selector store
        client: HTTP client for retrieval
        settings: Fetch configuration

    Raises:
        InvalidRecipeUrl: If the URL is malformed
        RetrievalFailure: If the page could not be retrieved
    """
    domain = extract_domain(url)

    existing = await repository.find_domain_selector(domain)
    overrides = existing.as_overrides() if existing else None
    if overrides:
        logger.info(f"Using custom selectors for {domain}: {', '.join(overrides)}")

    if html:
        outcome = scrape_recipe_from_html(html, url, overrides)
    else:
        outcome = await scrape_recipe(url, overrides, client=client, settings=settings)

    learned: dict[str, str] = {}
    if existing is None:
        learned = learn_selectors(outcome.results)
        if learned:
            await repository.upsert_domain_selectors(domain, learned)
            logger.info(f"Saved selectors for {domain}: {', '.join(learned)}")

    stats = outcome.results.stats()
    logger.info(
        f"Imported {url}: {stats.successful}/{stats.total} fields "
        f"({stats.from_ld_json} LD+JSON, {stats.from_selectors} selectors)"
    )

    return ImportOutcome(
        data=outcome.data,
        results=outcome.results,
        used_custom_selectors=existing is not None,
        stats=stats,
        learned_selectors=learned,
    )
