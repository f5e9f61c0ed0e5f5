"""
Larder - Recipe import.

Retrieval, LD+JSON and CSS selector extraction, per-domain selector learning.
"""

from .domain_selectors import (
    DomainSelectorRepository,
    InMemoryDomainSelectorRepository,
    SupabaseDomainSelectorRepository,
    create_repository,
    extract_domain,
    learn_selectors,
)
from .errors import (
    InvalidRecipeUrl,
    MalformedStructuredData,
    RecipeImportError,
    RetrievalFailure,
    SelectorEvaluationError,
)
from .extractor import scrape_recipe, scrape_recipe_from_html
from .models import (
    ContentMode,
    DomainSelectorSet,
    ExtractionSource,
    ExtractionStats,
    FetchedPage,
    FetchStrategy,
    ImportOutcome,
    RecipeData,
    ScrapeOutcome,
    ScrapingResults,
    SelectorResult,
)
from .service import import_recipe

__all__ = [
    "ContentMode",
    "DomainSelectorRepository",
    "DomainSelectorSet",
    "ExtractionSource",
    "ExtractionStats",
    "FetchStrategy",
    "FetchedPage",
    "ImportOutcome",
    "InMemoryDomainSelectorRepository",
    "InvalidRecipeUrl",
    "MalformedStructuredData",
    "RecipeData",
    "RecipeImportError",
    "RetrievalFailure",
    "ScrapeOutcome",
    "ScrapingResults",
    "SelectorEvaluationError",
    "SelectorResult",
    "SupabaseDomainSelectorRepository",
    "create_repository",
    "extract_domain",
    "import_recipe",
    "learn_selectors",
    "scrape_recipe",
    "scrape_recipe_from_html",
]
