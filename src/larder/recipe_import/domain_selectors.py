"""
Domain Selector Store.

Per-domain CSS selector overrides, learned from successful selector-based
extractions. The store is a best-effort cache: reads happen once at the start
of an import, writes are plain upserts where the last writer wins.

Backends implement DomainSelectorRepository:
- InMemoryDomainSelectorRepository: process-local, used by default and in tests
- SupabaseDomainSelectorRepository: the `domain_selectors` table
"""

import logging
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlparse

from supabase import Client, create_client

from larder.config import LarderSettings, get_settings

from .errors import InvalidRecipeUrl
from .models import SELECTOR_FIELDS, DomainSelectorSet, ExtractionSource, ScrapingResults

logger = logging.getLogger(__name__)

TABLE = "domain_selectors"


@runtime_checkable
class DomainSelectorRepository(Protocol):
    """Read and upsert per-domain selector overrides."""

    async def find_domain_selector(self, domain: str) -> DomainSelectorSet | None:
        """Selector set for a domain, or None when nothing was learned yet."""
        ...

    async def upsert_domain_selectors(
        self, domain: str, selectors: dict[str, str]
    ) -> DomainSelectorSet:
        """
        Create or update the domain's selectors.

        Only the given fields are written; others keep their stored value.
        """
        ...


def _known_fields(selectors: dict[str, str]) -> dict[str, str]:
    return {name: value for name, value in selectors.items() if name in SELECTOR_FIELDS and value}


class InMemoryDomainSelectorRepository:
    """Dict-backed repository."""

    def __init__(self, initial: list[DomainSelectorSet] | None = None):
        self._sets: dict[str, DomainSelectorSet] = {s.domain: s for s in initial or []}

    async def find_domain_selector(self, domain: str) -> DomainSelectorSet | None:
        return self._sets.get(domain)

    async def upsert_domain_selectors(
        self, domain: str, selectors: dict[str, str]
    ) -> DomainSelectorSet:
        selector_set = self._sets.get(domain) or DomainSelectorSet(domain=domain)
        for name, value in _known_fields(selectors).items():
            setattr(selector_set, name, value)
        self._sets[domain] = selector_set
        return selector_set


def _row_to_set(row: dict[str, Any]) -> DomainSelectorSet:
    return DomainSelectorSet(
        domain=row["domain"],
        **{name: row.get(f"{name}_selector") for name in SELECTOR_FIELDS},
    )


class SupabaseDomainSelectorRepository:
    """
    Repository on the Supabase `domain_selectors` table.

    Columns: domain (unique), title_selector, description_selector,
    ingredients_selector, instructions_selector, prep_time_selector,
    cook_time_selector, servings_selector, image_selector, cuisine_selector.
    """

    def __init__(self, client: Client | None = None, settings: LarderSettings | None = None):
        self._client = client
        self._settings = settings

    @property
    def client(self) -> Client:
        """Supabase client, created on first use.

        Raises:
            RuntimeError: If SUPABASE_URL or SUPABASE_KEY is not set
        """
        if self._client is None:
            settings = self._settings or get_settings()
            if not settings.supabase_url or not settings.supabase_key:
                raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set for the supabase selector store")
            self._client = create_client(settings.supabase_url, settings.supabase_key)
        return self._client

    async def find_domain_selector(self, domain: str) -> DomainSelectorSet | None:
        response = (
            self.client.table(TABLE).select("*").eq("domain", domain).maybe_single().execute()
        )
        row = response.data if response is not None else None
        return _row_to_set(row) if row else None

    async def upsert_domain_selectors(
        self, domain: str, selectors: dict[str, str]
    ) -> DomainSelectorSet:
        row = {"domain": domain}
        row.update({f"{name}_selector": value for name, value in _known_fields(selectors).items()})
        response = self.client.table(TABLE).upsert(row, on_conflict="domain").execute()
        if response.data:
            return _row_to_set(response.data[0])
        return DomainSelectorSet(domain=domain, **_known_fields(selectors))


def create_repository(settings: LarderSettings | None = None) -> DomainSelectorRepository:
    """Repository for the configured SELECTOR_STORE backend."""
    settings = settings or get_settings()
    if settings.selector_store == "supabase":
        return SupabaseDomainSelectorRepository(settings=settings)
    return InMemoryDomainSelectorRepository()


def extract_domain(url: str) -> str:
    """
    Hostname of a URL without a leading "www.".

    Raises:
        InvalidRecipeUrl: If the URL has no hostname
    """
    try:
        hostname = urlparse(url.strip()).hostname
    except ValueError as e:
        raise InvalidRecipeUrl(f"Invalid URL: {url}") from e
    if not hostname:
        raise InvalidRecipeUrl(f"Invalid URL: {url}")
    return hostname.removeprefix("www.")


def learn_selectors(results: ScrapingResults) -> dict[str, str]:
    """
    Selectors worth remembering for a domain.

    A field qualifies when its value came from a CSS selector (not LD+JSON)
    and is non-empty.
    """
    learned = {}
    for name in SELECTOR_FIELDS:
        result = getattr(results, name)
        if result.source == ExtractionSource.SELECTOR and result.selector and result.is_filled:
            learned[name] = result.selector
    return learned
