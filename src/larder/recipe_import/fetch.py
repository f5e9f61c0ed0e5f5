"""
Larder - Page Retrieval.

Fetches recipe pages through an ordered chain of strategies:

1. Direct fetch with desktop browser headers (through the scraping proxy
   when one is configured)
2. AMP variants: /amp, ?amp=1, ?output=amp
3. Reader proxy, returning readable text instead of HTML
4. Reader proxy wrapped in itself, for blocks on the reader's own fetch

A strategy advances the chain on a blocking status (403, 406, 451), a
network error or an empty body. There are no retries within a strategy.
"""

import logging
import re
from typing import Awaitable, Callable
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import httpx

from larder.config import LarderSettings, get_settings

from .errors import RetrievalFailure
from .models import ContentMode, FetchedPage, FetchStrategy

logger = logging.getLogger(__name__)

BLOCKING_STATUSES = frozenset({403, 406, 451})

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0.0.0 Safari/537.36"
)

READER_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/plain, text/html;q=0.9, */*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)

StrategyFn = Callable[[str, httpx.AsyncClient, LarderSettings], Awaitable[str | None]]


def desktop_headers(url: str) -> dict[str, str]:
    """Headers of a desktop Chrome navigation, with the page origin as Referer."""
    parts = urlsplit(url)
    return {
        "User-Agent": USER_AGENT,
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,"
            "image/avif,image/webp,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": f"{parts.scheme}://{parts.netloc}",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "DNT": "1",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-User": "?1",
        "Sec-Fetch-Dest": "document",
    }


def build_proxied_url(url: str, settings: LarderSettings) -> str | None:
    """
    Route a URL through the scraping proxy.

    Returns None when no proxy is configured.

    Example:
        https://proxy.example/?api_key=KEY&url=https%3A%2F%2Fsite.com%2Fr
    """
    if not settings.proxy_enabled:
        return None
    separator = "&" if "?" in settings.scraper_proxy_url else "?"
    return (
        f"{settings.scraper_proxy_url}{separator}"
        f"api_key={quote(settings.scraper_proxy_key, safe='')}"
        f"&url={quote(url, safe='')}"
    )


def amp_variants(url: str) -> list[str]:
    """AMP URLs to probe, in order: /amp, ?amp=1, ?output=amp."""
    parts = urlsplit(url)
    path = parts.path or "/"
    amp_path = f"{path}amp" if path.endswith("/") else f"{path}/amp"

    variants = [urlunsplit(parts._replace(path=amp_path))]
    for key, value in (("amp", "1"), ("output", "amp")):
        query = dict(parse_qsl(parts.query, keep_blank_values=True))
        query[key] = value
        variants.append(urlunsplit(parts._replace(query=urlencode(query))))
    return variants


def reader_url(url: str, reader_base_url: str) -> str:
    """Reader proxy URL for a page: {base}/http://{url without scheme}."""
    bare = _SCHEME.sub("", url)
    return f"{reader_base_url.rstrip('/')}/http://{bare}"


async def _get(
    client: httpx.AsyncClient, url: str, headers: dict[str, str]
) -> httpx.Response | None:
    """GET, or None on a network error."""
    try:
        return await client.get(url, headers=headers)
    except httpx.RequestError as e:
        logger.warning(f"Network error fetching {url}: {e!r}")
        return None


async def fetch_direct(
    url: str, client: httpx.AsyncClient, settings: LarderSettings
) -> str | None:
    """
    Direct fetch.

    Raises:
        httpx.HTTPStatusError: On a non-blocking HTTP error (404, 500, ...)
    """
    target = build_proxied_url(url, settings) or url
    response = await _get(client, target, desktop_headers(target))
    if response is None:
        return None

    if response.status_code in BLOCKING_STATUSES:
        logger.info(f"Direct fetch blocked for {url}: HTTP {response.status_code}")
        return None

    response.raise_for_status()
    return response.text


async def fetch_amp(
    url: str, client: httpx.AsyncClient, settings: LarderSettings
) -> str | None:
    """Try the AMP variants; the first 2xx with a body wins."""
    for variant in amp_variants(url):
        target = build_proxied_url(variant, settings) or variant
        response = await _get(client, target, desktop_headers(target))
        if response is None:
            continue
        if response.is_success and response.text.strip():
            logger.info(f"AMP variant succeeded: {variant}")
            return response.text
        logger.debug(f"AMP variant failed: {variant} (HTTP {response.status_code})")
    return None


async def _fetch_reader(client: httpx.AsyncClient, target: str) -> str | None:
    response = await _get(client, target, READER_HEADERS)
    if response is None:
        return None
    if not response.is_success:
        logger.info(f"Reader returned HTTP {response.status_code} for {target}")
        return None
    return response.text


async def fetch_reader(
    url: str, client: httpx.AsyncClient, settings: LarderSettings
) -> str | None:
    """Readable text from the reader proxy."""
    logger.warning(f"Falling back to reader proxy for {url}")
    return await _fetch_reader(client, reader_url(url, settings.reader_base_url))


async def fetch_double_reader(
    url: str, client: httpx.AsyncClient, settings: LarderSettings
) -> str | None:
    """Reader proxy applied to the reader URL itself."""
    once = reader_url(url, settings.reader_base_url)
    return await _fetch_reader(client, reader_url(once, settings.reader_base_url))


STRATEGIES: list[tuple[FetchStrategy, ContentMode, StrategyFn]] = [
    (FetchStrategy.DIRECT, ContentMode.HTML, fetch_direct),
    (FetchStrategy.AMP, ContentMode.HTML, fetch_amp),
    (FetchStrategy.READER, ContentMode.READABLE_TEXT, fetch_reader),
    (FetchStrategy.DOUBLE_READER, ContentMode.READABLE_TEXT, fetch_double_reader),
]


def create_http_client(settings: LarderSettings | None = None) -> httpx.AsyncClient:
    """HTTP client used for page retrieval."""
    settings = settings or get_settings()
    return httpx.AsyncClient(
        follow_redirects=True, timeout=settings.http_timeout_seconds
    )


async def fetch_page(
    url: str,
    *,
    client: httpx.AsyncClient,
    settings: LarderSettings | None = None,
) -> FetchedPage:
    """
    Fetch a page through the strategy chain.

    Args:
        url: Page URL
        client: HTTP client to send requests with
        settings: Proxy and reader configuration (defaults to env settings)

    Returns:
        FetchedPage from the first strategy that produced content

    Raises:
        RetrievalFailure: If every strategy failed, or the direct fetch hit
            a non-blocking HTTP error
    """
    settings = settings or get_settings()
    attempts: list[str] = []

    for strategy, mode, fetch in STRATEGIES:
        attempts.append(strategy.value)
        logger.info(f"Fetching {url} via {strategy.value}")
        try:
            content = await fetch(url, client, settings)
        except httpx.HTTPStatusError as e:
            raise RetrievalFailure(
                url, attempts, reason=f"HTTP {e.response.status_code}"
            ) from e

        if content and content.strip():
            logger.info(f"Retrieved {url} via {strategy.value} ({len(content)} chars)")
            return FetchedPage(url=url, content=content, mode=mode, strategy=strategy)

        logger.info(f"No content from {strategy.value} for {url}")

    raise RetrievalFailure(url, attempts)
