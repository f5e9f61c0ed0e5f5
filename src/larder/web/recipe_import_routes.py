"""API endpoints for recipe scraping, ingredient normalization and scaling."""

import logging
from dataclasses import asdict
from functools import lru_cache
from typing import AsyncIterator, Literal

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from larder.config import get_settings
from larder.ingredients import (
    NormalizationOptions,
    normalize_ingredients,
    scale_ingredient,
    scale_servings,
)
from larder.recipe_import import (
    DomainSelectorRepository,
    InvalidRecipeUrl,
    RetrievalFailure,
    create_repository,
    import_recipe,
)
from larder.recipe_import.fetch import create_http_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recipe-import"])


# =============================================================================
# Dependencies
# =============================================================================


@lru_cache
def get_selector_repository() -> DomainSelectorRepository:
    """Process-wide domain selector store."""
    return create_repository(get_settings())


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client for one request."""
    async with create_http_client(get_settings()) as client:
        yield client


# =============================================================================
# Request/Response Models
# =============================================================================


class ScrapeRequest(BaseModel):
    """Request to scrape a recipe. `html` skips retrieval."""

    url: str
    html: str | None = None


class RecipeDataResponse(BaseModel):
    """Assembled recipe fields."""

    title: str
    description: str
    ingredients: list[str] = []
    instructions: list[str] = []
    prep_time: str | None = None
    cook_time: str | None = None
    servings: str | None = None
    image_url: str = ""
    cuisine: str = ""
    source_url: str
    nutrition: dict[str, str] | None = None


class SelectorResultResponse(BaseModel):
    """Per-field extraction outcome."""

    value: str | list[str]
    selector: str | None = None
    source: Literal["ld-json", "selector"]


class ExtractionStatsResponse(BaseModel):
    total: int
    successful: int
    from_ld_json: int
    from_selectors: int


class ScrapeResponse(BaseModel):
    """Response from a scrape."""

    success: bool
    data: RecipeDataResponse
    used_custom_selectors: bool
    extraction_stats: ExtractionStatsResponse
    extraction_details: dict[str, SelectorResultResponse]


class NormalizationOptionsRequest(BaseModel):
    """Rendering policy for normalized ingredients."""

    unit_system: Literal["imperial", "metric"] = "imperial"
    amount_format: Literal["decimal", "fraction"] = "fraction"
    round_to_fraction: float | None = Field(default=0.125, gt=0, le=1)
    decimals: int | None = Field(default=None, ge=0, le=6)


class NormalizeRequest(BaseModel):
    lines: list[str]
    options: NormalizationOptionsRequest = NormalizationOptionsRequest()


class CanonicalIngredientResponse(BaseModel):
    """Normalized ingredient line."""

    amount: float | None = None
    amount_min: float | None = None
    amount_max: float | None = None
    unit: str
    name: str
    notes: str | None = None
    original_text: str
    display: str


class NormalizeResponse(BaseModel):
    ingredients: list[CanonicalIngredientResponse]


class ScaleRequest(BaseModel):
    """Scale ingredient lines (and optionally servings) by a factor."""

    ingredients: list[str]
    factor: float = Field(gt=0)
    servings: str | None = None


class ScaleResponse(BaseModel):
    ingredients: list[str]
    servings: str | None = None


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/scrape-recipe", response_model=ScrapeResponse)
async def scrape_recipe_endpoint(
    req: ScrapeRequest,
    repository: DomainSelectorRepository = Depends(get_selector_repository),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> ScrapeResponse:
    """
    Scrape a recipe page.

    Uses learned selectors for the domain when present, otherwise learns
    the selectors that worked. Returns the recipe plus extraction stats so
    the caller can prompt for fields that are still missing.
    """
    logger.info(f"Scrape request for URL: {req.url}")

    try:
        outcome = await import_recipe(
            req.url, req.html, repository=repository, client=client
        )
    except InvalidRecipeUrl as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RetrievalFailure as e:
        logger.warning(f"Retrieval failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return ScrapeResponse(
        success=True,
        data=RecipeDataResponse(**asdict(outcome.data)),
        used_custom_selectors=outcome.used_custom_selectors,
        extraction_stats=ExtractionStatsResponse(**asdict(outcome.stats)),
        extraction_details={
            name: SelectorResultResponse(
                value=result.value, selector=result.selector, source=result.source.value
            )
            for name, result in outcome.results.items()
        },
    )


@router.post("/ingredients/normalize", response_model=NormalizeResponse)
async def normalize_endpoint(req: NormalizeRequest) -> NormalizeResponse:
    """Normalize ingredient lines to canonical display strings."""
    options = NormalizationOptions(**req.options.model_dump())
    normalized = normalize_ingredients(req.lines, options)
    return NormalizeResponse(
        ingredients=[CanonicalIngredientResponse(**asdict(item)) for item in normalized]
    )


@router.post("/ingredients/scale", response_model=ScaleResponse)
async def scale_endpoint(req: ScaleRequest) -> ScaleResponse:
    """Scale ingredient lines and servings by a factor."""
    return ScaleResponse(
        ingredients=[scale_ingredient(line, req.factor) for line in req.ingredients],
        servings=scale_servings(req.servings, req.factor),
    )
