"""
Larder Web API - FastAPI application.
"""

import logging

from fastapi import FastAPI

from larder import __version__
from larder.config import settings
from larder.web.recipe_import_routes import router as recipe_import_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Larder", version=__version__)


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    logger.info("Larder starting up...")
    logger.info(f"  Environment: {settings.larder_env}")
    logger.info(f"  Selector store: {settings.selector_store}")
    logger.info(f"  Scraping proxy: {'enabled' if settings.proxy_enabled else 'disabled'}")
    logger.info(f"  Reader proxy: {settings.reader_base_url}")


app.include_router(recipe_import_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
