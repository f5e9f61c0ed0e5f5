"""
Pytest configuration and fixtures for Larder tests.
"""

import os

import httpx
import pytest

# Set test environment before importing larder modules
os.environ["LARDER_ENV"] = "development"
os.environ["SELECTOR_STORE"] = "memory"
os.environ.pop("SCRAPER_PROXY_URL", None)
os.environ.pop("SCRAPER_PROXY_KEY", None)
os.environ.pop("SCRAPING_API_KEY", None)

from larder.config import LarderSettings  # noqa: E402
from larder.recipe_import import InMemoryDomainSelectorRepository  # noqa: E402

READER_BASE = "https://reader.test"


RECIPE_LD_JSON_HTML = """
<html>
<head>
<title>Weeknight Pasta</title>
<meta name="description" content="A quick pasta for busy nights.">
<script type="application/ld+json">
{"@context": "https://schema.org", "@type": "Organization", "name": "Test Kitchen"}
</script>
<script type="application/ld+json">
{
  "@context": "https://schema.org",
  "@type": "Recipe",
  "name": "Weeknight Pasta",
  "description": "Garlicky tomato pasta.",
  "recipeIngredient": [
    "8 oz spaghetti",
    "2 tbsp olive oil",
    "3 cloves garlic, minced",
    "1 (14 oz) can crushed tomatoes",
    "salt to taste"
  ],
  "recipeInstructions": [
    {"@type": "HowToStep", "text": "Boil the spaghetti in salted water until al dente."},
    {"@type": "HowToStep", "text": "Warm the oil and garlic, then add the tomatoes and simmer."},
    {"@type": "HowToStep", "text": "Toss the pasta with the sauce and serve."}
  ],
  "prepTime": "PT10M",
  "cookTime": "PT20M",
  "recipeYield": "4 servings",
  "recipeCuisine": "Italian",
  "image": {"@type": "ImageObject", "url": "https://example.com/pasta.jpg"},
  "nutrition": {"@type": "NutritionInformation", "calories": "450 kcal", "proteinContent": "14 g"}
}
</script>
</head>
<body><h1 class="recipe-title">Weeknight Pasta</h1></body>
</html>
"""

RECIPE_SELECTOR_HTML = """
<html>
<head>
<meta name="description" content="Fluffy buttermilk pancakes.">
<meta property="og:image" content="/images/pancakes.jpg">
</head>
<body>
<article>
  <h1 class="recipe-title">Buttermilk Pancakes</h1>
  <span class="prep-time">10 mins</span>
  <span class="cook-time">15 minutes</span>
  <div class="servings">Serves 4</div>
  <ul class="ingredients">
    <li>2 cups flour</li>
    <li>2 tbsp sugar</li>
    <li>2 cups buttermilk</li>
    <li>2 eggs</li>
  </ul>
  <ol class="instructions">
    <li>Whisk the dry ingredients together in a large bowl.</li>
    <li>Stir in the buttermilk and eggs until just combined.</li>
    <li>Cook ladlefuls on a hot griddle until golden.</li>
  </ol>
  <div class="nutrition-facts">
    <span class="calories">320 kcal</span>
    <span class="protein">9 g</span>
  </div>
</article>
</body>
</html>
"""

READABLE_TEXT = """Title: Simple Pancakes
Home
Jump to recipe
Simple Pancakes
Ingredients
- 1 cup flour
- 2 eggs
1 cup milk
Instructions
1. Whisk the flour, eggs and milk together.
2. Cook on a hot griddle until golden.
Notes
Best eaten warm.
"""


@pytest.fixture
def mock_http():
    """Factory for an AsyncClient that answers every request with handler(request)."""

    def factory(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)

    return factory


@pytest.fixture
def fetch_settings():
    """Settings with no scraping proxy and a fake reader host."""
    return LarderSettings(
        _env_file=None,
        scraper_proxy_url="",
        scraper_proxy_key="",
        reader_base_url=READER_BASE,
    )


@pytest.fixture
def proxy_settings():
    """Settings with the scraping proxy enabled."""
    return LarderSettings(
        _env_file=None,
        scraper_proxy_url="https://proxy.test/",
        scraper_proxy_key="KEY",
        reader_base_url=READER_BASE,
    )


@pytest.fixture
def repository():
    """Empty in-memory domain selector store."""
    return InMemoryDomainSelectorRepository()


@pytest.fixture
def ld_json_html():
    return RECIPE_LD_JSON_HTML


@pytest.fixture
def selector_html():
    return RECIPE_SELECTOR_HTML


@pytest.fixture
def readable_text():
    return READABLE_TEXT
