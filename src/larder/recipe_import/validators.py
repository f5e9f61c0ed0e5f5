"""
Larder - Content Validators.

Heuristic filters for scraped text blocks, and near-duplicate removal.
Rejections are not errors: a rejected line is simply skipped.
"""

import html
import re

_SCALE_ARTIFACT = re.compile(r"1x2x3x")
_ODD_SPACES = re.compile(r"[\u00a0\u2000-\u200b\u2028\u2029]")
_WHITESPACE = re.compile(r"\s+")
_NUMERIC_ONLY = re.compile(r"^[\d\s\-.,]+$")

_COMMON_SKIP = [
    r"^ingredients?$",
    r"^directions?$",
    r"^instructions?$",
    r"^method$",
    r"^preparation$",
    r"^steps?$",
    r"^recipe$",
    r"^advertisement$",
    r"^sponsored$",
    r"^print recipe$",
    r"^save recipe$",
    r"^share$",
    r"^rating",
    r"^reviews?$",
    r"^comments?$",
    r"^nutrition",
]

INGREDIENT_SKIP_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in _COMMON_SKIP
    + [
        r"^serves?\s*\d*",
        r"^yield",
        r"^prep time",
        r"^cook time",
        r"^total time",
        r"^difficulty",
        r"^cuisine",
        r"^category",
        r"^course",
        r"^diet",
        r"^for the",
        r"^calories",
        r"^\d+\s*servings?$",
        r"^\d+\s*portions?$",
    ]
]

INSTRUCTION_SKIP_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in _COMMON_SKIP
    + [
        r"^notes?$",
        r"^tips?$",
        r"^chef'?s? notes?$",
        r"^cook'?s? tips?$",
    ]
]

# Single-value fields are bounded so a selector matching a page container
# cannot pass as a title or cuisine.
MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
MAX_CUISINE_LENGTH = 60


def clean_text(text: str) -> str:
    """
    Normalize scraped text.

    Removes the "1x2x3x" recipe-card scale widget text, unescapes HTML
    entities, turns odd unicode spaces into plain spaces and collapses runs
    of whitespace.
    """
    if not text:
        return ""
    text = _SCALE_ARTIFACT.sub("", text)
    text = html.unescape(text)
    text = _ODD_SPACES.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def is_valid_ingredient(text: str) -> bool:
    """True if the line looks like an ingredient, not a heading or label."""
    cleaned = text.lower().strip()
    if len(cleaned) < 3 or _NUMERIC_ONLY.match(cleaned):
        return False
    if len(text) > 150:
        return False
    if cleaned.startswith("ingredients"):
        return False
    return not any(p.search(cleaned) for p in INGREDIENT_SKIP_PATTERNS)


def is_valid_instruction(text: str) -> bool:
    """True if the line looks like an instruction step."""
    cleaned = text.lower().strip()
    if len(cleaned) < 10:
        return False
    if len(text) > 500:
        return False
    if cleaned.startswith(("instructions", "directions")):
        return False
    return not any(p.search(cleaned) for p in INSTRUCTION_SKIP_PATTERNS)


def is_valid_label(text: str, max_length: int) -> bool:
    """Validation for single-line text fields (title, description, cuisine)."""
    cleaned = text.strip()
    if not cleaned or len(cleaned) > max_length:
        return False
    lowered = cleaned.lower()
    return not any(p.search(lowered) for p in INSTRUCTION_SKIP_PATTERNS)


def remove_duplicates(items: list[str]) -> list[str]:
    """
    Drop exact and container/child duplicates, keeping first-seen order.

    Lines are compared lowercased with whitespace collapsed. A line is a
    duplicate when it equals an accepted line, or when one contains the other
    and the longer is more than 1.5x the shorter. The second rule catches a
    selector matching both a wrapper element and its child.

    Examples:
        ["2 cups flour", "2 cups flour"] -> ["2 cups flour"]
        ["2 cups flour", "flour"]        -> ["2 cups flour"]
    """
    seen: list[str] = []
    result: list[str] = []

    for item in items:
        normalized = _WHITESPACE.sub(" ", item.lower().strip())
        if normalized in seen:
            continue

        is_duplicate = any(
            (len(normalized) > len(accepted) * 1.5 and accepted in normalized)
            or (len(accepted) > len(normalized) * 1.5 and normalized in accepted)
            for accepted in seen
        )
        if not is_duplicate:
            seen.append(normalized)
            result.append(item.strip())

    return result
