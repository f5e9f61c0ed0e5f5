"""
Larder - Readable Text Extraction.

Recovers title, ingredients and instructions from the plain text returned by
a reader proxy, by locating section headings.
"""

import re
from dataclasses import dataclass, field

from .validators import is_valid_ingredient, is_valid_instruction, remove_duplicates

_INGREDIENTS_HEADING = re.compile(r"^(ingredients|for the ingredients)", re.IGNORECASE)
_INSTRUCTIONS_HEADING = re.compile(
    r"^(instructions|directions|method|preparation|how to)", re.IGNORECASE
)
_SECTION_END = re.compile(
    r"^(instructions|directions|method|notes|nutrition|video|tips|equipment)",
    re.IGNORECASE,
)
_IGNORED_TITLES = re.compile(
    r"^(home|browse|videos|about|subscribe|search|jump to recipe|pin recipe"
    r"|leave a review|sign up|get the latest)$",
    re.IGNORECASE,
)
_TWO_WORDS = re.compile(r"\b\w+\b.*\b\w+\b")
_TITLE_PREFIX = re.compile(r"^title:\s*", re.IGNORECASE)
_INGREDIENT_PREFIX = re.compile(r"^(?:\d+[.)]\s*|[-*•‣◦⁃∙]\s+)")
_STEP_PREFIX = re.compile(r"^\d+[.)]?\s*|^[-*•]\s*")
_LINE_SPLIT = re.compile(r"\r?\n")
_HAS_DIGIT = re.compile(r"\d")

# Lines searched above the ingredients heading, and near the top, for a title
TITLE_LOOKBACK = 6
TITLE_SCAN_LIMIT = 80
# Without an instructions heading, steps are looked for this far below the
# ingredients heading
INSTRUCTIONS_OFFSET = 20
INSTRUCTIONS_WINDOW = 60


@dataclass
class ReadableRecipe:
    """Fields recovered from readable text."""

    title: str = ""
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)


def _find_index(lines: list[str], pattern: re.Pattern) -> int:
    return next((i for i, line in enumerate(lines) if pattern.search(line)), -1)


def _section_end(lines: list[str], start: int) -> int:
    if start < 0:
        return len(lines)
    for offset, line in enumerate(lines[start + 1:]):
        if _SECTION_END.search(line):
            return start + 1 + offset
    return len(lines)


def _find_title(lines: list[str], ingredients_idx: int) -> str:
    title = ""

    # Prefer a line just above the ingredients heading
    if ingredients_idx > 1:
        for i in range(ingredients_idx - 1, max(0, ingredients_idx - TITLE_LOOKBACK) - 1, -1):
            candidate = lines[i]
            if len(candidate) > 4 and not _IGNORED_TITLES.match(candidate):
                title = candidate
                break

    if not title:
        for candidate in lines[:TITLE_SCAN_LIMIT]:
            if (
                len(candidate) > 4
                and not _IGNORED_TITLES.match(candidate)
                and _TWO_WORDS.search(candidate)
            ):
                title = candidate
                break

    return _TITLE_PREFIX.sub("", title).strip()


def parse_readable_text(text: str) -> ReadableRecipe:
    """
    Parse reader-proxy text into a partial recipe.

    Ingredient lines must be bulleted, numbered or contain a digit. Without an
    instructions heading, steps are taken from further below the ingredients.
    """
    lines = [line.strip() for line in _LINE_SPLIT.split(text)]
    lines = [line for line in lines if line]

    ingredients_idx = _find_index(lines, _INGREDIENTS_HEADING)
    instructions_idx = _find_index(lines, _INSTRUCTIONS_HEADING)

    ingredients: list[str] = []
    if ingredients_idx >= 0:
        end = min(
            _section_end(lines, ingredients_idx),
            instructions_idx if instructions_idx >= 0 else len(lines),
        )
        ingredients = [
            _INGREDIENT_PREFIX.sub("", line).strip()
            for line in lines[ingredients_idx + 1:end]
            if _INGREDIENT_PREFIX.match(line) or _HAS_DIGIT.search(line)
        ]
        ingredients = [line for line in ingredients if is_valid_ingredient(line)]

    instructions: list[str] = []
    if instructions_idx >= 0:
        section = lines[instructions_idx + 1:_section_end(lines, instructions_idx)]
        instructions = [
            _STEP_PREFIX.sub("", line).strip() for line in section if len(line) > 8
        ]
    elif ingredients_idx >= 0:
        start = min(len(lines), ingredients_idx + 1 + INSTRUCTIONS_OFFSET)
        section = lines[start:start + INSTRUCTIONS_WINDOW]
        instructions = [_STEP_PREFIX.sub("", line).strip() for line in section]
        instructions = [line for line in instructions if len(line) > 8]
    instructions = [line for line in instructions if is_valid_instruction(line)]

    return ReadableRecipe(
        title=_find_title(lines, ingredients_idx),
        ingredients=remove_duplicates(ingredients),
        instructions=remove_duplicates(instructions),
    )
