"""
Larder - Ingredient Normalization.

Turns messy ingredient lines into canonical, unit-converted display strings.

Pipeline for one line:
1. Pre-clean (decimal commas, dashes, hedge words, bullets, comma spacing)
2. Leading range detection ("5 to 6", "1-2"), averaged to a midpoint
3. Amount and unit parsing
4. Alternate unit after a slash ("500 g / 1 lb"), preferred when it matches
   the requested unit system
5. Name cleanup and package note extraction ("(14 oz can)")
6. Unit canonicalization per unit system
7. Display assembly
"""

import math
import re
from fractions import Fraction

from .amounts import FRACTION_CHARS, parse_amount, parse_ingredient, parse_unit
from .models import DEFAULT_OPTIONS, CanonicalIngredient, NormalizationOptions
from .scaling import format_number
from .units import UnitFamily, convert_unit, unit_family

NO_QUANTITY = "no-quantity"

_RANGE_AMOUNT = (
    rf"\d+\s*[{FRACTION_CHARS}]"
    r"|\d+\s+\d+/\d+"
    r"|\d+/\d+"
    r"|\d+(?:\.\d+)?"
    rf"|[{FRACTION_CHARS}]"
)

_DECIMAL_COMMA = re.compile(r"(\d),(?=\d)")
_DASHES = re.compile(r"[–—−]")
_HEDGE_WORDS = re.compile(r"\b(?:about|approx\.?|around|roughly)(?!\w)", re.IGNORECASE)
_LEADING_BULLET = re.compile(r"^\s*(?:\[[xX ]?\]|[-*•·▪▫◦●□▢■☐✓✔✗✘])\s+")
_SPACE_BEFORE_COMMA = re.compile(r"\s+,")
_SPACE_AFTER_COMMA = re.compile(r",\s+")
_WHITESPACE = re.compile(r"\s+")

_HYPHEN_MIXED = re.compile(r"^\d+-\d+/\d+")
_RANGE = re.compile(
    rf"^({_RANGE_AMOUNT})\s*(?:to|-)\s*({_RANGE_AMOUNT})(?![\d/])", re.IGNORECASE
)
_ALT_UNIT = re.compile(
    rf"(?<![\d/])/\s*({_RANGE_AMOUNT})\s*(oz|lbs?|g|kg|ml|l)\b", re.IGNORECASE
)
_PACKAGE = re.compile(
    r"\(?\s*(\d+(?:\.\d+)?)(?:\s*-\s*(\d+(?:\.\d+)?))?\s*(oz|g|ml|lb|kg)\s*\)?\s*"
    r"(can|package|pkg|jar)s?",
    re.IGNORECASE,
)

_NAME_SLASH_ALT = re.compile(
    r"\s*(?<![\d/])/\s*\d+(?:[\d/.\s-]*)\s*(?:oz|lbs?|g|kg|ml|l)\b", re.IGNORECASE
)
_NAME_PAREN_ALT = re.compile(
    r"\(\s*\d+(?:[\d/.\s-]*)\s*(?:oz|lbs?|g|kg|ml|l)(?:\s*can)?\s*\)", re.IGNORECASE
)
_NAME_OR_PHRASE = re.compile(r"\s+or\s+[^()]+(?=$|\s*\()", re.IGNORECASE)
_DUPLICATE_PARENS = re.compile(r"\(\s*([^)]*?)\s*\)\s*\(\s*\1\s*\)")

_BULLET_SPLITTER = re.compile(r"\s*\[[xX ]?\]\s*|\s*[•·▪▫◦●□▢■☐]\s*")
_OR_CONTINUATION = re.compile(r"^\s*or\b", re.IGNORECASE)

_IMPERIAL_UNITS = {"oz", "lb", "lbs"}
_METRIC_UNITS = {"g", "kg", "ml", "l"}


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def _keep_nonzero(rounded: float, raw: float) -> float:
    return rounded if rounded > 0 else raw


def _pre_clean(text: str) -> str:
    cleaned = _DECIMAL_COMMA.sub(r"\1.", text)
    cleaned = _DASHES.sub("-", cleaned)
    cleaned = _HEDGE_WORDS.sub("", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    cleaned = _LEADING_BULLET.sub("", cleaned)
    cleaned = _SPACE_BEFORE_COMMA.sub(", ", cleaned)
    cleaned = _SPACE_AFTER_COMMA.sub(", ", cleaned)
    return cleaned.strip()


def _clean_name(name: str) -> str:
    name = _NAME_SLASH_ALT.sub("", name)
    name = _NAME_PAREN_ALT.sub("", name)
    name = _NAME_OR_PHRASE.sub("", name)
    name = _SPACE_BEFORE_COMMA.sub(", ", name)
    name = _SPACE_AFTER_COMMA.sub(", ", name)
    name = _WHITESPACE.sub(" ", name)
    return name.strip().strip(",").strip()


def _package_note(text: str, name: str) -> str | None:
    match = _PACKAGE.search(text)
    if not match:
        return None
    size = format_number(float(match.group(1)))
    note = f"{size} {match.group(3).lower()} {match.group(4).lower()}"
    if note.lower() in name.lower():
        return None
    return f"({note})"


def format_as_fraction(value: float, step: float = 0.125) -> str:
    """
    Round to the nearest step and render as a mixed fraction.

    Examples:
        format_as_fraction(1.5)         -> "1 1/2"
        format_as_fraction(0.3333)      -> "3/8"
        format_as_fraction(2.0)         -> "2"
        format_as_fraction(0.7, 0.25)   -> "3/4"
    """
    step_fraction = Fraction(step).limit_denominator(1000)
    rounded = int(_round_half_up(value / step)) * step_fraction
    if rounded == 0:
        # Below the smallest step, show the decimal rather than "0"
        return format_number(round(value, 3))

    whole = math.floor(rounded)
    remainder = rounded - whole
    if remainder == 0:
        return str(whole)
    if whole == 0:
        return f"{remainder.numerator}/{remainder.denominator}"
    return f"{whole} {remainder.numerator}/{remainder.denominator}"


def format_amount(amount: float, options: NormalizationOptions) -> str:
    """Render an amount per the requested format (fraction or decimal)."""
    if options.amount_format == "fraction":
        return format_as_fraction(amount, options.round_to_fraction or 0.125)

    decimals = options.decimals if options.decimals is not None else 2
    text = f"{amount:.{decimals}f}"
    whole, _, fractional = text.partition(".")
    if fractional and not fractional.strip("0"):
        text = whole
    if text == "0":
        return format_number(round(amount, 3))
    return text


def _imperial_mass(amount: float, unit: str) -> tuple[float, str]:
    """Whole ounces, or quarter pounds once the weight reaches a pound."""
    oz, _ = convert_unit(amount, unit, "oz")
    oz_rounded = _keep_nonzero(_round_half_up(oz), oz) if oz >= 1 else oz
    if oz_rounded >= 16:
        lb = oz / 16
        return _round_half_up(lb / 0.25) * 0.25, "lb"
    return oz_rounded, "oz"


def _canonicalize(
    amount: float, unit: str, options: NormalizationOptions
) -> tuple[float, str]:
    family = unit_family(unit) if unit else UnitFamily.OTHER

    if amount and family is UnitFamily.VOLUME:
        if options.unit_system == "metric":
            ml, _ = convert_unit(amount, unit, "ml")
            return _keep_nonzero(_round_half_up(ml), ml), "ml"
        tsp, _ = convert_unit(amount, unit, "tsp")
        return tsp, "tsp"

    if amount and family is UnitFamily.MASS:
        if options.unit_system == "metric":
            grams, _ = convert_unit(amount, unit, "g")
            return _keep_nonzero(_round_half_up(grams), grams), "g"
        return _imperial_mass(amount, unit)

    return amount, unit


def normalize_ingredient_line(
    text: str, options: NormalizationOptions = DEFAULT_OPTIONS
) -> CanonicalIngredient:
    """
    Normalize a single ingredient line.

    Args:
        text: Raw ingredient line, e.g. "about 1-2 tsp salt"
        options: Unit system and amount format for the display string

    Returns:
        CanonicalIngredient. ``amount`` is None when no quantity was found,
        and ``notes`` is "no-quantity" when neither amount nor unit was.

    Examples (imperial, fraction):
        "1½ cups flour"          -> display "72 tsp flour"
        "500 g / 1 lb beef"      -> display "1 lb beef"
        "1 (14 oz) can tomatoes" -> display "1 can tomatoes (14 oz can)"
    """
    original_text = text.strip()
    pre = _pre_clean(original_text)

    amount_min: float | None = None
    amount_max: float | None = None

    range_match = None if _HYPHEN_MIXED.match(pre) else _RANGE.match(pre)
    if range_match:
        amount_min = parse_amount(range_match.group(1))
        amount_max = parse_amount(range_match.group(2))
        amount = (amount_min + amount_max) / 2
        unit, name = parse_unit(pre[range_match.end():])
        detected_amount = True
    else:
        parsed = parse_ingredient(pre)
        amount, unit, name = parsed.amount, parsed.unit, parsed.ingredient
        detected_amount = parsed.amount != 0

    alt_match = _ALT_UNIT.search(pre)
    if alt_match:
        alt_unit = alt_match.group(2).lower()
        if (options.unit_system == "imperial" and alt_unit in _IMPERIAL_UNITS) or (
            options.unit_system == "metric" and alt_unit in _METRIC_UNITS
        ):
            amount = parse_amount(alt_match.group(1))
            unit = alt_unit
            amount_min = amount_max = None

    name = _clean_name(name)
    package_note = _package_note(pre, name)

    amount, canonical_unit = _canonicalize(amount, unit, options)

    formatted = format_amount(amount, options) if amount else ""
    parts = [part for part in (formatted, canonical_unit, name) if part]
    if package_note:
        parts.append(package_note)

    display = _WHITESPACE.sub(" ", " ".join(parts))
    display = _DUPLICATE_PARENS.sub(r"(\1)", display).strip()

    return CanonicalIngredient(
        amount=amount or None,
        amount_min=amount_min,
        amount_max=amount_max,
        unit=canonical_unit,
        name=name,
        notes=NO_QUANTITY if not detected_amount and not unit else None,
        original_text=original_text,
        display=display,
    )


def normalize_ingredients(
    lines: list[str], options: NormalizationOptions = DEFAULT_OPTIONS
) -> list[CanonicalIngredient]:
    """
    Normalize a list of ingredient lines.

    Lines holding several bulleted/checkbox items are split first (never on
    hyphens, so ranges like "3-6 lbs" survive). Stray "or ..." continuation
    lines and nameless numeric fragments are dropped, then the result is
    deduplicated by display string, case-insensitively.
    """
    exploded = [
        piece.strip()
        for line in lines
        for piece in _BULLET_SPLITTER.split(line)
        if piece.strip()
    ]

    normalized = [normalize_ingredient_line(line, options) for line in exploded]

    filtered = [
        item
        for item in normalized
        if not (item.amount is None and _OR_CONTINUATION.match(item.original_text))
        and item.name.strip()
    ]

    seen: set[str] = set()
    unique: list[CanonicalIngredient] = []
    for item in filtered:
        key = item.display.lower()
        if key not in seen:
            seen.add(key)
            unique.append(item)

    return unique
