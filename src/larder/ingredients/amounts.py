"""
Larder - Amount Parsing.

Reads leading quantities (integers, decimals, fractions, unicode fractions,
mixed numbers) and units from free-text ingredient lines.
"""

import re

from .models import ParsedIngredient
from .units import is_known_unit

UNICODE_FRACTIONS: dict[str, float] = {
    "½": 1 / 2,
    "¼": 1 / 4,
    "¾": 3 / 4,
    "⅐": 1 / 7,
    "⅑": 1 / 9,
    "⅒": 1 / 10,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "⅕": 1 / 5,
    "⅖": 2 / 5,
    "⅗": 3 / 5,
    "⅘": 4 / 5,
    "⅙": 1 / 6,
    "⅚": 5 / 6,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
}

FRACTION_CHARS = "".join(UNICODE_FRACTIONS)

# One amount token. Order matters: longest forms first.
AMOUNT_PATTERN = (
    rf"\d+\s*[{FRACTION_CHARS}]"  # 1½
    r"|\d+-\d+/\d+"  # 1-1/2
    r"|\d+\s+\d+/\d+"  # 1 1/2
    r"|\d+/\d+"  # 1/2
    rf"|[{FRACTION_CHARS}]"  # ½
    r"|\d+(?:\.\d+)?"  # 2, 1.5
)

_LEADING_AMOUNT = re.compile(rf"^\s*({AMOUNT_PATTERN})")
_MIXED_UNICODE = re.compile(rf"^(\d+)\s*([{FRACTION_CHARS}])$")
_HYPHEN_MIXED = re.compile(r"^(\d+)-(\d+)/(\d+)$")
_SPACE_MIXED = re.compile(r"^(\d+)\s+(\d+)/(\d+)$")
_SIMPLE_FRACTION = re.compile(r"^(\d+)/(\d+)$")
_LEADING_FLOAT = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)")
_UNIT_WORDS = re.compile(r"^([A-Za-z][A-Za-z.]*)(?:\s+([A-Za-z][A-Za-z.]*))?")
_LEADING_OF = re.compile(r"^of\s+", re.IGNORECASE)

# Case matters for these: T is a tablespoon, t a teaspoon
_CASE_SENSITIVE_UNITS = {"T": "tbsp", "t": "tsp"}


def _ratio(numerator: str, denominator: str) -> float:
    den = int(denominator)
    if den == 0:
        return 0.0
    return int(numerator) / den


def parse_amount(text: str) -> float:
    """
    Convert an amount string to a number.

    Recognized forms, in priority order:
        "1½"    -> 1.5   (mixed unicode fraction)
        "½"     -> 0.5   (bare unicode fraction)
        "1-1/2" -> 1.5   (hyphenated mixed number)
        "1 1/2" -> 1.5   (space-separated mixed number)
        "1/2"   -> 0.5   (simple fraction)
        "2.25"  -> 2.25  (leading decimal, like parseFloat)

    Returns 0 when nothing numeric can be read.
    """
    text = text.strip()

    match = _MIXED_UNICODE.match(text)
    if match:
        return int(match.group(1)) + UNICODE_FRACTIONS[match.group(2)]

    if text in UNICODE_FRACTIONS:
        return UNICODE_FRACTIONS[text]

    match = _HYPHEN_MIXED.match(text)
    if match:
        return int(match.group(1)) + _ratio(match.group(2), match.group(3))

    match = _SPACE_MIXED.match(text)
    if match:
        return int(match.group(1)) + _ratio(match.group(2), match.group(3))

    match = _SIMPLE_FRACTION.match(text)
    if match:
        return _ratio(match.group(1), match.group(2))

    match = _LEADING_FLOAT.match(text)
    if match:
        return float(match.group(1))

    return 0.0


def parse_unit(text: str) -> tuple[str, str]:
    """
    Split a leading unit word off the text.

    Two-word units ("fl oz", "fluid ounces") are tried before single words.
    Lookup is case-insensitive except for the T/t abbreviations.

    Returns:
        Tuple of (unit, remaining_text). Unit is "" when the text does not
        start with a known unit, in which case remaining_text is the input.

    Examples:
        "cups flour"      -> ("cups", "flour")
        "fl oz cream"     -> ("fl oz", "cream")
        "lbs of chicken"  -> ("lbs", "chicken")
        "large eggs"      -> ("", "large eggs")
    """
    text = text.strip()
    match = _UNIT_WORDS.match(text)
    if not match:
        return "", text

    first, second = match.group(1), match.group(2)

    if second:
        phrase = f"{first} {second}"
        if is_known_unit(phrase):
            return phrase.lower().rstrip("."), _strip_of(text[match.end():])

    rest = text[match.end(1):]
    bare = first.rstrip(".")
    if bare in _CASE_SENSITIVE_UNITS:
        return _CASE_SENSITIVE_UNITS[bare], _strip_of(rest)
    if is_known_unit(first):
        return first.lower().rstrip("."), _strip_of(rest)

    return "", text


def _strip_of(text: str) -> str:
    return _LEADING_OF.sub("", text.strip())


def parse_ingredient(text: str) -> ParsedIngredient:
    """
    Parse an ingredient line into amount, unit and ingredient name.

    The amount is matched greedily before any unit lookup, so ingredient
    words are never read as units by accident.

    Examples:
        "2 cups flour"    -> (2.0, "cups", "flour")
        "1½ tsp salt"     -> (1.5, "tsp", "salt")
        "3 large eggs"    -> (3.0, "", "large eggs")
        "salt to taste"   -> (0, "", "salt to taste")
    """
    text = text.strip()

    match = _LEADING_AMOUNT.match(text)
    if not match:
        return ParsedIngredient(amount=0, unit="", ingredient=text, original_text=text)

    amount = parse_amount(match.group(1))
    remaining = text[match.end():].strip()
    unit, ingredient = parse_unit(remaining)

    return ParsedIngredient(
        amount=amount,
        unit=unit,
        ingredient=ingredient.strip(),
        original_text=text,
    )
