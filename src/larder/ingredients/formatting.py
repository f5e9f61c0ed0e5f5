"""Split the leading measurement off an ingredient line for emphasis."""

import re

_AMOUNT = (
    r"(?:\d+(?:\s+\d+/\d+)?"
    r"|\d+\s*[½¼¾⅓⅔⅛⅜⅝⅞]|[½¼¾⅓⅔⅛⅜⅝⅞]"
    r"|\d+/\d+|\d+(?:\.\d+)?)"
)

_UNITS = (
    r"(?:cups?|c|tablespoons?|tbsp|teaspoons?|tsp|pounds?|lbs?|ounces?|oz"
    r"|grams?|g|kilograms?|kg|milliliters?|ml|liters?|l|pints?|pt|quarts?|qt"
    r"|gallons?|gal|inches?|in|feet|ft|cloves?|pieces?|slices?"
    r"|whole|large|medium|small|pinch|dash)"
)

_FIRST = rf"{_AMOUNT}(?:\s*{_UNITS})?"
_RANGE = rf"(?:\s*(?:-|to)\s*{_AMOUNT}(?:\s*{_UNITS})?)?"

MEASUREMENT_PATTERN = re.compile(rf"^((?:{_FIRST}){_RANGE})\s+", re.IGNORECASE)


def split_leading_measurement(text: str) -> tuple[str, str] | None:
    """
    Split an ingredient line into (measurement, rest).

    Examples:
        "1 1/2 cups flour"  -> ("1 1/2 cups", "flour")
        "1-2 tbsp oil"      -> ("1-2 tbsp", "oil")
        "½ tsp salt"        -> ("½ tsp", "salt")
        "salt to taste"     -> None
    """
    match = MEASUREMENT_PATTERN.match(text)
    if not match:
        return None
    return match.group(1), text[match.end():]
