"""
Larder - Unit Handling.

Unit tables, alias resolution and same-family conversion.

Two independent conversion families:
- Volume, based on the teaspoon
- Mass, based on the ounce

Metric units carry fixed factors into these bases. Count and other units
(cans, cloves, pinches) are recognized but never converted.
"""

from enum import Enum


class UnitFamily(str, Enum):
    """Conversion family of a unit."""

    VOLUME = "volume"
    MASS = "mass"
    COUNT = "count"
    OTHER = "other"


# Teaspoons per unit
VOLUME_TO_TSP: dict[str, float] = {
    "tsp": 1,
    "tbsp": 3,
    "fl oz": 6,
    "cup": 48,
    "pint": 96,
    "quart": 192,
    "gallon": 768,
    "ml": 0.202884,
    "l": 202.884,
}

# Ounces per unit
MASS_TO_OZ: dict[str, float] = {
    "oz": 1,
    "lb": 16,
    "g": 0.035274,
    "kg": 35.274,
}

# Spellings, plurals and abbreviations -> canonical unit
UNIT_ALIASES: dict[str, str] = {
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsps": "tsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbs": "tbsp",
    "tbl": "tbsp",
    "tbsps": "tbsp",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "fluid oz": "fl oz",
    "fl. oz": "fl oz",
    "c": "cup",
    "cups": "cup",
    "pt": "pint",
    "pints": "pint",
    "qt": "quart",
    "quarts": "quart",
    "gal": "gallon",
    "gallons": "gallon",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "mls": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    "gram": "g",
    "grams": "g",
    "gr": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kgs": "kg",
}

COUNT_UNITS = {
    "can", "package", "pkg", "jar", "clove", "piece", "bottle",
    "bag", "box", "bunch", "head", "slice", "stick", "sprig",
}
OTHER_UNITS = {"pinch", "dash", "handful", "splash"}


def canonical_unit(unit: str) -> str:
    """
    Resolve a unit spelling to its canonical form.

    Examples:
        canonical_unit("Cups") -> "cup"
        canonical_unit("tablespoons") -> "tbsp"
        canonical_unit("pinch") -> "pinch"
    """
    normalized = unit.lower().strip().rstrip(".")
    return UNIT_ALIASES.get(normalized, normalized)


def _singular(word: str) -> str:
    if word in COUNT_UNITS or word in OTHER_UNITS:
        return word
    if word.endswith("es") and (word[:-2] in COUNT_UNITS or word[:-2] in OTHER_UNITS):
        return word[:-2]
    if word.endswith("s") and (word[:-1] in COUNT_UNITS or word[:-1] in OTHER_UNITS):
        return word[:-1]
    return word


def unit_family(unit: str) -> UnitFamily:
    """Classify a unit into its conversion family."""
    canonical = canonical_unit(unit)
    if canonical in VOLUME_TO_TSP:
        return UnitFamily.VOLUME
    if canonical in MASS_TO_OZ:
        return UnitFamily.MASS
    if _singular(canonical) in COUNT_UNITS:
        return UnitFamily.COUNT
    return UnitFamily.OTHER


def is_known_unit(token: str) -> bool:
    """True if the token is a volume, mass, count or other unit we recognize."""
    canonical = canonical_unit(token)
    if not canonical:
        return False
    return (
        canonical in VOLUME_TO_TSP
        or canonical in MASS_TO_OZ
        or _singular(canonical) in COUNT_UNITS
        or _singular(canonical) in OTHER_UNITS
    )


def _base_factor(canonical: str) -> tuple[UnitFamily, float] | None:
    if canonical in VOLUME_TO_TSP:
        return UnitFamily.VOLUME, VOLUME_TO_TSP[canonical]
    if canonical in MASS_TO_OZ:
        return UnitFamily.MASS, MASS_TO_OZ[canonical]
    return None


def convert_unit(amount: float, from_unit: str, to_unit: str) -> tuple[float, str]:
    """
    Convert an amount between two units of the same family.

    Goes through the family's base unit (teaspoons or ounces).
    Unknown units and cross-family pairs pass through unchanged.

    Args:
        amount: Quantity in from_unit
        from_unit: Source unit (any alias)
        to_unit: Target unit (any alias)

    Returns:
        Tuple of (converted amount, unit). The unit is to_unit on success,
        from_unit when the conversion was not possible.
    """
    source = _base_factor(canonical_unit(from_unit))
    target = _base_factor(canonical_unit(to_unit))

    if source is None or target is None or source[0] != target[0]:
        return amount, from_unit

    base_amount = amount * source[1]
    return base_amount / target[1], to_unit
