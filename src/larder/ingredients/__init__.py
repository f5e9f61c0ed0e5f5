"""
Larder - Ingredient parsing, conversion, scaling and normalization.

Pure functions, no I/O.
"""

from .amounts import parse_amount, parse_ingredient, parse_unit
from .formatting import split_leading_measurement
from .models import (
    DEFAULT_OPTIONS,
    CanonicalIngredient,
    NormalizationOptions,
    ParsedIngredient,
)
from .normalize import normalize_ingredient_line, normalize_ingredients
from .scaling import find_best_unit, scale_ingredient, scale_servings, to_fraction
from .units import UnitFamily, canonical_unit, convert_unit, unit_family

__all__ = [
    "DEFAULT_OPTIONS",
    "CanonicalIngredient",
    "NormalizationOptions",
    "ParsedIngredient",
    "UnitFamily",
    "canonical_unit",
    "convert_unit",
    "find_best_unit",
    "normalize_ingredient_line",
    "normalize_ingredients",
    "parse_amount",
    "parse_ingredient",
    "parse_unit",
    "scale_ingredient",
    "scale_servings",
    "split_leading_measurement",
    "to_fraction",
    "unit_family",
]
