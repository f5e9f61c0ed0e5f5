"""
Larder - Recipe Scaling.

Scales ingredient lines and servings by a factor, promoting the unit one
tier when the scaled amount crosses a fixed threshold.
"""

import math
import re

from .amounts import parse_ingredient
from .units import canonical_unit, convert_unit

MAX_DENOMINATOR = 32

_LEADING_INT = re.compile(r"^\s*(\d+)")


def format_number(value: float) -> str:
    """Plain decimal rendering: 6.0 -> "6", 4.5 -> "4.5"."""
    return f"{value:.15g}"


def to_fraction(value: float, tolerance: float = 1e-6) -> str:
    """
    Render a number as a kitchen fraction using continued fractions.

    Falls back to a decimal string for very large or very small values and
    for values that need a denominator above 32.

    Examples:
        to_fraction(1.5)    -> "1 1/2"
        to_fraction(0.333333333) -> "1/3"
        to_fraction(6)      -> "6"
        to_fraction(0.3183) -> "0.3183"
    """
    if value == 0:
        return "0"

    if value > 100 or value < 0.01:
        return format_number(value)

    h1, h2, k1, k2 = 1, 0, 0, 1
    remainder = value
    # Convergents of a double settle well within 64 terms
    for _ in range(64):
        whole_part = math.floor(remainder)
        h1, h2 = whole_part * h1 + h2, h1
        k1, k2 = whole_part * k1 + k2, k1
        if abs(value - h1 / k1) <= tolerance:
            break
        fractional = remainder - whole_part
        if fractional == 0:
            break
        remainder = 1 / fractional

    if k1 > MAX_DENOMINATOR or abs(value - h1 / k1) > tolerance:
        return format_number(value)

    whole, numerator = divmod(h1, k1)
    if numerator == 0:
        return str(whole)
    if whole == 0:
        return f"{numerator}/{k1}"
    return f"{whole} {numerator}/{k1}"


def find_best_unit(amount: float, unit: str) -> str:
    """
    Pick a larger display unit once the amount crosses a threshold.

    Only one tier of promotion is applied: 48 tsp becomes 16 tbsp, not 1 cup.

    Thresholds:
        tsp  >= 3  -> tbsp
        tbsp >= 16 -> cup
        cup  >= 4  -> quart
        cup  >= 2  -> pint
        oz   >= 16 -> lb
    """
    canonical = canonical_unit(unit)

    if canonical == "tsp" and amount >= 3:
        return "tbsp"
    if canonical == "tbsp" and amount >= 16:
        return "cup"
    if canonical == "cup":
        if amount >= 4:
            return "quart"
        if amount >= 2:
            return "pint"
    if canonical == "oz" and amount >= 16:
        return "lb"

    return unit


def scale_ingredient(text: str, factor: float) -> str:
    """
    Scale an ingredient line by a factor.

    Args:
        text: Ingredient line such as "2 tbsp butter"
        factor: Multiplier, must be positive

    Returns:
        The rebuilt line, e.g. "6 tbsp butter" for a factor of 3. The input
        is returned unchanged when the factor is 1 or the line has no amount.

    Raises:
        ValueError: If factor is zero or negative
    """
    if factor <= 0:
        raise ValueError(f"Scale factor must be positive, got {factor}")

    if factor == 1:
        return text

    parsed = parse_ingredient(text)
    if parsed.amount == 0:
        return text

    scaled = parsed.amount * factor

    if not parsed.unit:
        return f"{to_fraction(scaled)} {parsed.ingredient}".strip()

    best_unit = find_best_unit(scaled, parsed.unit)
    amount, unit = scaled, parsed.unit
    if best_unit != parsed.unit:
        amount, unit = convert_unit(scaled, parsed.unit, best_unit)

    return f"{to_fraction(amount)} {unit} {parsed.ingredient}".strip()


def scale_servings(servings: str | None, factor: float) -> str | None:
    """
    Scale a servings value by a factor.

    Only the leading integer is used ("4 servings" x 2 -> "8").
    Non-numeric values are returned unchanged.
    """
    if not servings or factor == 1:
        return servings

    match = _LEADING_INT.match(servings)
    if not match:
        return servings

    return format_number(int(match.group(1)) * factor)
