"""Normalization utilities for scraped recipe fields."""

import re
from urllib.parse import urljoin

_ISO_DURATION = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)
_HOURS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?|h)\b", re.IGNORECASE)
_MINUTES = re.compile(r"(\d+)\s*(?:minutes?|mins?|m)\b", re.IGNORECASE)
_FIRST_NUMBER = re.compile(r"(\d+)")


def parse_duration(duration: str | int | None) -> int | None:
    """
    Parse a duration to whole minutes.

    Examples:
        PT30M -> 30
        PT1H -> 60
        PT1H30M -> 90
        P1DT2H -> 1560
        "1 hour 30 mins" -> 90
        "45" -> 45
    """
    if duration is None or duration == "" or isinstance(duration, bool):
        return None

    # Handle already-numeric values
    if isinstance(duration, (int, float)):
        return int(duration)

    text = str(duration).strip()

    match = _ISO_DURATION.match(text)
    if match and any(match.groups()):
        days, hours, minutes = (int(g or 0) for g in match.groups()[:3])
        seconds = float(match.group(4) or 0)
        total = days * 1440 + hours * 60 + minutes + int(seconds / 60 + 0.5)
        return total or None

    hours = _HOURS.search(text)
    minutes = _MINUTES.search(text)
    if hours or minutes:
        total = float(hours.group(1)) * 60 if hours else 0
        total += int(minutes.group(1)) if minutes else 0
        return int(total)

    number = _FIRST_NUMBER.search(text)
    if number:
        return int(number.group(1))

    return None


def parse_time_to_minutes(value: str | int | None) -> str | None:
    """Minutes as a string ("PT45M" -> "45"), or None when unparseable."""
    minutes = parse_duration(value)
    return str(minutes) if minutes is not None else None


def parse_servings(yield_value: str | int | list | None) -> int | None:
    """
    Parse recipe yield/servings to integer.

    Examples:
        "4 servings" -> 4
        "Serves 6" -> 6
        ["4", "4 servings"] -> 4
        "Makes 12 cookies" -> 12
    """
    if isinstance(yield_value, list):
        yield_value = yield_value[0] if yield_value else None

    if yield_value is None or yield_value == "" or isinstance(yield_value, bool):
        return None

    if isinstance(yield_value, int):
        return yield_value

    # Extract first number from string
    match = _FIRST_NUMBER.search(str(yield_value))
    if match:
        return int(match.group(1))

    return None


def extract_instructions_text(instructions: list | dict | str | None) -> list[str]:
    """
    Flatten instructions to an ordered list of step strings.

    Handles:
        - Plain strings (split by numbered steps, then blank lines)
        - Lists of strings
        - HowToStep dicts with 'text' (or 'name') field
        - HowToSection dicts with 'itemListElement', nested arbitrarily
    """
    if not instructions:
        return []

    if isinstance(instructions, list):
        result = []
        for item in instructions:
            result.extend(extract_instructions_text(item))
        return result

    if isinstance(instructions, dict):
        if "itemListElement" in instructions:
            return extract_instructions_text(instructions["itemListElement"])
        text = instructions.get("text") or instructions.get("name") or ""
        if isinstance(text, str) and text.strip():
            return [text.strip()]
        return []

    if isinstance(instructions, str):
        # Try splitting by numbered patterns like "1." or "1)"
        steps = re.split(r"\n\s*\d+[\.\)]\s*", instructions)
        if len(steps) > 1:
            return [s.strip() for s in steps if s.strip()]

        # Fall back to splitting by double newlines
        steps = instructions.split("\n\n")
        if len(steps) > 1:
            return [s.strip() for s in steps if s.strip()]

        return [instructions.strip()] if instructions.strip() else []

    return []


def coerce_ingredient_list(ingredients: list | str | None) -> list[str]:
    """
    Normalize ingredients to a list of strings.

    Handles:
        - A single string
        - List of strings
        - List of dicts with 'text' or 'name' field
        - Numbers, stringified
    """
    if not ingredients:
        return []

    if not isinstance(ingredients, list):
        ingredients = [ingredients]

    result = []
    for item in ingredients:
        if isinstance(item, dict):
            item = item.get("text") or item.get("name") or ""
        text = str(item).strip() if item is not None else ""
        if text:
            result.append(text)

    return result


def first_text(value: str | list | None) -> str:
    """First entry of a string-or-list field ("recipeCuisine": ["Italian"])."""
    if isinstance(value, list):
        value = next((v for v in value if v), None)
    if isinstance(value, str):
        return value
    return ""


def extract_image_url(
    image: str | dict | list | None, base_url: str | None = None
) -> str | None:
    """
    Extract image URL from various formats.

    Handles:
        - Plain URL string (relative URLs resolved against base_url)
        - Dict with 'url' or 'contentUrl' field
        - List of images (take first)

    Only http(s) URLs are returned.
    """
    if not image:
        return None

    if isinstance(image, list):
        return extract_image_url(image[0], base_url)

    if isinstance(image, dict):
        image = image.get("url") or image.get("@url") or image.get("contentUrl")

    if not isinstance(image, str) or not image.strip():
        return None

    url = image.strip()
    if base_url:
        url = urljoin(base_url, url)

    return url if url.startswith(("http://", "https://")) else None
