"""Normalization utilities for recipe data.

Turns the loosely typed values found in JSON-LD, microdata and scraped
markup (durations, yields, instruction blocks, images, nutrition) into
plain Python values. Nothing in here raises on bad input.
"""

import html
import re
from urllib.parse import urljoin

from .models import Nutrition, TimeEntry

DEFAULT_MINUTES = 30

PREPARATION_LABEL = "Vorbereitungszeit"
COOKING_LABEL = "Kochzeit"
TOTAL_LABEL = "Zubereitungszeit"

_ISO_DURATION = re.compile(
    r"P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?",
    re.IGNORECASE,
)
_HOURS = re.compile(r"(\d+)\s*(?:hour|hr|stunde|std)", re.IGNORECASE)
_MINUTES = re.compile(r"(\d+)\s*(?:minute|min)", re.IGNORECASE)
_FIRST_NUMBER = re.compile(r"(\d+)")
_DECIMAL = re.compile(r"(\d+(?:[.,]\d+)?)")


def clean_text(text: str | None) -> str:
    """Unescape HTML entities and collapse whitespace."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", html.unescape(str(text))).strip()


def parse_duration(duration: str | int | None) -> int | None:
    """
    Parse an ISO 8601 duration (as used in structured data) to minutes.

    Examples:
        PT30M -> 30
        PT1H30M -> 90
        P0DT2H15M -> 135
        "45" -> 45

    Free text such as "30 minutes" is not a duration and returns None.
    """
    if duration is None or duration == "":
        return None

    if isinstance(duration, bool):
        return None
    if isinstance(duration, (int, float)):
        return int(duration) if duration > 0 else None

    value = str(duration).strip()
    match = _ISO_DURATION.fullmatch(value)
    if not match or value.upper() in ("P", "PT"):
        try:
            minutes = int(value)
        except ValueError:
            return None
        return minutes if minutes > 0 else None

    days = int(match.group("days") or 0)
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    seconds = float(match.group("seconds") or 0)
    total = days * 24 * 60 + hours * 60 + minutes + round(seconds / 60)
    return total if total else None


def parse_time_to_minutes(text: str | None) -> int:
    """
    Parse free-text durations like "1 Std. 20 Min." to minutes.

    Hour and minute markers are summed. Without either marker the first
    number wins. With no number at all, or a zero duration, the result is 30.
    """
    if not text:
        return DEFAULT_MINUTES

    hours = _HOURS.search(text)
    minutes = _MINUTES.search(text)
    if hours or minutes:
        total = 0
        if hours:
            total += int(hours.group(1)) * 60
        if minutes:
            total += int(minutes.group(1))
        return total or DEFAULT_MINUTES

    number = _FIRST_NUMBER.search(text)
    if number:
        return int(number.group(1)) or DEFAULT_MINUTES
    return DEFAULT_MINUTES


def structured_minutes(value) -> int | None:
    """
    Minutes from a structured-data time field.

    ISO durations and numbers go through parse_duration; other strings are
    only handed to the free-text parser when they contain a digit, so that
    an empty or nonsense field stays None instead of becoming 30.
    """
    minutes = parse_duration(value)
    if minutes is not None:
        return minutes
    if isinstance(value, str) and _FIRST_NUMBER.search(value):
        return parse_time_to_minutes(value)
    return None


def estimate_time_split(total_minutes: int) -> list[TimeEntry]:
    """
    Guess a preparation/cooking split when only a total is known.

    Up to 30 minutes is all preparation; longer totals split 30/70.
    """
    if total_minutes <= 0:
        return []
    if total_minutes <= 30:
        return [TimeEntry(PREPARATION_LABEL, total_minutes)]
    preparation = round(total_minutes * 0.3)
    return [
        TimeEntry(PREPARATION_LABEL, preparation),
        TimeEntry(COOKING_LABEL, total_minutes - preparation),
    ]


def build_time_entries(
    prep_minutes: int | None,
    cook_minutes: int | None,
    total_minutes: int | None = None,
) -> list[TimeEntry]:
    """Time entries from phase values, estimating from the total if needed."""
    entries = []
    if prep_minutes:
        entries.append(TimeEntry(PREPARATION_LABEL, prep_minutes))
    if cook_minutes:
        entries.append(TimeEntry(COOKING_LABEL, cook_minutes))
    if entries:
        return entries
    if total_minutes:
        return estimate_time_split(total_minutes)
    return []


def parse_servings(yield_value, default: int | None = None) -> int | None:
    """
    Parse recipe yield/servings to integer.

    Examples:
        "4 Portionen" -> 4
        ["4", "4 Portionen"] -> 4
        6 -> 6
    """
    if isinstance(yield_value, list):
        for item in yield_value:
            servings = parse_servings(item)
            if servings:
                return servings
        return default

    if isinstance(yield_value, bool) or yield_value is None or yield_value == "":
        return default

    if isinstance(yield_value, (int, float)):
        return int(yield_value) if yield_value > 0 else default

    match = _FIRST_NUMBER.search(str(yield_value))
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    return default


def extract_instructions_text(instructions) -> list[str]:
    """
    Extract instruction text from various formats.

    Handles:
        - Plain strings (split by numbered steps or blank lines)
        - List of strings
        - HowToStep dicts with 'text' (or 'name') field
        - HowToSection dicts with nested 'itemListElement'
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
        text = clean_text(text) if isinstance(text, str) else ""
        return [text] if text else []

    if isinstance(instructions, str):
        # Numbered steps like "1." or "1)"
        steps = re.split(r"(?:^|\n)\s*\d+[.)]\s+", instructions)
        steps = [clean_text(s) for s in steps if clean_text(s)]
        if len(steps) > 1:
            return steps

        steps = [clean_text(s) for s in re.split(r"\n\s*\n", instructions) if clean_text(s)]
        if len(steps) > 1:
            return steps

        text = clean_text(instructions)
        return [text] if text else []

    return []


def normalize_ingredients(ingredients) -> list[str]:
    """
    Normalize ingredients to list of strings.

    Handles:
        - A single string
        - List of strings
        - List of dicts with 'text' or 'name' field
    """
    if not ingredients:
        return []

    if isinstance(ingredients, str):
        ingredients = [ingredients]

    result = []
    for item in ingredients:
        if isinstance(item, dict):
            item = item.get("text") or item.get("name") or ""
        if isinstance(item, str):
            text = clean_text(item)
            if text:
                result.append(text)
    return result


def extract_image_url(image, base_url: str | None = None) -> str | None:
    """
    Extract image URL from various formats.

    Handles:
        - Plain URL string (relative URLs resolved against base_url)
        - Dict (ImageObject) with 'url' or 'contentUrl' field
        - List of images (first usable one)
    """
    if not image:
        return None

    if isinstance(image, str):
        url = image.strip()
        if url.startswith("//"):
            return "https:" + url
        if url.startswith(("http://", "https://")):
            return url
        if base_url and url and not url.startswith("data:"):
            return urljoin(base_url, url)
        return None

    if isinstance(image, dict):
        url = image.get("url") or image.get("@id") or image.get("contentUrl")
        return extract_image_url(url, base_url) if isinstance(url, str) else None

    if isinstance(image, list):
        for item in image:
            url = extract_image_url(item, base_url)
            if url:
                return url

    return None


def parse_nutrition(nutrition) -> Nutrition | None:
    """
    Read a schema.org NutritionInformation block.

    Values like "350 kcal" or "12,5 g" keep only the number.
    """
    if not isinstance(nutrition, dict):
        return None

    values = Nutrition(
        calories=_first_decimal(nutrition.get("calories")),
        carbohydrates=_first_decimal(nutrition.get("carbohydrateContent")),
        protein=_first_decimal(nutrition.get("proteinContent")),
        fat=_first_decimal(nutrition.get("fatContent")),
    )
    if values == Nutrition():
        return None
    return values


def split_title(title: str, separators: tuple[str, ...]) -> tuple[str, str | None]:
    """Split "Titel – Untertitel" on the first separator that occurs."""
    for separator in separators:
        if separator in title:
            head, _, tail = title.partition(separator)
            if head.strip() and tail.strip():
                return head.strip(), tail.strip()
    return title.strip(), None


def first_string(value) -> str | None:
    """First non-empty string of a value that may be a string or a list."""
    if isinstance(value, list):
        for item in value:
            text = first_string(item)
            if text:
                return text
        return None
    if isinstance(value, str):
        return clean_text(value) or None
    return None


def _first_decimal(value) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _DECIMAL.search(str(value))
    if not match:
        return None
    return float(match.group(1).replace(",", "."))
