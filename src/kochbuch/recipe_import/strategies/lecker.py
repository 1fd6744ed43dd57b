"""Lecker.de strategy."""

import logging
import re
from urllib.parse import unquote, urljoin

from bs4 import BeautifulSoup

from ..capabilities import Capability, ExtractorCapabilities
from ..json_ld import find_json_ld_recipe, has_recipe_content
from ..keywords import extract_category, extract_keywords, map_difficulty
from ..markup import element_text, first_image_src, make_soup, meta_content, page_text, select_texts
from ..models import (
    INGREDIENTS_PLACEHOLDER,
    INSTRUCTIONS_PLACEHOLDER,
    ExtractedRecipeData,
    StrategyKind,
    TimeEntry,
)
from ..normalizer import (
    TOTAL_LABEL,
    build_time_entries,
    clean_text,
    extract_instructions_text,
    first_string,
    normalize_ingredients,
    parse_nutrition,
    parse_servings,
    split_title,
    structured_minutes,
)
from . import Strategy

logger = logging.getLogger(__name__)

NAME = "Lecker.de Extractor"
DOMAINS = ("lecker.de",)
BASE_URL = "https://www.lecker.de"
IMAGE_HOST = "images.lecker.de"
TITLE_SEPARATORS = (" – ", " - ", " | ", ": ")
DEFAULT_SERVINGS = 4
MIN_IMAGE_WIDTH = 400
MAX_SECTION_ITEMS = 20

CAPABILITIES = ExtractorCapabilities(
    supports_ingredient_groups=Capability.UNSUPPORTED,
    supports_preparation_groups=Capability.UNSUPPORTED,
    supports_images=Capability.EXPERIMENTAL,
    supports_nutrition=Capability.EXPERIMENTAL,
    supports_metadata=Capability.SUPPORTED,
    supports_time_extraction=Capability.EXPERIMENTAL,
    supports_difficulty_extraction=Capability.EXPERIMENTAL,
    supports_keyword_extraction=Capability.SUPPORTED,
    supports_category_extraction=Capability.SUPPORTED,
)

TAG_SELECTORS = ('[class*="tags"] a', 'a[href*="/thema/"]')

_SERVINGS = (
    re.compile(r"für\s*(\d+)\s*Personen", re.IGNORECASE),
    re.compile(r"(\d+)\s*Portionen", re.IGNORECASE),
    re.compile(r"(\d+)\s*Stück", re.IGNORECASE),
)
_TIME = (
    re.compile(r"Zubereitungszeit:?\s*(\d+)\s*Min", re.IGNORECASE),
    re.compile(r"(\d+)\s*Min\.", re.IGNORECASE),
)
_PINTEREST_MEDIA = re.compile(r"media=([^\"&]+)", re.IGNORECASE)
_LECKER_IMAGE = re.compile(
    r"(https://images\.lecker\.de/[^\"'\s>&,]+\.(?:jpe?g|png|webp)[^\"'\s>,]*)", re.IGNORECASE
)
_INGREDIENT_HINT = re.compile(r"\d|\bEL\b|\bTL\b|Pck")


def normalize_image_url(url: str | None) -> str | None:
    """
    Make a Lecker image URL absolute.

    Query parameters are kept on images.lecker.de (they select the crop)
    and stripped everywhere else.
    """
    if not url:
        return None
    url = url.strip()
    if IMAGE_HOST not in url:
        url = url.split("?")[0]
    if url.startswith("//"):
        return "https:" + url
    if not url.startswith(("http://", "https://")):
        return urljoin(BASE_URL + "/", url)
    return url


def select_image(image) -> str | None:
    """
    Pick an image from a JSON-LD image value.

    From a list, the first plain string wins; among ImageObjects the first
    one at least 400px wide, otherwise the last one seen.
    """
    if not image:
        return None
    if isinstance(image, str):
        return normalize_image_url(image)
    if isinstance(image, dict):
        return normalize_image_url(image.get("url") or image.get("contentUrl"))
    if isinstance(image, list):
        chosen = None
        for item in image:
            if isinstance(item, str):
                chosen = item
                break
            if isinstance(item, dict):
                url = item.get("url") or item.get("contentUrl")
                if url:
                    chosen = url
                    if _width(item) >= MIN_IMAGE_WIDTH:
                        break
        return normalize_image_url(chosen)
    return None


def _width(image: dict) -> int:
    try:
        return int(str(image.get("width") or 0).rstrip("px"))
    except ValueError:
        return 0


def _split_title(name: str | None) -> tuple[str, str | None]:
    cleaned = clean_text(name)
    if not cleaned:
        return "Lecker-Rezept", None
    return split_title(cleaned, TITLE_SEPARATORS)


def _tags(soup: BeautifulSoup) -> list[str]:
    return select_texts(soup, TAG_SELECTORS, min_length=3)


def _from_json_ld(recipe: dict, soup: BeautifulSoup, url: str) -> ExtractedRecipeData:
    title, subtitle = _split_title(first_string(recipe.get("name")))
    description = first_string(recipe.get("description"))
    keywords = extract_keywords(title, description, json_ld=recipe, html_tags=_tags(soup))

    return ExtractedRecipeData(
        title=title,
        subtitle=subtitle,
        source_url=url,
        description=description,
        servings=parse_servings(recipe.get("recipeYield"), default=DEFAULT_SERVINGS),
        time_entries=build_time_entries(
            structured_minutes(recipe.get("prepTime") or recipe.get("totalTime")),
            structured_minutes(recipe.get("cookTime")),
        ),
        difficulty=map_difficulty(first_string(recipe.get("difficulty"))) or "mittel",
        ingredients=normalize_ingredients(recipe.get("recipeIngredient")),
        instructions=extract_instructions_text(recipe.get("recipeInstructions")),
        image_url=select_image(recipe.get("image")),
        nutrition=parse_nutrition(recipe.get("nutrition")),
        keywords=keywords,
        category=extract_category(title, description, json_ld=recipe, keywords=keywords),
    )


def _section_lines(text: str, start: str, end: str | None) -> list[str]:
    """Non-empty lines between a start heading and an end heading."""
    start_heading = re.compile(rf"^(?:## )?{start}\b")
    end_heading = re.compile(rf"^(?:## )?{end}\b") if end else None
    collected, inside = [], False
    for line in (clean_text(line) for line in text.splitlines()):
        if not inside:
            inside = bool(start_heading.match(line))
            continue
        if end_heading and end_heading.match(line):
            break
        if line:
            collected.append(line)
    return collected


def _html_ingredients(soup: BeautifulSoup) -> list[str]:
    items = select_texts(soup, ('[class*="ingredient"] li', 'li[class*="ingredient"]'))
    if items:
        return items[:MAX_SECTION_ITEMS]
    lines = _section_lines(page_text(soup), "Zutaten", "Zubereitung")
    lines = [
        line
        for line in lines
        if len(line) > 3 and _INGREDIENT_HINT.search(line) and not line.startswith("Fehlt")
    ]
    return lines[:MAX_SECTION_ITEMS]


def _html_instructions(soup: BeautifulSoup) -> list[str]:
    steps = select_texts(
        soup,
        ('[class*="preparation"] li', '[class*="instruction"] li', '[class*="step"] p'),
        min_length=21,
    )
    if steps:
        return steps
    lines = _section_lines(page_text(soup), "Zubereitung", None)
    return [line for line in lines if len(line) > 20][:MAX_SECTION_ITEMS]


def _html_image(soup: BeautifulSoup, html: str) -> str | None:
    for anchor in soup.select('a[href*="pinterest"], [data-href*="pinterest"]'):
        target = anchor.get("href") or anchor.get("data-href") or ""
        match = _PINTEREST_MEDIA.search(target)
        if match:
            return unquote(match.group(1))

    match = _LECKER_IMAGE.search(html)
    if match:
        return match.group(1)

    return meta_content(soup, "og:image") or first_image_src(soup)


def _html_difficulty(text: str):
    lowered = text.lower()
    if "einfach" in lowered:
        return "leicht"
    if "schwer" in lowered or "schwierig" in lowered:
        return "schwer"
    return "mittel"


def _first_match(patterns, text: str) -> int | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return int(next(group for group in match.groups() if group))
    return None


def _from_html(soup: BeautifulSoup, html: str, url: str) -> ExtractedRecipeData:
    text = page_text(soup)
    title, subtitle = _split_title(element_text(soup.find("h1")))
    description = meta_content(soup, "description")
    minutes = _first_match(_TIME, text)
    keywords = extract_keywords(title, description, html_tags=_tags(soup))

    return ExtractedRecipeData(
        title=title,
        subtitle=subtitle,
        source_url=url,
        description=description or f"Rezept von Lecker.de: {url}",
        servings=_first_match(_SERVINGS, text) or DEFAULT_SERVINGS,
        time_entries=[TimeEntry(TOTAL_LABEL, minutes)] if minutes else [],
        difficulty=_html_difficulty(text),
        ingredients=_html_ingredients(soup) or [INGREDIENTS_PLACEHOLDER],
        instructions=_html_instructions(soup) or [INSTRUCTIONS_PLACEHOLDER],
        image_url=normalize_image_url(_html_image(soup, html)),
        keywords=keywords,
        category=extract_category(title, description, keywords=keywords),
    )


def parse(html: str, url: str) -> ExtractedRecipeData:
    soup = make_soup(html)
    recipe = find_json_ld_recipe(html, url)
    if recipe is not None and has_recipe_content(recipe):
        return _from_json_ld(recipe, soup, url)
    logger.info(f"No complete Lecker JSON-LD on {url}, reading markup instead")
    return _from_html(soup, html, url)


STRATEGY = Strategy(
    kind=StrategyKind.LECKER,
    name=NAME,
    domains=DOMAINS,
    description=(
        "Spezialisiert auf Lecker.de. Teilt Titel in Titel und Untertitel auf und wählt "
        "das hochauflösendste Rezeptbild aus."
    ),
    capabilities=CAPABILITIES,
    parse=parse,
)
