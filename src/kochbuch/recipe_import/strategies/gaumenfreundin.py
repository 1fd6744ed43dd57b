"""Gaumenfreundin.de strategy.

The site uses the WP Recipe Maker plugin, so both the JSON-LD and the
recipe card markup follow the plugin's conventions. Card times and tags
are what the author maintains by hand and win over the structured data.
"""

import logging
import re

from bs4 import BeautifulSoup

from ..capabilities import Capability, ExtractorCapabilities
from ..json_ld import find_json_ld_recipe
from ..keywords import extract_category, extract_keywords, map_difficulty
from ..markup import (
    absolute_url,
    element_text,
    first_image_src,
    make_soup,
    meta_content,
    page_text,
    select_texts,
)
from ..models import (
    INGREDIENTS_PLACEHOLDER,
    INSTRUCTIONS_PLACEHOLDER,
    ExtractedRecipeData,
    StrategyKind,
    TimeEntry,
)
from ..normalizer import (
    build_time_entries,
    extract_image_url,
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

NAME = "Gaumenfreundin.de Extractor"
DOMAINS = ("gaumenfreundin.de",)
TITLE_SEPARATORS = (" – ",)
DEFAULT_SERVINGS = 4
DEFAULT_PREP_MINUTES = 15
NOISE_MARKERS = ("Rezepte", "Merkliste")

CAPABILITIES = ExtractorCapabilities(
    supports_ingredient_groups=Capability.UNSUPPORTED,
    supports_preparation_groups=Capability.UNSUPPORTED,
    supports_images=Capability.SUPPORTED,
    supports_nutrition=Capability.EXPERIMENTAL,
    supports_metadata=Capability.SUPPORTED,
    supports_time_extraction=Capability.SUPPORTED,
    supports_difficulty_extraction=Capability.UNSUPPORTED,
    supports_keyword_extraction=Capability.SUPPORTED,
    supports_category_extraction=Capability.SUPPORTED,
)

INGREDIENT_SELECTORS = (
    "li.wprm-recipe-ingredient",
    '.wprm-recipe ul[class*="ingredients"] li',
    'ul[class*="ingredients"] li',
)
INSTRUCTION_SELECTORS = (
    ".wprm-recipe-instruction-text",
    '.wprm-recipe ol[class*="instructions"] li',
    "ol li",
)

_NUMBER = re.compile(r"(\d+)")
_TEXT_TIMES = (
    re.compile(r"Zubereitung\s+(\d+)\s*Min", re.IGNORECASE),
    re.compile(r"Gesamtzeit\s+(\d+)\s*Min", re.IGNORECASE),
    re.compile(r"(\d+)\s*Minuten", re.IGNORECASE),
)


def _is_noise(text: str) -> bool:
    return any(marker in text for marker in NOISE_MARKERS)


def _clean_ingredients(items: list[str]) -> list[str]:
    return [item for item in items if not _is_noise(item)]


def _clean_instructions(items: list[str]) -> list[str]:
    return [item for item in items if len(item) > 5 and not _is_noise(item)]


def _card_number(soup: BeautifulSoup, selector: str) -> int:
    match = _NUMBER.search(element_text(soup.select_one(selector)))
    return int(match.group(1)) if match else 0


def card_minutes(soup: BeautifulSoup, kind: str) -> int | None:
    """Minutes shown in the recipe card for prep, cook or total time."""
    hours = _card_number(soup, f".wprm-recipe-{kind}_time-hours")
    minutes = _card_number(soup, f".wprm-recipe-{kind}_time-minutes")
    total = hours * 60 + minutes
    return total or None


def card_tags(soup: BeautifulSoup) -> list[str]:
    """Course, cuisine and keyword tags of the recipe card."""
    tags = []
    for selector in (".wprm-recipe-course", ".wprm-recipe-cuisine", ".wprm-recipe-keyword"):
        for element in soup.select(selector):
            tags.extend(t.strip() for t in element_text(element).split(",") if t.strip())
    return tags


def _card_time_entries(soup: BeautifulSoup) -> list[TimeEntry]:
    return build_time_entries(
        card_minutes(soup, "prep"),
        card_minutes(soup, "cook"),
        card_minutes(soup, "total"),
    )


def _json_ld_time_entries(recipe: dict) -> list[TimeEntry]:
    total = structured_minutes(recipe.get("totalTime") or recipe.get("cookTime")) or 0
    prep = structured_minutes(recipe.get("prepTime")) or 0
    cook = max(0, total - prep)
    return build_time_entries(prep or DEFAULT_PREP_MINUTES, cook)


def _keywords_and_category(
    soup: BeautifulSoup,
    title: str,
    description: str | None,
    recipe: dict | None,
) -> tuple[list[str], str | None]:
    tags = card_tags(soup)
    course = element_text(soup.select_one(".wprm-recipe-course")).split(",")[0].strip() or None
    if tags:
        keywords = extract_keywords(title, description, html_tags=tags)
        category = extract_category(title, description, html_category=course, keywords=keywords)
    else:
        keywords = extract_keywords(title, description, json_ld=recipe)
        category = extract_category(title, description, json_ld=recipe, keywords=keywords)
    return keywords, category


def _html_image(soup: BeautifulSoup) -> str | None:
    card_image = soup.select_one('img[class*="wprm-recipe-image"], .wprm-recipe-image img')
    if card_image is not None:
        src = card_image.get("data-lazy-src") or card_image.get("src")
        if src and not src.startswith("data:"):
            return src
    return meta_content(soup, "og:image") or first_image_src(soup, r"\.jpe?g")


def _from_json_ld(recipe: dict, soup: BeautifulSoup, url: str) -> ExtractedRecipeData | None:
    ingredients = _clean_ingredients(
        normalize_ingredients(recipe.get("recipeIngredient") or recipe.get("ingredients"))
    )
    instructions = _clean_instructions(extract_instructions_text(recipe.get("recipeInstructions")))
    if not ingredients or not instructions:
        return None

    title, subtitle = split_title(first_string(recipe.get("name")) or "Gaumenfreundin-Rezept", TITLE_SEPARATORS)
    description = first_string(recipe.get("description"))
    keywords, category = _keywords_and_category(soup, title, description, recipe)

    return ExtractedRecipeData(
        title=title,
        subtitle=subtitle,
        source_url=url,
        description=description,
        servings=parse_servings(recipe.get("recipeYield"), default=DEFAULT_SERVINGS),
        time_entries=_card_time_entries(soup) or _json_ld_time_entries(recipe),
        difficulty=map_difficulty(first_string(recipe.get("difficulty"))) or "mittel",
        ingredients=ingredients,
        instructions=instructions,
        image_url=extract_image_url(recipe.get("image"), url),
        nutrition=parse_nutrition(recipe.get("nutrition")),
        keywords=keywords,
        category=category,
    )


def _text_time_entries(text: str) -> list[TimeEntry]:
    for pattern in _TEXT_TIMES:
        match = pattern.search(text)
        if match:
            return build_time_entries(int(match.group(1)), None)
    return build_time_entries(DEFAULT_PREP_MINUTES, None)


def _from_html(soup: BeautifulSoup, url: str) -> ExtractedRecipeData:
    title, subtitle = split_title(
        element_text(soup.find("h1")) or "Gaumenfreundin-Rezept", TITLE_SEPARATORS
    )
    description = meta_content(soup, "description")
    keywords, category = _keywords_and_category(soup, title, description, None)

    ingredients = _clean_ingredients(select_texts(soup, INGREDIENT_SELECTORS, min_length=3))
    instructions = _clean_instructions(select_texts(soup, INSTRUCTION_SELECTORS, min_length=11))
    servings = parse_servings(element_text(soup.select_one(".wprm-recipe-servings")))

    return ExtractedRecipeData(
        title=title,
        subtitle=subtitle,
        source_url=url,
        description=description,
        servings=servings or DEFAULT_SERVINGS,
        time_entries=_card_time_entries(soup) or _text_time_entries(page_text(soup)),
        difficulty="mittel",
        ingredients=ingredients or [INGREDIENTS_PLACEHOLDER],
        instructions=instructions or [INSTRUCTIONS_PLACEHOLDER],
        image_url=absolute_url(_html_image(soup), url),
        keywords=keywords,
        category=category,
    )


def parse(html: str, url: str) -> ExtractedRecipeData:
    soup = make_soup(html)
    recipe = find_json_ld_recipe(html, url)
    if recipe is not None:
        data = _from_json_ld(recipe, soup, url)
        if data is not None:
            return data
        logger.info(f"Gaumenfreundin JSON-LD on {url} is incomplete, reading recipe card instead")
    return _from_html(soup, url)


STRATEGY = Strategy(
    kind=StrategyKind.GAUMENFREUNDIN,
    name=NAME,
    domains=DOMAINS,
    description=(
        "Spezialisiert auf Gaumenfreundin.de. Liest die WP-Recipe-Maker-Rezeptkarte; "
        "Zeiten und Schlagworte der Karte haben Vorrang vor den strukturierten Daten."
    ),
    capabilities=CAPABILITIES,
    parse=parse,
)
