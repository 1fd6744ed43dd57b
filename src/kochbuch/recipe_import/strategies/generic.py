"""Generic strategy: schema.org structured data, then HTML heuristics.

Used for every site without a dedicated strategy and as the dispatcher's
fallback. Also parses raw JSON-LD payloads handed over by the browser
bookmarklet.
"""

import json
import logging
import re

from bs4 import BeautifulSoup

from ...config import settings
from ..capabilities import Capability, ExtractorCapabilities
from ..errors import NoRecipeFoundError
from ..json_ld import (
    extract_structured_data,
    find_recipe_in_json_ld,
    find_recipe_in_microdata,
    has_recipe_content,
)
from ..keywords import extract_category, extract_keywords, map_difficulty
from ..markup import (
    absolute_url,
    first_image_src,
    make_soup,
    meta_content,
    page_text,
    page_title,
    select_texts,
)
from ..models import (
    INGREDIENTS_PLACEHOLDER,
    INSTRUCTIONS_PLACEHOLDER,
    ExtractedRecipeData,
    StrategyKind,
)
from ..normalizer import (
    build_time_entries,
    clean_text,
    extract_image_url,
    extract_instructions_text,
    first_string,
    normalize_ingredients,
    parse_nutrition,
    parse_servings,
    structured_minutes,
)
from . import Strategy

logger = logging.getLogger(__name__)

NAME = "JSON-LD Generic Extractor"
UNTITLED = "Unbenanntes Rezept"
HTML_UNTITLED = "Importiertes Rezept"

CAPABILITIES = ExtractorCapabilities(
    supports_ingredient_groups=Capability.UNSUPPORTED,
    supports_preparation_groups=Capability.UNSUPPORTED,
    supports_images=Capability.SUPPORTED,
    supports_nutrition=Capability.EXPERIMENTAL,
    supports_metadata=Capability.SUPPORTED,
    supports_time_extraction=Capability.EXPERIMENTAL,
    supports_difficulty_extraction=Capability.UNSUPPORTED,
    supports_keyword_extraction=Capability.EXPERIMENTAL,
    supports_category_extraction=Capability.EXPERIMENTAL,
)

INGREDIENT_SELECTORS = (
    '[itemprop="recipeIngredient"]',
    '[itemprop="ingredients"]',
    'li[class*="ingredient"]',
    '[class*="ingredient"] li',
)
INSTRUCTION_SELECTORS = (
    '[itemprop="recipeInstructions"] li',
    '[itemprop="recipeInstructions"]',
    'li[class*="instruction"]',
    '[class*="instruction"] li',
    'div[class*="step"]',
    'p[class*="direction"]',
    '[class*="preparation"] li',
)

_SERVINGS = re.compile(r"(\d+)\s*(?:Portionen|Portion|Personen|Person|servings)", re.IGNORECASE)


def recipe_from_json_ld(
    recipe: dict,
    source_url: str,
    html_tags: list[str] | None = None,
) -> ExtractedRecipeData:
    """Map a schema.org Recipe node onto ExtractedRecipeData."""
    title = first_string(recipe.get("name")) or first_string(recipe.get("headline")) or UNTITLED
    description = first_string(recipe.get("description"))
    keywords = extract_keywords(title, description, json_ld=recipe, html_tags=html_tags)

    ingredients = normalize_ingredients(recipe.get("recipeIngredient") or recipe.get("ingredients"))
    instructions = extract_instructions_text(recipe.get("recipeInstructions"))

    return ExtractedRecipeData(
        title=title,
        source_url=source_url,
        description=description,
        servings=parse_servings(recipe.get("recipeYield")),
        time_entries=build_time_entries(
            structured_minutes(recipe.get("prepTime")),
            structured_minutes(recipe.get("cookTime")),
            structured_minutes(recipe.get("totalTime")),
        ),
        difficulty=map_difficulty(first_string(recipe.get("difficulty"))),
        ingredients=ingredients or [INGREDIENTS_PLACEHOLDER],
        instructions=instructions or [INSTRUCTIONS_PLACEHOLDER],
        image_url=extract_image_url(recipe.get("image"), source_url),
        nutrition=parse_nutrition(recipe.get("nutrition")),
        keywords=keywords,
        category=extract_category(title, description, json_ld=recipe, keywords=keywords),
    )


def parse(html: str, url: str) -> ExtractedRecipeData:
    """JSON-LD, then microdata, then HTML heuristics."""
    soup = make_soup(html)

    structured = extract_structured_data(html, url)

    recipe = find_recipe_in_json_ld(structured["json-ld"])
    if recipe is not None and has_recipe_content(recipe):
        logger.debug(f"Using JSON-LD recipe for {url}")
        return recipe_from_json_ld(recipe, url)

    microdata = find_recipe_in_microdata(structured["microdata"])
    if microdata and has_recipe_content(microdata):
        logger.debug(f"Using microdata recipe for {url}")
        return recipe_from_json_ld(microdata, url)

    logger.info(f"No usable structured data on {url}, falling back to HTML heuristics")
    return _from_html(soup, url)


def parse_json_ld_payload(payload, source_url: str = "") -> ExtractedRecipeData:
    """
    Parse a JSON-LD payload that the caller already has.

    Args:
        payload: Parsed JSON (object or array) or a JSON string
        source_url: Page the payload came from, if known

    Raises:
        NoRecipeFoundError: If the payload is not JSON or holds no Recipe
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise NoRecipeFoundError(f"Invalid JSON-LD payload: {e}") from e

    recipe = find_recipe_in_json_ld(payload)
    if recipe is None:
        raise NoRecipeFoundError("No Recipe found in JSON-LD payload")

    if not source_url and isinstance(recipe.get("url"), str):
        source_url = recipe["url"]
    return recipe_from_json_ld(recipe, source_url)


def _from_html(soup: BeautifulSoup, url: str) -> ExtractedRecipeData:
    limit = settings.kochbuch_max_html_items
    title = page_title(soup) or HTML_UNTITLED
    description = meta_content(soup, "description") or meta_content(soup, "og:description")

    ingredients = select_texts(soup, INGREDIENT_SELECTORS, limit=limit)
    instructions = select_texts(soup, INSTRUCTION_SELECTORS, min_length=10, limit=limit)

    servings_match = _SERVINGS.search(page_text(soup))
    meta_keywords = meta_content(soup, "keywords")
    html_tags = [k for k in (meta_keywords or "").split(",") if k.strip()]
    keywords = extract_keywords(title, description, html_tags=html_tags)

    image = meta_content(soup, "og:image") or first_image_src(soup)

    return ExtractedRecipeData(
        title=clean_text(title),
        source_url=url,
        description=description or f"Rezept importiert von {url}",
        servings=int(servings_match.group(1)) if servings_match else None,
        ingredients=ingredients or [INGREDIENTS_PLACEHOLDER],
        instructions=instructions or [INSTRUCTIONS_PLACEHOLDER],
        image_url=absolute_url(image, url),
        keywords=keywords,
        category=extract_category(title, description, keywords=keywords),
    )


STRATEGY = Strategy(
    kind=StrategyKind.GENERIC_JSON_LD,
    name=NAME,
    domains=("*",),
    description=(
        "Generischer Extraktor für alle Websites mit schema.org-Rezeptdaten (JSON-LD oder "
        "Microdata). Ohne strukturierte Daten wird das HTML heuristisch ausgewertet."
    ),
    capabilities=CAPABILITIES,
    parse=parse,
)
