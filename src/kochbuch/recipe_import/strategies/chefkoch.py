"""Chefkoch.de strategy.

Chefkoch ships JSON-LD on nearly every recipe page; the markup fallback
reads the ingredient table and the "recipe-text" blocks. Times and
keywords come from structured data only, the difficulty from markup only.
"""

import logging
import re

from bs4 import BeautifulSoup

from ..capabilities import Capability, ExtractorCapabilities
from ..json_ld import find_json_ld_recipe
from ..keywords import extract_category, keywords_from_json_ld, map_difficulty
from ..markup import absolute_url, element_text, make_soup, meta_content, page_text, select_texts
from ..models import (
    INGREDIENTS_PLACEHOLDER,
    INSTRUCTIONS_PLACEHOLDER,
    ExtractedRecipeData,
    StrategyKind,
    TimeEntry,
)
from ..normalizer import (
    TOTAL_LABEL,
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

NAME = "Chefkoch.de Extractor"
DOMAINS = ("chefkoch.de",)
DEFAULT_SERVINGS = 4
MAX_HTML_INGREDIENTS = 30

CAPABILITIES = ExtractorCapabilities(
    supports_ingredient_groups=Capability.UNSUPPORTED,
    supports_preparation_groups=Capability.UNSUPPORTED,
    supports_images=Capability.SUPPORTED,
    supports_nutrition=Capability.EXPERIMENTAL,
    supports_metadata=Capability.SUPPORTED,
    supports_time_extraction=Capability.SUPPORTED,
    supports_difficulty_extraction=Capability.EXPERIMENTAL,
    supports_keyword_extraction=Capability.SUPPORTED,
    supports_category_extraction=Capability.SUPPORTED,
)

_SENTENCE_BREAK = re.compile(r"(?<=\.)\s+(?=[A-ZÄÖÜ])")
_SERVINGS = re.compile(r"(\d+)\s*(?:Portion|Person|Stück)", re.IGNORECASE)
_DIFFICULTY_LABEL = re.compile(
    r"(?:Schwierigkeitsgrad|Schwierigkeit|Difficulty):?\s*([^\n]+)", re.IGNORECASE
)
_MIN_STEP_LENGTH = 10


def split_instruction_text(text: str) -> list[str]:
    """
    Split a Chefkoch instruction blob into steps.

    Blank lines separate steps when present, otherwise sentences do.
    Fragments of ten characters or less are dropped.
    """
    paragraphs = [clean_text(p) for p in re.split(r"\n\s*\n", text or "")]
    paragraphs = [p for p in paragraphs if p]
    if len(paragraphs) > 1:
        steps = paragraphs
    else:
        steps = [clean_text(s) for s in _SENTENCE_BREAK.split(clean_text(text))]
    return [s for s in steps if len(s) > _MIN_STEP_LENGTH]


def _html_ingredients(soup: BeautifulSoup) -> list[str]:
    rows = []
    for table in soup.select("table.ingredients"):
        for row in table.find_all("tr"):
            cells = [element_text(cell) for cell in row.find_all("td")]
            line = " ".join(cell for cell in cells if cell)
            if line:
                rows.append(line)
    if rows:
        return rows

    items = select_texts(soup, ('ul[class*="ingredient"] li', 'ol[class*="ingredient"] li'))
    if items:
        return items

    cells = select_texts(soup, ("td.td-left",))
    cells = [c for c in cells if c.lower() not in ("zutat", "zutaten", "menge")]
    return cells[:MAX_HTML_INGREDIENTS]


def _html_instructions(soup: BeautifulSoup) -> list[str]:
    steps = []
    for block in soup.select("div.recipe-text"):
        steps.extend(split_instruction_text(block.get_text("\n")))
    if steps:
        return steps
    return select_texts(soup, ('ol[class*="instruction"] li',), min_length=_MIN_STEP_LENGTH + 1)


def _json_ld_instructions(value) -> list[str]:
    if isinstance(value, str):
        return split_instruction_text(value)
    return extract_instructions_text(value)


def _difficulty(soup: BeautifulSoup):
    span = soup.select_one("span.recipe-difficulty")
    if span is not None:
        difficulty = map_difficulty(element_text(span))
        if difficulty:
            return difficulty

    label = _DIFFICULTY_LABEL.search(page_text(soup))
    if label:
        difficulty = map_difficulty(label.group(1))
        if difficulty:
            return difficulty

    return map_difficulty(meta_content(soup, "description"))


def _from_json_ld(recipe: dict, soup: BeautifulSoup, url: str) -> ExtractedRecipeData | None:
    ingredients = normalize_ingredients(recipe.get("recipeIngredient")) or _html_ingredients(soup)
    instructions = _json_ld_instructions(recipe.get("recipeInstructions")) or _html_instructions(
        soup
    )
    if not ingredients or not instructions:
        return None

    title = first_string(recipe.get("name")) or _html_title(soup)
    description = first_string(recipe.get("description"))
    cook_minutes = structured_minutes(recipe.get("cookTime"))
    keywords = keywords_from_json_ld(recipe)

    return ExtractedRecipeData(
        title=title,
        source_url=url,
        description=description,
        servings=parse_servings(recipe.get("recipeYield"), default=DEFAULT_SERVINGS),
        time_entries=[TimeEntry(TOTAL_LABEL, cook_minutes)] if cook_minutes else [],
        difficulty=_difficulty(soup),
        ingredients=ingredients,
        instructions=instructions,
        image_url=extract_image_url(recipe.get("image"), url),
        nutrition=parse_nutrition(recipe.get("nutrition")),
        keywords=keywords,
        category=extract_category(title, description, json_ld=recipe, keywords=keywords),
    )


def _html_title(soup: BeautifulSoup) -> str:
    title = element_text(soup.select_one("h1.page-title")) or element_text(soup.find("h1"))
    if not title and soup.title:
        title = element_text(soup.title).split(" | ")[0]
    return title or "Chefkoch-Rezept"


def _from_html(soup: BeautifulSoup, url: str) -> ExtractedRecipeData:
    servings = _SERVINGS.search(page_text(soup))
    return ExtractedRecipeData(
        title=_html_title(soup),
        source_url=url,
        description=meta_content(soup, "description"),
        servings=int(servings.group(1)) if servings else DEFAULT_SERVINGS,
        difficulty=_difficulty(soup),
        ingredients=_html_ingredients(soup) or [INGREDIENTS_PLACEHOLDER],
        instructions=_html_instructions(soup) or [INSTRUCTIONS_PLACEHOLDER],
        image_url=absolute_url(meta_content(soup, "og:image"), url),
    )


def parse(html: str, url: str) -> ExtractedRecipeData:
    soup = make_soup(html)
    recipe = find_json_ld_recipe(html, url)
    if recipe is not None:
        data = _from_json_ld(recipe, soup, url)
        if data is not None:
            return data
        logger.info(f"Chefkoch JSON-LD on {url} is incomplete, reading markup instead")
    return _from_html(soup, url)


STRATEGY = Strategy(
    kind=StrategyKind.CHEFKOCH,
    name=NAME,
    domains=DOMAINS,
    description=(
        "Spezialisiert auf Chefkoch.de. Liest die strukturierten Rezeptdaten der Seite und "
        "ergänzt fehlende Zutaten, Zubereitungsschritte und den Schwierigkeitsgrad aus dem HTML."
    ),
    capabilities=CAPABILITIES,
    parse=parse,
)
