"""JSON-LD/Schema.org discovery.

Structured data is read with extruct: JSON-LD blocks first, microdata as
the fallback. Broken structured data is treated as absent, never as an
error.
"""

import logging
import re

from .markup import make_soup
from .normalizer import extract_instructions_text, normalize_ingredients

logger = logging.getLogger(__name__)

STRUCTURED_SYNTAXES = ("json-ld", "microdata")

_JSON_LD_TYPE = re.compile(r"application/ld\+json", re.IGNORECASE)


def is_recipe_node(node) -> bool:
    """True for a dict whose @type is (or includes) Recipe."""
    if not isinstance(node, dict):
        return False
    node_type = node.get("@type", "")
    types = node_type if isinstance(node_type, list) else [node_type]
    return any(
        isinstance(t, str) and t.rsplit("/", 1)[-1].rsplit(":", 1)[-1].lower() == "recipe"
        for t in types
    )


def find_recipe_in_json_ld(data) -> dict | None:
    """
    Find a Recipe in parsed JSON-LD.

    Handles a bare object, arrays of objects, @graph containers and
    pages that wrap the recipe in mainEntity.
    """
    if isinstance(data, list):
        for item in data:
            recipe = find_recipe_in_json_ld(item)
            if recipe is not None:
                return recipe
        return None

    if not isinstance(data, dict):
        return None

    if is_recipe_node(data):
        return data

    for key in ("@graph", "mainEntity"):
        if key in data:
            recipe = find_recipe_in_json_ld(data[key])
            if recipe is not None:
                return recipe
    return None


def _extract(html: str, base_url: str | None, syntaxes: list[str]) -> dict[str, list]:
    import extruct

    try:
        return extruct.extract(html, base_url=base_url or None, syntaxes=syntaxes, errors="ignore")
    except Exception as e:
        # lxml rejects some documents outright
        logger.debug(f"Structured data extraction failed for {base_url}: {e}")
        return {}


def _json_ld_per_block(html: str, base_url: str | None) -> list:
    """JSON-LD items block by block, so one broken block does not hide the rest."""
    items = []
    for script in make_soup(html).find_all("script", attrs={"type": _JSON_LD_TYPE}):
        block = _extract(str(script), base_url, ["json-ld"]).get("json-ld")
        if block is None:
            logger.debug(f"Skipping malformed JSON-LD block on {base_url}")
            continue
        items.extend(block)
    return items


def extract_structured_data(
    html: str,
    base_url: str | None = None,
    syntaxes: tuple[str, ...] = STRUCTURED_SYNTAXES,
) -> dict[str, list]:
    """
    Run extruct once over a page.

    Returns a dict keyed by syntax ("json-ld", "microdata"), each a list of
    items. A syntax extruct could not read comes back as an empty list.
    """
    if not html or not html.strip():
        return {syntax: [] for syntax in syntaxes}

    data = _extract(html, base_url, list(syntaxes))
    if "json-ld" in syntaxes and "json-ld" not in data:
        data["json-ld"] = _json_ld_per_block(html, base_url)
    return {syntax: data.get(syntax) or [] for syntax in syntaxes}


def find_json_ld_recipe(html: str, base_url: str | None = None) -> dict | None:
    """First Recipe node across all JSON-LD blocks of a page."""
    data = extract_structured_data(html, base_url, syntaxes=("json-ld",))
    return find_recipe_in_json_ld(data["json-ld"])


def find_recipe_in_microdata(items: list) -> dict | None:
    """Recipe properties from extruct's microdata items."""
    for item in items:
        if isinstance(item, dict) and "Recipe" in str(item.get("type", "")):
            return item.get("properties", {})
    return None


def has_recipe_content(recipe: dict) -> bool:
    """Structured data is only trusted with both ingredients and instructions."""
    return bool(
        normalize_ingredients(recipe.get("recipeIngredient") or recipe.get("ingredients"))
        and extract_instructions_text(recipe.get("recipeInstructions"))
    )
