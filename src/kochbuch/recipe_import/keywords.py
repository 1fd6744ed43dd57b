"""Keyword, category and difficulty detection."""

import logging
import re

from .models import Difficulty
from .normalizer import clean_text

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 10

CATEGORIES = (
    "Vorspeise",
    "Hauptgericht",
    "Dessert",
    "Suppe",
    "Salat",
    "Beilage",
    "Getränk",
    "Frühstück",
    "Snack",
    "Brot & Gebäck",
)

# Lowercased declared category text -> canonical category
CATEGORY_SYNONYMS: dict[str, str] = {
    **dict.fromkeys(
        ["vorspeise", "vorspeisen", "starter", "starters", "appetizer", "appetizers", "antipasti"],
        "Vorspeise",
    ),
    **dict.fromkeys(
        [
            "hauptgericht", "hauptgerichte", "hauptspeise", "hauptspeisen", "main course",
            "main dish", "main", "dinner", "abendessen", "mittagessen", "lunch",
        ],
        "Hauptgericht",
    ),
    **dict.fromkeys(
        [
            "dessert", "desserts", "nachtisch", "nachspeise", "nachspeisen", "süßspeise",
            "süßspeisen", "kuchen", "torte", "torten", "kuchen & torten",
        ],
        "Dessert",
    ),
    **dict.fromkeys(
        ["suppe", "suppen", "eintopf", "eintöpfe", "soup", "soups", "stew"], "Suppe"
    ),
    **dict.fromkeys(["salat", "salate", "salad", "salads"], "Salat"),
    **dict.fromkeys(
        ["beilage", "beilagen", "side dish", "side dishes", "side", "sides"], "Beilage"
    ),
    **dict.fromkeys(
        ["getränk", "getränke", "drink", "drinks", "beverage", "beverages", "cocktail", "cocktails"],
        "Getränk",
    ),
    **dict.fromkeys(["frühstück", "breakfast", "brunch"], "Frühstück"),
    **dict.fromkeys(["snack", "snacks", "fingerfood", "imbiss", "party food"], "Snack"),
    **dict.fromkeys(
        [
            "brot", "brote", "brötchen", "gebäck", "brot & gebäck", "brot und gebäck",
            "backen", "bread", "baking", "baked goods", "kekse", "plätzchen",
        ],
        "Brot & Gebäck",
    ),
}

# Title/description words that reveal the category when nothing is declared
_CATEGORY_HINTS: tuple[tuple[str, str], ...] = (
    ("suppe", "Suppe"),
    ("eintopf", "Suppe"),
    ("salat", "Salat"),
    ("brötchen", "Brot & Gebäck"),
    ("brot", "Brot & Gebäck"),
    ("plätzchen", "Brot & Gebäck"),
    ("kuchen", "Dessert"),
    ("torte", "Dessert"),
    ("dessert", "Dessert"),
    ("pudding", "Dessert"),
    ("smoothie", "Getränk"),
    ("cocktail", "Getränk"),
    ("porridge", "Frühstück"),
    ("müsli", "Frühstück"),
    ("frühstück", "Frühstück"),
)

# Keyword -> lowercase trigger fragments searched in title + description
KEYWORD_VOCABULARY: dict[str, tuple[str, ...]] = {
    # Cooking methods
    "Gebacken": ("gebacken", "backofen", "überbacken"),
    "Gegrillt": ("gegrillt", "grill"),
    "Gebraten": ("gebraten", "pfanne"),
    "Geschmort": ("geschmort", "schmor"),
    "Gekocht": ("gekocht",),
    "Gedünstet": ("gedünstet",),
    "Frittiert": ("frittiert",),
    "Ofengericht": ("ofen", "auflauf", "gratin"),
    "One Pot": ("one pot", "eintopf"),
    # Diets
    "Vegetarisch": ("vegetarisch", "veggie"),
    "Vegan": ("vegan",),
    "Glutenfrei": ("glutenfrei",),
    "Laktosefrei": ("laktosefrei",),
    "Low Carb": ("low carb", "low-carb"),
    "Schnell": ("schnell", "blitz", "minuten"),
    "Einfach": ("einfach",),
    "Gesund": ("gesund",),
    # Origins
    "Italienisch": ("italienisch", "pasta", "risotto", "pizza"),
    "Asiatisch": ("asiatisch", "wok", "curry"),
    "Mexikanisch": ("mexikanisch", "tacos", "burrito"),
    "Griechisch": ("griechisch", "feta", "gyros"),
    "Französisch": ("französisch",),
    "Orientalisch": ("orientalisch",),
    "Deutsch": ("deutsch", "klassiker"),
    # Textures
    "Cremig": ("cremig",),
    "Knusprig": ("knusprig",),
    "Saftig": ("saftig",),
    # Main ingredients
    "Hähnchen": ("hähnchen", "huhn", "chicken"),
    "Rind": ("rind",),
    "Schwein": ("schwein",),
    "Hackfleisch": ("hackfleisch",),
    "Fisch": ("fisch", "lachs"),
    "Nudeln": ("nudeln", "spaghetti", "pasta", "spätzle"),
    "Kartoffeln": ("kartoffel",),
    "Reis": ("reis",),
    "Käse": ("käse",),
    "Gemüse": ("gemüse",),
    "Schokolade": ("schokolade", "schoko"),
}

_DIFFICULTY_TERMS: tuple[tuple[Difficulty, tuple[str, ...]], ...] = (
    ("leicht", ("simpel", "einfach", "leicht", "easy")),
    ("mittel", ("normal", "mittel", "medium", "mittelschwer")),
    ("schwer", ("schwer", "schwierig", "komplex", "anspruchsvoll", "hard", "difficult")),
)


def keywords_from_json_ld(recipe: dict | None) -> list[str]:
    """Declared keywords, category and cuisine of a structured-data recipe."""
    if not recipe:
        return []

    found: list[str] = []
    keywords = recipe.get("keywords")
    if isinstance(keywords, str):
        found.extend(keywords.split(","))
    elif isinstance(keywords, list):
        found.extend(k for k in keywords if isinstance(k, str))

    for key in ("recipeCategory", "recipeCuisine"):
        value = recipe.get(key)
        if isinstance(value, str):
            found.extend(value.split(","))
        elif isinstance(value, list):
            found.extend(v for v in value if isinstance(v, str))

    return _dedupe(found)


def vocabulary_keywords(title: str, description: str | None = None) -> list[str]:
    """Keywords from the fixed vocabulary that occur in title or description."""
    text = f"{title} {description or ''}".lower()
    return [
        keyword
        for keyword, triggers in KEYWORD_VOCABULARY.items()
        if any(trigger in text for trigger in triggers)
    ]


def extract_keywords(
    title: str,
    description: str | None = None,
    json_ld: dict | None = None,
    html_tags: list[str] | None = None,
) -> list[str]:
    """
    Collect up to ten keywords for a recipe.

    Sources in order of preference: declared structured-data keywords,
    tags found in the page markup, then the built-in vocabulary matched
    against title and description. Duplicates are dropped ignoring case.
    """
    candidates = [
        *keywords_from_json_ld(json_ld),
        *(html_tags or []),
        *vocabulary_keywords(title, description),
    ]
    keywords = _dedupe(candidates)
    logger.debug(f"Keywords for {title!r}: {keywords}")
    return keywords


def normalize_category(text: str | None) -> str | None:
    """
    Map declared category text onto the fixed category set.

    "Main Course" -> "Hauptgericht", "Nachspeisen" -> "Dessert".
    Unknown categories are returned unchanged (trimmed).
    """
    cleaned = clean_text(text)
    if not cleaned:
        return None
    return CATEGORY_SYNONYMS.get(cleaned.lower(), cleaned)


def category_from_json_ld(recipe: dict | None) -> str | None:
    if not recipe:
        return None
    value = recipe.get("recipeCategory")
    if isinstance(value, list):
        value = next((v for v in value if isinstance(v, str) and v.strip()), None)
    if isinstance(value, str) and "," in value:
        value = value.split(",")[0]
    return normalize_category(value) if isinstance(value, str) else None


def extract_category(
    title: str,
    description: str | None = None,
    json_ld: dict | None = None,
    html_category: str | None = None,
    keywords: list[str] | None = None,
) -> str | None:
    """
    Pick one category for a recipe.

    Declared structured-data category first, then a category named in the
    page markup, then a keyword that is a known category, then hints in
    title and description.
    """
    declared = category_from_json_ld(json_ld)
    if declared:
        return declared

    if html_category:
        category = normalize_category(html_category)
        if category:
            return category

    for keyword in keywords or []:
        category = CATEGORY_SYNONYMS.get(keyword.strip().lower())
        if category:
            return category

    text = f"{title} {description or ''}".lower()
    for hint, category in _CATEGORY_HINTS:
        if hint in text:
            return category
    return None


def map_difficulty(text: str | None) -> Difficulty | None:
    """
    Map site wording to leicht/mittel/schwer.

    Exact terms are tried before partial matches, so "mittelschwer" is
    "mittel" and not "schwer".
    """
    value = clean_text(text).lower()
    if not value:
        return None

    for difficulty, terms in _DIFFICULTY_TERMS:
        if value in terms:
            return difficulty

    for word in re.findall(r"\w+", value):
        for difficulty, terms in _DIFFICULTY_TERMS:
            if word in terms:
                return difficulty

    for difficulty, terms in _DIFFICULTY_TERMS:
        if any(term in value for term in terms):
            return difficulty
    return None


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        text = clean_text(value)
        key = text.lower()
        if len(text) <= 2 or key in seen:
            continue
        seen.add(key)
        result.append(text)
        if len(result) >= MAX_KEYWORDS:
            break
    return result
