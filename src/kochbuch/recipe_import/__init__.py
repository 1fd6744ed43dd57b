"""
Recipe import.

Turns recipe pages from cooking websites (or raw JSON-LD) into structured
recipe data: site-specific strategies with a generic schema.org fallback,
a rule-based German ingredient parser and a unit catalog.
"""

from .capabilities import Capability, ExtractorCapabilities, build_import_warnings
from .errors import (
    ExtractionError,
    FetchError,
    InvalidUrlError,
    NoRecipeFoundError,
    RecipeImportError,
)
from .extractor import (
    ExtractorPreview,
    ExtractorRegistry,
    can_extract_from_url,
    create_default_registry,
    extract_from_html,
    extract_from_json_ld,
    extract_recipe,
    get_extractor_for_url,
    get_extractor_preview,
    get_supported_sites,
    import_json_ld,
    import_recipe,
)
from .formatter import RecipePayload, convert_to_recipe_format
from .ingredient_parser import parse_ingredient, parse_multiple_ingredients
from .models import (
    ExtractedRecipeData,
    ImportResult,
    Nutrition,
    ParsedIngredient,
    Quantity,
    StrategyKind,
    TimeEntry,
)
from .normalizer import parse_duration, parse_time_to_minutes
from .strategies import Strategy
from .units import (
    convert_from_base_unit,
    convert_to_base_unit,
    find_unit,
    normalize_to_base_unit,
)

__all__ = [
    # Dispatch
    "ExtractorRegistry",
    "ExtractorPreview",
    "Strategy",
    "StrategyKind",
    "create_default_registry",
    "get_extractor_for_url",
    "can_extract_from_url",
    "get_supported_sites",
    "get_extractor_preview",
    "extract_recipe",
    "extract_from_html",
    "extract_from_json_ld",
    "import_recipe",
    "import_json_ld",
    # Data
    "ExtractedRecipeData",
    "ImportResult",
    "Nutrition",
    "ParsedIngredient",
    "Quantity",
    "TimeEntry",
    "RecipePayload",
    "convert_to_recipe_format",
    # Parsing
    "parse_ingredient",
    "parse_multiple_ingredients",
    "parse_duration",
    "parse_time_to_minutes",
    "find_unit",
    "normalize_to_base_unit",
    "convert_to_base_unit",
    "convert_from_base_unit",
    # Capabilities
    "Capability",
    "ExtractorCapabilities",
    "build_import_warnings",
    # Errors
    "RecipeImportError",
    "InvalidUrlError",
    "FetchError",
    "NoRecipeFoundError",
    "ExtractionError",
]
