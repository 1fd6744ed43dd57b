"""Data models for recipe import."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

Difficulty = Literal["leicht", "mittel", "schwer"]

# Placeholders emitted when a reachable page yields nothing usable
UNKNOWN_INGREDIENT_NAME = "Unbekannte Zutat"
INGREDIENTS_PLACEHOLDER = "Bitte Zutaten manuell hinzufügen"
INSTRUCTIONS_PLACEHOLDER = "Bitte Zubereitungsschritte manuell hinzufügen"


class StrategyKind(str, Enum):
    """Source family an extraction strategy handles."""

    CHEFKOCH = "chefkoch"
    LECKER = "lecker"
    GAUMENFREUNDIN = "gaumenfreundin"
    GENERIC_JSON_LD = "generic-json-ld"


@dataclass(frozen=True)
class Quantity:
    """An amount in a unit. amount=0 with unit="" means "indefinite"."""

    amount: float
    unit: str


@dataclass(frozen=True)
class ParsedIngredient:
    """One ingredient line split into name, quantity and description."""

    name: str
    quantities: list[Quantity]
    description: str | None = None

    @property
    def quantity(self) -> Quantity:
        return self.quantities[0]


@dataclass(frozen=True)
class TimeEntry:
    """A labelled cooking phase, e.g. ("Zubereitungszeit", 45)."""

    label: str
    minutes: int


@dataclass(frozen=True)
class Nutrition:
    """Per-serving nutrition values."""

    calories: float | None = None
    carbohydrates: float | None = None
    protein: float | None = None
    fat: float | None = None


@dataclass(frozen=True)
class ExtractedRecipeData:
    """Output of a single extraction call, before formatting."""

    title: str
    source_url: str
    subtitle: str | None = None
    description: str | None = None
    servings: int | None = None
    time_entries: list[TimeEntry] = field(default_factory=list)
    difficulty: Difficulty | None = None
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    image_url: str | None = None
    nutrition: Nutrition | None = None
    keywords: list[str] = field(default_factory=list)
    category: str | None = None

    @property
    def total_minutes(self) -> int:
        return sum(entry.minutes for entry in self.time_entries)


@dataclass
class ImportResult:
    """Result of an end-to-end import: extraction, formatting, advisories."""

    data: ExtractedRecipeData
    payload: Any
    strategy_name: str
    strategy_kind: StrategyKind
    warnings: list[str] = field(default_factory=list)
