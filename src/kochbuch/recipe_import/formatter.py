"""
Kochbuch - Recipe payload format.

Turns ExtractedRecipeData into the recipe document the storage layer
accepts. Field names serialize in camelCase (by_alias=True); every group
and step gets its own id.
"""

import logging
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .ingredient_parser import parse_multiple_ingredients
from .models import ExtractedRecipeData, ParsedIngredient

logger = logging.getLogger(__name__)

DEFAULT_INGREDIENT_GROUP = "Zutaten"
DEFAULT_PREPARATION_GROUP = "Zubereitung"
DEFAULT_SERVINGS = 4


def new_id() -> str:
    return uuid4().hex


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Ingredients
# =============================================================================


class QuantityPayload(_Payload):
    amount: float
    unit: str


class IngredientPayload(_Payload):
    """One parsed ingredient."""

    name: str
    description: str | None = None
    quantities: list[QuantityPayload]


class IngredientGroup(_Payload):
    id: str = Field(default_factory=new_id)
    title: str | None = None
    ingredients: list[IngredientPayload] = Field(default_factory=list)


# =============================================================================
# Preparation
# =============================================================================


class PreparationStep(_Payload):
    """A step; ingredient links are filled in later by the editor."""

    id: str = Field(default_factory=new_id)
    text: str
    linked_ingredients: list[str] = Field(default_factory=list)
    intermediate_ingredients: list[str] = Field(default_factory=list)


class PreparationGroup(_Payload):
    id: str = Field(default_factory=new_id)
    title: str | None = None
    steps: list[PreparationStep] = Field(default_factory=list)


# =============================================================================
# Recipe
# =============================================================================


class TimeEntryPayload(_Payload):
    label: str
    minutes: int


class NutritionPayload(_Payload):
    calories: float | None = None
    carbohydrates: float | None = None
    protein: float | None = None
    fat: float | None = None


class RecipeMetadata(_Payload):
    servings: int = DEFAULT_SERVINGS
    time_entries: list[TimeEntryPayload] = Field(default_factory=list)
    difficulty: str | None = None
    nutrition: NutritionPayload | None = None


class RecipePayload(_Payload):
    """Partial recipe document produced from an import."""

    title: str
    subtitle: str | None = None
    description: str | None = None
    category: str | None = None
    tags: list[str] | None = None
    metadata: RecipeMetadata
    ingredient_groups: list[IngredientGroup]
    preparation_groups: list[PreparationGroup]
    image_url: str | None = None
    source_url: str | None = None

    def to_document(self) -> dict:
        """camelCase dict without unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def all_ids(self) -> list[str]:
        ids = [group.id for group in self.ingredient_groups]
        for group in self.preparation_groups:
            ids.append(group.id)
            ids.extend(step.id for step in group.steps)
        return ids


def _ingredient_payload(ingredient: ParsedIngredient) -> IngredientPayload:
    return IngredientPayload(
        name=ingredient.name,
        description=ingredient.description,
        quantities=[QuantityPayload(amount=q.amount, unit=q.unit) for q in ingredient.quantities],
    )


def convert_to_recipe_format(data: ExtractedRecipeData) -> RecipePayload:
    """
    Build the recipe payload for extracted data.

    Each raw ingredient line is parsed with parse_multiple_ingredients, so
    "Salz und Pfeffer" becomes two ingredients. All ingredients land in a
    single "Zutaten" group and all steps in a single "Zubereitung" group.
    """
    ingredients = [
        _ingredient_payload(parsed)
        for line in data.ingredients
        for parsed in parse_multiple_ingredients(line)
    ]
    steps = [PreparationStep(text=text) for text in data.instructions if text.strip()]

    nutrition = None
    if data.nutrition is not None:
        nutrition = NutritionPayload(
            calories=data.nutrition.calories,
            carbohydrates=data.nutrition.carbohydrates,
            protein=data.nutrition.protein,
            fat=data.nutrition.fat,
        )

    payload = RecipePayload(
        title=data.title,
        subtitle=data.subtitle,
        description=data.description,
        category=data.category,
        tags=list(data.keywords) or None,
        metadata=RecipeMetadata(
            servings=data.servings or DEFAULT_SERVINGS,
            time_entries=[
                TimeEntryPayload(label=entry.label, minutes=entry.minutes)
                for entry in data.time_entries
            ],
            difficulty=data.difficulty,
            nutrition=nutrition,
        ),
        ingredient_groups=[IngredientGroup(title=DEFAULT_INGREDIENT_GROUP, ingredients=ingredients)],
        preparation_groups=[PreparationGroup(title=DEFAULT_PREPARATION_GROUP, steps=steps)],
        image_url=data.image_url,
        source_url=data.source_url or None,
    )
    logger.debug(
        f"Formatted {data.title!r}: {len(ingredients)} ingredients from "
        f"{len(data.ingredients)} lines, {len(steps)} steps"
    )
    return payload
