"""Tests for the recipe payload format."""

from kochbuch.recipe_import.formatter import (
    DEFAULT_INGREDIENT_GROUP,
    DEFAULT_PREPARATION_GROUP,
    RecipePayload,
    convert_to_recipe_format,
)
from kochbuch.recipe_import.models import ExtractedRecipeData, Nutrition, TimeEntry


def _data(**kwargs) -> ExtractedRecipeData:
    defaults = {
        "title": "Pfannkuchen",
        "source_url": "https://example.com/pfannkuchen",
        "ingredients": ["200 g Mehl", "2 Eier und Milch", "Salz und Pfeffer"],
        "instructions": ["Alles verrühren.", "  ", "In der Pfanne ausbacken."],
    }
    defaults.update(kwargs)
    return ExtractedRecipeData(**defaults)


class TestConvertToRecipeFormat:
    """ExtractedRecipeData to RecipePayload."""

    def test_ingredient_lines_are_split(self):
        payload = convert_to_recipe_format(_data())
        assert len(payload.ingredient_groups) == 1
        group = payload.ingredient_groups[0]
        assert group.title == DEFAULT_INGREDIENT_GROUP
        assert [i.name for i in group.ingredients] == ["Mehl", "Eier", "Milch", "Salz", "Pfeffer"]
        assert group.ingredients[0].quantities[0].amount == 200
        assert group.ingredients[0].quantities[0].unit == "g"
        assert group.ingredients[2].quantities[0].amount == 2

    def test_blank_steps_dropped(self):
        payload = convert_to_recipe_format(_data())
        group = payload.preparation_groups[0]
        assert group.title == DEFAULT_PREPARATION_GROUP
        assert [step.text for step in group.steps] == [
            "Alles verrühren.",
            "In der Pfanne ausbacken.",
        ]
        assert group.steps[0].linked_ingredients == []

    def test_ids_unique(self):
        payload = convert_to_recipe_format(_data())
        ids = payload.all_ids()
        assert len(ids) == 4
        assert len(set(ids)) == len(ids)

    def test_defaults(self):
        payload = convert_to_recipe_format(_data())
        assert payload.metadata.servings == 4
        assert payload.tags is None
        assert payload.metadata.nutrition is None

    def test_metadata_carried(self):
        payload = convert_to_recipe_format(
            _data(
                servings=2,
                time_entries=[TimeEntry("Zubereitungszeit", 10), TimeEntry("Kochzeit", 20)],
                difficulty="leicht",
                nutrition=Nutrition(calories=320, protein=12),
                keywords=["Schnell"],
                category="Frühstück",
                image_url="https://example.com/pfannkuchen.jpg",
            )
        )
        assert payload.metadata.servings == 2
        assert [(t.label, t.minutes) for t in payload.metadata.time_entries] == [
            ("Zubereitungszeit", 10),
            ("Kochzeit", 20),
        ]
        assert payload.metadata.difficulty == "leicht"
        assert payload.metadata.nutrition.calories == 320
        assert payload.tags == ["Schnell"]
        assert payload.category == "Frühstück"


class TestToDocument:
    def test_camel_case_keys(self):
        document = convert_to_recipe_format(
            _data(time_entries=[TimeEntry("Zubereitungszeit", 10)])
        ).to_document()
        assert {"ingredientGroups", "preparationGroups", "sourceUrl"} <= set(document)
        assert "timeEntries" in document["metadata"]
        step = document["preparationGroups"][0]["steps"][0]
        assert step["linkedIngredients"] == []
        assert step["intermediateIngredients"] == []

    def test_unset_fields_omitted(self):
        document = convert_to_recipe_format(_data()).to_document()
        assert "subtitle" not in document
        assert "tags" not in document
        assert "imageUrl" not in document
        assert "nutrition" not in document["metadata"]

    def test_round_trip_through_aliases(self):
        payload = convert_to_recipe_format(_data(subtitle="Süß oder herzhaft"))
        restored = RecipePayload.model_validate(payload.to_document())
        assert restored == payload
