"""Tests for keyword, category and difficulty detection."""

import pytest

from kochbuch.recipe_import.keywords import (
    CATEGORIES,
    MAX_KEYWORDS,
    extract_category,
    extract_keywords,
    keywords_from_json_ld,
    map_difficulty,
    normalize_category,
    vocabulary_keywords,
)


class TestExtractKeywords:
    def test_json_ld_keywords_first(self):
        keywords = extract_keywords(
            "Gemüsecurry",
            json_ld={"keywords": "Curry, Vegan", "recipeCuisine": "Indisch"},
            html_tags=["Abendessen"],
        )
        assert keywords[:4] == ["Curry", "Vegan", "Indisch", "Abendessen"]

    def test_vocabulary_from_title_and_description(self):
        keywords = extract_keywords("Cremige Kürbissuppe", "Schnell gemacht und vegan")
        assert {"Cremig", "Schnell", "Vegan"} <= set(keywords)

    def test_deduplicated_ignoring_case(self):
        keywords = extract_keywords("Pasta", html_tags=["Vegan", "vegan", "VEGAN"])
        assert [k.lower() for k in keywords].count("vegan") == 1

    def test_short_values_dropped(self):
        assert extract_keywords("x", html_tags=["ab", "", "Ofen"]) == ["Ofen"]

    def test_capped(self):
        tags = [f"Schlagwort {i}" for i in range(20)]
        assert len(extract_keywords("Titel", html_tags=tags)) == MAX_KEYWORDS

    def test_keywords_from_json_ld_list(self):
        recipe = {"keywords": ["Sommer", "Grillen"], "recipeCategory": ["Beilage"]}
        assert keywords_from_json_ld(recipe) == ["Sommer", "Grillen", "Beilage"]

    def test_vocabulary_keywords_none(self):
        assert vocabulary_keywords("Xyz") == []


class TestCategory:
    """Category normalization and selection."""

    @pytest.mark.parametrize(
        "declared, expected",
        [
            ("Main Course", "Hauptgericht"),
            ("Nachspeisen", "Dessert"),
            ("soups", "Suppe"),
            ("Brot und Gebäck", "Brot & Gebäck"),
            ("Breakfast", "Frühstück"),
        ],
    )
    def test_synonyms(self, declared, expected):
        assert normalize_category(declared) == expected
        assert expected in CATEGORIES

    def test_unknown_category_unchanged(self):
        assert normalize_category("  Grillgut ") == "Grillgut"

    def test_empty_category(self):
        assert normalize_category("") is None
        assert normalize_category(None) is None

    def test_json_ld_category_wins(self):
        category = extract_category(
            "Tomatensuppe", json_ld={"recipeCategory": "Vorspeise"}, html_category="Hauptgericht"
        )
        assert category == "Vorspeise"

    def test_html_category(self):
        assert extract_category("Tomatensuppe", html_category="Snacks") == "Snack"

    def test_keyword_category(self):
        assert extract_category("Gefüllte Paprika", keywords=["Vegetarisch", "Abendessen"]) == (
            "Hauptgericht"
        )

    def test_title_hint(self):
        assert extract_category("Omas Kartoffelsalat") == "Salat"

    def test_no_category(self):
        assert extract_category("Gefüllte Paprika") is None


class TestMapDifficulty:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("simpel", "leicht"),
            ("Einfach", "leicht"),
            ("normal", "mittel"),
            ("mittelschwer", "mittel"),
            ("pfiffig schwierig", "schwer"),
            ("Schwierigkeit: anspruchsvoll", "schwer"),
            ("easy", "leicht"),
        ],
    )
    def test_mapping(self, text, expected):
        assert map_difficulty(text) == expected

    def test_unknown(self):
        assert map_difficulty("pfiffig") is None
        assert map_difficulty(None) is None
