"""Tests for the extraction strategies (no network)."""

import json
from unittest.mock import MagicMock

import pytest

from kochbuch.recipe_import.errors import FetchError, NoRecipeFoundError
from kochbuch.recipe_import.models import (
    INGREDIENTS_PLACEHOLDER,
    INSTRUCTIONS_PLACEHOLDER,
    StrategyKind,
    TimeEntry,
)
from kochbuch.recipe_import.normalizer import COOKING_LABEL, PREPARATION_LABEL, TOTAL_LABEL
from kochbuch.recipe_import.strategies import chefkoch, domain_matches, gaumenfreundin, generic, lecker

CHEFKOCH_URL = "https://www.chefkoch.de/rezepte/123/omas-apfelkuchen.html"
LECKER_URL = "https://www.lecker.de/kuerbissuppe-12345.html"
GAUMENFREUNDIN_URL = "https://www.gaumenfreundin.de/zucchini-puffer/"
GENERIC_URL = "https://www.example.com/rezepte/carbonara"


class TestDomainMatches:
    def test_exact_and_subdomain(self):
        assert domain_matches("https://chefkoch.de/r/1", ("chefkoch.de",))
        assert domain_matches("https://www.chefkoch.de/r/1", ("chefkoch.de",))
        assert domain_matches("https://WWW.CHEFKOCH.DE/r/1", ("chefkoch.de",))

    def test_substring(self):
        assert domain_matches("https://chefkoch.de.mirror.example/r/1", ("chefkoch.de",))

    def test_no_match(self):
        assert not domain_matches("https://example.com/chefkoch.de", ("chefkoch.de",))
        assert not domain_matches("not a url", ("chefkoch.de",))


class TestStrategyExtract:
    def test_fetches_and_parses(self, chefkoch_html):
        fetch = MagicMock(return_value=chefkoch_html)
        data = chefkoch.STRATEGY.extract_recipe(CHEFKOCH_URL, fetch)
        fetch.assert_called_once_with(CHEFKOCH_URL)
        assert data.title == "Omas Apfelkuchen"

    def test_fetch_errors_propagate(self):
        fetch = MagicMock(side_effect=FetchError(CHEFKOCH_URL, "HTTP 503", status_code=503))
        with pytest.raises(FetchError):
            chefkoch.STRATEGY.extract_recipe(CHEFKOCH_URL, fetch)

    def test_kinds(self):
        assert chefkoch.STRATEGY.kind is StrategyKind.CHEFKOCH
        assert generic.STRATEGY.is_generic
        assert not lecker.STRATEGY.is_generic


class TestGenericStrategy:
    """JSON-LD, microdata and HTML heuristics."""

    def test_json_ld_graph(self, generic_html):
        data = generic.parse(generic_html, GENERIC_URL)
        assert data.title == "Spaghetti Carbonara"
        assert data.servings == 4
        assert data.time_entries == [
            TimeEntry(PREPARATION_LABEL, 15),
            TimeEntry(COOKING_LABEL, 90),
        ]
        assert data.ingredients == ["400 g Spaghetti", "150 g Speck", "3 Eier", "etwas Salz"]
        assert len(data.instructions) == 2
        assert data.image_url == "https://example.com/carbonara.jpg"
        assert data.nutrition.calories == 650
        assert data.nutrition.protein == 25.5
        assert data.category == "Hauptgericht"
        assert "Pasta" in data.keywords
        assert len(data.keywords) <= 10

    def test_cook_time_iso_duration(self, json_ld_recipe):
        json_ld_recipe.pop("prepTime")
        data = generic.recipe_from_json_ld(json_ld_recipe, GENERIC_URL)
        assert data.time_entries == [TimeEntry(COOKING_LABEL, 90)]

    def test_html_heuristics(self, plain_html):
        data = generic.parse(plain_html, GENERIC_URL)
        assert data.title == "Schneller Nudelauflauf"
        assert data.description == f"Rezept importiert von {GENERIC_URL}"
        assert data.ingredients == ["250 g Nudeln", "200 ml Sahne"]
        assert len(data.instructions) == 2
        assert data.servings == 3
        assert data.image_url == "https://www.example.com/img/auflauf.jpg"
        assert {"Auflauf", "Nudeln"} <= set(data.keywords)

    def test_empty_page_gets_placeholders(self, empty_html):
        data = generic.parse(empty_html, GENERIC_URL)
        assert data.title == generic.HTML_UNTITLED
        assert data.ingredients == [INGREDIENTS_PLACEHOLDER]
        assert data.instructions == [INSTRUCTIONS_PLACEHOLDER]

    def test_incomplete_json_ld_falls_through(self):
        html = (
            '<script type="application/ld+json">{"@type": "Recipe", "name": "Halb"}</script>'
            '<h1>Halbes Rezept</h1><li class="ingredient">1 Ei</li>'
        )
        data = generic.parse(html, GENERIC_URL)
        assert data.title == "Halbes Rezept"
        assert data.ingredients == ["1 Ei"]


class TestParseJsonLdPayload:
    def test_object(self, json_ld_recipe):
        data = generic.parse_json_ld_payload(json_ld_recipe, GENERIC_URL)
        assert data.title == "Spaghetti Carbonara"
        assert data.source_url == GENERIC_URL

    def test_array_and_string(self, json_ld_recipe):
        payload = json.dumps([{"@type": "BreadcrumbList"}, json_ld_recipe])
        assert generic.parse_json_ld_payload(payload).title == "Spaghetti Carbonara"

    def test_source_url_from_payload(self, json_ld_recipe):
        json_ld_recipe["url"] = "https://example.com/carbonara"
        assert generic.parse_json_ld_payload(json_ld_recipe).source_url == (
            "https://example.com/carbonara"
        )

    def test_missing_lists_become_placeholders(self):
        data = generic.parse_json_ld_payload({"@type": "Recipe", "name": "Leer"})
        assert data.ingredients == [INGREDIENTS_PLACEHOLDER]
        assert data.instructions == [INSTRUCTIONS_PLACEHOLDER]

    def test_invalid_payloads(self):
        with pytest.raises(NoRecipeFoundError):
            generic.parse_json_ld_payload("{ not json")
        with pytest.raises(NoRecipeFoundError):
            generic.parse_json_ld_payload({"@type": "Person"})


class TestChefkochStrategy:
    """Chefkoch: JSON-LD cookTime only, difficulty from markup."""

    def test_json_ld(self, chefkoch_html):
        data = chefkoch.parse(chefkoch_html, CHEFKOCH_URL)
        assert data.title == "Omas Apfelkuchen"
        assert data.servings == 12
        assert data.time_entries == [TimeEntry(TOTAL_LABEL, 60)]
        assert data.instructions == [
            "Äpfel schälen und in Spalten schneiden.",
            "Teig rühren und in die Form geben.",
        ]
        assert data.difficulty == "leicht"
        assert data.keywords == ["Backen", "Kuchen"]
        assert data.category == "Dessert"
        assert data.image_url == "https://img.chefkoch-cdn.de/apfelkuchen.jpg"

    def test_markup_fallback(self, chefkoch_markup_html):
        url = "https://www.chefkoch.de/rezepte/456/linsensuppe.html"
        data = chefkoch.parse(chefkoch_markup_html, url)
        assert data.title == "Linsensuppe"
        assert data.ingredients == ["200 g Linsen", "1 Zwiebel(n)"]
        assert data.instructions == [
            "Linsen waschen und abtropfen lassen.",
            "Zwiebel würfeln und mit den Linsen kochen.",
        ]
        assert data.servings == 4
        assert data.time_entries == []
        assert data.keywords == []
        assert data.image_url == "https://www.chefkoch.de/bilder/linsensuppe.jpg"

    def test_json_ld_missing_ingredients_filled_from_markup(self):
        html = (
            '<script type="application/ld+json">'
            '{"@type": "Recipe", "name": "Gulasch", "recipeInstructions": "Fleisch scharf anbraten."}'
            "</script>"
            '<table class="ingredients"><tr><td>1 kg</td><td>Rindfleisch</td></tr></table>'
        )
        data = chefkoch.parse(html, CHEFKOCH_URL)
        assert data.title == "Gulasch"
        assert data.ingredients == ["1 kg Rindfleisch"]

    def test_split_instruction_text_drops_fragments(self):
        assert chefkoch.split_instruction_text("Fertig. Servieren.") == []


class TestLeckerStrategy:
    """Lecker: title split and image selection."""

    def test_json_ld(self, lecker_html):
        data = lecker.parse(lecker_html, LECKER_URL)
        assert data.title == "Kürbissuppe"
        assert data.subtitle == "cremig und schnell"
        assert data.image_url == "https://images.lecker.de/kuerbis.jpg?w=1200"
        assert data.time_entries == [TimeEntry(PREPARATION_LABEL, 40)]
        assert data.difficulty == "mittel"
        assert data.category == "Suppe"

    def test_markup_fallback(self, lecker_markup_html):
        data = lecker.parse(lecker_markup_html, LECKER_URL)
        assert data.title == "Bratkartoffeln"
        assert data.subtitle == "wie bei Oma"
        assert data.ingredients == ["1 kg Kartoffeln", "2 EL Butterschmalz"]
        assert len(data.instructions) == 2
        assert data.time_entries == [TimeEntry(TOTAL_LABEL, 45)]
        assert data.servings == 4
        assert data.difficulty == "leicht"
        assert data.image_url == "https://images.lecker.de/bratkartoffeln.jpg"

    def test_normalize_image_url(self):
        assert lecker.normalize_image_url("/bilder/a.jpg?x=1") == "https://www.lecker.de/bilder/a.jpg"
        assert lecker.normalize_image_url("//images.lecker.de/a.jpg?w=800") == (
            "https://images.lecker.de/a.jpg?w=800"
        )
        assert lecker.normalize_image_url(None) is None

    def test_select_image_prefers_first_string(self):
        assert lecker.select_image(["https://images.lecker.de/a.jpg", {"url": "b.jpg"}]) == (
            "https://images.lecker.de/a.jpg"
        )


class TestGaumenfreundinStrategy:
    """Gaumenfreundin: recipe card wins over JSON-LD, noise filtered."""

    def test_card_times_and_tags_win(self, gaumenfreundin_html):
        data = gaumenfreundin.parse(gaumenfreundin_html, GAUMENFREUNDIN_URL)
        assert data.title == "Zucchini-Puffer"
        assert data.subtitle == "knusprig aus der Pfanne"
        assert data.ingredients == ["2 Zucchini", "1 Ei", "50 g Mehl"]
        assert data.instructions == [
            "Zucchini raspeln und gut ausdrücken.",
            "Mit Ei und Mehl vermengen und ausbacken.",
        ]
        assert data.time_entries == [
            TimeEntry(PREPARATION_LABEL, 15),
            TimeEntry(COOKING_LABEL, 20),
        ]
        assert data.keywords[:3] == ["Hauptgericht", "vegetarisch", "Sommer"]
        assert "Zucchini" not in data.keywords
        assert data.category == "Hauptgericht"
        assert data.servings == 4

    def test_json_ld_times_without_card(self, gaumenfreundin_json_ld):
        html = f'<script type="application/ld+json">{json.dumps(gaumenfreundin_json_ld)}</script>'
        data = gaumenfreundin.parse(html, GAUMENFREUNDIN_URL)
        assert data.time_entries == [
            TimeEntry(PREPARATION_LABEL, 20),
            TimeEntry(COOKING_LABEL, 30),
        ]
        assert data.keywords[:2] == ["Zucchini", "Sommer"]

    def test_empty_page(self, empty_html):
        data = gaumenfreundin.parse(empty_html, GAUMENFREUNDIN_URL)
        assert data.ingredients == [INGREDIENTS_PLACEHOLDER]
        assert data.instructions == [INSTRUCTIONS_PLACEHOLDER]
        assert data.time_entries == [TimeEntry(PREPARATION_LABEL, 15)]
        assert data.servings == 4

    def test_card_markup_fallback(self, gaumenfreundin_card):
        html = (
            "<h1>Linsensalat – frisch und würzig</h1>"
            '<ul class="wprm-recipe-ingredients">'
            '<li class="wprm-recipe-ingredient">200 g Linsen</li>'
            '<li class="wprm-recipe-ingredient">Zu meinen Rezepten</li>'
            "</ul>"
            '<div class="wprm-recipe-instruction-text">Linsen weich kochen und abkühlen lassen.</div>'
            '<span class="wprm-recipe-servings">2</span>'
            + gaumenfreundin_card
        )
        data = gaumenfreundin.parse(html, GAUMENFREUNDIN_URL)
        assert data.title == "Linsensalat"
        assert data.ingredients == ["200 g Linsen"]
        assert data.instructions == ["Linsen weich kochen und abkühlen lassen."]
        assert data.servings == 2
        assert data.time_entries[0] == TimeEntry(PREPARATION_LABEL, 15)
