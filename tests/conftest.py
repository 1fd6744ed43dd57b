"""
Pytest configuration and fixtures for Kochbuch tests.
"""

import json
import os

import pytest

# Set test environment before importing kochbuch modules
os.environ["KOCHBUCH_ENV"] = "development"
os.environ["KOCHBUCH_FETCH_TIMEOUT"] = "5"


def _page(body: str, head: str = "", json_ld: dict | list | None = None) -> str:
    script = ""
    if json_ld is not None:
        script = f'<script type="application/ld+json">{json.dumps(json_ld)}</script>'
    return f"<html><head>{head}{script}</head><body>{body}</body></html>"


@pytest.fixture
def json_ld_recipe():
    """A complete schema.org Recipe node."""
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Spaghetti Carbonara",
        "description": "Der italienische Klassiker mit Speck und Ei.",
        "recipeYield": "4 Portionen",
        "prepTime": "PT15M",
        "cookTime": "PT1H30M",
        "totalTime": "PT1H45M",
        "recipeIngredient": ["400 g Spaghetti", "150 g Speck", "3 Eier", "etwas Salz"],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Spaghetti in Salzwasser kochen."},
            {"@type": "HowToStep", "text": "Speck anbraten und mit den Eiern vermengen."},
        ],
        "image": {"@type": "ImageObject", "url": "https://example.com/carbonara.jpg"},
        "nutrition": {
            "@type": "NutritionInformation",
            "calories": "650 kcal",
            "carbohydrateContent": "70 g",
            "proteinContent": "25,5 g",
            "fatContent": "28 g",
        },
        "keywords": "Pasta, Italienisch, schnell",
        "recipeCategory": "Main Course",
    }


@pytest.fixture
def generic_html(json_ld_recipe):
    """A page whose recipe sits in a JSON-LD @graph."""
    graph = {
        "@context": "https://schema.org",
        "@graph": [{"@type": "WebPage", "name": "Rezeptseite"}, json_ld_recipe],
    }
    return _page("<h1>Spaghetti Carbonara</h1>", json_ld=graph)


@pytest.fixture
def plain_html():
    """A page without structured data."""
    head = (
        "<title>Mein Rezept</title>"
        '<meta property="og:title" content="Schneller Nudelauflauf">'
        '<meta property="og:image" content="/img/auflauf.jpg">'
        '<meta name="keywords" content="Auflauf, Nudeln">'
    )
    body = (
        "<ul>"
        '<li class="ingredient">250 g Nudeln</li>'
        '<li class="ingredient">200 ml Sahne</li>'
        "</ul>"
        '<div class="instructions"><ol>'
        "<li>Nudeln bissfest kochen und abgießen.</li>"
        "<li>Mit Sahne in eine Auflaufform geben und überbacken.</li>"
        "</ol></div>"
        "<p>Ergibt 3 Portionen</p>"
    )
    return _page(body, head=head)


@pytest.fixture
def chefkoch_html():
    """Chefkoch page with JSON-LD and a difficulty badge."""
    recipe = {
        "@context": "http://schema.org",
        "@type": "Recipe",
        "name": "Omas Apfelkuchen",
        "description": "Saftiger Apfelkuchen vom Blech",
        "recipeYield": "12 Stück",
        "prepTime": "PT30M",
        "cookTime": "P0DT1H0M",
        "recipeIngredient": ["250 g Mehl", "125 g Zucker", "4 Äpfel", "1 Pck. Backpulver"],
        "recipeInstructions": (
            "Äpfel schälen und in Spalten schneiden. Teig rühren und in die Form geben."
        ),
        "keywords": ["Backen", "Kuchen"],
        "recipeCategory": "Kuchen",
        "image": "https://img.chefkoch-cdn.de/apfelkuchen.jpg",
    }
    body = '<h1>Omas Apfelkuchen</h1><span class="recipe-difficulty">simpel</span>'
    return _page(body, head="<title>Omas Apfelkuchen | Chefkoch</title>", json_ld=recipe)


@pytest.fixture
def chefkoch_markup_html():
    """Chefkoch page without structured data."""
    body = (
        '<h1 class="page-title">Linsensuppe</h1>'
        '<table class="ingredients">'
        "<tr><td>200 g</td><td>Linsen</td></tr>"
        "<tr><td>1</td><td>Zwiebel(n)</td></tr>"
        "</table>"
        '<div class="recipe-text">Linsen waschen und abtropfen lassen.\n\n'
        "Zwiebel würfeln und mit den Linsen kochen.</div>"
        "<p>Für 4 Portionen</p>"
    )
    return _page(body, head='<meta property="og:image" content="/bilder/linsensuppe.jpg">')


@pytest.fixture
def lecker_html():
    """Lecker page with JSON-LD and several image sizes."""
    recipe = {
        "@context": "https://schema.org",
        "@type": ["Recipe"],
        "name": "Kürbissuppe – cremig und schnell",
        "description": "Eine wärmende Suppe für den Herbst.",
        "recipeYield": "4",
        "prepTime": "",
        "totalTime": "PT40M",
        "recipeIngredient": ["1 kg Hokkaido", "1 l Gemüsebrühe", "200 ml Sahne"],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Kürbis würfeln und in Brühe weich kochen."},
            {"@type": "HowToStep", "text": "Sahne zugeben und alles fein pürieren."},
        ],
        "image": [
            {"@type": "ImageObject", "url": "https://images.lecker.de/kuerbis.jpg?w=200", "width": 200},
            {"@type": "ImageObject", "url": "https://images.lecker.de/kuerbis.jpg?w=1200", "width": 1200},
        ],
    }
    return _page("<h1>Kürbissuppe</h1>", json_ld=recipe)


@pytest.fixture
def lecker_markup_html():
    """Lecker page without structured data."""
    body = (
        "<h1>Bratkartoffeln - wie bei Oma</h1>"
        '<meta name="description" content="Knusprige Bratkartoffeln aus der Pfanne">'
        '<div class="recipe-ingredients"><ul>'
        "<li>1 kg Kartoffeln</li><li>2 EL Butterschmalz</li>"
        "</ul></div>"
        '<div class="recipe-preparation"><ol>'
        "<li>Kartoffeln kochen, pellen und in Scheiben schneiden.</li>"
        "<li>In der Pfanne goldbraun und knusprig braten.</li>"
        "</ol></div>"
        "<p>Zubereitungszeit: 45 Min.</p>"
        "<p>für 4 Personen</p>"
        "<p>Schwierigkeit: einfach</p>"
        '<a href="https://pinterest.com/pin/create/button/?url=x'
        '&media=https%3A%2F%2Fimages.lecker.de%2Fbratkartoffeln.jpg&description=y">Pin</a>'
    )
    return _page(body)


@pytest.fixture
def gaumenfreundin_json_ld():
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Zucchini-Puffer – knusprig aus der Pfanne",
        "description": "Goldbraune Puffer mit Kräuterquark.",
        "recipeYield": ["4", "4 Portionen"],
        "prepTime": "PT20M",
        "totalTime": "PT50M",
        "recipeIngredient": ["2 Zucchini", "1 Ei", "Weitere Rezepte", "50 g Mehl"],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Zucchini raspeln und gut ausdrücken."},
            {"@type": "HowToStep", "text": "Merkliste"},
            {"@type": "HowToStep", "text": "Mit Ei und Mehl vermengen und ausbacken."},
        ],
        "keywords": "Zucchini, Sommer",
        "image": "https://www.gaumenfreundin.de/wp-content/uploads/puffer.jpg",
    }


@pytest.fixture
def gaumenfreundin_card():
    """WP Recipe Maker card markup."""
    return (
        '<div class="wprm-recipe">'
        '<span class="wprm-recipe-prep_time-minutes">15'
        '<span class="sr-only"> Minuten</span></span>'
        '<span class="wprm-recipe-cook_time-minutes">20</span>'
        '<span class="wprm-recipe-course">Hauptgericht</span>'
        '<span class="wprm-recipe-keyword">vegetarisch, Sommer</span>'
        "</div>"
    )


@pytest.fixture
def gaumenfreundin_html(gaumenfreundin_json_ld, gaumenfreundin_card):
    return _page(gaumenfreundin_card, json_ld=gaumenfreundin_json_ld)


@pytest.fixture
def empty_html():
    """A reachable page without any recipe content."""
    return _page("<p>Diese Seite enthält kein Rezept.</p>")
