"""Ingredient Parser - Turn raw ingredient lines into structured data.

A line like "3 gestr. TL Backpulver" becomes amount 3, unit "TL",
name "Backpulver", description "gestr.".

Parsing is an ordered rule table: each IngredientRule pairs a regex with
an extract function, and the first rule whose pattern matches and whose
extract returns a result wins. Unit spellings in the patterns come from
the unit catalog. Lines no rule understands become a name with an
indefinite quantity; the parser never raises.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable

from .models import UNKNOWN_INGREDIENT_NAME, ParsedIngredient, Quantity
from .normalizer import clean_text
from .units import find_unit, unit_alias_pattern

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "Stück"

# "Zwiebel(n)", "Ei(er)": optional plural endings stay part of the name
PLURAL_SUFFIXES = frozenset({"n", "e", "s", "en", "er", "nen"})

VULGAR_FRACTIONS = {
    "½": 0.5,
    "¼": 0.25,
    "¾": 0.75,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "⅛": 0.125,
}

INDEFINITE_MARKERS = (
    "ein wenig",
    "ein paar",
    "etwas",
    "wenig",
    "einige",
    "reichlich",
    "ca.",
    "circa",
    "evtl.",
    "eventuell",
    "optional",
    "nach Geschmack",
    "nach Belieben",
    "n. B.",
    "n.B.",
)

TRAILING_MARKERS = (
    "nach Geschmack",
    "nach Belieben",
    "zum Abschmecken",
    "zum Bestreuen",
    "zum Garnieren",
    "zum Anbraten",
    "zum Braten",
    "zum Einfetten",
    "n. B.",
    "n.B.",
)

_AMOUNT = r"\d+(?:[.,]\d+)?"
_RANGE = rf"{_AMOUNT}(?:\s*[-–]\s*{_AMOUNT})?"
_FRACTION_CHARS = "".join(VULGAR_FRACTIONS)
_UNIT = unit_alias_pattern()
_UNIT_END = r"\.?(?=[\s,(]|$)"
_DESCRIPTIVE = r"(?:[a-zäöüß][^\s\d]*\s+){1,2}?"
_NATURAL_SUFFIX = (
    r"(?:stangen?|zehen?|zweige?|blätter|blatt|knollen?|scheiben?|schoten?|würfel)"
)
_SHORT_UNITS = r"(?i:ml|kg|g|l|EL|TL|Pck|Dose|Stück|Bund|Zehe|Scheibe|Prise)"

_LEADING_UNIT = re.compile(rf"^(?P<unit>{_UNIT}){_UNIT_END}\s*(?P<name>.*)$")
_LEADING_DESCRIPTIVE_UNIT = re.compile(
    rf"^(?P<description>{_DESCRIPTIVE})(?P<unit>{_UNIT}){_UNIT_END}\s*(?P<name>.+)$"
)
_TRAILING_PARENTHETICAL = re.compile(r"^(?P<base>.*?)\s*\((?P<inner>[^()]*)\)$")
_STARTS_WITH_NUMBER = re.compile(rf"^[\d{_FRACTION_CHARS}]")


@dataclass(frozen=True)
class IngredientRule:
    """One entry of a parser rule table."""

    name: str
    pattern: re.Pattern
    extract: Callable[[re.Match], list[ParsedIngredient] | ParsedIngredient | None]


def parse_amount(text: str | None) -> float:
    """
    Parse an amount token to a number.

    Accepts "2", "2,5", "1/2", "1 1/2", "½", "1½" and ranges like "2-3"
    (the lower bound wins). Anything else is 0.
    """
    if not text:
        return 0.0

    value = str(text).strip().replace(",", ".")
    value = re.split(r"\s*[-–]\s*", value)[0]

    total = 0.0
    for char, fraction in VULGAR_FRACTIONS.items():
        if char in value:
            total += fraction * value.count(char)
            value = value.replace(char, " ")

    try:
        for part in value.split():
            if "/" in part:
                numerator, denominator = part.split("/", 1)
                total += float(numerator) / float(denominator)
            else:
                total += float(part)
    except (ValueError, ZeroDivisionError):
        return 0.0

    return total if math.isfinite(total) else 0.0


def format_ingredient(ingredient: ParsedIngredient) -> str:
    """Serialize back to "<amount> <unit> <name>", dropping empty parts."""
    quantity = ingredient.quantity
    parts = []
    if quantity.amount:
        parts.append(f"{quantity.amount:g}")
    if quantity.unit:
        parts.append(quantity.unit)
    parts.append(ingredient.name)
    if ingredient.description:
        parts.append(f"({ingredient.description})")
    return " ".join(parts)


def _canonical_unit(token: str) -> str:
    unit = find_unit(token) or find_unit(token.rstrip("."))
    return unit.name if unit else token


def _split_unit(text: str) -> tuple[str, str, str | None]:
    """Split a leading unit (optionally after descriptive words) off a name."""
    match = _LEADING_UNIT.match(text)
    if match:
        return _canonical_unit(match["unit"]), match["name"], None
    match = _LEADING_DESCRIPTIVE_UNIT.match(text)
    if match:
        return _canonical_unit(match["unit"]), match["name"], match["description"].strip()
    return DEFAULT_UNIT, text, None


def _join(*parts: str | None) -> str | None:
    joined = ", ".join(p.strip() for p in parts if p and p.strip())
    return joined or None


def _ingredient(
    amount: float,
    unit: str,
    name: str,
    description: str | None = None,
) -> ParsedIngredient:
    """Build the result, moving a trailing parenthetical into the description."""
    name = clean_text(name).strip(" ,;:")
    match = _TRAILING_PARENTHETICAL.match(name)
    if match and match["base"]:
        inner = match["inner"].strip()
        if inner.lower() not in PLURAL_SUFFIXES:
            name = match["base"].strip(" ,;:")
            description = _join(description, inner)

    return ParsedIngredient(
        name=name or UNKNOWN_INGREDIENT_NAME,
        quantities=[Quantity(amount=amount, unit=unit)],
        description=_join(description),
    )


# Rule extract functions ------------------------------------------------------


def _parenthetical_qualifier(match: re.Match) -> ParsedIngredient | None:
    qualifier = match["qualifier"].strip()
    if qualifier.lower() in PLURAL_SUFFIXES:
        return None
    unit, name, description = _split_unit(match["name"])
    if not name.strip():
        return None
    return _ingredient(parse_amount(match["amount"]), unit, name, _join(description, qualifier))


def _descriptive_before_unit(match: re.Match) -> ParsedIngredient:
    return _ingredient(
        parse_amount(match["amount"]),
        _canonical_unit(match["unit"]),
        match["name"],
        match["description"],
    )


def _container_with_content(match: re.Match) -> ParsedIngredient | None:
    if match["content"].strip().lower() in PLURAL_SUFFIXES:
        # "2 Dose(n) Tomaten" is an optional plural, not a container size
        return None
    return _ingredient(
        parse_amount(match["amount"]),
        _canonical_unit(match["unit"]),
        match["name"],
        match["content"],
    )


def _bare_description(match: re.Match) -> ParsedIngredient:
    return _ingredient(0, "", match.group(0))


def _compound_natural_unit(match: re.Match) -> ParsedIngredient:
    return _ingredient(parse_amount(match["amount"]), DEFAULT_UNIT, match["name"])


def _optional_plural(match: re.Match) -> ParsedIngredient:
    amount = parse_amount(match["amount"])
    unit = find_unit(match["stem"])
    rest = match["rest"].strip()
    if unit and rest:
        # "2 Dose(n) Tomaten": the marked word is the unit
        return _ingredient(amount, unit.name, rest)
    return _ingredient(amount, DEFAULT_UNIT, match["word"] + match["rest"])


def _leading_fraction(match: re.Match) -> ParsedIngredient:
    unit, name, description = _split_unit(match["rest"])
    return _ingredient(parse_amount(match["amount"]), unit, name, description)


def _indefinite_leading(match: re.Match) -> ParsedIngredient:
    rest = match["rest"]
    if _STARTS_WITH_NUMBER.match(rest):
        # "ca. 200 g Mehl" keeps its amount; the marker becomes description
        parsed = _apply_rules(rest)
        return ParsedIngredient(
            name=parsed.name,
            quantities=parsed.quantities,
            description=_join(match["marker"], parsed.description),
        )
    return _ingredient(0, "", rest)


def _indefinite_trailing(match: re.Match) -> ParsedIngredient:
    return _ingredient(0, "", match["name"], match["marker"])


def _unit_pattern(match: re.Match) -> ParsedIngredient | None:
    return _ingredient(parse_amount(match["amount"]), _canonical_unit(match["unit"]), match["name"])


def _short_unit(match: re.Match) -> ParsedIngredient:
    return _ingredient(parse_amount(match["amount"]), _canonical_unit(match["unit"]), match["name"])


def _amount_and_name(match: re.Match) -> ParsedIngredient:
    return _ingredient(parse_amount(match["amount"]), DEFAULT_UNIT, match["name"])


def _markers(markers: tuple[str, ...]) -> str:
    return "|".join(re.escape(m) for m in sorted(markers, key=len, reverse=True))


INGREDIENT_RULES: tuple[IngredientRule, ...] = (
    IngredientRule(
        "parenthetical_qualifier",
        re.compile(
            rf"^(?P<amount>{_RANGE})\s+(?P<name>[^\d\s(][^(]*?)\s*\((?P<qualifier>[^()]+)\)$"
        ),
        _parenthetical_qualifier,
    ),
    IngredientRule(
        "descriptive_before_unit",
        re.compile(
            rf"^(?P<amount>{_RANGE})\s+(?P<description>{_DESCRIPTIVE})"
            rf"(?P<unit>{_UNIT}){_UNIT_END}\s*(?P<name>.+)$"
        ),
        _descriptive_before_unit,
    ),
    IngredientRule(
        "container_with_content",
        re.compile(
            rf"^(?P<amount>{_RANGE})\s*(?P<unit>{_UNIT})\.?\s*\((?P<content>[^()]+)\)\s*(?P<name>.+)$"
        ),
        _container_with_content,
    ),
    IngredientRule(
        "bare_description",
        re.compile(
            r"^(?:Schale|Saft|Abrieb|Zesten?|Mark)\s+(?:von|aus|einer|eines|der|des)\s+.+$",
            re.IGNORECASE,
        ),
        _bare_description,
    ),
    IngredientRule(
        "compound_natural_unit",
        re.compile(
            rf"^(?P<amount>{_RANGE})\s+(?P<name>[A-ZÄÖÜ][a-zäöüß]+{_NATURAL_SUFFIX}\b.*)$"
        ),
        _compound_natural_unit,
    ),
    IngredientRule(
        "optional_plural",
        re.compile(
            rf"^(?P<amount>{_RANGE})\s+"
            r"(?P<word>(?P<stem>[^\s(]+)\((?:n|e|s|en|er|nen)\))(?P<rest>.*)$"
        ),
        _optional_plural,
    ),
    IngredientRule(
        "vulgar_fraction",
        re.compile(rf"^(?P<amount>(?:\d+\s*)?[{_FRACTION_CHARS}])\s*(?P<rest>.+)$"),
        _leading_fraction,
    ),
    IngredientRule(
        "numeric_fraction",
        re.compile(r"^(?P<amount>(?:\d+\s+)?\d+/\d+)\s*(?P<rest>.+)$"),
        _leading_fraction,
    ),
    IngredientRule(
        "indefinite_leading",
        re.compile(
            rf"^(?P<marker>{_markers(INDEFINITE_MARKERS)})\s+(?P<rest>.+)$", re.IGNORECASE
        ),
        _indefinite_leading,
    ),
    IngredientRule(
        "indefinite_trailing",
        re.compile(
            rf"^(?P<name>[^\d{_FRACTION_CHARS}].*?)[,\s]+(?P<marker>{_markers(TRAILING_MARKERS)})$",
            re.IGNORECASE,
        ),
        _indefinite_trailing,
    ),
    IngredientRule(
        "unit_pattern",
        re.compile(rf"^(?P<amount>{_RANGE})\s*(?P<unit>{_UNIT}){_UNIT_END}\s*(?P<name>.*)$"),
        _unit_pattern,
    ),
    IngredientRule(
        "short_unit",
        re.compile(rf"^(?P<amount>{_RANGE})\s*(?P<unit>{_SHORT_UNITS})\.?\s*(?P<name>[A-ZÄÖÜ].*)$"),
        _short_unit,
    ),
    IngredientRule(
        "amount_and_name",
        re.compile(rf"^(?P<amount>{_RANGE})\s+(?P<name>.+)$"),
        _amount_and_name,
    ),
)


def _apply_rules(text: str) -> ParsedIngredient:
    for rule in INGREDIENT_RULES:
        match = rule.pattern.match(text)
        if not match:
            continue
        result = rule.extract(match)
        if result is not None:
            logger.debug(f"Ingredient {text!r} parsed by rule {rule.name}")
            return result
    return _ingredient(0, "", text)


def parse_ingredient(line: str | None) -> ParsedIngredient:
    """
    Parse one ingredient line into exactly one ParsedIngredient.

    Examples:
        "3 EL Olivenöl"  -> Olivenöl, 3 EL
        "etwas Salz"     -> Salz, 0 ""
        "1 Zwiebel(n)"   -> Zwiebel(n), 1 Stück
    """
    text = clean_text(line)
    if not text:
        return _ingredient(0, "", "")
    return _apply_rules(text)


# Multi-ingredient lines ------------------------------------------------------


def _is_simple_name(text: str) -> bool:
    return bool(text) and not text[0].isdigit() and "-" not in text and len(text) < 50


def _shared_amount(match: re.Match) -> list[ParsedIngredient] | None:
    amount, first, second = match["amount"], match["first"], match["second"]
    if " und " in f" {second} " or not (_is_simple_name(first) and _is_simple_name(second)):
        return None

    # The unit of the first conjunct carries over: "1 Bund Petersilie und Dill"
    unit_prefix = ""
    unit_match = _LEADING_UNIT.match(first)
    if unit_match and unit_match["name"] and not _LEADING_UNIT.match(second):
        unit_prefix = first[: unit_match.start("name")].strip() + " "

    if INGREDIENT_RULES_BY_NAME["indefinite_leading"].pattern.match(second):
        second_line = second
    else:
        second_line = f"{amount} {unit_prefix}{second}"
    return [parse_ingredient(f"{amount} {first}"), parse_ingredient(second_line)]


def _plain_pair(match: re.Match) -> list[ParsedIngredient] | None:
    first, second = match["first"].strip(), match["second"].strip()
    if len(first.split()) > 2 or len(second.split()) > 2:
        return None
    return [parse_ingredient(first), parse_ingredient(second)]


INGREDIENT_RULES_BY_NAME = {rule.name: rule for rule in INGREDIENT_RULES}

MULTI_INGREDIENT_RULES: tuple[IngredientRule, ...] = (
    IngredientRule(
        "shared_amount_conjunction",
        re.compile(
            rf"^(?P<amount>{_RANGE}|[{_FRACTION_CHARS}])\s+(?P<first>.+?)\s+und\s+(?P<second>.+)$"
        ),
        _shared_amount,
    ),
    IngredientRule(
        "plain_conjunction",
        re.compile(rf"^(?P<first>[^\d{_FRACTION_CHARS},()]+?)\s+und\s+(?P<second>[^\d,()]+)$"),
        _plain_pair,
    ),
)


def parse_multiple_ingredients(line: str | None) -> list[ParsedIngredient]:
    """
    Parse a line that may name more than one ingredient.

    "2 Eier und Milch" -> [2 Stück Eier, 2 Stück Milch]
    "Salz und Pfeffer" -> [Salz, Pfeffer]
    Anything else is one ingredient.
    """
    text = clean_text(line)
    for rule in MULTI_INGREDIENT_RULES:
        match = rule.pattern.match(text)
        if not match:
            continue
        result = rule.extract(match)
        if result:
            logger.debug(f"Ingredient line {text!r} split by rule {rule.name}")
            return result
    return [parse_ingredient(text)]
