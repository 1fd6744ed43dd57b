"""
Kochbuch - Unit catalog.

Static table of the German cooking units the importer understands, with
alias lookup and conversion between base units (what gets stored) and
larger display units (what gets shown).

Base units never convert. Derived units point at exactly one base unit
with a positive conversion factor.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum


class UnitCategory(str, Enum):
    """Broad unit family; conversion only happens within one family."""

    WEIGHT = "weight"
    VOLUME = "volume"
    PIECE = "piece"
    NATURAL = "natural"
    SMALL = "small"


@dataclass(frozen=True)
class UnitDefinition:
    """A unit with its aliases and, for derived units, its base conversion."""

    name: str
    category: UnitCategory
    display_name: str
    is_base_unit: bool
    aliases: frozenset[str] = field(default_factory=frozenset)
    base_unit: str | None = None
    conversion_factor: float | None = None

    def __post_init__(self):
        if self.is_base_unit:
            if self.base_unit is not None or self.conversion_factor is not None:
                raise ValueError(f"Base unit {self.name!r} must not declare a conversion")
        elif not self.base_unit or not self.conversion_factor or self.conversion_factor <= 0:
            raise ValueError(f"Derived unit {self.name!r} needs a base unit and a positive factor")


@dataclass(frozen=True)
class BaseUnitFactor:
    base_unit: str
    conversion_factor: float


@dataclass(frozen=True)
class BaseQuantity:
    amount: float
    base_unit: str


@dataclass(frozen=True)
class DisplayQuantity:
    amount: float
    unit: str
    display_name: str


def _base(name, category, display_name, *aliases) -> UnitDefinition:
    return UnitDefinition(
        name=name,
        category=category,
        display_name=display_name,
        is_base_unit=True,
        aliases=frozenset(aliases),
    )


def _derived(name, category, display_name, base_unit, factor, *aliases) -> UnitDefinition:
    return UnitDefinition(
        name=name,
        category=category,
        display_name=display_name,
        is_base_unit=False,
        aliases=frozenset(aliases),
        base_unit=base_unit,
        conversion_factor=factor,
    )


W, V, P, N, S = (
    UnitCategory.WEIGHT,
    UnitCategory.VOLUME,
    UnitCategory.PIECE,
    UnitCategory.NATURAL,
    UnitCategory.SMALL,
)

UNIT_CATALOG: tuple[UnitDefinition, ...] = (
    # Base units
    _base("g", W, "Gramm", "Gramm", "gram"),
    _base("ml", V, "Milliliter", "Milliliter"),
    _base("Stück", P, "Stück", "Stk.", "Stk", "St.", "St"),
    # Natural units
    _base("Zehe", N, "Zehe", "Zehen"),
    _base("Bund", N, "Bund"),
    _base("Kopf", N, "Kopf", "Köpfe"),
    _base("Knolle", N, "Knolle", "Knollen"),
    _base("Stange", N, "Stange", "Stangen"),
    _base("Zweig", N, "Zweig", "Zweige"),
    _base("Blatt", N, "Blatt", "Blätter"),
    _base("Scheibe", N, "Scheibe", "Scheiben"),
    _base("Handvoll", N, "Handvoll"),
    # Small amounts
    _base("Prise", S, "Prise", "Prisen", "Pr."),
    _base("Msp.", S, "Messerspitze", "Messerspitze", "Msp"),
    _base("Tropfen", S, "Tropfen", "Tr."),
    _base("Spritzer", S, "Spritzer"),
    _base("Schuss", S, "Schuss"),
    _base("Hauch", S, "Hauch"),
    # Spoons are stored as-is; their ml equivalent varies too much
    _base("TL", V, "Teelöffel", "Teelöffel"),
    _base("EL", V, "Esslöffel", "Esslöffel", "Eßlöffel"),
    # Display units
    _derived("Tasse", V, "Tasse", "ml", 250, "Tassen"),
    _derived("Becher", V, "Becher", "ml", 200),
    _derived("Glas", V, "Glas", "ml", 200, "Gläser"),
    _derived("l", V, "Liter", "ml", 1000, "Liter"),
    _derived("kg", W, "Kilogramm", "g", 1000, "Kilogramm", "kilogram"),
    # Containers count as pieces
    _derived("Pck.", P, "Packung", "Stück", 1, "Pck", "Packung", "Packungen", "Pack"),
    _derived("Päckchen", P, "Päckchen", "Stück", 1),
    _derived("Dose", P, "Dose", "Stück", 1, "Dosen"),
    _derived("Flasche", P, "Flasche", "Stück", 1, "Flaschen"),
    _derived("Tube", P, "Tube", "Stück", 1, "Tuben"),
    _derived("Würfel", P, "Würfel", "Stück", 1),
    _derived("Riegel", P, "Riegel", "Stück", 1),
    _derived("Rolle", P, "Rolle", "Stück", 1, "Rollen"),
)

_BY_NAME: dict[str, UnitDefinition] = {unit.name.lower(): unit for unit in UNIT_CATALOG}
_BY_ALIAS: dict[str, UnitDefinition] = {
    alias.lower(): unit for unit in UNIT_CATALOG for alias in unit.aliases
}


def find_unit(text: str | None) -> UnitDefinition | None:
    """
    Look up a unit by canonical name, then by alias.

    Both lookups ignore case: "TL", "tl" and "Teelöffel" all resolve to TL.
    Unknown text returns None.
    """
    if not text:
        return None
    key = text.strip().lower()
    return _BY_NAME.get(key) or _BY_ALIAS.get(key)


def normalize_to_base_unit(text: str | None) -> BaseUnitFactor | None:
    """Return the base unit and factor for a unit; base units have factor 1."""
    unit = find_unit(text)
    if unit is None:
        return None
    if unit.is_base_unit:
        return BaseUnitFactor(base_unit=unit.name, conversion_factor=1)
    return BaseUnitFactor(base_unit=unit.base_unit, conversion_factor=unit.conversion_factor)


def convert_to_base_unit(amount: float, text: str | None) -> BaseQuantity | None:
    """Convert an amount in any known unit to its base unit."""
    normalized = normalize_to_base_unit(text)
    if normalized is None:
        return None
    return BaseQuantity(
        amount=amount * normalized.conversion_factor,
        base_unit=normalized.base_unit,
    )


def convert_from_base_unit(amount: float, base_unit: str) -> DisplayQuantity:
    """
    Pick the best display unit for an amount given in a base unit.

    Tries the derived units of that base from largest to smallest factor
    (factor-1 units are skipped) and takes the first one where the amount
    lands in [1, 1000). Falls back to the base unit itself.

    Examples:
        2000, "g"  -> 2 kg
        500, "g"   -> 500 g
        750, "ml"  -> 3 Tasse
    """
    candidates = sorted(
        (
            unit
            for unit in UNIT_CATALOG
            if not unit.is_base_unit and unit.base_unit == base_unit
        ),
        key=lambda unit: -unit.conversion_factor,
    )
    for unit in candidates:
        if unit.conversion_factor == 1:
            continue
        converted = amount / unit.conversion_factor
        if 1 <= converted < 1000:
            return DisplayQuantity(
                amount=_round1(converted),
                unit=unit.name,
                display_name=unit.display_name,
            )

    base = _BY_NAME.get(base_unit.lower())
    return DisplayQuantity(
        amount=_round1(amount),
        unit=base_unit,
        display_name=base.display_name if base else base_unit,
    )


def format_quantity(amount: float, unit: str) -> DisplayQuantity:
    """
    Present an amount in the most readable unit.

    Unknown units come back untouched, and factor-1 containers
    ("Dose", "Pck.") keep their own name instead of collapsing to Stück.
    """
    normalized = normalize_to_base_unit(unit)
    if normalized is None:
        return DisplayQuantity(amount=amount, unit=unit, display_name=unit)

    if normalized.base_unit == unit:
        return convert_from_base_unit(amount, unit)

    if normalized.conversion_factor == 1:
        definition = find_unit(unit)
        return DisplayQuantity(amount=amount, unit=unit, display_name=definition.display_name)

    return convert_from_base_unit(amount * normalized.conversion_factor, normalized.base_unit)


def get_base_units() -> list[UnitDefinition]:
    return [unit for unit in UNIT_CATALOG if unit.is_base_unit]


def get_available_units() -> list[dict[str, str]]:
    """Base units in a form suitable for selection lists."""
    return [
        {"name": unit.name, "category": unit.category.value, "display_name": unit.display_name}
        for unit in get_base_units()
    ]


def get_unit_variations() -> list[dict]:
    """Every spelling per unit, keyed by the base unit it normalizes to."""
    return [
        {
            "unit": unit.name if unit.is_base_unit else unit.base_unit,
            "variations": [unit.name, *sorted(unit.aliases - {unit.name})],
        }
        for unit in UNIT_CATALOG
    ]


def unit_alias_pattern() -> str:
    """
    Regex alternation of every unit spelling, longest first.

    Wrapped in a scoped case-insensitive group so callers can embed it in
    case-sensitive patterns.
    """
    spellings = {unit.name for unit in UNIT_CATALOG}
    spellings.update(alias for unit in UNIT_CATALOG for alias in unit.aliases)
    ordered = sorted(spellings, key=lambda s: (-len(s), s))
    return "(?i:" + "|".join(re.escape(s) for s in ordered) + ")"


def _round1(value: float) -> float:
    # Half-up, so 2.25 shows as 2.3
    return math.floor(value * 10 + 0.5) / 10
