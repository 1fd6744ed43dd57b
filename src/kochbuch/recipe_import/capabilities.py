"""Capability descriptors for extraction strategies.

Each strategy declares what it can pull out of a page and how reliably.
The flags only drive advisory messages shown after an import; they never
stop a strategy from trying.
"""

from dataclasses import dataclass, fields
from enum import Enum

from .models import ExtractedRecipeData


class Capability(str, Enum):
    """Three-valued confidence tag for one extractable feature."""

    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"
    EXPERIMENTAL = "experimental"


@dataclass(frozen=True)
class ExtractorCapabilities:
    supports_ingredient_groups: Capability = Capability.UNSUPPORTED
    supports_preparation_groups: Capability = Capability.UNSUPPORTED
    supports_images: Capability = Capability.SUPPORTED
    supports_nutrition: Capability = Capability.UNSUPPORTED
    supports_metadata: Capability = Capability.SUPPORTED
    supports_time_extraction: Capability = Capability.SUPPORTED
    supports_difficulty_extraction: Capability = Capability.UNSUPPORTED
    supports_keyword_extraction: Capability = Capability.SUPPORTED
    supports_category_extraction: Capability = Capability.SUPPORTED

    def as_dict(self) -> dict[str, dict[str, str]]:
        """Flags with their German titles, keyed by field name."""
        return {
            f.name: {"title": CAPABILITY_TITLES[f.name], "value": getattr(self, f.name).value}
            for f in fields(self)
        }


CAPABILITY_TITLES = {
    "supports_ingredient_groups": "Zutatgruppen",
    "supports_preparation_groups": "Zubereitungsgruppen",
    "supports_images": "Bildextraktion",
    "supports_nutrition": "Nährwertinformationen",
    "supports_metadata": "Metadaten",
    "supports_time_extraction": "Zeitextraktion",
    "supports_difficulty_extraction": "Schwierigkeitsextraktion",
    "supports_keyword_extraction": "Schlagwortextraktion",
    "supports_category_extraction": "Kategorieextraktion",
}

CHECK_INGREDIENTS_WARNING = (
    "Bitte überprüfen Sie die extrahierten Zutaten auf Korrektheit und Vollständigkeit."
)
NO_INGREDIENT_GROUPS_WARNING = (
    "Die Zutaten wurden ohne Gruppierung importiert. "
    "Sie können diese manuell in Gruppen organisieren."
)
NO_PREPARATION_GROUPS_WARNING = (
    "Die Zubereitungsschritte wurden ohne Gruppierung importiert. "
    "Sie können diese manuell in Gruppen organisieren."
)
EXPERIMENTAL_NUTRITION_WARNING = (
    "Die Nährwertinformationen wurden experimentell extrahiert und sollten überprüft werden."
)
EXPERIMENTAL_TIME_WARNING = (
    "Die Zeitangaben wurden experimentell extrahiert und sollten überprüft werden."
)
EXPERIMENTAL_DIFFICULTY_WARNING = (
    "Der Schwierigkeitsgrad wurde experimentell bestimmt und sollte überprüft werden."
)
EXPERIMENTAL_IMAGE_WARNING = (
    "Das Bild wurde möglicherweise nicht korrekt extrahiert und sollte überprüft werden."
)
GENERIC_EXTRACTOR_WARNING = (
    "Es wurde der generische Extraktor verwendet. "
    "Bitte überprüfen Sie alle importierten Daten besonders sorgfältig."
)
JSON_LD_IMPORT_WARNING = "Import aus JSON-LD. Bitte überprüfen Sie alle importierten Daten."


def build_import_warnings(
    capabilities: ExtractorCapabilities,
    data: ExtractedRecipeData,
    *,
    generic: bool = False,
) -> list[str]:
    """
    German advisory messages for an import.

    Experimental features only produce a warning when the field was
    actually filled.
    """
    warnings = [CHECK_INGREDIENTS_WARNING]

    if capabilities.supports_ingredient_groups is Capability.UNSUPPORTED:
        warnings.append(NO_INGREDIENT_GROUPS_WARNING)
    if capabilities.supports_preparation_groups is Capability.UNSUPPORTED:
        warnings.append(NO_PREPARATION_GROUPS_WARNING)

    experimental = Capability.EXPERIMENTAL
    if capabilities.supports_nutrition is experimental and data.nutrition:
        warnings.append(EXPERIMENTAL_NUTRITION_WARNING)
    if capabilities.supports_time_extraction is experimental and data.time_entries:
        warnings.append(EXPERIMENTAL_TIME_WARNING)
    if capabilities.supports_difficulty_extraction is experimental and data.difficulty:
        warnings.append(EXPERIMENTAL_DIFFICULTY_WARNING)
    if capabilities.supports_images is experimental and data.image_url:
        warnings.append(EXPERIMENTAL_IMAGE_WARNING)

    if generic:
        warnings.append(GENERIC_EXTRACTOR_WARNING)
    return warnings
