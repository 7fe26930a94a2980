"""Einlesen von Tages- und Stundenkatalog aus API- bzw. JSON-Rohdaten.

Unterstützte Formate pro Eintrag:
  Tag:    {"_id": "...", "name": "Monday"}  oder  {"id": ..., "name": ..., "day_type": ...}
  Stunde: {"_id": "...", "value": "08:00", "daysId": {"_id": "...", "name": "..."}}
          oder  {"id": ..., "label": "08:00", "dayId": "..."}
"""

import logging
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from models.catalog import ReferenceCatalog
from models.day import Day
from models.hour_slot import HourSlot

logger = logging.getLogger(__name__)


class CatalogImportError(Exception):
    """Fehler beim Einlesen des Tages-/Stundenkatalogs."""


def _first(raw: dict, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_day(raw: dict) -> Day:
    """Rohdaten → Day. Fehlende ID ist ein Importfehler."""
    if not isinstance(raw, dict):
        raise CatalogImportError(f"Tag ist kein Objekt: {raw!r}")
    day_id = _first(raw, "_id", "id")
    if day_id is None:
        raise CatalogImportError(f"Tag ohne ID: {raw!r}")
    try:
        return Day(
            id=str(day_id),
            name=str(raw.get("name") or ""),
            day_type=_first(raw, "day_type", "dayType"),
        )
    except ValidationError as e:
        raise CatalogImportError(f"Ungültiger Tag {day_id}: {e}") from e


def parse_hour(raw: dict) -> Optional[HourSlot]:
    """Rohdaten → HourSlot.

    Slots ohne zugeordneten Tag werden übersprungen (None + Warnung), da sie
    keinem Tag angeboten werden können.
    """
    if not isinstance(raw, dict):
        raise CatalogImportError(f"Stunde ist kein Objekt: {raw!r}")
    hour_id = _first(raw, "_id", "id")
    label = _first(raw, "label", "value")
    if hour_id is None or label is None:
        raise CatalogImportError(f"Stunde ohne ID oder Uhrzeit: {raw!r}")

    day_ref = _first(raw, "day_id", "dayId", "daysId")
    if isinstance(day_ref, dict):
        day_ref = _first(day_ref, "_id", "id")
    if day_ref is None:
        logger.warning(f"Stunde {hour_id} ({label}) ohne Tag – übersprungen")
        return None

    try:
        return HourSlot(id=str(hour_id), label=str(label), day_id=str(day_ref))
    except ValidationError as e:
        raise CatalogImportError(f"Ungültige Stunde {hour_id}: {e}") from e


def build_catalog(days_raw: Iterable[dict], hours_raw: Iterable[dict]) -> ReferenceCatalog:
    """Baut den Katalog aus Rohlisten (Reihenfolge der Tage bleibt erhalten)."""
    days = [parse_day(r) for r in days_raw]
    hours = [h for h in (parse_hour(r) for r in hours_raw) if h is not None]
    try:
        catalog = ReferenceCatalog(days=days, hours=hours)
    except ValidationError as e:
        raise CatalogImportError(f"Katalog ungültig: {e}") from e
    logger.info(f"Katalog geladen: {len(days)} Tage, {len(hours)} Stundenslots")
    return catalog
