"""ReferenceCatalog: Tage + Stundenslots als unveränderliche Stammdaten (Pydantic v2)."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, PrivateAttr, model_validator

from models.day import Day
from models.hour_slot import HourSlot

logger = logging.getLogger(__name__)


class ReferenceCatalog(BaseModel):
    """Tages- und Stundenkatalog einer Sitzung.

    Wird einmal geladen und danach nur gelesen. Die Reihenfolge von ``days``
    ist die Anzeige-Reihenfolge.
    """

    days: list[Day]
    hours: list[HourSlot]

    _day_index: dict[str, Day] = PrivateAttr(default_factory=dict)
    _hour_index: dict[str, HourSlot] = PrivateAttr(default_factory=dict)

    @model_validator(mode='after')
    def _check_unique_ids(self):
        day_ids = [d.id for d in self.days]
        if len(day_ids) != len(set(day_ids)):
            dupes = sorted({d for d in day_ids if day_ids.count(d) > 1})
            raise ValueError(f"Doppelte Tages-IDs im Katalog: {dupes}")
        hour_ids = [h.id for h in self.hours]
        if len(hour_ids) != len(set(hour_ids)):
            dupes = sorted({h for h in hour_ids if hour_ids.count(h) > 1})
            raise ValueError(f"Doppelte Stunden-IDs im Katalog: {dupes}")
        return self

    def model_post_init(self, __context) -> None:
        self._day_index = {d.id: d for d in self.days}
        self._hour_index = {h.id: h for h in self.hours}
        orphans = [h.id for h in self.hours if h.day_id not in self._day_index]
        if orphans:
            logger.warning(
                f"{len(orphans)} Stundenslots verweisen auf unbekannte Tage: {orphans[:5]}"
            )

    # ─── Lookups ───

    def get_day(self, day_id: str) -> Optional[Day]:
        return self._day_index.get(day_id)

    def get_hour(self, hour_id: str) -> Optional[HourSlot]:
        return self._hour_index.get(hour_id)

    def has_day(self, day_id: str) -> bool:
        return day_id in self._day_index

    def hours_for_day(self, day_id: str) -> list[HourSlot]:
        """Alle Slots eines Tages, sortiert nach Uhrzeit."""
        return sorted(
            (h for h in self.hours if h.day_id == day_id),
            key=lambda h: h.sort_key,
        )

    def day_label(self, day_id: str) -> str:
        """Anzeigename eines Tages; unbekannte IDs werden roh angezeigt."""
        day = self.get_day(day_id)
        return day.display_name if day else day_id

    def summary(self) -> str:
        """Kurze Übersicht über den Katalog."""
        lines = [f"Tage: {len(self.days)}", f"Stundenslots: {len(self.hours)}"]
        for day in self.days:
            lines.append(f"  {day.display_name}: {len(self.hours_for_day(day.id))} Slots")
        return "\n".join(lines)

    # ─── Persistenz ───

    def save_json(self, path: Path) -> None:
        """Speichert den Katalog als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "ReferenceCatalog":
        """Lädt einen Katalog aus einer JSON-Datei (eigenes Format)."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Katalog-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
