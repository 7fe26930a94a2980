"""Datenmodell für einen Wochentag aus dem Stammdaten-Katalog (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from config.schema import DayType


class Day(BaseModel):
    """Ein Wochentag, an dem eine Lehrkraft verfügbar sein kann.

    ``day_type`` ist das maßgebliche Klassifikationsmerkmal. Fehlt es im Katalog,
    wird der Typ über den Namen bestimmt (siehe classify_day_name).
    """

    model_config = ConfigDict(frozen=True)

    id: str                            # Katalog-ID ("mon", Mongo-ObjectId, ...)
    name: str                          # Anzeigename ("Monday")
    day_type: Optional[DayType] = None # None = aus dem Namen ableiten

    @field_validator("id")
    @classmethod
    def _strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tages-ID darf nicht leer sein.")
        return v

    @property
    def display_name(self) -> str:
        return self.name or self.id


def classify_day_name(name: str, weekend_names: list[str]) -> DayType:
    """Klassifiziert einen Tag anhand seines Namens.

    Vergleich ohne Groß-/Kleinschreibung als Teilstring, d.h. "Saturday (Labor)"
    gilt ebenfalls als Wochenende.
    """
    lowered = name.lower()
    for weekend in weekend_names:
        if weekend.lower() in lowered:
            return DayType.WEEKEND
    return DayType.WEEKDAY
