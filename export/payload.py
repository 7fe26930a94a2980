"""Payload für die Personalverwaltung aus einem Auswahlzustand.

Keine Ein-/Ausgabe: das Ergebnis wird vom Aufrufer an die API übergeben
oder als JSON gespeichert.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from engine.state import SelectionState


class SubmissionPayload(BaseModel):
    """Datensatz wie ihn POST/PATCH /doc-teach erwartet."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")   # nur beim Bearbeiten
    name: str = Field(min_length=1)
    is_doctor: bool = Field(False, alias="isDoctor")
    hour_ids: list[str] = Field(default_factory=list, alias="hourIds")
    days: list[str] = []
    day_hours: dict[str, list[str]] = Field(default_factory=dict, alias="dayHours")

    @property
    def is_update(self) -> bool:
        return bool(self.id)

    def to_wire(self) -> dict:
        """Serialisiert mit API-Feldnamen; ``_id`` fehlt bei Neuanlage."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def collect_hour_ids(state: "SelectionState") -> list[str]:
    """Alle Stunden-IDs der ausgewählten Tage, jede genau einmal.

    Reihenfolge: Tage wie ausgewählt, innerhalb eines Tages wie zugewiesen.
    Dieselben Tage wie as_dict(), damit hourIds und dayHours übereinstimmen.
    """
    seen: dict[str, None] = {}
    for day_id in state.selected_days:
        for hour_id in state.hours_for(day_id):
            seen.setdefault(hour_id, None)
    return list(seen)


def normalize_submission(
    state: "SelectionState",
    name: str,
    is_doctor: bool = False,
    record_id: Optional[str] = None,
) -> SubmissionPayload:
    """Baut den Payload: hourIds (flach, eindeutig) + days + dayHours."""
    return SubmissionPayload(
        _id=record_id or None,
        name=name,
        isDoctor=is_doctor,
        hourIds=collect_hour_ids(state),
        days=list(state.selected_days),
        dayHours=state.as_dict(),
    )
