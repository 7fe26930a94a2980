"""Datenmodell für eine gespeicherte Lehrkraft/Ärztin mit Verfügbarkeit (Pydantic v2)."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StaffRecord(BaseModel):
    """Gespeicherter Datensatz einer Lehrperson, wie ihn die API liefert.

    Akzeptiert das flache Format (``_id``, ``name``, ``isDoctor``, ``days``,
    ``dayHours``, ``hourIds``) und das verschachtelte Listenformat
    ``{"doctor": {...}, "hours": [...], "days": [...], "dayHours": {...}}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    name: str = Field(min_length=1)
    is_doctor: bool = Field(False, alias="isDoctor")
    days: list[str] = []
    day_hours: dict[str, list[str]] = Field(default_factory=dict, alias="dayHours")
    hour_ids: list[str] = Field(default_factory=list, alias="hourIds")

    @model_validator(mode='before')
    @classmethod
    def _unwrap_doctor_with_hours(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "doctor" not in data:
            return data
        doctor = data.get("doctor") or {}
        hour_ids = []
        for h in data.get("hours") or []:
            if isinstance(h, str):
                hour_ids.append(h)
            elif isinstance(h, dict) and "_id" in h:
                hour_ids.append(h["_id"])
            else:
                raise ValueError(f"Ungültiger Stunden-Eintrag: {h!r}")
        flat = {
            "_id": doctor.get("_id"),
            "name": doctor.get("name", ""),
            "isDoctor": doctor.get("isDoctor", False),
            "days": data.get("days") or [],
            "dayHours": data.get("dayHours") or {},
            "hourIds": hour_ids,
        }
        return flat

    @property
    def category_label(self) -> str:
        return "Ärztin/Arzt" if self.is_doctor else "Lehrkraft"
