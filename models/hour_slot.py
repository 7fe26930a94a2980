"""Datenmodell für einen buchbaren Stundenslot (Pydantic v2)."""

import re

from pydantic import BaseModel, ConfigDict, field_validator

_LABEL_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_PADDED_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class HourSlot(BaseModel):
    """Eine Uhrzeit, die genau einem Wochentag zugeordnet ist.

    Immutable (frozen=True), damit Slots als Dict-Key / Set-Element nutzbar sind.
    """

    model_config = ConfigDict(frozen=True)

    id: str       # Katalog-ID
    label: str    # 24h-Format "HH:MM" (auf zwei Stellen normalisiert)
    day_id: str   # Zugehöriger Tag

    @field_validator("label")
    @classmethod
    def _normalize_label(cls, v: str) -> str:
        m = _LABEL_RE.match(v.strip())
        if not m:
            raise ValueError(f"Ungültige Uhrzeit '{v}' (erwartet HH:MM)")
        hour, minute = int(m.group(1)), int(m.group(2))
        if hour > 23 or minute > 59:
            raise ValueError(f"Uhrzeit außerhalb des Tages: '{v}'")
        return f"{hour:02d}:{minute:02d}"

    @property
    def hour(self) -> int:
        """Stunde des Tages (führende Ziffern des Labels)."""
        return int(self.label.split(":")[0])

    @property
    def minute(self) -> int:
        return int(self.label.split(":")[1])

    @property
    def sort_key(self) -> tuple[int, int]:
        """Numerischer Sortierschlüssel (Stunde, Minute), unabhängig vom Anzeigeformat."""
        return self.hour, self.minute

    def __str__(self) -> str:
        return self.label


def to_12h(label: str) -> str:
    """Wandelt "HH:MM" in "H:MM AM/PM" um ("13:15" → "1:15 PM").

    Nicht erkennbare Formate werden unverändert zurückgegeben.
    """
    m = _PADDED_RE.match(label)
    if not m:
        return label
    hour = int(m.group(1))
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:{m.group(2)} {suffix}"


def format_time_label(label: str, time_format: str = "24h") -> str:
    """Formatiert ein Slot-Label für die Anzeige ("24h" oder "12h")."""
    if time_format == "12h":
        return to_12h(label)
    return label
