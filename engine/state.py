"""SelectionState: ausgewählte Tage + Stunden pro Tag (unveränderlich).

Jede Änderung erzeugt einen neuen Zustand. Die Stundenlisten haben
Mengen-Semantik (keine Duplikate), die Einfügereihenfolge bleibt nur für
eine deterministische Ausgabe erhalten.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from models.catalog import ReferenceCatalog


def dedup(ids: Iterable[str]) -> tuple[str, ...]:
    """Entfernt Duplikate, erstes Vorkommen gewinnt."""
    return tuple(dict.fromkeys(ids))


@dataclass(frozen=True)
class SelectionState:
    """Auswahlzustand eines Bearbeitungsformulars."""

    # Ausgewählte Tages-IDs in Auswahl-Reihenfolge
    selected_days: tuple[str, ...] = ()
    # Tages-ID → zugewiesene Stunden-IDs (nur lesbar)
    day_hours: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Eingaben kopieren und deduplizieren
        object.__setattr__(self, "selected_days", dedup(self.selected_days))
        object.__setattr__(
            self, "day_hours",
            MappingProxyType({day_id: dedup(ids) for day_id, ids in self.day_hours.items()}),
        )

    def __hash__(self) -> int:
        return hash((self.selected_days, frozenset(self.day_hours.items())))

    def is_selected(self, day_id: str) -> bool:
        return day_id in self.selected_days

    def hours_for(self, day_id: str) -> tuple[str, ...]:
        return self.day_hours.get(day_id, ())

    @property
    def total_hours(self) -> int:
        return sum(len(self.hours_for(d)) for d in self.selected_days)

    def is_empty(self) -> bool:
        return not self.selected_days

    def as_dict(self) -> dict[str, list[str]]:
        """Stunden pro Tag als JSON-taugliches Dict (Reihenfolge wie selected_days)."""
        return {day_id: list(self.hours_for(day_id)) for day_id in self.selected_days}


def find_violations(state: SelectionState, catalog: "ReferenceCatalog") -> list[str]:
    """Prüft die Invarianten und gibt Verstöße als Klartext zurück.

    1. Schlüssel-Parität: keys(day_hours) == selected_days
    2. Zugehörigkeit: jeder auflösbare Slot gehört zu dem Tag, unter dem er steht
    3. Keine Duplikate (durch SelectionState bereits garantiert)
    """
    violations: list[str] = []

    keys = set(state.day_hours)
    selected = set(state.selected_days)
    for day_id in sorted(selected - keys):
        violations.append(f"Tag {day_id} ausgewählt, aber ohne Stunden-Eintrag")
    for day_id in sorted(keys - selected):
        violations.append(f"Stunden-Eintrag für nicht ausgewählten Tag {day_id}")

    for day_id, hour_ids in state.day_hours.items():
        for hour_id in hour_ids:
            slot = catalog.get_hour(hour_id)
            if slot is not None and slot.day_id != day_id:
                violations.append(
                    f"Slot {hour_id} ({slot.label}) gehört zu Tag {slot.day_id}, "
                    f"steht aber unter {day_id}"
                )
        if len(set(hour_ids)) != len(hour_ids):
            violations.append(f"Doppelte Stunden unter Tag {day_id}")

    return violations
