"""Verfügbarkeits-Engine: hält ausgewählte Tage und Stunden pro Tag konsistent.

Architektur:
  - SelectionState ist unveränderlich; jede Operation ist ein Reducer-Schritt
    (alter Zustand → neuer Zustand), der Tage UND Stunden in einem Zug ändert.
  - Invarianten nach jedem Schritt:
      I1  keys(day_hours) == selected_days
      I2  jeder auflösbare Slot steht unter seinem eigenen Tag
      I3  keine doppelten Stunden pro Tag
  - Fremde Slots werden still verworfen (AssignmentResult.dropped_ids),
    ein fehlender Katalog ist dagegen fatal (CatalogUnavailableError).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from engine.eligibility import EditMode, EligibilityPolicy, eligible_hours
from engine.state import SelectionState, dedup, find_violations
from models.catalog import ReferenceCatalog
from models.hour_slot import format_time_label

logger = logging.getLogger(__name__)


class CatalogUnavailableError(Exception):
    """Tages-/Stundenkatalog fehlt – das Formular ist nicht bearbeitbar."""


class DayNotSelectedError(ValueError):
    """Stunden für einen Tag gesetzt, der nicht ausgewählt ist."""


class InvariantViolationError(ValueError):
    """Gespeicherter Datensatz verletzt die Zuordnung Slot → Tag."""


@dataclass(frozen=True)
class AssignmentResult:
    """Ergebnis von set_hours_for_day.

    ``dropped_ids`` sind Slots, die still verworfen wurden (fremder Tag oder
    unbekannt). Das ist kein Fehler, sondern ein normales Ergebnis.
    """

    state: SelectionState
    dropped_ids: tuple[str, ...] = ()

    @property
    def fully_applied(self) -> bool:
        return not self.dropped_ids


@dataclass(frozen=True)
class HourOption:
    """Ein anbietbarer Slot inkl. Anzeige-Label."""

    id: str
    label: str
    resolved: bool   # False = ID nicht (mehr) im Katalog


# ─── Reducer ──────────────────────────────────────────────────────────────────

def select_day(state: SelectionState, day_id: str) -> SelectionState:
    """Hängt den Tag an; leerer Stunden-Eintrag falls noch keiner existiert."""
    if state.is_selected(day_id):
        return state
    day_hours = dict(state.day_hours)
    day_hours.setdefault(day_id, ())
    return SelectionState(state.selected_days + (day_id,), day_hours)


def deselect_day(state: SelectionState, day_id: str) -> SelectionState:
    """Entfernt den Tag UND alle seine Stunden (kein Wiederherstellen)."""
    if not state.is_selected(day_id) and day_id not in state.day_hours:
        return state
    day_hours = {d: ids for d, ids in state.day_hours.items() if d != day_id}
    selected = tuple(d for d in state.selected_days if d != day_id)
    return SelectionState(selected, day_hours)


def set_hours_for_day(
    state: SelectionState,
    catalog: ReferenceCatalog,
    day_id: str,
    hour_ids: Iterable[str],
) -> AssignmentResult:
    """Ersetzt die Stunden eines ausgewählten Tages.

    Behalten werden:
      - Slots, deren Katalog-Tag == day_id
      - unbekannte IDs, die dem Tag bereits zugewiesen waren (Altbestand)
    Alles andere landet in ``dropped_ids``.
    """
    if not state.is_selected(day_id):
        raise DayNotSelectedError(f"Tag {day_id} ist nicht ausgewählt")

    previous = set(state.hours_for(day_id))
    kept: list[str] = []
    dropped: list[str] = []
    for hour_id in dedup(hour_ids):
        slot = catalog.get_hour(hour_id)
        if slot is not None and slot.day_id == day_id:
            kept.append(hour_id)
        elif slot is None and hour_id in previous:
            kept.append(hour_id)
        else:
            dropped.append(hour_id)

    if dropped:
        logger.debug(f"Tag {day_id}: {len(dropped)} fremde Slots verworfen: {dropped}")

    day_hours = dict(state.day_hours)
    day_hours[day_id] = tuple(kept)
    return AssignmentResult(
        state=SelectionState(state.selected_days, day_hours),
        dropped_ids=tuple(dropped),
    )


def reconcile_loaded(
    catalog: ReferenceCatalog,
    days: Iterable[str],
    day_hours: dict[str, Iterable[str]],
) -> SelectionState:
    """Übernimmt einen gespeicherten Datensatz ohne Stundenfenster-Filter.

    - doppelte Tage/Stunden werden zusammengefasst
    - ausgewählte Tage ohne Eintrag bekommen einen leeren Eintrag
    - Einträge für nicht ausgewählte Tage werden verworfen (Warnung)
    - unbekannte Slot-IDs bleiben erhalten
    - ein bekannter Slot unter einem fremden Tag → InvariantViolationError
    """
    selected = dedup(days)
    orphans = [d for d in day_hours if d not in selected]
    if orphans:
        logger.warning(f"Stunden für nicht ausgewählte Tage verworfen: {orphans}")

    state = SelectionState(
        selected,
        {d: tuple(day_hours.get(d) or ()) for d in selected},
    )
    violations = find_violations(state, catalog)
    if violations:
        raise InvariantViolationError(
            "Gespeicherte Verfügbarkeit ist inkonsistent:\n  " + "\n  ".join(violations)
        )

    unresolved = [h for d in selected for h in state.hours_for(d) if catalog.get_hour(h) is None]
    if unresolved:
        logger.info(f"{len(unresolved)} gespeicherte Slots nicht im Katalog – bleiben erhalten")
    return state


# ─── Engine ───────────────────────────────────────────────────────────────────

class AvailabilityEngine:
    """Einziger Einstiegspunkt für Änderungen am Auswahlzustand.

    Jede Operation berechnet den Folgezustand vollständig und tauscht ihn in
    einer Zuweisung aus; ein Zwischenzustand mit verletzter Invariante ist
    von außen nie sichtbar.
    """

    def __init__(
        self,
        catalog: Optional[ReferenceCatalog],
        policy: Optional[EligibilityPolicy] = None,
        state: Optional[SelectionState] = None,
        mode: EditMode = EditMode.CREATE,
    ) -> None:
        if catalog is None:
            raise CatalogUnavailableError("Kein Katalog geladen – Bearbeitung nicht möglich")
        self.catalog = catalog
        self.policy = policy or EligibilityPolicy()
        self.mode = EditMode(mode)
        self._state = state or SelectionState()

    @classmethod
    def create(cls, catalog: ReferenceCatalog,
               policy: Optional[EligibilityPolicy] = None) -> "AvailabilityEngine":
        """Leerer Zustand für ein neues Formular."""
        return cls(catalog, policy, SelectionState(), EditMode.CREATE)

    @classmethod
    def from_persisted(
        cls,
        catalog: ReferenceCatalog,
        days: Iterable[str],
        day_hours: dict[str, Iterable[str]],
        policy: Optional[EligibilityPolicy] = None,
    ) -> "AvailabilityEngine":
        """Zustand aus einem gespeicherten Datensatz (Bearbeiten)."""
        state = reconcile_loaded(catalog, days, day_hours)
        return cls(catalog, policy, state, EditMode.EDIT)

    @property
    def state(self) -> SelectionState:
        return self._state

    # ─── Mutationen ───

    def select_day(self, day_id: str) -> SelectionState:
        self._state = select_day(self._state, day_id)
        return self._state

    def deselect_day(self, day_id: str) -> SelectionState:
        self._state = deselect_day(self._state, day_id)
        return self._state

    def toggle_day(self, day_id: str) -> SelectionState:
        """Wählt einen Tag ab, wenn er ausgewählt ist, sonst aus."""
        if self._state.is_selected(day_id):
            return self.deselect_day(day_id)
        return self.select_day(day_id)

    def set_hours_for_day(self, day_id: str, hour_ids: Iterable[str]) -> AssignmentResult:
        result = set_hours_for_day(self._state, self.catalog, day_id, hour_ids)
        self._state = result.state
        return result

    # ─── Abfragen ───

    def eligible_hours(self, day_id: str, mode: Optional[EditMode] = None) -> list[str]:
        """Anbietbare Stunden-IDs; ohne ``mode`` gilt der Modus der Engine."""
        return eligible_hours(self._state, self.catalog, self.policy, day_id,
                              mode or self.mode)

    def hour_options(self, day_id: str, mode: Optional[EditMode] = None,
                     time_format: str = "24h") -> list[HourOption]:
        """Wie eligible_hours, aber mit Anzeige-Labels (unbekannt → rohe ID)."""
        options = []
        for hour_id in self.eligible_hours(day_id, mode):
            slot = self.catalog.get_hour(hour_id)
            if slot is None:
                options.append(HourOption(hour_id, hour_id, resolved=False))
            else:
                options.append(HourOption(hour_id, format_time_label(slot.label, time_format),
                                          resolved=True))
        return options

    def unresolved_hour_ids(self) -> list[str]:
        """Zugewiesene IDs ohne Katalog-Eintrag (werden unverändert mitgeführt)."""
        return [
            h for d in self._state.selected_days for h in self._state.hours_for(d)
            if self.catalog.get_hour(h) is None
        ]

    def __repr__(self) -> str:
        return (f"AvailabilityEngine({self.mode.value}, "
                f"{len(self._state.selected_days)} Tage, {self._state.total_hours} Stunden)")
