"""Welche Stundenslots pro Tag angeboten werden dürfen.

Zwei Modi:
  create – nur Slots des Tages innerhalb des Stundenfensters
  edit   – alle bereits zugewiesenen Slots (auch außerhalb des Fensters oder
           nicht mehr im Katalog) plus alle Slots des Tages
"""

import logging
from enum import Enum
from typing import Callable, Optional

from config.defaults import default_eligibility
from config.schema import DayType, EligibilityConfig
from engine.state import SelectionState
from models.catalog import ReferenceCatalog
from models.day import Day, classify_day_name
from models.hour_slot import HourSlot

logger = logging.getLogger(__name__)


class EditMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class EligibilityPolicy:
    """Stundenfenster pro Tagestyp (Werktag/Wochenende)."""

    def __init__(self, config: Optional[EligibilityConfig] = None) -> None:
        self.config = config or default_eligibility()

    def day_type(self, day: Day) -> DayType:
        """Katalog-Typ hat Vorrang, sonst Klassifikation über den Namen."""
        if day.day_type is not None:
            return day.day_type
        return classify_day_name(day.name, self.config.weekend_names)

    def is_eligible(self, day: Day, slot: HourSlot) -> bool:
        return self.config.window_for(self.day_type(day)).contains(slot.hour)


def _time_ordered(catalog: ReferenceCatalog, hour_ids) -> list[str]:
    """Auflösbare IDs nach Uhrzeit, danach unbekannte IDs in Originalreihenfolge."""
    resolved = [catalog.get_hour(h) for h in hour_ids]
    known = sorted((s for s in resolved if s is not None), key=lambda s: s.sort_key)
    unknown = [h for h, s in zip(hour_ids, resolved) if s is None]
    return [s.id for s in known] + unknown


def create_candidates(
    state: SelectionState,
    catalog: ReferenceCatalog,
    policy: EligibilityPolicy,
    day_id: str,
) -> list[str]:
    """Slots des Tages, die das Stundenfenster des Tagestyps erfüllen."""
    day = catalog.get_day(day_id)
    if day is None:
        logger.debug(f"Unbekannter Tag {day_id} – keine Stunden angeboten")
        return []
    return [
        slot.id for slot in catalog.hours_for_day(day_id)
        if policy.is_eligible(day, slot)
    ]


def edit_candidates(
    state: SelectionState,
    catalog: ReferenceCatalog,
    policy: EligibilityPolicy,
    day_id: str,
) -> list[str]:
    """Bereits zugewiesene Slots (ohne Filter) ∪ alle Slots des Tages."""
    assigned = list(state.hours_for(day_id))
    same_day = [slot.id for slot in catalog.hours_for_day(day_id)]
    return _time_ordered(catalog, list(dict.fromkeys(assigned + same_day)))


_CANDIDATES: dict[EditMode, Callable[..., list[str]]] = {
    EditMode.CREATE: create_candidates,
    EditMode.EDIT: edit_candidates,
}


def eligible_hours(
    state: SelectionState,
    catalog: ReferenceCatalog,
    policy: EligibilityPolicy,
    day_id: str,
    mode: EditMode,
) -> list[str]:
    """Stunden-IDs, die für ``day_id`` im gegebenen Modus angeboten werden."""
    return _CANDIDATES[EditMode(mode)](state, catalog, policy, day_id)
