"""Verfügbarkeits-Engine (Tage ↔ Stunden, Neuanlage/Bearbeiten)."""

from .state import SelectionState
from .eligibility import EditMode, EligibilityPolicy
from .engine import (
    AssignmentResult,
    AvailabilityEngine,
    CatalogUnavailableError,
    DayNotSelectedError,
    HourOption,
    InvariantViolationError,
)
from .session import CatalogStatus, EditingSession, UnknownDayError

__all__ = [
    "SelectionState",
    "EditMode",
    "EligibilityPolicy",
    "AssignmentResult",
    "AvailabilityEngine",
    "CatalogUnavailableError",
    "DayNotSelectedError",
    "HourOption",
    "InvariantViolationError",
    "CatalogStatus",
    "EditingSession",
    "UnknownDayError",
]
