"""EditingSession: ein Bearbeitungsformular von Katalog-Laden bis Speichern.

Ablauf:
  PENDING  – Katalog wird geladen, alle Änderungen gesperrt
  READY    – Engine aktiv
  FAILED   – Katalog nicht verfügbar, alle Änderungen gesperrt (fatal)

Speichern ist die einzige asynchrone Grenze nach dem Laden. Der Payload wird
bei jedem Aufruf neu aus dem aktuellen Zustand abgeleitet; ein Fehler oder
Abbruch beim Speichern verändert den Zustand nicht.
"""

import asyncio
import logging
from enum import Enum
from typing import Iterable, Optional, Protocol

from analysis.summary import ScheduleSummary, project_summary
from config.defaults import default_config
from config.schema import AvailabilityConfig
from data.wire import build_catalog
from engine.eligibility import EditMode, EligibilityPolicy
from engine.engine import AssignmentResult, AvailabilityEngine, CatalogUnavailableError
from engine.state import SelectionState
from export.payload import SubmissionPayload, normalize_submission
from models.catalog import ReferenceCatalog
from models.staff import StaffRecord

logger = logging.getLogger(__name__)


class UnknownDayError(ValueError):
    """Tages-ID existiert nicht im Katalog."""


class CatalogStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class CatalogSource(Protocol):
    async def fetch_days(self) -> list[dict]: ...
    async def fetch_hours(self) -> list[dict]: ...


class SubmissionSink(Protocol):
    async def submit(self, payload: SubmissionPayload) -> dict: ...


class EditingSession:
    """Zustand eines einzelnen Formulars (Neuanlage oder Bearbeiten).

    Jede Sitzung besitzt ihren eigenen Auswahlzustand; mehrere Sitzungen
    teilen sich nichts außer dem (unveränderlichen) Katalog.
    """

    def __init__(self, config: Optional[AvailabilityConfig] = None,
                 record: Optional[StaffRecord] = None) -> None:
        self.config = config or default_config()
        self.record = record
        self.mode = EditMode.EDIT if record is not None else EditMode.CREATE
        self.name = record.name if record else ""
        self.is_doctor = record.is_doctor if record else False
        self.status = CatalogStatus.PENDING
        self.catalog: Optional[ReferenceCatalog] = None
        self._engine: Optional[AvailabilityEngine] = None
        self._failure: Optional[str] = None

    # ─── Katalog ───

    async def load_catalog(self, source: CatalogSource) -> ReferenceCatalog:
        """Lädt Tage und Stunden parallel und aktiviert die Engine."""
        try:
            days_raw, hours_raw = await asyncio.gather(
                source.fetch_days(), source.fetch_hours()
            )
            catalog = build_catalog(days_raw, hours_raw)
        except Exception as e:
            self.status = CatalogStatus.FAILED
            self._failure = str(e)
            logger.error(f"Katalog konnte nicht geladen werden: {e}")
            raise CatalogUnavailableError(
                f"Tages-/Stundenkatalog nicht verfügbar: {e}"
            ) from e
        self.attach_catalog(catalog)
        return catalog

    def attach_catalog(self, catalog: ReferenceCatalog) -> None:
        """Aktiviert die Engine mit einem bereits geladenen Katalog."""
        policy = EligibilityPolicy(self.config.eligibility)
        if self.record is not None:
            engine = AvailabilityEngine.from_persisted(
                catalog, self.record.days, self.record.day_hours, policy
            )
        else:
            engine = AvailabilityEngine.create(catalog, policy)
        self.catalog = catalog
        self._engine = engine
        self.status = CatalogStatus.READY
        logger.info(f"Sitzung bereit ({self.mode.value}): {engine!r}")

    @property
    def engine(self) -> AvailabilityEngine:
        if self.status == CatalogStatus.PENDING:
            raise CatalogUnavailableError("Katalog wird noch geladen – Bearbeitung gesperrt")
        if self.status == CatalogStatus.FAILED or self._engine is None:
            raise CatalogUnavailableError(
                f"Katalog nicht verfügbar – Formular nicht bearbeitbar ({self._failure})"
            )
        return self._engine

    @property
    def state(self) -> SelectionState:
        return self.engine.state

    # ─── Änderungen ───

    def _require_known_day(self, day_id: str) -> None:
        if not self.engine.catalog.has_day(day_id):
            raise UnknownDayError(f"Unbekannter Tag: {day_id}")

    def select_day(self, day_id: str) -> SelectionState:
        self._require_known_day(day_id)
        return self.engine.select_day(day_id)

    def deselect_day(self, day_id: str) -> SelectionState:
        return self.engine.deselect_day(day_id)

    def toggle_day(self, day_id: str) -> SelectionState:
        if not self.engine.state.is_selected(day_id):
            self._require_known_day(day_id)
        return self.engine.toggle_day(day_id)

    def set_hours_for_day(self, day_id: str, hour_ids: Iterable[str]) -> AssignmentResult:
        return self.engine.set_hours_for_day(day_id, hour_ids)

    def eligible_hours(self, day_id: str, mode: Optional[EditMode] = None) -> list[str]:
        return self.engine.eligible_hours(day_id, mode or self.mode)

    # ─── Ausgabe ───

    def summary(self) -> Optional[ScheduleSummary]:
        display = self.config.display
        return project_summary(self.state, self.engine.catalog,
                               display.max_time_labels, display.time_format)

    def build_payload(self) -> SubmissionPayload:
        record_id = self.record.id if self.record is not None else None
        return normalize_submission(self.state, self.name, self.is_doctor, record_id)

    async def submit(self, sink: SubmissionSink) -> dict:
        """Speichert den aktuellen Zustand. Fehler werden unverändert weitergereicht."""
        payload = self.build_payload()
        result = await sink.submit(payload)
        logger.info(
            f"Gespeichert: {payload.name} – {len(payload.days)} Tage, {len(payload.hour_ids)} Stunden"
        )
        return result
