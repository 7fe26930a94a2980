"""JSON-Dateien als Katalogquelle, Datensatzquelle und Payload-Ziel.

Katalog-Datei:   {"days": [...], "hours": [...]}  (Formate siehe data.wire)
Datensatz-Datei: StaffRecord (flach oder "doctor with hours")
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from data.api_client import SubmissionError
from data.wire import CatalogImportError, build_catalog
from export.payload import SubmissionPayload
from models.catalog import ReferenceCatalog
from models.staff import StaffRecord

logger = logging.getLogger(__name__)


class JsonCatalogSource:
    """Liest Tage und Stunden aus einer JSON-Datei."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            raise FileNotFoundError(f"Katalog-Datei nicht gefunden: {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogImportError(f"Katalog-Datei kein gültiges JSON: {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise CatalogImportError(f"Katalog-Datei muss ein Objekt sein: {self.path}")
        return data

    async def fetch_days(self) -> list[dict]:
        return list(self._read().get("days", []))

    async def fetch_hours(self) -> list[dict]:
        return list(self._read().get("hours", []))

    def load(self) -> ReferenceCatalog:
        """Synchrone Variante für CLI-Befehle ohne Sitzung."""
        data = self._read()
        return build_catalog(data.get("days", []), data.get("hours", []))

    def __repr__(self) -> str:
        return f"JsonCatalogSource({self.path})"


def load_record_json(path: Path) -> StaffRecord:
    """Lädt einen gespeicherten Datensatz zum Bearbeiten."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Datensatz nicht gefunden: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read()
    try:
        return StaffRecord.model_validate_json(raw)
    except ValidationError as e:
        raise ValueError(f"Datensatz ungültig: {path}\n{e}") from e


class JsonPayloadSink:
    """Schreibt den Payload als JSON-Datei statt ihn an die API zu senden."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def submit(self, payload: SubmissionPayload) -> dict:
        """Fehler beim Schreiben werden als SubmissionError gemeldet."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(payload.to_json())
        except OSError as e:
            raise SubmissionError(f"Payload konnte nicht gespeichert werden: {self.path}: {e}") from e
        logger.info(f"Payload gespeichert: {self.path}")
        return payload.to_wire()
