"""HTTP-Client für Stammdaten (Tage/Stunden) und Personalverwaltung (/doc-teach)."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from config.schema import ApiConfig
from export.payload import SubmissionPayload
from models.staff import StaffRecord

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Anfrage an die Schnittstelle fehlgeschlagen."""


class SubmissionError(ApiError):
    """Speichern des Datensatzes fehlgeschlagen (Auswahl bleibt unverändert)."""


class ApiClient:
    """Asynchroner Client; liefert Rohdaten, das Parsen übernimmt data.wire."""

    def __init__(self, config: Optional[ApiConfig] = None,
                 http: Optional[httpx.AsyncClient] = None) -> None:
        self.config = config or ApiConfig()
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout_seconds),
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str,
                       json: Optional[dict] = None) -> Any:
        try:
            response = await self.http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise ApiError(f"Verbindung zu {path} fehlgeschlagen: {exc}") from exc
        if response.status_code >= 400:
            raise ApiError(f"{method} {path}: HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"{method} {path}: Antwort ist kein JSON") from exc

    # ─── Katalog ───

    async def fetch_days(self) -> list[dict]:
        data = await self._request("GET", self.config.days_endpoint)
        if not isinstance(data, list):
            raise ApiError(f"{self.config.days_endpoint}: Liste erwartet")
        return data

    async def fetch_hours(self) -> list[dict]:
        data = await self._request("GET", self.config.hours_endpoint)
        if not isinstance(data, list):
            raise ApiError(f"{self.config.hours_endpoint}: Liste erwartet")
        return data

    # ─── Personal ───

    async def fetch_record(self, record_id: str) -> StaffRecord:
        """Lädt einen gespeicherten Datensatz zum Bearbeiten."""
        data = await self._request("GET", f"{self.config.staff_endpoint}/{record_id}")
        try:
            return StaffRecord.model_validate(data)
        except ValidationError as e:
            raise ApiError(f"Datensatz {record_id} ungültig: {e}") from e

    async def submit(self, payload: SubmissionPayload) -> dict:
        """Neuanlage (POST) oder Aktualisierung (PATCH, wenn ``_id`` gesetzt)."""
        if payload.is_update:
            method, path = "PATCH", f"{self.config.staff_endpoint}/{payload.id}"
        else:
            method, path = "POST", self.config.staff_endpoint
        try:
            result = await self._request(method, path, json=payload.to_wire())
        except ApiError as e:
            raise SubmissionError(str(e)) from e
        logger.info(f"Datensatz gespeichert ({method} {path})")
        return result
