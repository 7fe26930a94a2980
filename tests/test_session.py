"""Tests für EditingSession: Katalog-Laden, Sperren, Speichern."""

import json

import pytest

from config.defaults import default_config
from data.api_client import SubmissionError
from data.json_store import JsonCatalogSource, JsonPayloadSink, load_record_json
from data.wire import CatalogImportError, build_catalog
from engine.eligibility import EditMode
from engine.engine import CatalogUnavailableError, InvariantViolationError
from engine.session import CatalogStatus, EditingSession, UnknownDayError
from models.staff import StaffRecord


# ─── Test-Doubles ─────────────────────────────────────────────────────────────

class _StaticSource:
    def __init__(self, raw: dict) -> None:
        self.raw = raw

    async def fetch_days(self) -> list[dict]:
        return self.raw["days"]

    async def fetch_hours(self) -> list[dict]:
        return self.raw["hours"]


class _BrokenSource:
    async def fetch_days(self) -> list[dict]:
        raise ConnectionError("Server nicht erreichbar")

    async def fetch_hours(self) -> list[dict]:
        return []


class _RecordingSink:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.payloads = []

    async def submit(self, payload) -> dict:
        self.payloads.append(payload)
        if self.fail:
            raise RuntimeError("HTTP 500")
        return payload.to_wire()


def _make_record(**overrides) -> StaffRecord:
    data = {
        "_id": "r1", "name": "Weber, Eva", "isDoctor": False,
        "days": ["mon"], "dayHours": {"mon": ["mon-0700", "mon-0900"]},
    }
    data.update(overrides)
    return StaffRecord.model_validate(data)


# ─── Katalog-Status ───────────────────────────────────────────────────────────

class TestCatalogLifecycle:
    def test_pending_blocks_mutations(self):
        session = EditingSession()
        assert session.status == CatalogStatus.PENDING
        with pytest.raises(CatalogUnavailableError):
            session.select_day("mon")
        with pytest.raises(CatalogUnavailableError):
            session.summary()

    @pytest.mark.asyncio
    async def test_load_makes_ready(self, catalog_raw):
        session = EditingSession()
        catalog = await session.load_catalog(_StaticSource(catalog_raw))
        assert session.status == CatalogStatus.READY
        assert [d.id for d in catalog.days] == ["mon", "sat", "hol"]
        assert session.select_day("mon").selected_days == ("mon",)

    @pytest.mark.asyncio
    async def test_failed_load_is_fatal(self):
        session = EditingSession()
        with pytest.raises(CatalogUnavailableError, match="nicht verfügbar"):
            await session.load_catalog(_BrokenSource())
        assert session.status == CatalogStatus.FAILED
        with pytest.raises(CatalogUnavailableError):
            session.select_day("mon")

    @pytest.mark.asyncio
    async def test_invalid_catalog_data_is_fatal(self):
        raw = {"days": [{"name": "ohne ID"}], "hours": []}
        session = EditingSession()
        with pytest.raises(CatalogUnavailableError):
            await session.load_catalog(_StaticSource(raw))
        assert session.status == CatalogStatus.FAILED

    @pytest.mark.asyncio
    async def test_json_file_source(self, tmp_path, catalog):
        path = tmp_path / "catalog.json"
        catalog.save_json(path)
        session = EditingSession()
        loaded = await session.load_catalog(JsonCatalogSource(path))
        assert loaded.get_hour("sat-0900").label == "09:00"
        assert loaded.get_day("hol").day_type == catalog.get_day("hol").day_type

    @pytest.mark.asyncio
    async def test_missing_json_file_is_fatal(self, tmp_path):
        session = EditingSession()
        with pytest.raises(CatalogUnavailableError):
            await session.load_catalog(JsonCatalogSource(tmp_path / "fehlt.json"))
        assert session.status == CatalogStatus.FAILED


# ─── Bearbeiten ───────────────────────────────────────────────────────────────

class TestSessionEditing:
    def test_create_mode_without_record(self, catalog):
        session = EditingSession()
        session.attach_catalog(catalog)
        assert session.mode == EditMode.CREATE
        assert session.state.is_empty()

    def test_edit_mode_loads_record(self, catalog):
        session = EditingSession(record=_make_record())
        session.attach_catalog(catalog)
        assert session.mode == EditMode.EDIT
        assert session.name == "Weber, Eva"
        assert session.state.hours_for("mon") == ("mon-0700", "mon-0900")
        assert "mon-0700" in session.eligible_hours("mon")

    def test_inconsistent_record_raises(self, catalog):
        session = EditingSession(record=_make_record(dayHours={"mon": ["sat-0900"]}))
        with pytest.raises(InvariantViolationError):
            session.attach_catalog(catalog)
        assert session.status == CatalogStatus.PENDING

    def test_unknown_day_rejected(self, catalog):
        session = EditingSession()
        session.attach_catalog(catalog)
        with pytest.raises(UnknownDayError):
            session.select_day("xyz")
        with pytest.raises(UnknownDayError):
            session.toggle_day("xyz")
        assert session.state.is_empty()

    def test_deselect_via_toggle(self, catalog):
        session = EditingSession()
        session.attach_catalog(catalog)
        session.toggle_day("sat")
        session.set_hours_for_day("sat", ["sat-0900"])
        session.toggle_day("sat")
        assert session.state.is_empty()

    def test_summary_uses_display_config(self, catalog):
        config = default_config()
        config.display.time_format = "12h"
        session = EditingSession(config)
        session.attach_catalog(catalog)
        session.select_day("mon")
        session.set_hours_for_day("mon", ["mon-2000"])
        assert session.summary().days[0].time_labels == ["8:00 PM"]

    def test_sessions_are_isolated(self, catalog):
        first, second = EditingSession(), EditingSession()
        first.attach_catalog(catalog)
        second.attach_catalog(catalog)
        first.select_day("mon")
        assert second.state.is_empty()


# ─── Speichern ────────────────────────────────────────────────────────────────

class TestSubmission:
    @pytest.mark.asyncio
    async def test_submit_create(self, catalog):
        session = EditingSession()
        session.attach_catalog(catalog)
        session.name = "Koch, Lena"
        session.select_day("sat")
        session.set_hours_for_day("sat", ["sat-0900"])
        sink = _RecordingSink()
        result = await session.submit(sink)
        assert result["hourIds"] == ["sat-0900"]
        assert "_id" not in result

    @pytest.mark.asyncio
    async def test_submit_edit_targets_record(self, catalog):
        session = EditingSession(record=_make_record())
        session.attach_catalog(catalog)
        result = await session.submit(_RecordingSink())
        assert result["_id"] == "r1"
        assert result["hourIds"] == ["mon-0700", "mon-0900"]

    @pytest.mark.asyncio
    async def test_failed_submit_keeps_state(self, catalog):
        """Nach einem Fehler kann ohne Neueingabe erneut gespeichert werden."""
        session = EditingSession(record=_make_record())
        session.attach_catalog(catalog)
        before = session.state
        with pytest.raises(RuntimeError):
            await session.submit(_RecordingSink(fail=True))
        assert session.state == before

        session.set_hours_for_day("mon", ["mon-0900"])
        sink = _RecordingSink()
        await session.submit(sink)
        assert sink.payloads[0].hour_ids == ["mon-0900"]

    @pytest.mark.asyncio
    async def test_json_sink_writes_file(self, tmp_path, catalog):
        session = EditingSession(record=_make_record())
        session.attach_catalog(catalog)
        out = tmp_path / "out" / "payload.json"
        await session.submit(JsonPayloadSink(out))
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["days"] == ["mon"]
        assert data["_id"] == "r1"

    @pytest.mark.asyncio
    async def test_json_sink_write_error(self, tmp_path, catalog):
        """Ein Verzeichnis als Ziel wird als SubmissionError gemeldet."""
        session = EditingSession(record=_make_record())
        session.attach_catalog(catalog)
        before = session.state
        with pytest.raises(SubmissionError, match="nicht gespeichert"):
            await session.submit(JsonPayloadSink(tmp_path))
        assert session.state == before


# ─── Dateien + Rohdaten ───────────────────────────────────────────────────────

class TestWireParsing:
    def test_api_shape(self, catalog_raw):
        catalog = build_catalog(catalog_raw["days"], catalog_raw["hours"])
        assert catalog.get_hour("mon-0800").day_id == "mon"
        assert catalog.get_day("hol").day_type is not None

    def test_hour_without_day_skipped(self):
        catalog = build_catalog(
            [{"_id": "mon", "name": "Monday"}],
            [{"_id": "x", "value": "08:00"}, {"_id": "y", "value": "09:00", "dayId": "mon"}],
        )
        assert [h.id for h in catalog.hours] == ["y"]

    def test_single_digit_hour_normalized(self):
        catalog = build_catalog(
            [{"id": "mon", "name": "Monday"}],
            [{"id": "a", "label": "8:00", "day_id": "mon"}],
        )
        assert catalog.get_hour("a").label == "08:00"

    def test_invalid_label_raises(self):
        with pytest.raises(CatalogImportError):
            build_catalog([{"id": "mon", "name": "Monday"}],
                          [{"id": "a", "label": "acht", "day_id": "mon"}])

    def test_duplicate_ids_raise(self):
        with pytest.raises(CatalogImportError):
            build_catalog([{"id": "mon", "name": "Monday"}, {"id": "mon", "name": "Montag"}], [])

    def test_load_record_json(self, tmp_path):
        path = tmp_path / "record.json"
        path.write_text(json.dumps({"name": "Weber, Eva", "days": ["mon"]}), encoding="utf-8")
        assert load_record_json(path).days == ["mon"]

    def test_load_record_json_invalid(self, tmp_path):
        path = tmp_path / "record.json"
        path.write_text(json.dumps({"days": ["mon"]}), encoding="utf-8")
        with pytest.raises(ValueError, match="ungültig"):
            load_record_json(path)

    def test_load_record_json_bad_hour_entry(self, tmp_path):
        path = tmp_path / "record.json"
        path.write_text(json.dumps({
            "doctor": {"_id": "r9", "name": "Dr. Braun"},
            "hours": [["mon-0900"]], "days": ["mon"], "dayHours": {"mon": ["mon-0900"]},
        }), encoding="utf-8")
        with pytest.raises(ValueError, match="Stunden-Eintrag"):
            load_record_json(path)
