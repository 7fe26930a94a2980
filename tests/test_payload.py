"""Tests für den Payload der Personalverwaltung und das Datensatz-Modell."""

import json

import pytest
from pydantic import ValidationError

from engine.state import SelectionState
from export.payload import SubmissionPayload, collect_hour_ids, normalize_submission
from models.staff import StaffRecord


class TestNormalizer:
    def test_overlapping_hours_dedup(self):
        """Dieselbe ID unter zwei Tagen erscheint in hourIds nur einmal."""
        state = SelectionState(("d1", "d2"), {"d1": ("h1", "h2"), "d2": ("h2", "h3")})
        payload = normalize_submission(state, "Koch, Lena")
        assert payload.hour_ids == ["h1", "h2", "h3"]
        assert payload.day_hours == {"d1": ["h1", "h2"], "d2": ["h2", "h3"]}

    def test_order_follows_selection(self):
        state = SelectionState(("sat", "mon"), {"mon": ("m1",), "sat": ("s1", "s2")})
        assert collect_hour_ids(state) == ["s1", "s2", "m1"]

    def test_unselected_entries_ignored(self):
        """hourIds enthält nur Stunden, die auch in dayHours stehen."""
        state = SelectionState(("mon",), {"mon": ("a",), "tue": ("a", "b")})
        assert collect_hour_ids(state) == ["a"]
        payload = normalize_submission(state, "Koch, Lena")
        assert payload.day_hours == {"mon": ["a"]}
        listed = {h for ids in payload.day_hours.values() for h in ids}
        assert set(payload.hour_ids) <= listed

    def test_empty_state(self):
        payload = normalize_submission(SelectionState(), "Koch, Lena")
        assert payload.hour_ids == []
        assert payload.days == []
        assert payload.day_hours == {}

    def test_days_keep_empty_entries(self):
        state = SelectionState(("mon", "sat"), {"mon": (), "sat": ("s1",)})
        payload = normalize_submission(state, "Koch, Lena")
        assert payload.days == ["mon", "sat"]
        assert payload.day_hours["mon"] == []

    def test_state_untouched(self):
        state = SelectionState(("d1",), {"d1": ("h1",)})
        normalize_submission(state, "Koch, Lena")
        assert state.hours_for("d1") == ("h1",)


class TestSubmissionPayload:
    def test_create_omits_id(self):
        payload = normalize_submission(SelectionState(("mon",), {"mon": ("m1",)}),
                                       "Koch, Lena", is_doctor=True)
        wire = payload.to_wire()
        assert "_id" not in wire
        assert wire == {
            "name": "Koch, Lena",
            "isDoctor": True,
            "hourIds": ["m1"],
            "days": ["mon"],
            "dayHours": {"mon": ["m1"]},
        }
        assert not payload.is_update

    def test_edit_includes_id(self):
        payload = normalize_submission(SelectionState(), "Koch, Lena", record_id="abc123")
        assert payload.is_update
        assert payload.to_wire()["_id"] == "abc123"
        assert json.loads(payload.to_json())["_id"] == "abc123"

    def test_empty_record_id_counts_as_create(self):
        payload = normalize_submission(SelectionState(), "Koch, Lena", record_id="")
        assert "_id" not in payload.to_wire()

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            normalize_submission(SelectionState(), "")

    def test_populate_by_field_name(self):
        payload = SubmissionPayload(name="X", hour_ids=["a"], day_hours={"d": ["a"]})
        assert payload.to_wire()["hourIds"] == ["a"]


class TestStaffRecord:
    def test_flat_format(self):
        record = StaffRecord.model_validate({
            "_id": "r1", "name": "Weber, Eva", "isDoctor": False,
            "days": ["mon"], "dayHours": {"mon": ["m1"]}, "hourIds": ["m1"],
        })
        assert record.id == "r1"
        assert record.day_hours == {"mon": ["m1"]}
        assert record.category_label == "Lehrkraft"

    def test_doctor_with_hours_format(self):
        """Verschachteltes Format: Stammdaten unter 'doctor', Stunden als Objekte."""
        record = StaffRecord.model_validate({
            "doctor": {"_id": "r2", "name": "Dr. Fischer", "isDoctor": True},
            "hours": [{"_id": "m1"}, {"_id": "m2"}],
            "days": ["mon"],
            "dayHours": {"mon": ["m1", "m2"]},
        })
        assert record.id == "r2"
        assert record.is_doctor
        assert record.hour_ids == ["m1", "m2"]
        assert record.category_label == "Ärztin/Arzt"

    def test_doctor_with_hours_plain_ids(self):
        """Stunden dürfen auch als reine IDs kommen."""
        record = StaffRecord.model_validate({
            "doctor": {"_id": "r3", "name": "Dr. Braun"},
            "hours": ["m1", {"_id": "m2"}],
            "days": ["mon"],
            "dayHours": {"mon": ["m1", "m2"]},
        })
        assert record.hour_ids == ["m1", "m2"]

    @pytest.mark.parametrize("entry", [123, {"label": "08:00"}, None])
    def test_doctor_with_hours_invalid_entry(self, entry):
        with pytest.raises(ValidationError, match="Stunden-Eintrag"):
            StaffRecord.model_validate({
                "doctor": {"name": "Dr. Braun"},
                "hours": [entry],
                "days": [],
            })

    def test_missing_day_hours_default_empty(self):
        record = StaffRecord.model_validate({"name": "Neu", "days": ["mon"]})
        assert record.day_hours == {}
        assert record.id is None

    def test_name_required(self):
        with pytest.raises(ValidationError):
            StaffRecord.model_validate({"name": "", "days": []})
