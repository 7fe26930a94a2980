"""Tests für die Verfügbarkeits-Übersicht."""

from analysis.summary import DaySummary, ScheduleSummary, project_summary
from engine.state import SelectionState
from models.catalog import ReferenceCatalog
from models.day import Day
from models.hour_slot import HourSlot


def _make_wide_catalog() -> ReferenceCatalog:
    """Ein Tag mit sieben Slots, darunter zwei in derselben Stunde."""
    labels = ["14:00", "09:00", "09:30", "08:15", "16:00", "10:00", "08:05"]
    hours = [HourSlot(id=f"h{i}", label=label, day_id="tue") for i, label in enumerate(labels)]
    return ReferenceCatalog(days=[Day(id="tue", name="Tuesday")], hours=hours)


class TestProjectSummary:
    def test_empty_state_gives_nothing(self, catalog):
        """Ohne ausgewählte Tage keine Übersicht, auch keine Summenzeile."""
        assert project_summary(SelectionState(), catalog) is None

    def test_truncation(self):
        """Sechs Stunden → vier Uhrzeiten und '+2'."""
        catalog = _make_wide_catalog()
        state = SelectionState(("tue",), {"tue": ("h0", "h1", "h2", "h3", "h4", "h5")})
        summary = project_summary(state, catalog)
        day = summary.days[0]
        assert day.hour_count == 6
        assert len(day.time_labels) == 4
        assert day.overflow_count == 2

    def test_labels_sorted_by_hour_then_minute(self):
        """Die ersten vier zugewiesenen Slots werden nach Uhrzeit sortiert."""
        catalog = _make_wide_catalog()
        state = SelectionState(("tue",), {"tue": ("h0", "h1", "h2", "h3", "h4")})
        summary = project_summary(state, catalog)
        assert summary.days[0].time_labels == ["08:15", "09:00", "09:30", "14:00"]
        assert summary.days[0].overflow_count == 1

    def test_minute_ordering_within_same_hour(self):
        catalog = _make_wide_catalog()
        state = SelectionState(("tue",), {"tue": ("h3", "h6")})
        assert project_summary(state, catalog).days[0].time_labels == ["08:05", "08:15"]

    def test_day_order_follows_selection(self, catalog):
        state = SelectionState(("sat", "mon"), {"mon": ("mon-0800",), "sat": ()})
        summary = project_summary(state, catalog)
        assert [d.day_id for d in summary.days] == ["sat", "mon"]
        assert [d.day_label for d in summary.days] == ["Saturday", "Monday"]

    def test_totals(self, catalog):
        state = SelectionState(
            ("mon", "sat"),
            {"mon": ("mon-0800", "mon-0900"), "sat": ("sat-0900",)},
        )
        summary = project_summary(state, catalog)
        assert summary.day_count == 2
        assert summary.total_hours == 3

    def test_selected_day_without_hours(self, catalog):
        state = SelectionState(("mon",), {"mon": ()})
        summary = project_summary(state, catalog)
        assert summary.days[0].hour_count == 0
        assert summary.days[0].time_labels == []
        assert summary.total_hours == 0

    def test_unresolved_id_shows_raw_id_last(self, catalog):
        state = SelectionState(("mon",), {"mon": ("legacy-42", "mon-0900", "mon-0800")})
        summary = project_summary(state, catalog)
        assert summary.days[0].time_labels == ["08:00", "09:00", "legacy-42"]

    def test_12h_format(self, catalog):
        state = SelectionState(("mon",), {"mon": ("mon-2000", "mon-1130")})
        summary = project_summary(state, catalog, time_format="12h")
        assert summary.days[0].time_labels == ["11:30 AM", "8:00 PM"]

    def test_custom_label_limit(self):
        catalog = _make_wide_catalog()
        state = SelectionState(("tue",), {"tue": ("h0", "h1", "h2")})
        summary = project_summary(state, catalog, max_time_labels=2)
        assert summary.days[0].time_labels == ["09:00", "14:00"]
        assert summary.days[0].overflow_count == 1

    def test_state_is_not_modified(self, catalog):
        state = SelectionState(("mon",), {"mon": ("mon-0900", "mon-0800")})
        project_summary(state, catalog)
        assert state.hours_for("mon") == ("mon-0900", "mon-0800")


class TestSummaryOutput:
    def test_hours_text(self):
        one = DaySummary(day_id="mon", day_label="Monday", hour_count=1,
                         time_labels=["08:00"], overflow_count=0)
        many = DaySummary(day_id="mon", day_label="Monday", hour_count=3,
                          time_labels=["08:00"], overflow_count=0)
        assert one.hours_text == "1 Stunde"
        assert many.hours_text == "3 Stunden"

    def test_print_rich(self, capsys):
        summary = ScheduleSummary(
            days=[DaySummary(day_id="sat", day_label="Saturday", hour_count=5,
                             time_labels=["09:00", "10:00", "11:00", "12:00"],
                             overflow_count=1)],
            day_count=1,
            total_hours=5,
        )
        summary.print_rich(title="Test")
        out = capsys.readouterr().out
        assert "Saturday" in out
        assert "+1 weitere" in out
        assert "Gesamt" in out
