"""Übersicht über eine Verfügbarkeit (nur lesend).

Pro ausgewähltem Tag: Anzahl Stunden, die ersten Uhrzeiten sortiert, Anzahl
weiterer Stunden ("+N"). Dazu eine Summenzeile. Ohne ausgewählte Tage gibt
es keine Übersicht.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel

from models.hour_slot import format_time_label

if TYPE_CHECKING:
    from engine.state import SelectionState
    from models.catalog import ReferenceCatalog


class DaySummary(BaseModel):
    """Eine Zeile der Übersicht."""

    day_id: str
    day_label: str
    hour_count: int
    time_labels: list[str]   # höchstens max_time_labels, nach Uhrzeit sortiert
    overflow_count: int      # hour_count - angezeigte Labels (≥ 0)

    @property
    def hours_text(self) -> str:
        return f"{self.hour_count} Stunde" if self.hour_count == 1 else f"{self.hour_count} Stunden"


class ScheduleSummary(BaseModel):
    """Vollständige Übersicht inkl. Summenzeile."""

    days: list[DaySummary]
    day_count: int
    total_hours: int

    def print_rich(self, title: str = "Verfügbarkeit") -> None:
        """Gibt die Übersicht als Rich-Tabelle aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Tag", style="bold")
        table.add_column("Stunden")
        table.add_column("Uhrzeiten")
        for ds in self.days:
            labels = ", ".join(ds.time_labels)
            if ds.overflow_count:
                labels += f" [dim]+{ds.overflow_count} weitere[/dim]"
            count_style = "green" if ds.hour_count else "dim"
            table.add_row(ds.day_label, f"[{count_style}]{ds.hours_text}[/{count_style}]",
                          labels or "[dim]–[/dim]")
        table.add_row("[bold]Gesamt[/bold]", f"[bold]{self.total_hours}[/bold]",
                      f"{self.day_count} Tage")
        console.print(table)


def _slot_sort_key(catalog: "ReferenceCatalog", hour_id: str) -> tuple:
    slot = catalog.get_hour(hour_id)
    if slot is None:
        return (1, 0, 0, hour_id)
    return (0, slot.hour, slot.minute, "")


def _time_label(catalog: "ReferenceCatalog", hour_id: str, time_format: str) -> str:
    slot = catalog.get_hour(hour_id)
    if slot is None:
        return hour_id
    return format_time_label(slot.label, time_format)


def project_summary(
    state: "SelectionState",
    catalog: "ReferenceCatalog",
    max_time_labels: int = 4,
    time_format: str = "24h",
) -> Optional[ScheduleSummary]:
    """Berechnet die Übersicht für einen Auswahlzustand.

    Angezeigt werden die ersten ``max_time_labels`` zugewiesenen Stunden
    (Zuweisungsreihenfolge), sortiert nach Uhrzeit (Stunde, Minute).
    Unbekannte Slot-IDs erscheinen mit ihrer rohen ID am Ende.

    Returns:
        ScheduleSummary oder None, wenn kein Tag ausgewählt ist.
    """
    if state.is_empty():
        return None

    days: list[DaySummary] = []
    for day_id in state.selected_days:
        hour_ids = state.hours_for(day_id)
        shown = sorted(hour_ids[:max_time_labels], key=lambda h: _slot_sort_key(catalog, h))
        days.append(DaySummary(
            day_id=day_id,
            day_label=catalog.day_label(day_id),
            hour_count=len(hour_ids),
            time_labels=[_time_label(catalog, h, time_format) for h in shown],
            overflow_count=max(0, len(hour_ids) - max_time_labels),
        ))

    return ScheduleSummary(
        days=days,
        day_count=len(state.selected_days),
        total_hours=sum(d.hour_count for d in days),
    )
