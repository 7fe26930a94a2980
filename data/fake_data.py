"""Beispieldaten: Tages-/Stundenkatalog und Lehrpersonen mit Verfügbarkeit.

Der Katalog enthält pro Tag volle Stunden von 07:00 bis 21:00 und damit
absichtlich Slots außerhalb der Stundenfenster:
  - Werktage: 07:00 und 21:00 liegen außerhalb (Fenster 8–20)
  - Wochenende: 07:00, 08:00 und 18:00–21:00 liegen außerhalb (Fenster 9–17)
Einige Stunden tragen halbe Uhrzeiten (":30"), um die Sortierung nach Minuten
abzudecken.
"""

import random
from typing import Optional

from config.defaults import DEFAULT_CATALOG_HOURS, DEFAULT_DAYS
from config.schema import AvailabilityConfig
from engine.eligibility import EditMode, EligibilityPolicy
from engine.engine import AvailabilityEngine
from export.payload import normalize_submission
from models.catalog import ReferenceCatalog
from models.day import Day
from models.hour_slot import HourSlot
from models.staff import StaffRecord

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Andreas", "Birgit", "Christian", "Eva", "Franz", "Iris", "Jürgen",
    "Kathrin", "Lena", "Markus", "Olga", "Peter", "Sandra", "Tobias",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Koch", "Richter",
]

# Stunden mit halber Uhrzeit (Stunde → Minute)
_HALF_HOURS = {11: 30, 13: 30}


class SampleCatalogGenerator:
    """Generiert einen Beispielkatalog und passende Datensätze."""

    def __init__(self, config: AvailabilityConfig, seed: Optional[int] = None) -> None:
        self.config = config
        self.rng = random.Random(seed)

    # ─── Katalog ──────────────────────────────────────────────────────────────

    def generate(self) -> ReferenceCatalog:
        """Erzeugt sieben Tage mit je einem Slot pro Katalog-Stunde."""
        days = [Day(id=day_id, name=name) for day_id, name in DEFAULT_DAYS]
        hours = []
        for day in days:
            for hour in DEFAULT_CATALOG_HOURS:
                minute = _HALF_HOURS.get(hour, 0)
                hours.append(HourSlot(
                    id=f"{day.id}-{hour:02d}{minute:02d}",
                    label=f"{hour:02d}:{minute:02d}",
                    day_id=day.id,
                ))
        return ReferenceCatalog(days=days, hours=hours)

    # ─── Datensätze ───────────────────────────────────────────────────────────

    def generate_record(self, catalog: ReferenceCatalog, record_id: Optional[str] = None,
                        max_days: int = 3) -> StaffRecord:
        """Erzeugt eine Lehrperson mit zufälliger, gültiger Verfügbarkeit."""
        name = f"{self.rng.choice(_LAST_NAMES)}, {self.rng.choice(_FIRST_NAMES)}"
        engine = AvailabilityEngine.create(catalog, EligibilityPolicy(self.config.eligibility))

        num_days = self.rng.randint(1, min(max_days, len(catalog.days)))
        for day in self.rng.sample(catalog.days, num_days):
            engine.select_day(day.id)
            candidates = engine.eligible_hours(day.id, EditMode.CREATE)
            if candidates:
                picked = self.rng.sample(candidates, self.rng.randint(1, min(6, len(candidates))))
                engine.set_hours_for_day(day.id, picked)

        payload = normalize_submission(engine.state, name,
                                       is_doctor=self.rng.random() < 0.3,
                                       record_id=record_id)
        return StaffRecord.model_validate(payload.to_wire())

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, catalog: ReferenceCatalog) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht des erzeugten Katalogs aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        policy = EligibilityPolicy(self.config.eligibility)
        console = Console()
        table = Table(title="Erzeugter Katalog", box=box.ROUNDED)
        table.add_column("Tag", style="bold cyan")
        table.add_column("Typ")
        table.add_column("Slots", justify="right")
        table.add_column("im Fenster", justify="right")

        for day in catalog.days:
            slots = catalog.hours_for_day(day.id)
            eligible = sum(1 for s in slots if policy.is_eligible(day, s))
            table.add_row(day.display_name, policy.day_type(day).value,
                          str(len(slots)), str(eligible))

        console.print(table)
