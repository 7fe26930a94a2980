"""Gemeinsame Testdaten: kleiner Katalog mit Werktag, Wochenende und Grenzfällen."""

import pytest

from config.schema import DayType
from models.catalog import ReferenceCatalog
from models.day import Day
from models.hour_slot import HourSlot


def make_catalog() -> ReferenceCatalog:
    """Montag + Samstag mit Slots an den Rändern der Stundenfenster.

    Montag (Werktag, 8–20):    07:00 08:00 09:00 11:30 20:00 21:00
    Samstag (Wochenende, 9–17): 08:00 09:00 17:00 18:00
    Feiertag (day_type=weekend, Name ohne Wochenend-Bezug): 08:00 10:00
    """
    days = [
        Day(id="mon", name="Monday"),
        Day(id="sat", name="Saturday"),
        Day(id="hol", name="Feiertag", day_type=DayType.WEEKEND),
    ]
    hours = [
        HourSlot(id="mon-0700", label="07:00", day_id="mon"),
        HourSlot(id="mon-0800", label="08:00", day_id="mon"),
        HourSlot(id="mon-0900", label="09:00", day_id="mon"),
        HourSlot(id="mon-1130", label="11:30", day_id="mon"),
        HourSlot(id="mon-2000", label="20:00", day_id="mon"),
        HourSlot(id="mon-2100", label="21:00", day_id="mon"),
        HourSlot(id="sat-0800", label="08:00", day_id="sat"),
        HourSlot(id="sat-0900", label="09:00", day_id="sat"),
        HourSlot(id="sat-1700", label="17:00", day_id="sat"),
        HourSlot(id="sat-1800", label="18:00", day_id="sat"),
        HourSlot(id="hol-0800", label="08:00", day_id="hol"),
        HourSlot(id="hol-1000", label="10:00", day_id="hol"),
    ]
    return ReferenceCatalog(days=days, hours=hours)


def _catalog_raw() -> dict:
    """Derselbe Katalog im API-Format (``_id``, ``value``, ``daysId``)."""
    catalog = make_catalog()
    return {
        "days": [
            {"_id": d.id, "name": d.name, **({"day_type": d.day_type.value} if d.day_type else {})}
            for d in catalog.days
        ],
        "hours": [
            {"_id": h.id, "value": h.label,
             "daysId": {"_id": h.day_id, "name": catalog.day_label(h.day_id)}}
            for h in catalog.hours
        ],
    }


@pytest.fixture
def catalog() -> ReferenceCatalog:
    return make_catalog()


@pytest.fixture
def catalog_raw() -> dict:
    return _catalog_raw()
