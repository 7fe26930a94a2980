from models.day import Day, classify_day_name
from models.hour_slot import HourSlot, format_time_label, to_12h
from models.catalog import ReferenceCatalog
from models.staff import StaffRecord

__all__ = [
    "Day",
    "classify_day_name",
    "HourSlot",
    "format_time_label",
    "to_12h",
    "ReferenceCatalog",
    "StaffRecord",
]
