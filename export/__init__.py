"""Export-Modul: Payload für die Personalverwaltung."""

from export.payload import SubmissionPayload, collect_hour_ids, normalize_submission

__all__ = ["SubmissionPayload", "collect_hour_ids", "normalize_submission"]
