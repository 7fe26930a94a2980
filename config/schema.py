from pydantic import BaseModel, Field, model_validator
from typing import Literal, Optional
from enum import Enum


class DayType(str, Enum):
    WEEKDAY = "weekday"
    WEEKEND = "weekend"


# ─── VERFÜGBARKEITSFENSTER ───

class HourWindow(BaseModel):
    """Erlaubter Stundenbereich (volle Stunden, beide Grenzen inklusive)."""
    # Früheste erlaubte Stunde (z.B. 8 = ab 08:00)
    first_hour: int = Field(ge=0, le=23)
    # Späteste erlaubte Stunde (z.B. 20 = bis einschließlich 20:xx)
    last_hour: int = Field(ge=0, le=23)

    @model_validator(mode='after')
    def _check_order(self):
        if self.first_hour > self.last_hour:
            raise ValueError(
                f"first_hour ({self.first_hour}) > last_hour ({self.last_hour})")
        return self

    def contains(self, hour: int) -> bool:
        return self.first_hour <= hour <= self.last_hour


class EligibilityConfig(BaseModel):
    """Welche Stunden pro Tagestyp angeboten werden dürfen.

    Die Klassifikation Wochentag/Wochenende kommt bevorzugt aus dem Katalog
    (Day.day_type). Nur wenn der Katalog keinen Typ liefert, wird der Tagesname
    mit ``weekend_names`` verglichen (Teilstring, ohne Groß-/Kleinschreibung).
    """
    # Werktage: 08:00 bis 20:xx
    weekday: HourWindow = Field(
        default_factory=lambda: HourWindow(first_hour=8, last_hour=20),
        description="Stundenfenster für Werktage")
    # Wochenende: 09:00 bis 17:xx
    weekend: HourWindow = Field(
        default_factory=lambda: HourWindow(first_hour=9, last_hour=17),
        description="Stundenfenster für Samstag/Sonntag")
    # Namen, die einen Tag als Wochenende kennzeichnen
    weekend_names: list[str] = Field(
        default=["saturday", "sunday"],
        description="Tagesnamen (Teilstring) für Wochenend-Tage")

    def window_for(self, day_type: DayType) -> HourWindow:
        return self.weekend if day_type == DayType.WEEKEND else self.weekday


# ─── ANZEIGE ───

class DisplayConfig(BaseModel):
    """Darstellung der Zusammenfassung."""
    # Maximal angezeigte Uhrzeiten pro Tag, Rest als "+N"
    max_time_labels: int = Field(4, ge=1, le=24,
        description="Angezeigte Uhrzeiten pro Tag in der Übersicht")
    # "24h" → 08:00, "12h" → 8:00 AM
    time_format: Literal["24h", "12h"] = Field("24h",
        description="Uhrzeitformat der Übersicht")


# ─── KATALOG + API ───

class CatalogConfig(BaseModel):
    """Herkunft des Tages-/Stundenkatalogs."""
    # "file" = JSON-Datei, "api" = HTTP-Schnittstelle
    source: Literal["file", "api"] = "file"
    # Pfad der Katalog-Datei (nur bei source="file")
    path: str = "output/catalog.json"


class ApiConfig(BaseModel):
    """HTTP-Schnittstelle der Stammdaten- und Personalverwaltung."""
    base_url: str = "http://localhost:8000"
    timeout_seconds: float = Field(10.0, gt=0)
    days_endpoint: str = "/days"
    hours_endpoint: str = "/hours"
    staff_endpoint: str = "/doc-teach"


# ─── GESAMT-KONFIGURATION ───

class AvailabilityConfig(BaseModel):
    """Vollständige Konfiguration des Verfügbarkeits-Werkzeugs."""
    # Anzeigename der Einrichtung (nur für Überschriften)
    institution_name: str = Field("Muster-Hochschule",
        description="Name der Einrichtung")
    eligibility: EligibilityConfig = Field(default_factory=EligibilityConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    # Optional: abweichende Ausgabedatei für Payloads
    payload_output: Optional[str] = None
