from config.schema import (
    ApiConfig,
    AvailabilityConfig,
    CatalogConfig,
    DisplayConfig,
    EligibilityConfig,
    HourWindow,
)


# Wochentage des Beispielkatalogs in Anzeige-Reihenfolge: (id, Name)
DEFAULT_DAYS: list[tuple[str, str]] = [
    ("mon", "Monday"),
    ("tue", "Tuesday"),
    ("wed", "Wednesday"),
    ("thu", "Thursday"),
    ("fri", "Friday"),
    ("sat", "Saturday"),
    ("sun", "Sunday"),
]

# Volle Stunden, die der Beispielkatalog pro Tag anlegt (07:00 – 21:00)
DEFAULT_CATALOG_HOURS: list[int] = list(range(7, 22))


def default_eligibility() -> EligibilityConfig:
    """Standard-Stundenfenster.

    Werktage:     08:00 – 20:xx
    Wochenende:   09:00 – 17:xx

    Maßgeblich ist nur die Stunde des Labels, d.h. "20:30" ist an Werktagen
    noch erlaubt, "17:45" am Wochenende ebenfalls.
    """
    return EligibilityConfig(
        weekday=HourWindow(first_hour=8, last_hour=20),
        weekend=HourWindow(first_hour=9, last_hour=17),
        weekend_names=["saturday", "sunday"],
    )


def default_config() -> AvailabilityConfig:
    """Vollständige Default-Konfiguration."""
    return AvailabilityConfig(
        institution_name="Muster-Hochschule",
        eligibility=default_eligibility(),
        display=DisplayConfig(max_time_labels=4, time_format="24h"),
        catalog=CatalogConfig(source="file", path="output/catalog.json"),
        api=ApiConfig(),
    )
