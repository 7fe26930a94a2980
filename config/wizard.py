"""Interaktiver Setup-Wizard für die Ersteinrichtung.

Fragt Einrichtung, Stundenfenster, Übersicht und Katalogquelle ab.
Nutzt rich für die Konsolenausgabe.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.schema import (
    ApiConfig,
    AvailabilityConfig,
    CatalogConfig,
    DisplayConfig,
    EligibilityConfig,
    HourWindow,
)
from config.defaults import default_eligibility

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


def _show_eligibility_table(ec: EligibilityConfig) -> None:
    """Zeigt die Stundenfenster als rich-Tabelle an."""
    table = Table(title="Stundenfenster", box=box.ROUNDED)
    table.add_column("Tagestyp", style="bold")
    table.add_column("Erste Stunde")
    table.add_column("Letzte Stunde")
    table.add_row("Werktag", f"{ec.weekday.first_hour:02d}:00",
                  f"{ec.weekday.last_hour:02d}:59")
    table.add_row("Wochenende", f"{ec.weekend.first_hour:02d}:00",
                  f"{ec.weekend.last_hour:02d}:59")
    console.print(table)
    _info(f"Wochenend-Namen: {', '.join(ec.weekend_names)}")


# ─── SCHRITT 1: Stundenfenster ───

def _ask_window(label: str, default: HourWindow) -> HourWindow:
    first = IntPrompt.ask(f"  {label}: erste Stunde", default=default.first_hour)
    last = IntPrompt.ask(f"  {label}: letzte Stunde", default=default.last_hour)
    return HourWindow(first_hour=first, last_hour=last)


def _wizard_eligibility() -> EligibilityConfig:
    _header("Schritt 1 — Stundenfenster")
    default_ec = default_eligibility()
    _show_eligibility_table(default_ec)

    if Confirm.ask("Standard-Stundenfenster übernehmen?", default=True):
        _success("Standard-Stundenfenster übernommen.")
        return default_ec

    try:
        weekday = _ask_window("Werktag", default_ec.weekday)
        weekend = _ask_window("Wochenende", default_ec.weekend)
        names = Prompt.ask("Wochenend-Namen (kommagetrennt)",
                           default=",".join(default_ec.weekend_names))
        ec = EligibilityConfig(
            weekday=weekday,
            weekend=weekend,
            weekend_names=[n.strip().lower() for n in names.split(",") if n.strip()],
        )
        _success("Stundenfenster konfiguriert und validiert.")
        return ec
    except Exception as e:
        _warn(f"Validierungsfehler: {e}")
        _warn("Standard-Stundenfenster werden verwendet.")
        return default_ec


# ─── SCHRITT 2: Übersicht ───

def _wizard_display() -> DisplayConfig:
    _header("Schritt 2 — Übersicht")
    max_labels = IntPrompt.ask("Angezeigte Uhrzeiten pro Tag", default=4)
    console.print("Uhrzeitformat: [1] 24h (08:00)  [2] 12h (8:00 AM)")
    fmt = Prompt.ask("Format wählen", default="1")
    return DisplayConfig(max_time_labels=max_labels,
                         time_format="12h" if fmt == "2" else "24h")


# ─── SCHRITT 3: Katalog ───

def _wizard_catalog() -> tuple[CatalogConfig, ApiConfig]:
    _header("Schritt 3 — Tages-/Stundenkatalog")
    console.print("Quelle: [1] JSON-Datei  [2] HTTP-Schnittstelle")
    src = Prompt.ask("Quelle wählen", default="1")
    api = ApiConfig()
    if src == "2":
        base_url = Prompt.ask("Basis-URL", default=api.base_url)
        return CatalogConfig(source="api"), ApiConfig(base_url=base_url)
    path = Prompt.ask("Pfad der Katalog-Datei", default="output/catalog.json")
    return CatalogConfig(source="file", path=path), api


def _show_summary(config: AvailabilityConfig) -> None:
    _header("Zusammenfassung")
    table = Table(box=box.ROUNDED, title="Konfigurationsübersicht")
    table.add_column("Bereich", style="bold cyan")
    table.add_column("Wert")

    ec = config.eligibility
    table.add_row("Einrichtung", config.institution_name)
    table.add_row("Werktage", f"{ec.weekday.first_hour}–{ec.weekday.last_hour} Uhr")
    table.add_row("Wochenende", f"{ec.weekend.first_hour}–{ec.weekend.last_hour} Uhr")
    table.add_row("Übersicht",
                  f"{config.display.max_time_labels} Uhrzeiten, {config.display.time_format}")
    if config.catalog.source == "api":
        table.add_row("Katalog", f"API {config.api.base_url}")
    else:
        table.add_row("Katalog", f"Datei {config.catalog.path}")
    console.print(table)


# ─── HAUPT-WIZARD ───

def run_wizard() -> Optional[AvailabilityConfig]:
    """Führt den interaktiven Setup-Wizard aus.

    Returns:
        Fertige AvailabilityConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Willkommen bei der Lehrkräfte-Verfügbarkeit![/bold]\n\n"
        "Der Wizard legt fest, welche Stunden pro Tag angeboten werden\n"
        "und woher der Tages-/Stundenkatalog kommt.\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]Verfügbarkeit v1[/bold cyan]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nMöchten Sie jetzt einrichten?", default=True):
        console.print("[yellow]Einrichtung abgebrochen.[/yellow]")
        return None

    try:
        name = Prompt.ask("Name der Einrichtung", default="Muster-Hochschule")
        eligibility = _wizard_eligibility()
        display = _wizard_display()
        catalog, api = _wizard_catalog()

        config = AvailabilityConfig(
            institution_name=name,
            eligibility=eligibility,
            display=display,
            catalog=catalog,
            api=api,
        )

        _show_summary(config)

        if not Confirm.ask("\nKonfiguration speichern?", default=True):
            console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
            return None

        _success("Konfiguration wird gespeichert...")
        return config

    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None
    except Exception as e:
        console.print(f"\n[red]Fehler während der Konfiguration: {e}[/red]")
        return None
