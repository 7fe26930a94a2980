"""Lehrkräfte-Verfügbarkeit: Haupt-CLI.

Verwendung:
  python main.py setup                         Ersteinrichtung (Wizard)
  python main.py config show                   Konfiguration anzeigen
  python main.py catalog generate              Beispielkatalog erzeugen
  python main.py catalog show                  Katalog anzeigen
  python main.py eligible <tag>                Anbietbare Stunden eines Tages
  python main.py summary <datensatz.json>      Übersicht eines Datensatzes
  python main.py payload <datensatz.json>      Payload neu berechnen
  python main.py edit [--record datei.json]    Verfügbarkeit interaktiv bearbeiten
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich import box

console = Console()
logger = logging.getLogger(__name__)

# Standard-Pfad für den Beispielkatalog
DEFAULT_CATALOG_JSON = Path("output/catalog.json")


def _setup_logging(verbose: bool) -> None:
    from rich.logging import RichHandler
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(ctx: click.Context):
    """Lädt die Konfiguration; ohne Datei gelten die Defaults."""
    from config.manager import ConfigManager
    mgr = ConfigManager(ctx.obj.get("config_path"))
    try:
        return mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _catalog_source(config, catalog_path: Optional[str]):
    """JSON-Datei (Option oder Config) oder HTTP-Schnittstelle."""
    from data.json_store import JsonCatalogSource
    if catalog_path:
        return JsonCatalogSource(Path(catalog_path))
    if config.catalog.source == "api":
        from data.api_client import ApiClient
        return ApiClient(config.api)
    return JsonCatalogSource(Path(config.catalog.path))


async def _open_session(config, source, record=None):
    from engine.session import EditingSession
    session = EditingSession(config, record)
    try:
        await session.load_catalog(source)
    finally:
        if hasattr(source, "aclose"):
            await source.aclose()
    return session


async def _submit(session, sink):
    try:
        return await session.submit(sink)
    finally:
        if hasattr(sink, "aclose"):
            await sink.aclose()


def _start_session(config, catalog_path: Optional[str], record=None):
    """Startet eine Sitzung; ein fehlender Katalog bricht das Formular ab."""
    from engine.engine import CatalogUnavailableError, InvariantViolationError

    source = _catalog_source(config, catalog_path)
    try:
        return asyncio.run(_open_session(config, source, record))
    except CatalogUnavailableError as e:
        console.print(f"[red bold]Formular nicht bearbeitbar:[/red bold] {e}")
        sys.exit(1)
    except InvariantViolationError as e:
        console.print(f"[red bold]Datensatz inkonsistent:[/red bold]\n{e}")
        sys.exit(1)


def _load_record_or_abort(path: Path):
    from data.json_store import load_record_json
    try:
        return load_record_json(path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.pass_context
def cmd_setup(ctx: click.Context):
    """Ersteinrichtung: Konfiguration mit dem Setup-Wizard anlegen."""
    from config.wizard import run_wizard
    from config.manager import ConfigManager

    mgr = ConfigManager(ctx.obj.get("config_path"))
    if not mgr.first_run_check():
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = run_wizard()
    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]python main.py catalog generate[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktuelle Konfiguration an."""
    from config.wizard import _show_eligibility_table

    config = _load_config(ctx)
    console.print(Panel(
        f"[bold]{config.institution_name}[/bold]  |  "
        f"Katalog: {config.catalog.source}",
        title="Konfiguration",
        border_style="cyan",
    ))
    _show_eligibility_table(config.eligibility)
    console.print(
        f"[bold]Übersicht:[/bold] {config.display.max_time_labels} Uhrzeiten/Tag | "
        f"Format {config.display.time_format}"
    )
    if config.catalog.source == "api":
        console.print(f"[bold]API:[/bold] {config.api.base_url}")
    else:
        console.print(f"[bold]Katalog-Datei:[/bold] {config.catalog.path}")


# ─── CATALOG ──────────────────────────────────────────────────────────────────

@click.group("catalog")
def cmd_catalog():
    """Tages-/Stundenkatalog erzeugen oder anzeigen."""


@cmd_catalog.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--output", "-o", default=str(DEFAULT_CATALOG_JSON),
              help="Pfad der Katalog-Datei.")
@click.option("--records", default=0, help="Zusätzlich N Beispiel-Datensätze erzeugen.")
@click.pass_context
def catalog_generate(ctx: click.Context, seed: int, output: str, records: int):
    """Erzeugt einen Beispielkatalog (Mo–So, 07:00–21:00)."""
    from data.fake_data import SampleCatalogGenerator

    config = _load_config(ctx)
    gen = SampleCatalogGenerator(config, seed=seed)
    catalog = gen.generate()
    gen.print_summary(catalog)

    out_path = Path(output)
    catalog.save_json(out_path)
    console.print(f"[green]✓[/green] Katalog gespeichert: {out_path}")

    for i in range(1, records + 1):
        record = gen.generate_record(catalog, record_id=f"sample-{i}")
        rec_path = out_path.parent / f"record_{i}.json"
        with open(rec_path, "w", encoding="utf-8") as f:
            f.write(record.model_dump_json(by_alias=True, indent=2))
        console.print(f"[green]✓[/green] Datensatz gespeichert: {rec_path} ({record.name})")


@cmd_catalog.command("show")
@click.option("--catalog", "catalog_path", default=None, help="Katalog-Datei (statt Config).")
@click.pass_context
def catalog_show(ctx: click.Context, catalog_path: Optional[str]):
    """Zeigt Tage, Tagestyp und Stundenslots des Katalogs."""
    from engine.eligibility import EligibilityPolicy

    config = _load_config(ctx)
    session = _start_session(config, catalog_path)
    catalog = session.catalog
    policy = EligibilityPolicy(config.eligibility)

    table = Table(title="Katalog", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Tag", style="bold")
    table.add_column("Typ")
    table.add_column("Slots")
    for day in catalog.days:
        labels = [
            s.label if policy.is_eligible(day, s) else f"[dim]{s.label}[/dim]"
            for s in catalog.hours_for_day(day.id)
        ]
        table.add_row(day.id, day.display_name, policy.day_type(day).value, " ".join(labels))
    console.print(table)


# ─── ELIGIBLE ─────────────────────────────────────────────────────────────────

@click.command("eligible")
@click.argument("day_id")
@click.option("--record", "record_path", type=click.Path(exists=True, path_type=Path),
              default=None, help="Datensatz (aktiviert den Bearbeiten-Modus).")
@click.option("--mode", type=click.Choice(["create", "edit"]), default=None,
              help="Modus erzwingen (Standard: edit mit Datensatz, sonst create).")
@click.option("--catalog", "catalog_path", default=None, help="Katalog-Datei (statt Config).")
@click.pass_context
def cmd_eligible(ctx: click.Context, day_id: str, record_path: Optional[Path],
                 mode: Optional[str], catalog_path: Optional[str]):
    """Listet die Stunden, die für einen Tag angeboten werden."""
    from engine.eligibility import EditMode

    config = _load_config(ctx)
    record = _load_record_or_abort(record_path) if record_path else None
    session = _start_session(config, catalog_path, record)
    if not session.catalog.has_day(day_id):
        console.print(f"[red]Unbekannter Tag: {day_id}[/red]")
        sys.exit(1)

    effective = EditMode(mode) if mode else session.mode
    options = session.engine.hour_options(day_id, effective, config.display.time_format)
    assigned = set(session.state.hours_for(day_id))

    table = Table(title=f"{session.catalog.day_label(day_id)} ({effective.value})",
                  box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Uhrzeit")
    table.add_column("Zugewiesen")
    for opt in options:
        label = opt.label if opt.resolved else f"[yellow]{opt.label}[/yellow]"
        table.add_row(opt.id, label, "✓" if opt.id in assigned else "")
    console.print(table)
    console.print(f"[dim]{len(options)} Stunden anbietbar[/dim]")


# ─── SUMMARY ──────────────────────────────────────────────────────────────────

@click.command("summary")
@click.argument("record_path", type=click.Path(exists=True, path_type=Path))
@click.option("--catalog", "catalog_path", default=None, help="Katalog-Datei (statt Config).")
@click.pass_context
def cmd_summary(ctx: click.Context, record_path: Path, catalog_path: Optional[str]):
    """Zeigt die Übersicht eines gespeicherten Datensatzes."""
    config = _load_config(ctx)
    record = _load_record_or_abort(record_path)
    session = _start_session(config, catalog_path, record)

    summary = session.summary()
    if summary is None:
        console.print(f"[dim]{record.name}: keine Tage ausgewählt.[/dim]")
        return
    summary.print_rich(title=f"{record.name} ({record.category_label})")

    unresolved = session.engine.unresolved_hour_ids()
    if unresolved:
        console.print(
            f"[yellow]⚠[/yellow]  {len(unresolved)} Slots nicht im Katalog: {', '.join(unresolved)}"
        )


# ─── PAYLOAD ──────────────────────────────────────────────────────────────────

@click.command("payload")
@click.argument("record_path", type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", default=None,
              help="Payload zusätzlich als Datei speichern (Standard: payload_output der Config).")
@click.option("--catalog", "catalog_path", default=None, help="Katalog-Datei (statt Config).")
@click.pass_context
def cmd_payload(ctx: click.Context, record_path: Path, output: Optional[str],
                catalog_path: Optional[str]):
    """Berechnet den Payload (hourIds, days, dayHours) eines Datensatzes neu."""
    config = _load_config(ctx)
    record = _load_record_or_abort(record_path)
    session = _start_session(config, catalog_path, record)

    payload = session.build_payload()
    click.echo(payload.to_json())
    output = output or config.payload_output
    if output:
        from data.api_client import SubmissionError
        from data.json_store import JsonPayloadSink
        try:
            asyncio.run(session.submit(JsonPayloadSink(Path(output))))
        except SubmissionError as e:
            console.print(f"[red bold]Speichern fehlgeschlagen:[/red bold] {e}")
            sys.exit(1)
        console.print(f"[green]✓[/green] Payload gespeichert: {output}")


# ─── EDIT ─────────────────────────────────────────────────────────────────────

def _show_days(session) -> None:
    table = Table(title="Tage", box=box.SIMPLE)
    table.add_column("Nr.", style="bold")
    table.add_column("Tag")
    table.add_column("Ausgewählt")
    for i, day in enumerate(session.catalog.days, 1):
        mark = "[green]✓[/green]" if session.state.is_selected(day.id) else ""
        table.add_row(str(i), day.display_name, mark)
    console.print(table)


def _pick_day(session, selected_only: bool = False) -> Optional[str]:
    days = session.catalog.days
    if selected_only:
        days = [d for d in days if session.state.is_selected(d.id)]
        if not days:
            console.print("[yellow]Noch kein Tag ausgewählt.[/yellow]")
            return None
        for i, day in enumerate(days, 1):
            console.print(f"  [bold]{i}.[/bold] {day.display_name}")
    raw = Prompt.ask("Tag Nr.")
    if not raw.isdigit() or not 1 <= int(raw) <= len(days):
        console.print("[yellow]Ungültige Auswahl.[/yellow]")
        return None
    return days[int(raw) - 1].id


def _edit_hours(session, day_id: str, time_format: str) -> None:
    options = session.engine.hour_options(day_id, time_format=time_format)
    assigned = set(session.state.hours_for(day_id))
    for i, opt in enumerate(options, 1):
        mark = "[green]✓[/green]" if opt.id in assigned else " "
        label = opt.label if opt.resolved else f"[yellow]{opt.label}[/yellow]"
        console.print(f"  {mark} [bold]{i:2d}.[/bold] {label}")
    raw = Prompt.ask("Stunden Nr. (kommagetrennt, leer = keine)", default="")
    picked = []
    for token in raw.replace(";", ",").split(","):
        token = token.strip()
        if token.isdigit() and 1 <= int(token) <= len(options):
            picked.append(options[int(token) - 1].id)
        elif token:
            console.print(f"[yellow]Ignoriert: {token}[/yellow]")
    result = session.set_hours_for_day(day_id, picked)
    if result.dropped_ids:
        logger.debug(f"Verworfen: {result.dropped_ids}")


@click.command("edit")
@click.option("--record", "record_path", type=click.Path(exists=True, path_type=Path),
              default=None, help="Gespeicherten Datensatz bearbeiten.")
@click.option("--record-id", default=None, help="Datensatz über die API laden.")
@click.option("--name", default=None, help="Name (bei Neuanlage).")
@click.option("--output", "-o", default=None,
              help="Payload in Datei schreiben statt an die API senden (Standard: payload_output der Config).")
@click.option("--catalog", "catalog_path", default=None, help="Katalog-Datei (statt Config).")
@click.pass_context
def cmd_edit(ctx: click.Context, record_path: Optional[Path], record_id: Optional[str],
             name: Optional[str], output: Optional[str], catalog_path: Optional[str]):
    """Verfügbarkeit einer Lehrperson interaktiv anlegen oder bearbeiten."""
    from data.api_client import ApiClient, ApiError, SubmissionError
    from data.json_store import JsonPayloadSink

    config = _load_config(ctx)
    output = output or config.payload_output
    record = None
    if record_path:
        record = _load_record_or_abort(record_path)
    elif record_id:
        async def _fetch():
            async with ApiClient(config.api) as client:
                return await client.fetch_record(record_id)
        try:
            record = asyncio.run(_fetch())
        except ApiError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)

    session = _start_session(config, catalog_path, record)
    if name:
        session.name = name
    if not session.name:
        session.name = Prompt.ask("Name")
    time_format = config.display.time_format

    while True:
        console.print()
        console.print(Panel(
            f"[bold]{session.name}[/bold] ({session.mode.value})",
            border_style="cyan",
        ))
        console.print("  [bold]1.[/bold] Tag an-/abwählen")
        console.print("  [bold]2.[/bold] Stunden eines Tages festlegen")
        console.print("  [bold]3.[/bold] Übersicht anzeigen")
        console.print("  [bold]4.[/bold] Ärztin/Arzt umschalten"
                      f" (aktuell: {'ja' if session.is_doctor else 'nein'})")
        console.print("  [bold]0.[/bold] Speichern & Beenden")
        console.print("  [bold]q.[/bold] Abbrechen")

        choice = Prompt.ask("\nAuswahl", default="0")
        if choice == "1":
            _show_days(session)
            day_id = _pick_day(session)
            if day_id:
                session.toggle_day(day_id)
        elif choice == "2":
            day_id = _pick_day(session, selected_only=True)
            if day_id:
                _edit_hours(session, day_id, time_format)
        elif choice == "3":
            summary = session.summary()
            if summary is None:
                console.print("[dim]Keine Tage ausgewählt.[/dim]")
            else:
                summary.print_rich(title=session.name)
        elif choice == "4":
            session.is_doctor = not session.is_doctor
        elif choice == "0":
            summary = session.summary()
            if summary is not None:
                summary.print_rich(title=session.name)
            sink = JsonPayloadSink(Path(output)) if output else ApiClient(config.api)
            try:
                asyncio.run(_submit(session, sink))
            except SubmissionError as e:
                console.print(f"[red bold]Speichern fehlgeschlagen:[/red bold] {e}")
                if Confirm.ask("Weiter bearbeiten?", default=True):
                    continue
                sys.exit(1)
            console.print("[bold green]Gespeichert.[/bold green]")
            break
        elif choice.lower() == "q":
            console.print("[yellow]Abgebrochen – nichts gespeichert.[/yellow]")
            break
        else:
            console.print("[yellow]Ungültige Auswahl.[/yellow]")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad der Konfigurationsdatei.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Ausführliches Logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """Verfügbarkeit von Lehrkräften und Ärzt:innen pflegen.

    Starten Sie mit: python main.py setup
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    _setup_logging(verbose)


def main():
    """Einstiegspunkt."""
    cli(obj={})


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_catalog)
cli.add_command(cmd_eligible)
cli.add_command(cmd_summary)
cli.add_command(cmd_payload)
cli.add_command(cmd_edit)


if __name__ == "__main__":
    main()
