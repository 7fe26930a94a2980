"""Konfigurationsmanager: YAML lesen, validieren und kommentiert schreiben.

Die Datei ist optional. Fehlt sie, arbeitet die CLI mit den Defaults
(siehe load_or_default); eine vorhandene, aber ungültige Datei ist ein Fehler.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_config
from config.schema import AvailabilityConfig

console = Console()
logger = logging.getLogger(__name__)
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── Kommentare in der YAML-Datei ───

def _yaml_header() -> str:
    return (
        "# ============================================\n"
        "# Lehrkräfte-Verfügbarkeit: Konfiguration\n"
        f"# Gespeichert am {date.today().isoformat()}\n"
        "# ============================================\n"
    )


# Abschnitt → (Überschrift, Erläuterung)
_SECTION_COMMENTS: dict[str, tuple[str, Optional[str]]] = {
    "eligibility": (
        "Verfügbarkeitsfenster",
        "Stunden (inklusive) die pro Tagestyp angeboten werden.\n"
        "weekend_names greift nur, wenn der Katalog keinen day_type liefert.",
    ),
    "display": ("Übersicht", "time_format: 24h oder 12h"),
    "catalog": ("Tages-/Stundenkatalog", "source: file (JSON-Datei) oder api (HTTP)"),
    "api": ("HTTP-Schnittstelle", "Nur relevant bei catalog.source = api oder edit ohne --output"),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "availability.yaml"

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if config_path is not None:
            self.DEFAULT_CONFIG = Path(config_path)

    def first_run_check(self) -> bool:
        """True, solange noch keine Konfigurationsdatei angelegt wurde."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def _read_yaml(self, target: Path) -> dict:
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ValueError(f"Konfigurationsdatei ungültig: {target}\nErwartet: Abschnitte als Mapping")
        unknown = sorted(set(raw) - set(AvailabilityConfig.model_fields))
        if unknown:
            logger.warning(f"Unbekannte Abschnitte in {target} ignoriert: {unknown}")
        return dict(raw)

    def load(self, path: Optional[Path] = None) -> AvailabilityConfig:
        """Liest die YAML-Datei und validiert sie über Pydantic."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Mit 'verfuegbarkeit setup' lässt sich eine anlegen."
            )
        raw = self._read_yaml(target)
        try:
            config = AvailabilityConfig.model_validate(raw)
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e
        logger.debug(f"Konfiguration geladen: {target}")
        return config

    def load_or_default(self, path: Optional[Path] = None) -> AvailabilityConfig:
        """Wie load(), ohne Datei gilt aber die Default-Konfiguration."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        if target.exists():
            return self.load(target)
        logger.info(f"Keine Konfiguration unter {target} – verwende Defaults")
        return default_config()

    # ─── Speichern ───

    def save(self, config: AvailabilityConfig, path: Optional[Path] = None) -> Path:
        """Schreibt die Konfiguration als YAML mit Abschnitts-Kommentaren."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_yaml_header() + "\n")
            yaml.dump(self._build_commented_yaml(config), f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")
        return target

    def _build_commented_yaml(self, config: AvailabilityConfig) -> CommentedMap:
        cm = CommentedMap(json.loads(config.model_dump_json()))
        for key, (label, comment) in _SECTION_COMMENTS.items():
            text = f"\n─── {label} ───"
            if comment:
                text += f"\n{comment}"
            cm.yaml_set_comment_before_after_key(key, before=text)
        return cm
