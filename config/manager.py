"""Konfigurationsmanager: Laden, Speichern und Anzeigen der Solver-Konfiguration.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import SolverConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Stundenplan-Solver: Solver-Konfiguration
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "random_seed": (
        "Zufall",
        "Gleicher Seed = identische Zugfolge, auch unter Zeitlimit. null = nicht reproduzierbar.",
    ),
    "termination": (
        "Abbruch",
        "Mindestens eine Grenze (Zeit, Schritte, Zeit ohne Verbesserung) ist Pflicht.",
    ),
    "acceptor": (
        "Akzeptanz",
        "simulated_annealing | late_acceptance | hill_climbing",
    ),
    "moves": (
        "Züge",
        None,
    ),
    "constraint_weights": (
        "Gewichte",
        "Höher = stärker optimiert. 0 = deaktiviert.",
    ),
    "full_assert": (
        "Diagnose",
        "Prüft nach jedem Zug den inkrementellen gegen den vollen Score (langsam).",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "solver_config.yaml"

    def exists(self, path: Optional[Path] = None) -> bool:
        return (path or self.DEFAULT_CONFIG).exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> SolverConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return SolverConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    # ─── Speichern ───

    def save(self, config: SolverConfig, path: Optional[Path] = None) -> Path:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")
        return target

    def _build_commented_yaml(self, config: SolverConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        # Inline-Kommentar für das Zeitlimit
        termination = CommentedMap(cm["termination"])
        termination.yaml_add_eol_comment("Sekunden", "time_limit_seconds")
        cm["termination"] = termination

        return cm

    # ─── Anzeige ───

    def show(self, config: SolverConfig) -> None:
        """Gibt die Konfiguration als Tabelle aus."""
        table = Table(title="Solver-Konfiguration", box=box.SIMPLE)
        table.add_column("Bereich", style="bold")
        table.add_column("Parameter")
        table.add_column("Wert", justify="right")

        table.add_row("", "random_seed", str(config.random_seed))
        table.add_row("", "full_assert", str(config.full_assert))
        sections = {
            "termination": config.termination,
            "acceptor": config.acceptor,
            "moves": config.moves,
            "constraint_weights": config.constraint_weights,
        }
        for section, model in sections.items():
            for i, (key, value) in enumerate(model.model_dump(mode="json").items()):
                table.add_row(section if i == 0 else "", key, str(value))
        console.print(table)
