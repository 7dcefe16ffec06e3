"""Stundenplan-Solver: Haupt-CLI.

Verwendung:
  python main.py demo                          Demo-Datensatz (SMALL) als JSON speichern
  python main.py demo --size LARGE             größerer Demo-Datensatz
  python main.py solve --demo SMALL            Demo-Datensatz lösen und anzeigen
  python main.py solve --input plan.json       Datensatz aus JSON lösen
  python main.py score --input plan.json       Score neu berechnen + Verstöße auflisten
  python main.py config init                   Default-Konfiguration anlegen
  python main.py config show                   Konfiguration anzeigen
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

console = Console()

DEFAULT_OUTPUT_DIR = Path("output")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )


def _load_solver_config(config_path: Optional[Path]):
    """Lädt die Solver-Konfiguration; ohne Datei gelten die Defaults."""
    from config.defaults import default_solver_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if config_path is not None:
        return mgr.load(config_path)
    if mgr.exists():
        return mgr.load()
    return default_solver_config()


def _load_problem(input_path: Optional[Path], demo: Optional[str]):
    from data.fake_data import DemoData, generate_demo_data
    from models.timetable import Timetable

    if input_path is not None and demo is not None:
        raise click.UsageError("Entweder --input oder --demo angeben, nicht beides.")
    if input_path is not None:
        return Timetable.load_json(input_path)
    return generate_demo_data(DemoData(demo or "SMALL"))


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Solver-Konfiguration anlegen oder anzeigen."""


@cmd_config.command("init")
@click.option("--path", "config_path", type=click.Path(path_type=Path), default=None,
              help="Zielpfad (Default: config/solver_config.yaml).")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Datei überschreiben.")
def config_init(config_path: Optional[Path], force: bool):
    """Schreibt die Default-Konfiguration als kommentierte YAML-Datei."""
    from config.defaults import default_solver_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if mgr.exists(config_path) and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Mit [bold]--force[/bold] überschreiben."
        )
        sys.exit(1)
    mgr.save(default_solver_config(), config_path)


@cmd_config.command("show")
@click.option("--path", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur YAML-Datei (Default: config/solver_config.yaml).")
def config_show(config_path: Optional[Path]):
    """Zeigt die aktive Konfiguration an."""
    from config.manager import ConfigManager

    try:
        config = _load_solver_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    ConfigManager().show(config)


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--size", type=click.Choice(["SMALL", "LARGE"], case_sensitive=False),
              default="SMALL", help="Größe des Demo-Datensatzes.")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Ausgabepfad für das JSON.")
def cmd_demo(size: str, output: Optional[Path]):
    """Erzeugt einen Demo-Datensatz (alle Lessons unzugewiesen)."""
    from data.fake_data import DemoData, generate_demo_data, print_summary

    timetable = generate_demo_data(DemoData(size.upper()))
    print_summary(timetable)

    out_path = output or DEFAULT_OUTPUT_DIR / f"demo_{size.lower()}.json"
    timetable.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── SOLVE ────────────────────────────────────────────────────────────────────

@click.command("solve")
@click.option("--input", "-i", "input_path",
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Problem als JSON.")
@click.option("--demo", type=click.Choice(["SMALL", "LARGE"], case_sensitive=False),
              default=None, help="Demo-Datensatz statt JSON lösen.")
@click.option("--config", "config_path",
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Solver-Konfiguration (YAML).")
@click.option("--time-limit", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Zeitlimit in Sekunden (überschreibt die Konfiguration).")
@click.option("--seed", type=int, default=None,
              help="Zufalls-Seed (überschreibt die Konfiguration).")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Lösung als JSON speichern.")
@click.option("--view", type=click.Choice(["room", "teacher", "student_group"]),
              default="room", help="Spalten der Anzeige.")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Solver-Log (INFO) ausgeben.")
def cmd_solve(
    input_path: Optional[Path],
    demo: Optional[str],
    config_path: Optional[Path],
    time_limit: Optional[float],
    seed: Optional[int],
    output: Optional[Path],
    view: str,
    verbose: bool,
):
    """Berechnet den Stundenplan (Eröffnungsheuristik + Local Search)."""
    _setup_logging(verbose)
    from analysis.solution_validator import SolutionValidator
    from export.tui_renderer import render_timetable
    from solver import SolverError, solve

    try:
        config = _load_solver_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    if time_limit is not None:
        config.termination.time_limit_seconds = time_limit
    if seed is not None:
        config.random_seed = seed

    problem = _load_problem(input_path, demo.upper() if demo else None)
    console.print(Panel(problem.summary(), title="Problem", border_style="cyan"))

    def on_best_update(solution):
        console.print(f"  [dim]Neue beste Lösung:[/dim] {solution.score}")

    try:
        solution = solve(problem, config, on_best_update=on_best_update)
    except SolverError as e:
        console.print(f"[red bold]Solver-Fehler:[/red bold] {e}")
        sys.exit(1)

    console.print(render_timetable(solution, view))
    report = SolutionValidator(config.constraint_weights).validate(solution)
    report.print_rich()

    if output is not None:
        solution.save_json(output)
        console.print(f"[green]✓[/green] Lösung gespeichert: {output}")


# ─── SCORE ────────────────────────────────────────────────────────────────────

@click.command("score")
@click.option("--input", "-i", "input_path", required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Stundenplan als JSON.")
@click.option("--config", "config_path",
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Solver-Konfiguration (Gewichte).")
def cmd_score(input_path: Path, config_path: Optional[Path]):
    """Berechnet den Score eines gespeicherten Stundenplans neu."""
    from analysis.solution_validator import SolutionValidator
    from models.timetable import Timetable

    try:
        config = _load_solver_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    timetable = Timetable.load_json(input_path)
    console.print(f"[bold]Lade Stundenplan:[/bold] {input_path}")
    console.print(f"\n{timetable.summary()}\n")

    report = SolutionValidator(config.constraint_weights).validate(timetable)
    report.print_rich()

    sys.exit(0 if report.is_valid else 1)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Stundenplan-Solver: Lessons auf Zeitslots und Räume verteilen.

    Starten Sie mit: python main.py solve --demo SMALL
    """


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_demo)
cli.add_command(cmd_solve)
cli.add_command(cmd_score)


if __name__ == "__main__":
    main()
