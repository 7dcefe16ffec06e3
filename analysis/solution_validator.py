"""Post-Solve Validierung eines fertigen Stundenplans.

Berechnet den Score unabhängig vom inkrementellen Pfad neu (naive
Regelauswertung) und listet jeden Verstoß einzeln auf. Dient als
Sicherheitsnetz und als Erklärung des Scores.
"""

from typing import Literal, Optional

from pydantic import BaseModel

from config.schema import ConstraintWeights
from models.timetable import Timetable
from solver.constraints import ConstraintLevel, build_constraints
from solver.score_director import ScoreDirector


class ValidationViolation(BaseModel):
    """Eine einzelne Constraint-Verletzung."""

    severity: Literal["error", "warning", "info"]
    constraint: str      # z.B. "Room conflict"
    description: str
    entity: str          # Lesson-IDs, Lehrkraft oder Lerngruppe
    score: str = ""      # Beitrag zum Score, z.B. "-1hard/0soft"


class ValidationReport(BaseModel):
    """Ergebnis der Post-Solve Validierung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)
    score: str

    @property
    def errors(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = self.errors
        warnings = self.warnings

        status = (
            "[bold green]✓ ZULÄSSIG[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [
            status,
            f"Score: {self.score}",
            f"Fehler: {len(errors)} | Warnungen: {len(warnings)}",
        ]
        console.print(Panel("\n".join(lines), title="Lösung-Validierung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Constraint", width=30)
        table.add_column("Entität", width=14)
        table.add_column("Score", width=14, justify="right")
        table.add_column("Beschreibung")

        colors = {"error": "red", "warning": "yellow", "info": "green"}
        for v in self.violations:
            color = colors[v.severity]
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.score,
                v.description,
            )
        console.print(table)


class SolutionValidator:
    """Prüft einen Timetable gegen alle aktiven Regeln."""

    def __init__(self, weights: Optional[ConstraintWeights] = None) -> None:
        self.weights = weights or ConstraintWeights()

    def validate(self, timetable: Timetable) -> ValidationReport:
        """Führt alle Prüfungen durch und gibt einen ValidationReport zurück.

        Harte Verstöße und unzugewiesene Lessons sind Fehler, weiche
        Strafen Warnungen, weiche Boni Hinweise.
        """
        director = ScoreDirector(timetable, build_constraints(self.weights))
        violations: list[ValidationViolation] = []
        violations.extend(self._check_unassigned(timetable))
        violations.extend(self._check_constraints(director))

        total = director.full_score()

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(
            violations=violations,
            is_valid=not has_errors,
            score=str(total),
        )

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_unassigned(self, timetable: Timetable) -> list[ValidationViolation]:
        """Jede Lesson braucht Zeitslot UND Raum."""
        violations: list[ValidationViolation] = []
        for lesson in timetable.lessons:
            if lesson.is_initialized:
                continue
            missing = [
                name for name, value in (("Zeitslot", lesson.timeslot), ("Raum", lesson.room))
                if value is None
            ]
            violations.append(ValidationViolation(
                severity="error",
                constraint="Unassigned lesson",
                entity=str(lesson.id),
                description=(
                    f"{lesson.subject} ({lesson.teacher}, {lesson.student_group}): "
                    f"{' und '.join(missing)} fehlt."
                ),
            ))
        return violations

    def _check_constraints(self, director: ScoreDirector) -> list[ValidationViolation]:
        """Ein Eintrag pro Constraint-Match."""
        rules = {c.name: c for c in director.constraints}
        violations: list[ValidationViolation] = []
        for match in director.explain():
            rule = rules[match.constraint_name]
            if rule.level is ConstraintLevel.HARD:
                severity = "error"
            elif rule.reward:
                severity = "info"
            else:
                severity = "warning"
            violations.append(ValidationViolation(
                severity=severity,
                constraint=match.constraint_name,
                entity=", ".join(str(l.id) for l in match.lessons),
                description=match.justification,
                score=str(match.score),
            ))
        return violations
