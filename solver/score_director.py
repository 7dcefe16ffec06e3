"""Inkrementeller Score-Director.

Hält den Arbeits-Score eines Timetable aktuell, während Züge Lessons
verändern. Jede Änderung läuft über assign():
  1. retract(lesson) in allen Regeln (alte Werte)
  2. Felder schreiben
  3. insert(lesson) in allen Regeln (neue Werte)
Dadurch werden nur die Buckets der berührten Lessons neu gescannt.
"""

import logging
from typing import TYPE_CHECKING, Optional

from models.lesson import Lesson
from models.room import Room
from models.score import HardSoftScore
from models.timeslot import Timeslot
from models.timetable import Timetable
from solver.constraints import Constraint, ConstraintLevel, ConstraintMatch
from solver.exceptions import InvariantViolation

if TYPE_CHECKING:
    from solver.moves import Move

logger = logging.getLogger(__name__)


class ScoreDirector:
    """Berechnet Scores für genau einen Timetable (nicht thread-übergreifend teilen)."""

    def __init__(self, timetable: Timetable, constraints: list[Constraint]) -> None:
        self.timetable = timetable
        self.constraints = list(constraints)
        self._timeslots = set(timetable.timeslots)
        self._rooms = set(timetable.rooms)

        self._hard = 0
        self._soft = 0
        self._uninitialized = 0
        # Anzahl bewerteter Züge (für Score-Berechnungen/s)
        self.calculation_count = 0

    # ─── Score ────────────────────────────────────────────────────────────────

    @property
    def score(self) -> HardSoftScore:
        """Aktueller inkrementeller Score."""
        return HardSoftScore(self._hard, self._soft, -self._uninitialized)

    def calculate_score(self) -> HardSoftScore:
        """Baut alle Indizes neu auf und setzt den Arbeits-Score."""
        self._hard = 0
        self._soft = 0
        self._uninitialized = 0
        for constraint in self.constraints:
            constraint.reset()
        for lesson in self.timetable.lessons:
            if lesson.is_initialized:
                self._insert(lesson)
            else:
                self._uninitialized += 1
        self.timetable.score = self.score
        logger.debug(
            f"Score-Indizes aufgebaut: {len(self.timetable.lessons)} Lessons, "
            f"{len(self.constraints)} Regeln | Score: {self.score}"
        )
        return self.score

    def full_score(self) -> HardSoftScore:
        """Neuberechnung von Grund auf (O(n²)), ohne die Indizes zu berühren."""
        total = HardSoftScore.ZERO
        lessons = self.timetable.lessons
        for constraint in self.constraints:
            total = total + constraint.match_and_score(lessons)
        return total.with_init_count(self.timetable.init_count)

    def assert_consistency(self) -> None:
        """Prüft inkrementellen gegen vollen Score."""
        working = self.score
        full = self.full_score()
        if working != full:
            raise InvariantViolation(
                f"Score-Korruption: inkrementell {working}, neu berechnet {full}"
            )

    def explain(self) -> list[ConstraintMatch]:
        """Alle Constraint-Matches (naiv berechnet)."""
        lessons = self.timetable.lessons
        return [m for c in self.constraints for m in c.matches(lessons)]

    @property
    def comparison_count(self) -> int:
        return sum(c.comparison_count for c in self.constraints)

    def reset_comparison_count(self) -> None:
        for constraint in self.constraints:
            constraint.comparison_count = 0

    # ─── Änderungen ───────────────────────────────────────────────────────────

    def check_value_range(
        self,
        lesson: Lesson,
        timeslot: Optional[Timeslot],
        room: Optional[Room],
    ) -> None:
        """InvariantViolation, wenn ein Wert nicht aus den Wertebereichen stammt."""
        if timeslot is not None and timeslot not in self._timeslots:
            raise InvariantViolation(
                f"Lesson {lesson.id}: Zeitslot {timeslot} ist nicht im Wertebereich"
            )
        if room is not None and room not in self._rooms:
            raise InvariantViolation(
                f"Lesson {lesson.id}: Raum {room} ist nicht im Wertebereich"
            )

    def assign(
        self,
        lesson: Lesson,
        timeslot: Optional[Timeslot],
        room: Optional[Room],
    ) -> None:
        """Einziger Schreibpfad für Planungsvariablen."""
        self.check_value_range(lesson, timeslot, room)

        if lesson.is_initialized:
            self._retract(lesson)
        else:
            self._uninitialized -= 1

        lesson.timeslot = timeslot
        lesson.room = room

        if lesson.is_initialized:
            self._insert(lesson)
        else:
            self._uninitialized += 1

    def do_move(self, move: "Move") -> "Move":
        """Führt einen Zug aus und gibt den Rückgängig-Zug zurück."""
        return move.do(self)

    def score_delta(self, move: "Move") -> HardSoftScore:
        """Score-Differenz eines Zuges, ohne ihn festzuschreiben."""
        before = self.score
        undo = move.do(self)
        after = self.score
        undo.do(self)
        self.calculation_count += 1
        return after - before

    # ─── Intern ───────────────────────────────────────────────────────────────

    def _apply(self, constraint: Constraint, match_delta: int) -> None:
        if not match_delta:
            return
        impact = constraint.impact(match_delta)
        if constraint.level is ConstraintLevel.HARD:
            self._hard += impact
        else:
            self._soft += impact

    def _insert(self, lesson: Lesson) -> None:
        for constraint in self.constraints:
            self._apply(constraint, constraint.insert(lesson))

    def _retract(self, lesson: Lesson) -> None:
        for constraint in self.constraints:
            self._apply(constraint, -constraint.retract(lesson))
