"""Local-Search Stundenplan-Solver.

Architektur:
  - Planungsentität: Lesson mit den Variablen timeslot und room
  - Wertebereiche: Timetable.timeslots und Timetable.rooms
  - Score: inkrementeller ScoreDirector über deklarative Regeln
  - Phase 1: Eröffnungsheuristik (jede offene Lesson bestmöglich platzieren)
  - Phase 2: Local Search (Change-/Swap-Züge, Simulated Annealing o.ä.)
  - Abbruch: synchron pro Iteration (Zeit, Schritte, Score) oder per Cancel-Flag
"""

import logging
import random
import threading
from typing import Optional

from config.schema import ConstraintWeights, SolverConfig
from models.score import HardSoftScore
from models.timetable import Timetable
from solver.acceptor import build_acceptor
from solver.constraints import build_constraints
from solver.construction import ConstructionHeuristicPhase
from solver.exceptions import ConfigurationError
from solver.local_search import LocalSearchPhase
from solver.move_selector import RandomMoveSelector
from solver.score_director import ScoreDirector
from solver.scope import BestSolutionListener, SolverScope
from solver.termination import build_termination

logger = logging.getLogger(__name__)


# ─── Problem-Prüfung ──────────────────────────────────────────────────────────

def validate_problem(timetable: Timetable) -> None:
    """Lehnt Probleme ab, auf denen der Solver keinen Fortschritt machen kann."""
    if timetable.lessons and not timetable.timeslots:
        raise ConfigurationError(
            f"{len(timetable.lessons)} Lessons, aber keine Zeitslots definiert."
        )
    if timetable.lessons and not timetable.rooms:
        raise ConfigurationError(
            f"{len(timetable.lessons)} Lessons, aber keine Räume definiert."
        )

    seen: set[int] = set()
    timeslots = set(timetable.timeslots)
    rooms = set(timetable.rooms)
    for lesson in timetable.lessons:
        if lesson.id in seen:
            raise ConfigurationError(f"Lesson-ID {lesson.id} ist doppelt vergeben.")
        seen.add(lesson.id)
        if lesson.timeslot is not None and lesson.timeslot not in timeslots:
            raise ConfigurationError(
                f"Lesson {lesson.id}: Zeitslot {lesson.timeslot} fehlt in der Zeitslot-Liste."
            )
        if lesson.room is not None and lesson.room not in rooms:
            raise ConfigurationError(
                f"Lesson {lesson.id}: Raum {lesson.room} fehlt in der Raum-Liste."
            )
        if lesson.pinned and not lesson.is_initialized:
            raise ConfigurationError(
                f"Lesson {lesson.id} ist gepinnt, hat aber keinen Slot/Raum."
            )


# ─── Haupt-Solver ─────────────────────────────────────────────────────────────

class TimetableSolver:
    """Local-Search basierter Stundenplan-Solver.

    Verwendung:
        solver = TimetableSolver(config)
        solver.add_best_solution_listener(print)
        best = solver.solve(timetable)

    Ein Solver-Objekt hält keinen Zustand zwischen zwei solve()-Aufrufen;
    jeder Aufruf besitzt eigenen Score-Director und eigene Zufallsquelle.
    """

    def __init__(self, config: Optional[SolverConfig] = None) -> None:
        self.config = config or SolverConfig()
        self._listeners: list[BestSolutionListener] = []
        # Akzeptierte Local-Search-Züge des letzten Laufs
        self.last_move_log: list[str] = []

    def add_best_solution_listener(self, listener: BestSolutionListener) -> None:
        """Listener läuft im Solver-Thread und darf den Snapshot nicht verändern."""
        self._listeners.append(listener)

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def solve(
        self,
        problem: Timetable,
        cancel_event: Optional[threading.Event] = None,
    ) -> Timetable:
        """Löst das Problem in place und gibt den besten Snapshot zurück."""
        validate_problem(problem)
        termination = build_termination(self.config.termination)
        rng = random.Random(self.config.random_seed)

        director = ScoreDirector(problem, build_constraints(self.config.constraint_weights))
        director.calculate_score()
        scope = SolverScope(director, termination, cancel_event, self._listeners)

        logger.info(
            f"Solving gestartet: {len(problem.lessons)} Lessons, "
            f"{len(problem.timeslots)} Zeitslots, {len(problem.rooms)} Räume | "
            f"Seed: {self.config.random_seed} | Abbruch: {termination!r}"
        )

        ConstructionHeuristicPhase().solve(scope)

        self.last_move_log = []
        if director.score.is_solution_initialized and not scope.is_terminated():
            selector = RandomMoveSelector(problem, rng, self.config.moves.swap_probability)
            LocalSearchPhase(
                selector,
                build_acceptor(self.config.acceptor, rng),
                full_assert=self.config.full_assert,
                move_log=self.last_move_log,
            ).solve(scope)

        if self.config.full_assert:
            director.assert_consistency()
        problem.score = director.score

        elapsed = scope.elapsed
        speed = director.calculation_count / elapsed if elapsed > 0 else 0.0
        reason = "abgebrochen" if scope.is_cancelled else "beendet"
        logger.info(
            f"Solving {reason}: Zeit: {elapsed:.2f}s | "
            f"Schritte: {scope.step_count} | "
            f"Score-Berechnungen/s: {speed:.0f} | "
            f"Bester Score: {scope.best_score} (Schritt {scope.best_step})"
        )
        if not scope.best_score.is_solution_initialized:
            logger.warning(
                f"Beste Lösung ist unvollständig: {scope.best_score.init_count} Lessons offen"
            )
        return scope.best_solution


# ─── Modul-Funktionen ─────────────────────────────────────────────────────────

def solve(
    problem: Timetable,
    config: Optional[SolverConfig] = None,
    on_best_update: Optional[BestSolutionListener] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Timetable:
    """Synchroner Solve; gibt den besten gefundenen Snapshot zurück."""
    solver = TimetableSolver(config)
    if on_best_update is not None:
        solver.add_best_solution_listener(on_best_update)
    return solver.solve(problem, cancel_event)


def score(timetable: Timetable, weights: Optional[ConstraintWeights] = None) -> HardSoftScore:
    """Vollständige Neuberechnung des Scores (Verifikation/Anzeige)."""
    director = ScoreDirector(timetable, build_constraints(weights or ConstraintWeights()))
    return director.full_score()
