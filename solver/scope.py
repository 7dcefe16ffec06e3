"""Laufzeit-Zustand eines Solve: Zeit, Schritte, bester Score, Listener."""

import logging
import threading
import time
from typing import Callable, Optional

from models.score import HardSoftScore
from models.timetable import Timetable
from solver.score_director import ScoreDirector
from solver.termination import Termination

logger = logging.getLogger(__name__)

BestSolutionListener = Callable[[Timetable], None]


class SolverScope:
    """Gehört genau einem Solve; wird nicht zwischen Threads geteilt."""

    def __init__(
        self,
        score_director: ScoreDirector,
        termination: Termination,
        cancel_event: Optional[threading.Event] = None,
        listeners: Optional[list[BestSolutionListener]] = None,
    ) -> None:
        self.score_director = score_director
        self.termination = termination
        self.cancel_event = cancel_event or threading.Event()
        self.listeners = list(listeners or [])

        self.start_time = time.monotonic()
        self.step_count = 0
        self.best_score: HardSoftScore = score_director.score
        self.best_solution: Timetable = score_director.timetable.snapshot(self.best_score)
        self.best_step = 0

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def is_terminated(self) -> bool:
        """Abbruch oder Abbruchbedingung; einmal pro Iteration aufrufen."""
        if self.is_cancelled:
            return True
        return self.termination.should_stop(self.elapsed, self.best_score, self.step_count)

    def step_gradient(self) -> float:
        return self.termination.step_gradient(self.step_count)

    def update_best(self) -> None:
        """Snapshot des aktuellen Zustands als neue beste Lösung."""
        score = self.score_director.score
        self.best_score = score
        self.best_step = self.step_count
        self.best_solution = self.score_director.timetable.snapshot(score)
        logger.debug(
            f"  Neue beste Lösung | Schritt {self.step_count} | "
            f"Zeit: {self.elapsed:.2f}s | Score: {score}"
        )
        for listener in self.listeners:
            listener(self.best_solution)
