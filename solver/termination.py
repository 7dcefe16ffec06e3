"""Abbruchbedingungen, synchron einmal pro Schleifen-Iteration geprüft.

Ein Schritt ist eine Iteration: eine Platzierung in der Eröffnungsheuristik
bzw. ein bewerteter Zug in der Local Search.
"""

from abc import ABC, abstractmethod
from typing import Optional

from config.schema import TerminationConfig
from models.score import HardSoftScore
from solver.exceptions import ConfigurationError


class Termination(ABC):
    """Prädikat: soll der Solver aufhören?"""

    @abstractmethod
    def should_stop(self, elapsed: float, best_score: HardSoftScore, step_count: int) -> bool:
        ...

    def step_gradient(self, step_count: int) -> float:
        """Fortschritt 0.0..1.0 bis zum Schrittlimit; -1.0 ohne Schrittlimit.

        Hängt nie von der Wanduhr ab.
        """
        return -1.0


class TimeLimitTermination(Termination):
    """Fester Wall-Clock-Deadline."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    def should_stop(self, elapsed, best_score, step_count) -> bool:
        return elapsed >= self.seconds

    def __repr__(self) -> str:
        return f"TimeLimitTermination({self.seconds}s)"


class StepCountTermination(Termination):
    def __init__(self, step_count_limit: int) -> None:
        self.step_count_limit = step_count_limit

    def should_stop(self, elapsed, best_score, step_count) -> bool:
        return step_count >= self.step_count_limit

    def step_gradient(self, step_count) -> float:
        if self.step_count_limit == 0:
            return 1.0
        return min(step_count / self.step_count_limit, 1.0)

    def __repr__(self) -> str:
        return f"StepCountTermination({self.step_count_limit})"


class BestScoreTermination(Termination):
    """Stoppt sobald der beste Score mindestens `limit` erreicht."""

    def __init__(self, limit: HardSoftScore) -> None:
        self.limit = limit

    def should_stop(self, elapsed, best_score, step_count) -> bool:
        return best_score >= self.limit

    def __repr__(self) -> str:
        return f"BestScoreTermination({self.limit})"


class FeasibleTermination(Termination):
    """Stoppt sobald alle Lessons zugewiesen sind und hard ≥ 0."""

    def should_stop(self, elapsed, best_score, step_count) -> bool:
        return best_score.is_solution_initialized and best_score.is_feasible

    def __repr__(self) -> str:
        return "FeasibleTermination()"


class UnimprovedTimeTermination(Termination):
    """Stoppt, wenn sich der beste Score `seconds` lang nicht verbessert hat."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        self._last_best: Optional[HardSoftScore] = None
        self._last_improvement = 0.0

    def should_stop(self, elapsed, best_score, step_count) -> bool:
        if self._last_best is None or best_score > self._last_best:
            self._last_best = best_score
            self._last_improvement = elapsed
            return False
        return elapsed - self._last_improvement >= self.seconds

    def __repr__(self) -> str:
        return f"UnimprovedTimeTermination({self.seconds}s)"


class CompositeTermination(Termination):
    """Stoppt sobald irgendeine Teil-Bedingung feuert."""

    def __init__(self, terminations: list[Termination]) -> None:
        self.terminations = list(terminations)

    def should_stop(self, elapsed, best_score, step_count) -> bool:
        # Alle auswerten: zustandsbehaftete Bedingungen brauchen jeden Aufruf
        results = [t.should_stop(elapsed, best_score, step_count) for t in self.terminations]
        return any(results)

    def step_gradient(self, step_count) -> float:
        return max(
            (t.step_gradient(step_count) for t in self.terminations),
            default=-1.0,
        )

    def __repr__(self) -> str:
        return f"CompositeTermination({self.terminations})"


def build_termination(config: TerminationConfig) -> Termination:
    """Baut die Abbruchbedingung; ohne begrenzende Bedingung → ConfigurationError."""
    bounded: list[Termination] = []
    if config.time_limit_seconds is not None:
        bounded.append(TimeLimitTermination(config.time_limit_seconds))
    if config.step_count_limit is not None:
        bounded.append(StepCountTermination(config.step_count_limit))
    if config.unimproved_seconds_limit is not None:
        bounded.append(UnimprovedTimeTermination(config.unimproved_seconds_limit))
    if not bounded:
        raise ConfigurationError(
            "Keine begrenzende Abbruchbedingung: time_limit_seconds, "
            "step_count_limit oder unimproved_seconds_limit setzen."
        )

    terminations = list(bounded)
    if config.best_score_limit is not None:
        terminations.append(BestScoreTermination(HardSoftScore.parse(config.best_score_limit)))
    if config.stop_when_feasible:
        terminations.append(FeasibleTermination())

    if len(terminations) == 1:
        return terminations[0]
    return CompositeTermination(terminations)
