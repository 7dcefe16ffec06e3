"""Akzeptanzkriterien der Local Search."""

import math
import random
from abc import ABC, abstractmethod

from config.schema import AcceptorConfig, AcceptorType
from models.score import HardSoftScore


class Acceptor(ABC):
    def phase_started(self, score: HardSoftScore) -> None:
        pass

    @abstractmethod
    def is_accepted(
        self,
        move_score: HardSoftScore,
        current_score: HardSoftScore,
        best_score: HardSoftScore,
        step_gradient: float,
    ) -> bool:
        ...

    def step_ended(self, score: HardSoftScore) -> None:
        pass


class HillClimbingAcceptor(Acceptor):
    """Akzeptiert jeden Zug, der den aktuellen Score nicht verschlechtert."""

    def is_accepted(self, move_score, current_score, best_score, step_gradient) -> bool:
        return move_score >= current_score


class SimulatedAnnealingAcceptor(Acceptor):
    """Simulated Annealing mit Temperatur pro Score-Level.

    Nicht schlechtere Züge werden immer akzeptiert. Sonst gilt
    P = Π exp(delta_level / T_level) über alle verschlechterten Levels,
    T_level = Starttemperatur · (1 - gradient). Ein Level mit
    Temperatur 0 darf sich nie verschlechtern.

    Der Gradient kommt aus dem Schrittlimit; ohne Schrittlimit kühlt die
    Temperatur über `cooling_step_count` Iterationen ab. Beides zählt Schritte,
    nicht Sekunden: gleicher Seed ergibt auch unter Zeitlimit dieselbe Zugfolge.
    """

    def __init__(
        self,
        starting_temperature: HardSoftScore,
        rng: random.Random,
        cooling_step_count: int = 100_000,
    ) -> None:
        self.starting_temperature = starting_temperature
        self.cooling_step_count = cooling_step_count
        self._rng = rng
        self._step = 0

    def phase_started(self, score: HardSoftScore) -> None:
        self._step = 0

    def step_ended(self, score: HardSoftScore) -> None:
        self._step += 1

    def gradient(self, step_gradient: float) -> float:
        if step_gradient >= 0:
            return step_gradient
        return min(self._step / self.cooling_step_count, 1.0)

    def is_accepted(self, move_score, current_score, best_score, step_gradient) -> bool:
        if move_score >= current_score:
            return True
        if move_score.init_score < current_score.init_score:
            return False
        fraction = 1.0 - self.gradient(step_gradient)
        chance = 1.0
        levels = (
            (move_score.hard_score - current_score.hard_score,
             self.starting_temperature.hard_score),
            (move_score.soft_score - current_score.soft_score,
             self.starting_temperature.soft_score),
        )
        for delta, start_temperature in levels:
            if delta >= 0:
                continue
            temperature = start_temperature * fraction
            if temperature <= 0:
                return False
            chance *= math.exp(delta / temperature)
        return self._rng.random() < chance


class LateAcceptanceAcceptor(Acceptor):
    """Akzeptiert, wenn nicht schlechter als aktuell oder als vor `size` Iterationen."""

    def __init__(self, size: int) -> None:
        self.size = size
        self._history: list[HardSoftScore] = []
        self._index = 0

    def phase_started(self, score: HardSoftScore) -> None:
        self._history = [score] * self.size
        self._index = 0

    def is_accepted(self, move_score, current_score, best_score, step_gradient) -> bool:
        return move_score >= current_score or move_score >= self._history[self._index]

    def step_ended(self, score: HardSoftScore) -> None:
        self._history[self._index] = score
        self._index = (self._index + 1) % self.size


def build_acceptor(config: AcceptorConfig, rng: random.Random) -> Acceptor:
    if config.acceptor_type is AcceptorType.SIMULATED_ANNEALING:
        return SimulatedAnnealingAcceptor(
            HardSoftScore.parse(config.starting_temperature), rng, config.cooling_step_count,
        )
    if config.acceptor_type is AcceptorType.LATE_ACCEPTANCE:
        return LateAcceptanceAcceptor(config.late_acceptance_size)
    return HillClimbingAcceptor()
