"""Zufällige Zug-Auswahl für die Local Search (reproduzierbar über den Seed)."""

import random

from models.timetable import Timetable
from solver.moves import ChangeMove, Move, SwapMove


class RandomMoveSelector:
    """Erzeugt pro Aufruf einen zufälligen Change- oder Swap-Zug.

    Gepinnte Lessons werden nie ausgewählt. Die Gültigkeit bzgl. harter
    Constraints prüft der Selector nicht; das ist Sache des Scores.
    """

    def __init__(
        self,
        timetable: Timetable,
        rng: random.Random,
        swap_probability: float = 0.5,
    ) -> None:
        self._rng = rng
        self._swap_probability = swap_probability
        self._lessons = [l for l in timetable.lessons if not l.pinned]
        self._timeslots = list(timetable.timeslots)
        self._rooms = list(timetable.rooms)

    @property
    def has_moves(self) -> bool:
        return bool(self._lessons) and bool(self._timeslots) and bool(self._rooms)

    def generate(self) -> Move:
        rng = self._rng
        count = len(self._lessons)
        if count > 1 and rng.random() < self._swap_probability:
            i = rng.randrange(count)
            j = rng.randrange(count - 1)
            if j >= i:
                j += 1
            return SwapMove(self._lessons[i], self._lessons[j])
        return ChangeMove(
            rng.choice(self._lessons),
            rng.choice(self._timeslots),
            rng.choice(self._rooms),
        )
