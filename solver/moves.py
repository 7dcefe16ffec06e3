"""Züge: ChangeMove (Lesson neu platzieren) und SwapMove (zwei Lessons tauschen).

Jeder Zug schreibt ausschließlich über ScoreDirector.assign() und liefert
einen Rückgängig-Zug, der den vorherigen Zustand exakt wiederherstellt.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator, Optional

from models.lesson import Lesson
from models.room import Room
from models.timeslot import Timeslot
from models.timetable import Timetable

if TYPE_CHECKING:
    from solver.score_director import ScoreDirector


class Move(ABC):
    """Basisklasse aller Züge."""

    @property
    @abstractmethod
    def planning_entities(self) -> tuple[Lesson, ...]:
        ...

    @abstractmethod
    def is_doable(self) -> bool:
        """False für Leerzüge und Züge auf gepinnten Lessons."""

    @abstractmethod
    def do(self, score_director: "ScoreDirector") -> "Move":
        """Führt den Zug aus und gibt den Rückgängig-Zug zurück."""


class ChangeMove(Move):
    """Setzt (timeslot, room) einer Lesson."""

    def __init__(
        self,
        lesson: Lesson,
        timeslot: Optional[Timeslot],
        room: Optional[Room],
    ) -> None:
        self.lesson = lesson
        self.timeslot = timeslot
        self.room = room

    @property
    def planning_entities(self) -> tuple[Lesson, ...]:
        return (self.lesson,)

    def is_doable(self) -> bool:
        if self.lesson.pinned:
            return False
        return not (
            self.lesson.timeslot == self.timeslot and self.lesson.room == self.room
        )

    def do(self, score_director: "ScoreDirector") -> "ChangeMove":
        undo = ChangeMove(self.lesson, self.lesson.timeslot, self.lesson.room)
        score_director.assign(self.lesson, self.timeslot, self.room)
        return undo

    def __repr__(self) -> str:
        return (
            f"ChangeMove({self.lesson} {self.lesson.timeslot}/{self.lesson.room} "
            f"→ {self.timeslot}/{self.room})"
        )


class SwapMove(Move):
    """Tauscht (timeslot, room) zweier Lessons atomar."""

    def __init__(self, left: Lesson, right: Lesson) -> None:
        self.left = left
        self.right = right

    @property
    def planning_entities(self) -> tuple[Lesson, ...]:
        return (self.left, self.right)

    def is_doable(self) -> bool:
        if self.left is self.right or self.left.pinned or self.right.pinned:
            return False
        return not (
            self.left.timeslot == self.right.timeslot
            and self.left.room == self.right.room
        )

    def do(self, score_director: "ScoreDirector") -> "SwapMove":
        left_timeslot, left_room = self.left.timeslot, self.left.room
        # Beide Seiten vorab prüfen: nie halb getauscht
        score_director.check_value_range(self.left, self.right.timeslot, self.right.room)
        score_director.check_value_range(self.right, left_timeslot, left_room)
        score_director.assign(self.left, self.right.timeslot, self.right.room)
        score_director.assign(self.right, left_timeslot, left_room)
        # Ein erneuter Tausch stellt den alten Zustand her
        return SwapMove(self.left, self.right)

    def __repr__(self) -> str:
        return f"SwapMove({self.left} ⇄ {self.right})"


def placement_moves(timetable: Timetable, lesson: Lesson) -> Iterator[ChangeMove]:
    """Deterministische Kandidaten: Zeitslot-Reihenfolge, dann Raum-Reihenfolge."""
    for timeslot in timetable.timeslots:
        for room in timetable.rooms:
            yield ChangeMove(lesson, timeslot, room)
