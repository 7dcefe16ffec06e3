"""Datenmodell für eine Unterrichtsstunde (Planungs-Entität, Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel

from models.room import Room
from models.timeslot import Timeslot


class Lesson(BaseModel):
    """Eine zu planende Unterrichtsstunde.

    subject/teacher/student_group sind feste Problem-Eigenschaften.
    Nur timeslot und room werden vom Solver geschrieben; gültige Werte
    stammen ausschließlich aus Timetable.timeslots bzw. Timetable.rooms.
    """

    id: int
    subject: str        # "Math"
    teacher: str        # "A. Turing"
    student_group: str  # "9th grade"
    timeslot: Optional[Timeslot] = None
    room: Optional[Room] = None
    # Gepinnte Lessons behalten ihre Eingabe-Zuweisung
    pinned: bool = False

    @property
    def is_initialized(self) -> bool:
        """True wenn Slot UND Raum zugewiesen sind."""
        return self.timeslot is not None and self.room is not None

    def __str__(self) -> str:
        return f"{self.subject}({self.id})"
