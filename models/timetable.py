"""Timetable: Problem + Lösung in einem Objekt (Pydantic v2)."""

from pathlib import Path
from typing import Annotated, Optional

from pydantic import BaseModel, PlainSerializer, PlainValidator, model_validator

from models.lesson import Lesson
from models.room import Room
from models.score import HardSoftScore
from models.timeslot import Timeslot

# Score wird in JSON als String gespeichert ("-2hard/-3soft")
ScoreField = Annotated[
    HardSoftScore,
    PlainValidator(HardSoftScore.coerce),
    PlainSerializer(str, return_type=str),
]


class Timetable(BaseModel):
    """Vollständiger Stundenplan: Wertebereiche, Lessons und abgeleiteter Score.

    timeslots und rooms sind die erschöpfenden Wertebereiche für
    Lesson.timeslot bzw. Lesson.room.
    """

    name: str = "Timetable"
    timeslots: list[Timeslot]
    rooms: list[Room]
    lessons: list[Lesson]
    score: Optional[ScoreField] = None

    @model_validator(mode="after")
    def _link_value_ranges(self):
        """Ersetzt gleichwertige Slot-/Raum-Kopien durch die Listen-Elemente."""
        timeslot_map = {ts: ts for ts in self.timeslots}
        room_map = {r: r for r in self.rooms}
        for lesson in self.lessons:
            if lesson.timeslot is not None:
                lesson.timeslot = timeslot_map.get(lesson.timeslot, lesson.timeslot)
            if lesson.room is not None:
                lesson.room = room_map.get(lesson.room, lesson.room)
        return self

    # ─── Übersicht ───

    @property
    def init_count(self) -> int:
        """Anzahl Lessons mit mindestens einem leeren Planungsfeld."""
        return sum(1 for lesson in self.lessons if not lesson.is_initialized)

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        teachers = {lesson.teacher for lesson in self.lessons}
        groups = {lesson.student_group for lesson in self.lessons}
        lines = [
            f"Stundenplan: {self.name}",
            f"Zeitslots: {len(self.timeslots)}",
            f"Räume: {len(self.rooms)}",
            f"Lessons: {len(self.lessons)} "
            f"({self.init_count} offen, {sum(1 for l in self.lessons if l.pinned)} gepinnt)",
            f"Lehrkräfte: {len(teachers)} | Lerngruppen: {len(groups)}",
            f"Score: {self.score}" if self.score is not None else "",
        ]
        return "\n".join(l for l in lines if l)

    def get_lesson(self, lesson_id: int) -> Optional[Lesson]:
        return next((l for l in self.lessons if l.id == lesson_id), None)

    # ─── Snapshots ───

    def snapshot(self, score: Optional[HardSoftScore] = None) -> "Timetable":
        """Unabhängige Kopie der Zuweisungen; Slots und Räume werden geteilt."""
        return Timetable.model_construct(
            name=self.name,
            timeslots=list(self.timeslots),
            rooms=list(self.rooms),
            lessons=[lesson.model_copy() for lesson in self.lessons],
            score=score if score is not None else self.score,
        )

    def assignments(self) -> dict[int, tuple[Optional[Timeslot], Optional[Room]]]:
        """lesson_id → (timeslot, room); nützlich für Vergleiche."""
        return {l.id: (l.timeslot, l.room) for l in self.lessons}

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den Stundenplan als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "Timetable":
        """Lädt einen Stundenplan aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
