"""Testdaten für den Stundenplan-Solver.

Zwei feste Demo-Datensätze (SMALL, LARGE) mit englischen Fach- und
Lehrkraftnamen sowie ein zufallsbasierter Generator für beliebig große
Probleme. Alle Lessons sind anfangs unzugewiesen.

Engpässe der Demo-Daten:
  1. SMALL: 20 Lessons auf 10 Slots × 3 Räume, M. Curie unterrichtet
     in beiden Jahrgängen (5 Lessons)
  2. LARGE: 60 Lessons auf 15 Slots × 6 Räume, jede Lerngruppe belegt
     alle 15 Slots; jede Lösung ohne harte Verstöße ist eng gepackt
"""

import random
from datetime import time
from enum import Enum
from typing import Optional

from models.lesson import Lesson
from models.room import Room
from models.timeslot import DayOfWeek, Timeslot
from models.timetable import Timetable


class DemoData(str, Enum):
    SMALL = "SMALL"
    LARGE = "LARGE"


# ─── Demo-Bausteine ───────────────────────────────────────────────────────────

_SLOT_TIMES = [
    (time(8, 30), time(9, 30)),
    (time(9, 30), time(10, 30)),
    (time(10, 30), time(11, 30)),
    (time(13, 30), time(14, 30)),
    (time(14, 30), time(15, 30)),
]

# (Fach, Lehrkraft) pro Lerngruppe; Reihenfolge = Lesson-Reihenfolge
_SMALL_CURRICULUM: dict[str, list[tuple[str, str]]] = {
    "9th grade": [
        ("Math", "A. Turing"),
        ("Math", "A. Turing"),
        ("Physics", "M. Curie"),
        ("Chemistry", "M. Curie"),
        ("Biology", "C. Darwin"),
        ("History", "I. Jones"),
        ("English", "I. Jones"),
        ("English", "I. Jones"),
        ("Spanish", "P. Cruz"),
        ("Spanish", "P. Cruz"),
    ],
    "10th grade": [
        ("Math", "A. Turing"),
        ("Math", "A. Turing"),
        ("Math", "A. Turing"),
        ("Physics", "M. Curie"),
        ("Chemistry", "M. Curie"),
        ("French", "M. Curie"),
        ("Geography", "C. Darwin"),
        ("History", "I. Jones"),
        ("English", "P. Cruz"),
        ("Spanish", "P. Cruz"),
    ],
}

_LARGE_GROUP_CURRICULUM: list[tuple[str, str]] = [
    ("Math", "A. Turing"),
    ("Math", "A. Turing"),
    ("Math", "A. Turing"),
    ("Physics", "M. Curie"),
    ("Chemistry", "M. Curie"),
    ("French", "M. Curie"),
    ("Biology", "C. Darwin"),
    ("Geography", "C. Darwin"),
    ("History", "I. Jones"),
    ("English", "I. Jones"),
    ("English", "P. Cruz"),
    ("Spanish", "P. Cruz"),
    ("Spanish", "P. Cruz"),
    ("Art", "S. Dali"),
    ("Music", "W. A. Mozart"),
]

_LARGE_GROUPS = ["9th grade", "10th grade", "11th grade", "12th grade"]


def _make_timeslots(days: list[DayOfWeek]) -> list[Timeslot]:
    return [
        Timeslot(day_of_week=day, start_time=start, end_time=end)
        for day in days
        for start, end in _SLOT_TIMES
    ]


def generate_demo_data(size: DemoData = DemoData.SMALL) -> Timetable:
    """Erzeugt einen der festen Demo-Datensätze (unzugewiesen)."""
    size = DemoData(size)
    if size == DemoData.SMALL:
        timeslots = _make_timeslots([DayOfWeek.MONDAY, DayOfWeek.TUESDAY])
        rooms = [Room(name=n) for n in ("Room A", "Room B", "Room C")]
        curriculum = _SMALL_CURRICULUM
    else:
        timeslots = _make_timeslots(
            [DayOfWeek.MONDAY, DayOfWeek.TUESDAY, DayOfWeek.WEDNESDAY]
        )
        rooms = [Room(name=f"Room {c}") for c in "ABCDEF"]
        curriculum = {group: _LARGE_GROUP_CURRICULUM for group in _LARGE_GROUPS}

    lessons: list[Lesson] = []
    for group, entries in curriculum.items():
        for subject, teacher in entries:
            lessons.append(Lesson(
                id=len(lessons),
                subject=subject,
                teacher=teacher,
                student_group=group,
            ))

    return Timetable(
        name=f"Demo {size.value}",
        timeslots=timeslots,
        rooms=rooms,
        lessons=lessons,
    )


# ─── Zufallsgenerator ─────────────────────────────────────────────────────────

_SUBJECTS = [
    "Math", "Physics", "Chemistry", "Biology", "Geography", "History",
    "English", "Spanish", "French", "Art", "Music", "Computer Science",
]

_TEACHER_NAMES = [
    "A. Turing", "M. Curie", "C. Darwin", "I. Jones", "P. Cruz", "S. Dali",
    "W. A. Mozart", "A. Lovelace", "E. Noether", "N. Bohr", "R. Franklin",
    "G. Hopper", "L. Meitner", "J. Kepler", "H. Arendt", "K. Gödel",
]


class FakeDataGenerator:
    """Generiert zufällige, unzugewiesene Stundenpläne beliebiger Größe.

    Gleicher Seed + gleiche Parameter = identischer Datensatz.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def _generate_timeslots(self, count: int) -> list[Timeslot]:
        """Slots à 30 Minuten ab 08:00, 20 pro Tag, Montag bis Sonntag."""
        days = list(DayOfWeek)
        per_day = 20
        if count > per_day * len(days):
            raise ValueError(f"Maximal {per_day * len(days)} Zeitslots möglich, angefragt: {count}")
        timeslots = []
        for i in range(count):
            day = days[i // per_day]
            minutes = 8 * 60 + (i % per_day) * 30
            start = time(minutes // 60, minutes % 60)
            end = time((minutes + 30) // 60, (minutes + 30) % 60)
            timeslots.append(Timeslot(day_of_week=day, start_time=start, end_time=end))
        return timeslots

    def _teacher_name(self, index: int) -> str:
        base = _TEACHER_NAMES[index % len(_TEACHER_NAMES)]
        round_ = index // len(_TEACHER_NAMES)
        return base if round_ == 0 else f"{base} {round_ + 1}"

    def generate(
        self,
        lesson_count: int = 100,
        timeslot_count: int = 25,
        room_count: int = 6,
        teacher_count: int = 10,
        group_count: int = 4,
    ) -> Timetable:
        """Erzeugt ein Problem; Lehrkraft und Lerngruppe werden zufällig gezogen."""
        if min(teacher_count, group_count) < 1 and lesson_count > 0:
            raise ValueError("Mindestens eine Lehrkraft und eine Lerngruppe nötig")

        timeslots = self._generate_timeslots(timeslot_count)
        rooms = [Room(name=f"Room {i + 1}") for i in range(room_count)]
        teachers = [self._teacher_name(i) for i in range(teacher_count)]
        groups = [f"Group {i + 1}" for i in range(group_count)]

        lessons = [
            Lesson(
                id=i,
                subject=self.rng.choice(_SUBJECTS),
                teacher=self.rng.choice(teachers),
                student_group=self.rng.choice(groups),
            )
            for i in range(lesson_count)
        ]
        return Timetable(
            name=f"Zufall {lesson_count}",
            timeslots=timeslots,
            rooms=rooms,
            lessons=lessons,
        )


# ─── Ausgabe ──────────────────────────────────────────────────────────────────

def print_summary(timetable: Timetable) -> None:
    """Gibt eine Rich-Tabelle mit Übersicht eines Datensatzes aus."""
    from rich.console import Console
    from rich.table import Table
    from rich import box

    lessons = timetable.lessons
    teachers = {l.teacher for l in lessons}
    groups = {l.student_group for l in lessons}
    days = {ts.day_of_week for ts in timetable.timeslots}

    console = Console()
    table = Table(title=f"Datensatz: {timetable.name}", box=box.ROUNDED)
    table.add_column("Kategorie", style="bold cyan")
    table.add_column("Anzahl", justify="right")
    table.add_column("Details")

    table.add_row("Zeitslots", str(len(timetable.timeslots)), f"{len(days)} Tage")
    table.add_row("Räume", str(len(timetable.rooms)), "")
    table.add_row("Lessons", str(len(lessons)),
                  f"{timetable.init_count} offen")
    table.add_row("Lehrkräfte", str(len(teachers)), "")
    table.add_row("Lerngruppen", str(len(groups)), "")

    console.print(table)
