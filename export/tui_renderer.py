"""Renderer für die Terminal-Anzeige eines Stundenplans.

Zeilen sind die Zeitslots (sortiert nach Tag und Beginn), Spalten die
Räume, Lehrkräfte oder Lerngruppen, je nach Ansicht. Mehrere Lessons in
einer Zelle bedeuten einen harten Konflikt und werden rot markiert.
"""

from collections import defaultdict
from enum import Enum

from rich.table import Table
from rich import box

from models.lesson import Lesson
from models.timetable import Timetable


class TimetableView(str, Enum):
    ROOM = "room"
    TEACHER = "teacher"
    STUDENT_GROUP = "student_group"


def _column_key(lesson: Lesson, view: TimetableView) -> str:
    if view == TimetableView.ROOM:
        return lesson.room.name
    if view == TimetableView.TEACHER:
        return lesson.teacher
    return lesson.student_group


def _cell_label(lesson: Lesson, view: TimetableView) -> str:
    """Zeigt jeweils die Angaben, die nicht schon in der Spalte stehen."""
    if view == TimetableView.ROOM:
        details = [lesson.teacher, lesson.student_group]
    elif view == TimetableView.TEACHER:
        details = [lesson.room.name, lesson.student_group]
    else:
        details = [lesson.room.name, lesson.teacher]
    return "\n".join([lesson.subject] + details)


def _columns(timetable: Timetable, view: TimetableView) -> list[str]:
    if view == TimetableView.ROOM:
        return [r.name for r in timetable.rooms]
    if view == TimetableView.TEACHER:
        return sorted({l.teacher for l in timetable.lessons})
    return sorted({l.student_group for l in timetable.lessons})


def build_timetable_rows(
    timetable: Timetable, view: TimetableView = TimetableView.ROOM
) -> tuple[list[str], list[list[str]]]:
    """Gibt (Spaltenköpfe, Tabellenzeilen) zurück.

    Jede Zeile: [Zeitslot, Zelle je Spalte]; leere Zellen sind "".
    """
    view = TimetableView(view)
    columns = _columns(timetable, view)
    cells: dict[tuple, list[Lesson]] = defaultdict(list)
    for lesson in timetable.lessons:
        if lesson.is_initialized:
            cells[(lesson.timeslot, _column_key(lesson, view))].append(lesson)

    rows: list[list[str]] = []
    for timeslot in sorted(timetable.timeslots, key=lambda ts: ts.sort_key):
        row = [str(timeslot)]
        for column in columns:
            lessons = cells.get((timeslot, column), [])
            row.append("\n---\n".join(_cell_label(l, view) for l in lessons))
        rows.append(row)
    return columns, rows


def render_timetable(
    timetable: Timetable, view: TimetableView = TimetableView.ROOM
) -> Table:
    """Baut eine Rich-Tabelle für den Stundenplan."""
    view = TimetableView(view)
    columns, rows = build_timetable_rows(timetable, view)

    title = f"{timetable.name}"
    if timetable.score is not None:
        title += f" | Score: {timetable.score}"
    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    table.add_column("Zeitslot", style="bold cyan", no_wrap=True)
    for column in columns:
        table.add_column(column)

    for row in rows:
        styled = [row[0]]
        for cell in row[1:]:
            if "\n---\n" in cell:
                styled.append(f"[red]{cell}[/red]")
            else:
                styled.append(cell)
        table.add_row(*styled)

    unassigned = [l for l in timetable.lessons if not l.is_initialized]
    if unassigned:
        table.caption = (
            f"[yellow]Nicht zugewiesen ({len(unassigned)}): "
            f"{', '.join(str(l) for l in unassigned)}[/yellow]"
        )
    return table
