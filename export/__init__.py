"""Export-Modul: Terminal-Anzeige (Rich) für den Stundenplan."""

from export.tui_renderer import TimetableView, build_timetable_rows, render_timetable

__all__ = ["TimetableView", "build_timetable_rows", "render_timetable"]
