from models.score import HardSoftScore
from models.timeslot import DayOfWeek, Timeslot
from models.room import Room
from models.lesson import Lesson
from models.timetable import Timetable

__all__ = [
    "HardSoftScore",
    "DayOfWeek",
    "Timeslot",
    "Room",
    "Lesson",
    "Timetable",
]
