"""Datenmodell für einen Zeitslot im Wochenraster (Pydantic v2)."""

from datetime import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def index(self) -> int:
        """0=Montag .. 6=Sonntag."""
        return list(DayOfWeek).index(self)

    @property
    def short_name(self) -> str:
        return ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"][self.index]


class Timeslot(BaseModel):
    """Ein Unterrichtszeitslot: Wochentag + Beginn + Ende.

    Immutable (frozen) und per Wert vergleichbar, damit er als Dict-Key /
    Set-Element nutzbar ist. Alle Lessons mit demselben Slot referenzieren
    dasselbe Objekt aus Timetable.timeslots.
    """

    model_config = ConfigDict(frozen=True)

    day_of_week: DayOfWeek
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def _check_order(self):
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Slot-Ende {self.end_time} liegt nicht nach Slot-Beginn {self.start_time}"
            )
        return self

    @property
    def sort_key(self) -> tuple[int, time]:
        return (self.day_of_week.index, self.start_time)

    def is_directly_before(self, other: "Timeslot") -> bool:
        """True wenn `other` am selben Tag genau dann beginnt, wenn dieser Slot endet."""
        return (
            self.day_of_week == other.day_of_week
            and self.end_time == other.start_time
        )

    def __repr__(self) -> str:
        return f"Timeslot({self.day_of_week.short_name} {self.start_time:%H:%M})"

    def __str__(self) -> str:
        return (
            f"{self.day_of_week.short_name} "
            f"{self.start_time:%H:%M}–{self.end_time:%H:%M}"
        )
