"""Deklarative Constraint-Regeln für den Score-Director.

Jede Regel kann auf zwei Arten bewertet werden:
  - matches()/match_and_score(): naive Neuberechnung (O(n²) über Lesson-Paare),
    nur für Verifikation und Score-Erklärung
  - insert()/retract(): inkrementell über einen eigenen Index. Eine Lesson wird
    nur mit den Lessons in ihrem Bucket (Zeitslot, Lehrkraft oder Lerngruppe)
    verglichen.

insert()/retract() liefern die Anzahl hinzugekommener bzw. entfallener
Match-Einheiten; der Score-Director rechnet sie mit Gewicht und Level um.
Nur vollständig zugewiesene Lessons (Slot UND Raum) nehmen teil.
"""

from abc import ABC, abstractmethod
from collections import Counter, defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Hashable, Iterable, Iterator

from config.schema import ConstraintWeights
from models.lesson import Lesson
from models.score import HardSoftScore


class ConstraintLevel(str, Enum):
    HARD = "hard"
    SOFT = "soft"


@dataclass(frozen=True)
class ConstraintMatch:
    """Ein gefundener Verstoß (bzw. Bonus) einer Regel."""

    constraint_name: str
    lessons: tuple[Lesson, ...]
    score: HardSoftScore
    justification: str
    match_weight: int = 1


def _remove_lesson(bucket: list[Lesson], lesson: Lesson) -> None:
    # Identität statt __eq__: Pydantic vergleicht sonst alle Felder
    for i, other in enumerate(bucket):
        if other is lesson:
            del bucket[i]
            return


class Constraint(ABC):
    """Basisklasse: Name, Level, Gewicht, Richtung (Strafe oder Bonus)."""

    name: str = ""
    level: ConstraintLevel = ConstraintLevel.HARD
    reward: bool = False

    def __init__(self, weight: int = 1) -> None:
        self.weight = weight
        # Instrumentierung: Anzahl Lesson-Vergleiche im inkrementellen Pfad
        self.comparison_count = 0
        self.reset()

    def impact(self, match_count: int) -> int:
        """Vorzeichenbehafteter Score-Beitrag für `match_count` Match-Einheiten."""
        sign = 1 if self.reward else -1
        return sign * self.weight * match_count

    def score(self, match_count: int) -> HardSoftScore:
        impact = self.impact(match_count)
        if self.level is ConstraintLevel.HARD:
            return HardSoftScore.of_hard(impact)
        return HardSoftScore.of_soft(impact)

    def match_and_score(self, lessons: Iterable[Lesson]) -> HardSoftScore:
        """Beitrag dieser Regel, komplett neu berechnet."""
        return self.score(sum(m.match_weight for m in self.matches(lessons)))

    @abstractmethod
    def matches(self, lessons: Iterable[Lesson]) -> Iterator[ConstraintMatch]:
        """Alle Matches, naiv berechnet."""

    @abstractmethod
    def reset(self) -> None:
        """Leert den inkrementellen Index."""

    @abstractmethod
    def insert(self, lesson: Lesson) -> int:
        """Nimmt eine zugewiesene Lesson in den Index auf."""

    @abstractmethod
    def retract(self, lesson: Lesson) -> int:
        """Entfernt eine Lesson mit ihren aktuellen Werten aus dem Index."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(weight={self.weight})"


class PairConstraint(Constraint):
    """Ein Match pro ungeordnetem Paar verschiedener Lessons im selben Bucket,
    für das is_match() gilt."""

    @abstractmethod
    def bucket_key(self, lesson: Lesson) -> Hashable:
        ...

    @abstractmethod
    def is_match(self, a: Lesson, b: Lesson) -> bool:
        ...

    def justify(self, a: Lesson, b: Lesson) -> str:
        return str(self.bucket_key(a))

    def matches(self, lessons: Iterable[Lesson]) -> Iterator[ConstraintMatch]:
        placed = [l for l in lessons if l.is_initialized]
        for i, a in enumerate(placed):
            for b in placed[i + 1:]:
                if self.bucket_key(a) == self.bucket_key(b) and self.is_match(a, b):
                    yield ConstraintMatch(
                        constraint_name=self.name,
                        lessons=(a, b),
                        score=self.score(1),
                        justification=self.justify(a, b),
                    )

    def reset(self) -> None:
        self._buckets: dict[Hashable, list[Lesson]] = defaultdict(list)

    def _count_matches(self, bucket: list[Lesson], lesson: Lesson) -> int:
        self.comparison_count += len(bucket)
        return sum(1 for other in bucket if self.is_match(other, lesson))

    def insert(self, lesson: Lesson) -> int:
        if not lesson.is_initialized:
            return 0
        bucket = self._buckets[self.bucket_key(lesson)]
        count = self._count_matches(bucket, lesson)
        bucket.append(lesson)
        return count

    def retract(self, lesson: Lesson) -> int:
        if not lesson.is_initialized:
            return 0
        key = self.bucket_key(lesson)
        bucket = self._buckets[key]
        _remove_lesson(bucket, lesson)
        count = self._count_matches(bucket, lesson)
        if not bucket:
            del self._buckets[key]
        return count


# ─── Harte Regeln ─────────────────────────────────────────────────────────────

class RoomConflict(PairConstraint):
    """Ein Raum kann pro Zeitslot nur eine Lesson aufnehmen."""

    name = "Room conflict"
    level = ConstraintLevel.HARD

    def bucket_key(self, lesson: Lesson) -> Hashable:
        return lesson.timeslot

    def is_match(self, a: Lesson, b: Lesson) -> bool:
        return a.room == b.room

    def justify(self, a: Lesson, b: Lesson) -> str:
        return f"{a.room} @ {a.timeslot}"


class TeacherConflict(PairConstraint):
    """Eine Lehrkraft kann pro Zeitslot nur eine Lesson unterrichten."""

    name = "Teacher conflict"
    level = ConstraintLevel.HARD

    def bucket_key(self, lesson: Lesson) -> Hashable:
        return lesson.timeslot

    def is_match(self, a: Lesson, b: Lesson) -> bool:
        return a.teacher == b.teacher

    def justify(self, a: Lesson, b: Lesson) -> str:
        return f"{a.teacher} @ {a.timeslot}"


class StudentGroupConflict(PairConstraint):
    """Eine Lerngruppe kann pro Zeitslot nur eine Lesson besuchen."""

    name = "Student group conflict"
    level = ConstraintLevel.HARD

    def bucket_key(self, lesson: Lesson) -> Hashable:
        return lesson.timeslot

    def is_match(self, a: Lesson, b: Lesson) -> bool:
        return a.student_group == b.student_group

    def justify(self, a: Lesson, b: Lesson) -> str:
        return f"{a.student_group} @ {a.timeslot}"


# ─── Weiche Regeln ────────────────────────────────────────────────────────────

class TeacherRoomStability(Constraint):
    """Eine Lehrkraft unterrichtet möglichst in einem Raum.

    Strafe pro Lehrkraft: (Anzahl verschiedener Räume - 1).
    """

    name = "Teacher room stability"
    level = ConstraintLevel.SOFT

    @staticmethod
    def _penalty(room_counts: Counter) -> int:
        return max(len(room_counts) - 1, 0)

    def matches(self, lessons: Iterable[Lesson]) -> Iterator[ConstraintMatch]:
        by_teacher: dict[str, list[Lesson]] = defaultdict(list)
        for lesson in lessons:
            if lesson.is_initialized:
                by_teacher[lesson.teacher].append(lesson)
        for teacher, taught in by_teacher.items():
            rooms = Counter(l.room for l in taught)
            penalty = self._penalty(rooms)
            if penalty:
                yield ConstraintMatch(
                    constraint_name=self.name,
                    lessons=tuple(taught),
                    score=self.score(penalty),
                    justification=(
                        f"{teacher}: {len(rooms)} Räume "
                        f"({', '.join(sorted(r.name for r in rooms))})"
                    ),
                    match_weight=penalty,
                )

    def reset(self) -> None:
        self._rooms_by_teacher: dict[str, Counter] = defaultdict(Counter)

    def insert(self, lesson: Lesson) -> int:
        if not lesson.is_initialized:
            return 0
        rooms = self._rooms_by_teacher[lesson.teacher]
        before = self._penalty(rooms)
        rooms[lesson.room] += 1
        return self._penalty(rooms) - before

    def retract(self, lesson: Lesson) -> int:
        if not lesson.is_initialized:
            return 0
        rooms = self._rooms_by_teacher[lesson.teacher]
        before = self._penalty(rooms)
        rooms[lesson.room] -= 1
        if rooms[lesson.room] <= 0:
            del rooms[lesson.room]
        if not rooms:
            del self._rooms_by_teacher[lesson.teacher]
        return before - self._penalty(rooms)


class TeacherTimeEfficiency(PairConstraint):
    """Bonus für Lessons einer Lehrkraft in direkt aufeinanderfolgenden Slots."""

    name = "Teacher time efficiency"
    level = ConstraintLevel.SOFT
    reward = True

    def bucket_key(self, lesson: Lesson) -> Hashable:
        return lesson.teacher

    def is_match(self, a: Lesson, b: Lesson) -> bool:
        return (
            a.timeslot.is_directly_before(b.timeslot)
            or b.timeslot.is_directly_before(a.timeslot)
        )

    def justify(self, a: Lesson, b: Lesson) -> str:
        first, second = sorted((a, b), key=lambda l: l.timeslot.sort_key)
        return f"{a.teacher}: {first.timeslot} → {second.timeslot}"


class StudentGroupSubjectVariety(PairConstraint):
    """Strafe, wenn eine Lerngruppe dasselbe Fach direkt hintereinander hat."""

    name = "Student group subject variety"
    level = ConstraintLevel.SOFT

    def bucket_key(self, lesson: Lesson) -> Hashable:
        return lesson.student_group

    def is_match(self, a: Lesson, b: Lesson) -> bool:
        return a.subject == b.subject and (
            a.timeslot.is_directly_before(b.timeslot)
            or b.timeslot.is_directly_before(a.timeslot)
        )

    def justify(self, a: Lesson, b: Lesson) -> str:
        return f"{a.student_group}: {a.subject} zweimal hintereinander"


# ─── Fabrik ───────────────────────────────────────────────────────────────────

def build_constraints(weights: ConstraintWeights) -> list[Constraint]:
    """Erzeugt die Regel-Liste; Regeln mit Gewicht 0 entfallen."""
    candidates = [
        (RoomConflict, weights.room_conflict),
        (TeacherConflict, weights.teacher_conflict),
        (StudentGroupConflict, weights.student_group_conflict),
        (TeacherRoomStability, weights.teacher_room_stability),
        (TeacherTimeEfficiency, weights.teacher_time_efficiency),
        (StudentGroupSubjectVariety, weights.student_group_subject_variety),
    ]
    return [cls(weight) for cls, weight in candidates if weight > 0]
