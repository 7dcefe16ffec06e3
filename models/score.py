"""HardSoftScore: Bewertung einer (Teil-)Lösung.

Sortierung lexikografisch über (init, hard, soft):
  - init_score = -Anzahl nicht zugewiesener Lessons (0 sobald alles belegt ist)
  - hard_score = Summe der harten Strafen (0 = zulässig)
  - soft_score = Summe der weichen Strafen/Boni
Weniger unbelegte Lessons schlagen immer hard/soft.
"""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Any

_SCORE_PATTERN = re.compile(
    r"^\s*(?:(?P<init>-?\d+)init/)?(?P<hard>-?\d+)hard/(?P<soft>-?\d+)soft\s*$"
)


@total_ordering
@dataclass(frozen=True)
class HardSoftScore:
    """Unveränderlicher Score-Wert (hashbar, als Dict-Key nutzbar)."""

    hard_score: int = 0
    soft_score: int = 0
    # ≤ 0 für absolute Scores; in Deltas auch positiv möglich
    init_score: int = 0

    # ─── Konstruktoren ───

    @classmethod
    def of(cls, hard: int, soft: int, init_count: int = 0) -> "HardSoftScore":
        return cls(hard_score=hard, soft_score=soft, init_score=-init_count)

    @classmethod
    def of_hard(cls, hard: int) -> "HardSoftScore":
        return cls(hard_score=hard)

    @classmethod
    def of_soft(cls, soft: int) -> "HardSoftScore":
        return cls(soft_score=soft)

    @classmethod
    def parse(cls, text: str) -> "HardSoftScore":
        """Liest die String-Form ("-2hard/-3soft", "-4init/0hard/0soft")."""
        match = _SCORE_PATTERN.match(text)
        if match is None:
            raise ValueError(
                f"Ungültiger Score '{text}': erwartet '<hard>hard/<soft>soft' "
                f"oder '<init>init/<hard>hard/<soft>soft'"
            )
        init = match.group("init")
        return cls(
            hard_score=int(match.group("hard")),
            soft_score=int(match.group("soft")),
            init_score=int(init) if init is not None else 0,
        )

    @classmethod
    def coerce(cls, value: Any) -> "HardSoftScore":
        """Pydantic-Validator: akzeptiert Score, String oder Dict."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, dict):
            return cls(**value)
        raise ValueError(f"Kein gültiger Score: {value!r}")

    # ─── Eigenschaften ───

    @property
    def init_count(self) -> int:
        """Anzahl nicht zugewiesener Lessons."""
        return -self.init_score

    @property
    def is_solution_initialized(self) -> bool:
        return self.init_score >= 0

    @property
    def is_feasible(self) -> bool:
        """True wenn keine harte Constraint verletzt ist."""
        return self.hard_score >= 0

    def with_init_count(self, init_count: int) -> "HardSoftScore":
        return HardSoftScore(self.hard_score, self.soft_score, -init_count)

    def _key(self) -> tuple[int, int, int]:
        return (self.init_score, self.hard_score, self.soft_score)

    # ─── Arithmetik & Vergleich ───

    def add(self, other: "HardSoftScore") -> "HardSoftScore":
        return HardSoftScore(
            self.hard_score + other.hard_score,
            self.soft_score + other.soft_score,
            self.init_score + other.init_score,
        )

    def subtract(self, other: "HardSoftScore") -> "HardSoftScore":
        return HardSoftScore(
            self.hard_score - other.hard_score,
            self.soft_score - other.soft_score,
            self.init_score - other.init_score,
        )

    def __add__(self, other: "HardSoftScore") -> "HardSoftScore":
        if not isinstance(other, HardSoftScore):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "HardSoftScore") -> "HardSoftScore":
        if not isinstance(other, HardSoftScore):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> "HardSoftScore":
        return HardSoftScore(-self.hard_score, -self.soft_score, -self.init_score)

    def __lt__(self, other: "HardSoftScore") -> bool:
        if not isinstance(other, HardSoftScore):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        if self.init_score != 0:
            return f"{self.init_score}init/{self.hard_score}hard/{self.soft_score}soft"
        return f"{self.hard_score}hard/{self.soft_score}soft"


HardSoftScore.ZERO = HardSoftScore()
