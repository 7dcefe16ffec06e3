from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.score import HardSoftScore


def _check_score_string(v: Optional[str]) -> Optional[str]:
    if v is not None:
        HardSoftScore.parse(v)  # wirft ValueError bei ungültigem Format
    return v


# ─── TERMINIERUNG ───

class TerminationConfig(BaseModel):
    """Abbruchbedingungen. Es feuert die zuerst erfüllte.

    Mindestens eine begrenzende Bedingung (Zeit, Schritte oder Zeit ohne
    Verbesserung) muss gesetzt sein.
    """
    # Zeitlimit für den gesamten Solve in Sekunden (None = keins)
    time_limit_seconds: Optional[float] = Field(30.0, gt=0,
        description="Zeitlimit Solver (Sekunden)")
    # Maximale Anzahl Schritte (Platzierungen + bewertete Züge)
    step_count_limit: Optional[int] = Field(None, ge=0,
        description="Max. Schritte")
    # Abbruch, wenn sich der beste Score so lange nicht verbessert hat
    unimproved_seconds_limit: Optional[float] = Field(None, gt=0,
        description="Max. Sekunden ohne Verbesserung")
    # Abbruch sobald der beste Score mindestens so gut ist, z.B. "0hard/-10soft"
    best_score_limit: Optional[str] = Field(None,
        description="Akzeptabler Score")
    # Abbruch sobald alle Lessons zugewiesen sind und hard ≥ 0
    stop_when_feasible: bool = Field(False,
        description="Bei erster zulässiger Lösung stoppen")

    @field_validator("best_score_limit")
    @classmethod
    def _check_best_score(cls, v: Optional[str]) -> Optional[str]:
        return _check_score_string(v)


# ─── LOCAL SEARCH ───

class AcceptorType(str, Enum):
    SIMULATED_ANNEALING = "simulated_annealing"
    LATE_ACCEPTANCE = "late_acceptance"
    HILL_CLIMBING = "hill_climbing"


class AcceptorConfig(BaseModel):
    """Akzeptanzkriterium der Local Search."""
    acceptor_type: AcceptorType = Field(AcceptorType.SIMULATED_ANNEALING)
    # Starttemperatur pro Level; 0 = dieses Level darf sich nie verschlechtern
    starting_temperature: str = Field("1hard/2soft",
        description="Starttemperatur Simulated Annealing")
    # Iterationen bis Temperatur 0, falls kein step_count_limit gesetzt ist
    cooling_step_count: int = Field(100_000, ge=1,
        description="Abkühlschritte Simulated Annealing")
    # Länge der Score-Historie für Late Acceptance
    late_acceptance_size: int = Field(400, ge=1,
        description="Historienlänge Late Acceptance")

    @field_validator("starting_temperature")
    @classmethod
    def _check_temperature(cls, v: str) -> str:
        temperature = HardSoftScore.parse(v)
        if temperature.hard_score < 0 or temperature.soft_score < 0:
            raise ValueError(f"Starttemperatur darf nicht negativ sein: {v}")
        return v


class MoveSelectorConfig(BaseModel):
    """Zug-Auswahl der Local Search."""
    # Wahrscheinlichkeit für einen Swap-Zug (Rest: Change-Zug)
    swap_probability: float = Field(0.5, ge=0.0, le=1.0,
        description="Anteil Swap-Züge")


# ─── CONSTRAINT-GEWICHTE ───

class ConstraintWeights(BaseModel):
    """Gewichte der Regeln. 0 = Regel deaktiviert."""
    room_conflict: int = Field(1, ge=0)
    teacher_conflict: int = Field(1, ge=0)
    student_group_conflict: int = Field(1, ge=0)
    teacher_room_stability: int = Field(1, ge=0)
    # Bonus pro direkt aufeinanderfolgendem Lesson-Paar einer Lehrkraft
    teacher_time_efficiency: int = Field(1, ge=0)
    # Optional: gleiches Fach direkt hintereinander für eine Lerngruppe
    student_group_subject_variety: int = Field(0, ge=0)


# ─── GESAMT-CONFIG ───

class SolverConfig(BaseModel):
    """Gesamtkonfiguration eines Solver-Laufs."""
    # Seed für reproduzierbare Läufe (None = nicht reproduzierbar)
    random_seed: Optional[int] = Field(0,
        description="Zufalls-Seed")
    termination: TerminationConfig = Field(default_factory=TerminationConfig)
    acceptor: AcceptorConfig = Field(default_factory=AcceptorConfig)
    moves: MoveSelectorConfig = Field(default_factory=MoveSelectorConfig)
    constraint_weights: ConstraintWeights = Field(default_factory=ConstraintWeights)
    # Nach jedem Schritt inkrementellen gegen vollen Score prüfen (langsam!)
    full_assert: bool = Field(False,
        description="Score-Konsistenz nach jedem Schritt prüfen")
