from config.schema import (
    AcceptorConfig,
    AcceptorType,
    ConstraintWeights,
    MoveSelectorConfig,
    SolverConfig,
    TerminationConfig,
)


def default_weights() -> ConstraintWeights:
    """Standard-Gewichte.

    Harte Regeln (je Konflikt -1hard):
      Raumkonflikt, Lehrkraft-Konflikt, Lerngruppen-Konflikt
    Weiche Regeln:
      Raumstabilität Lehrkraft     -1soft je zusätzlichem Raum
      Zeiteffizienz Lehrkraft      +1soft je direkt folgendem Paar
      Fachwechsel Lerngruppe       aus (0)
    """
    return ConstraintWeights(
        room_conflict=1,
        teacher_conflict=1,
        student_group_conflict=1,
        teacher_room_stability=1,
        teacher_time_efficiency=1,
        student_group_subject_variety=0,
    )


def default_solver_config() -> SolverConfig:
    """Default: 30 Sekunden Simulated Annealing, Seed 0."""
    return SolverConfig(
        random_seed=0,
        termination=TerminationConfig(time_limit_seconds=30.0),
        acceptor=AcceptorConfig(
            acceptor_type=AcceptorType.SIMULATED_ANNEALING,
            starting_temperature="1hard/2soft",
        ),
        moves=MoveSelectorConfig(swap_probability=0.5),
        constraint_weights=default_weights(),
    )

