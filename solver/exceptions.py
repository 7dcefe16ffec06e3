"""Fehlerklassen des Solvers."""


class SolverError(Exception):
    """Basisklasse aller Solver-Fehler."""


class ConfigurationError(SolverError):
    """Ungültiges Problem oder ungültige Solver-Konfiguration (vor dem Solve erkannt)."""


class InvariantViolation(SolverError):
    """Verletzter Programmvertrag, z.B. Zuweisung außerhalb der Wertebereiche."""
