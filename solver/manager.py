"""Asynchrones Solving: SolverJob-Handles und ein SolverManager mit Thread-Pool.

Jeder Job besitzt seinen eigenen Timetable, Score-Director und Zufallsquelle;
zwischen Jobs wird kein veränderlicher Zustand geteilt. Abbruch ist
kooperativ: das Cancel-Flag wird an derselben Iterationsgrenze geprüft wie
die Abbruchbedingung, danach liefert der Job die bisher beste Lösung.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Hashable, Optional

from config.schema import SolverConfig
from models.timetable import Timetable
from solver.scheduler import TimetableSolver
from solver.scope import BestSolutionListener

logger = logging.getLogger(__name__)


class SolverStatus(str, Enum):
    NOT_SOLVING = "NOT_SOLVING"
    SOLVING_SCHEDULED = "SOLVING_SCHEDULED"
    SOLVING_ACTIVE = "SOLVING_ACTIVE"


class SolverJob:
    """Handle auf einen laufenden oder wartenden Solve."""

    def __init__(
        self,
        problem_id: Hashable,
        problem: Timetable,
        config: SolverConfig,
        on_best_update: Optional[BestSolutionListener] = None,
    ) -> None:
        self.problem_id = problem_id
        self._problem = problem
        self._config = config
        self._on_best_update = on_best_update
        self._cancel_event = threading.Event()
        self._lock = threading.Lock()
        self._status = SolverStatus.SOLVING_SCHEDULED
        self._best_solution: Optional[Timetable] = None
        self._future: Optional[Future] = None

    # ─── Status ───

    @property
    def status(self) -> SolverStatus:
        with self._lock:
            return self._status

    @property
    def best_solution(self) -> Optional[Timetable]:
        """Zuletzt gemeldete beste Lösung (None vor der ersten)."""
        with self._lock:
            return self._best_solution

    def is_done(self) -> bool:
        return self._future is not None and self._future.done()

    # ─── Steuerung ───

    def cancel(self) -> None:
        """Beendet den Solve vorzeitig; await_result() liefert die beste Lösung."""
        logger.info(f"Solve {self.problem_id!r}: Abbruch angefordert")
        self._cancel_event.set()

    def await_result(self, timeout: Optional[float] = None) -> Timetable:
        """Blockiert bis zum Ende des Solves; Fehler des Solvers werden weitergereicht."""
        if self._future is None:
            raise RuntimeError(f"Solve {self.problem_id!r} wurde nie gestartet")
        return self._future.result(timeout=timeout)

    # ─── Intern ───

    def _submit(self, executor: ThreadPoolExecutor) -> "SolverJob":
        self._future = executor.submit(self._run)
        return self

    def _on_best(self, solution: Timetable) -> None:
        with self._lock:
            self._best_solution = solution
        if self._on_best_update is not None:
            self._on_best_update(solution)

    def _run(self) -> Timetable:
        with self._lock:
            self._status = SolverStatus.SOLVING_ACTIVE
        try:
            solver = TimetableSolver(self._config)
            solver.add_best_solution_listener(self._on_best)
            result = solver.solve(self._problem, self._cancel_event)
            with self._lock:
                self._best_solution = result
            return result
        finally:
            with self._lock:
                self._status = SolverStatus.NOT_SOLVING

    def __repr__(self) -> str:
        return f"SolverJob({self.problem_id!r}, {self.status.value})"


def solve_async(
    problem: Timetable,
    config: Optional[SolverConfig] = None,
    on_best_update: Optional[BestSolutionListener] = None,
) -> SolverJob:
    """Startet einen Solve in einem eigenen Thread und kehrt sofort zurück."""
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="solver")
    job = SolverJob(problem.name, problem, config or SolverConfig(), on_best_update)
    job._submit(executor)
    # Der Worker-Thread beendet sich nach dem Job
    executor.shutdown(wait=False)
    return job


class SolverManager:
    """Verwaltet mehrere unabhängige Solves über eine Problem-ID.

    Verwendung:
        with SolverManager(config, max_workers=2) as manager:
            job = manager.solve("schule-1", timetable)
            best = job.await_result()
    """

    def __init__(self, config: Optional[SolverConfig] = None, max_workers: Optional[int] = None) -> None:
        self.config = config or SolverConfig()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="solver")
        self._jobs: dict[Hashable, SolverJob] = {}
        self._lock = threading.Lock()

    def solve(
        self,
        problem_id: Hashable,
        problem: Timetable,
        on_best_update: Optional[BestSolutionListener] = None,
        config: Optional[SolverConfig] = None,
    ) -> SolverJob:
        """Plant einen Solve ein. Pro Problem-ID läuft höchstens ein Solve."""
        with self._lock:
            existing = self._jobs.get(problem_id)
            if existing is not None and not existing.is_done():
                raise ValueError(f"Für Problem {problem_id!r} läuft bereits ein Solve.")
            job = SolverJob(problem_id, problem, config or self.config, on_best_update)
            self._jobs[problem_id] = job
        logger.info(f"Solve {problem_id!r} eingeplant")
        return job._submit(self._executor)

    def get_job(self, problem_id: Hashable) -> Optional[SolverJob]:
        with self._lock:
            return self._jobs.get(problem_id)

    def get_status(self, problem_id: Hashable) -> SolverStatus:
        job = self.get_job(problem_id)
        return job.status if job is not None else SolverStatus.NOT_SOLVING

    def terminate_early(self, problem_id: Hashable) -> bool:
        """Bricht einen Solve ab. True wenn ein Job gefunden wurde."""
        job = self.get_job(problem_id)
        if job is None:
            return False
        job.cancel()
        return True

    def remove(self, problem_id: Hashable) -> bool:
        """Vergisst einen Job (laufende werden abgebrochen). True wenn gefunden."""
        with self._lock:
            job = self._jobs.pop(problem_id, None)
        if job is None:
            return False
        if not job.is_done():
            job.cancel()
        logger.info(f"Solve {problem_id!r} entfernt")
        return True

    def shutdown(self, cancel_running: bool = True) -> None:
        if cancel_running:
            with self._lock:
                jobs = list(self._jobs.values())
            for job in jobs:
                job.cancel()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "SolverManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
