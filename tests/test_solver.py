"""Tests für den Local-Search Stundenplan-Solver."""

import random
import threading
import time as _time
from datetime import time

import pytest

from config.schema import (
    AcceptorConfig,
    AcceptorType,
    SolverConfig,
    TerminationConfig,
)
from data.fake_data import DemoData, FakeDataGenerator, generate_demo_data
from models.lesson import Lesson
from models.room import Room
from models.score import HardSoftScore
from models.timeslot import DayOfWeek, Timeslot
from models.timetable import Timetable
from solver import (
    ConfigurationError,
    SolverManager,
    SolverStatus,
    TimetableSolver,
    score,
    solve,
    solve_async,
)
from solver.acceptor import SimulatedAnnealingAcceptor


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def make_config(steps: int = 2000, time_limit=None, seed=0, **kwargs) -> SolverConfig:
    """Schrittbegrenzte Konfiguration: unabhängig von der Rechnergeschwindigkeit."""
    return SolverConfig(
        random_seed=seed,
        termination=TerminationConfig(
            time_limit_seconds=time_limit,
            step_count_limit=steps,
        ),
        **kwargs,
    )


def make_four_lesson_problem() -> Timetable:
    """2 Zeitslots × 2 Räume, 4 Lessons: genau eine Belegung pro Slot/Raum."""
    timeslots = [
        Timeslot(day_of_week=DayOfWeek.MONDAY, start_time=time(8, 30), end_time=time(9, 30)),
        Timeslot(day_of_week=DayOfWeek.MONDAY, start_time=time(9, 30), end_time=time(10, 30)),
    ]
    rooms = [Room(name="Room A"), Room(name="Room B")]
    lessons = [
        Lesson(id=0, subject="Math", teacher="A. Turing", student_group="9th grade"),
        Lesson(id=1, subject="Chemistry", teacher="M. Curie", student_group="9th grade"),
        Lesson(id=2, subject="French", teacher="M. Curie", student_group="10th grade"),
        Lesson(id=3, subject="History", teacher="I. Jones", student_group="10th grade"),
    ]
    return Timetable(name="Vier Lessons", timeslots=timeslots, rooms=rooms, lessons=lessons)


def make_infeasible_problem() -> Timetable:
    """3 Lessons derselben Lehrkraft, aber nur 2 Zeitslots."""
    problem = make_four_lesson_problem()
    problem.rooms.append(Room(name="Room C"))
    problem.lessons = [
        Lesson(id=i, subject="Math", teacher="A. Turing", student_group=f"g{i}")
        for i in range(3)
    ]
    return problem


# ─── ENDE-ZU-ENDE ─────────────────────────────────────────────────────────────

class TestSolve:
    def test_four_lessons_feasible(self):
        result = solve(make_four_lesson_problem(), make_config(steps=500))
        assert result.score.is_solution_initialized
        assert result.score.hard_score == 0
        assert all(l.is_initialized for l in result.lessons)

        curie = [l for l in result.lessons if l.teacher == "M. Curie"]
        assert curie[0].timeslot != curie[1].timeslot
        assert score(result) == result.score

    def test_result_uses_value_range_instances(self):
        problem = make_four_lesson_problem()
        result = solve(problem, make_config(steps=200))
        for lesson in result.lessons:
            assert any(lesson.timeslot is ts for ts in problem.timeslots)
            assert any(lesson.room is r for r in problem.rooms)

    def test_infeasible_problem_returns_best_effort(self):
        result = solve(make_infeasible_problem(), make_config(steps=500))
        assert result.score.is_solution_initialized
        assert result.score.hard_score < 0
        assert not result.score.is_feasible

    def test_infeasible_problem_under_time_limit(self):
        """Nur Zeitlimit: Ende nach dem Limit mit hard < 0, kein Fehler."""
        config = SolverConfig(termination=TerminationConfig(time_limit_seconds=0.5))
        start = _time.monotonic()
        result = solve(make_infeasible_problem(), config)
        assert _time.monotonic() - start < 5.0
        assert result.score.is_solution_initialized
        assert result.score.hard_score < 0

    def test_demo_small_feasible(self):
        result = solve(generate_demo_data(DemoData.SMALL), make_config(steps=50_000))
        assert result.score.is_solution_initialized
        assert result.score.hard_score == 0

    def test_empty_problem(self):
        problem = Timetable(timeslots=[], rooms=[], lessons=[])
        result = solve(problem, make_config(steps=10))
        assert str(result.score) == "0hard/0soft"

    def test_pinned_lessons_keep_assignment(self):
        problem = make_four_lesson_problem()
        pinned = problem.lessons[1]
        pinned.timeslot = problem.timeslots[0]
        pinned.room = problem.rooms[1]
        pinned.pinned = True

        result = solve(problem, make_config(steps=500))
        kept = result.get_lesson(1)
        assert kept.timeslot == problem.timeslots[0]
        assert kept.room == problem.rooms[1]
        assert result.score.hard_score == 0

    @pytest.mark.parametrize("acceptor_type", list(AcceptorType))
    def test_all_acceptors_solve_demo(self, acceptor_type: AcceptorType):
        config = make_config(
            steps=5000,
            acceptor=AcceptorConfig(acceptor_type=acceptor_type, late_acceptance_size=50),
        )
        result = solve(generate_demo_data(DemoData.SMALL), config)
        assert result.score.is_solution_initialized
        assert score(result) == result.score

    def test_full_assert_run(self):
        config = make_config(steps=300, full_assert=True)
        problem = FakeDataGenerator(seed=3).generate(
            lesson_count=30, timeslot_count=10, room_count=3, teacher_count=6, group_count=4,
        )
        result = solve(problem, config)
        assert result.score.is_solution_initialized


# ─── BESTE LÖSUNG & REPRODUZIERBARKEIT ────────────────────────────────────────

class TestBestSolution:
    def test_best_score_strictly_improves(self):
        scores = []
        solve(
            generate_demo_data(DemoData.SMALL),
            make_config(steps=5000),
            on_best_update=lambda s: scores.append(s.score),
        )
        assert scores
        assert all(a < b for a, b in zip(scores, scores[1:]))

    def test_listener_receives_independent_snapshots(self):
        snapshots = []
        problem = make_four_lesson_problem()
        result = solve(problem, make_config(steps=300), on_best_update=snapshots.append)
        assert snapshots[-1].assignments() == result.assignments()
        assert all(s.lessons[0] is not problem.lessons[0] for s in snapshots)

    def test_same_seed_same_run(self):
        runs = []
        for _ in range(2):
            solver = TimetableSolver(make_config(steps=3000, seed=42))
            result = solver.solve(generate_demo_data(DemoData.SMALL))
            runs.append((solver.last_move_log, result.score, result.assignments()))
        assert runs[0][0]
        assert runs[0] == runs[1]

    def test_same_seed_same_moves_under_time_limit(self):
        """Zeitlimit statt Schrittlimit: die Zugfolgen stimmen bis zum kürzeren Lauf überein."""
        logs = []
        for _ in range(2):
            config = SolverConfig(
                random_seed=42,
                termination=TerminationConfig(time_limit_seconds=2.0),
            )
            solver = TimetableSolver(config)
            solver.solve(generate_demo_data(DemoData.LARGE))
            logs.append(solver.last_move_log)
        common = min(len(logs[0]), len(logs[1]))
        assert common > 0
        assert logs[0][:common] == logs[1][:common]

    def test_different_seed_different_moves(self):
        logs = []
        for seed in (1, 2):
            solver = TimetableSolver(make_config(steps=3000, seed=seed))
            solver.solve(generate_demo_data(DemoData.SMALL))
            logs.append(solver.last_move_log)
        assert logs[0] != logs[1]


# ─── AKZEPTANZ ────────────────────────────────────────────────────────────────

class TestSimulatedAnnealing:
    def test_cooling_counts_steps_without_step_limit(self):
        worse = HardSoftScore.parse("0hard/-1soft")
        acceptor = SimulatedAnnealingAcceptor(
            HardSoftScore.parse("0hard/1soft"), random.Random(0), cooling_step_count=10,
        )
        acceptor.phase_started(HardSoftScore.ZERO)
        assert acceptor.gradient(-1.0) == 0.0

        for _ in range(5):
            acceptor.step_ended(HardSoftScore.ZERO)
        assert acceptor.gradient(-1.0) == pytest.approx(0.5)

        for _ in range(5):
            acceptor.step_ended(HardSoftScore.ZERO)
        assert acceptor.gradient(-1.0) == 1.0
        assert not acceptor.is_accepted(worse, HardSoftScore.ZERO, HardSoftScore.ZERO, -1.0)

    def test_step_limit_gradient_takes_precedence(self):
        acceptor = SimulatedAnnealingAcceptor(
            HardSoftScore.parse("1hard/2soft"), random.Random(0), cooling_step_count=10,
        )
        acceptor.phase_started(HardSoftScore.ZERO)
        assert acceptor.gradient(0.25) == 0.25


# ─── ABBRUCH ──────────────────────────────────────────────────────────────────

class TestTermination:
    def test_termination_during_construction(self):
        """Abbruch nach 2 Platzierungen → unvollständige beste Lösung, kein Fehler."""
        result = solve(make_four_lesson_problem(), make_config(steps=2))
        assert result.score.init_count == 2
        assert str(result.score).startswith("-2init/")
        assert sum(1 for l in result.lessons if l.is_initialized) == 2

    def test_zero_steps_returns_input(self):
        result = solve(make_four_lesson_problem(), make_config(steps=0))
        assert result.score.init_count == 4
        assert str(result.score) == "-4init/0hard/0soft"

    def test_time_limit(self):
        config = SolverConfig(termination=TerminationConfig(time_limit_seconds=0.5))
        start = _time.monotonic()
        result = solve(generate_demo_data(DemoData.SMALL), config)
        assert _time.monotonic() - start < 5.0
        assert result.score.is_solution_initialized

    def test_best_score_limit(self):
        config = SolverConfig(termination=TerminationConfig(
            time_limit_seconds=30.0, best_score_limit="0hard/-1000soft",
        ))
        start = _time.monotonic()
        result = solve(make_four_lesson_problem(), config)
        assert _time.monotonic() - start < 10.0
        assert result.score.hard_score == 0

    def test_stop_when_feasible(self):
        config = SolverConfig(termination=TerminationConfig(
            time_limit_seconds=30.0, stop_when_feasible=True,
        ))
        start = _time.monotonic()
        result = solve(make_four_lesson_problem(), config)
        assert _time.monotonic() - start < 10.0
        assert result.score.is_feasible

    def test_cancel_event(self):
        """Abbruch aus dem Listener heraus: der Solve endet an der nächsten Iteration."""
        cancel = threading.Event()
        config = SolverConfig(termination=TerminationConfig(time_limit_seconds=60.0))
        start = _time.monotonic()
        result = solve(
            make_four_lesson_problem(), config,
            on_best_update=lambda s: cancel.set(), cancel_event=cancel,
        )
        assert _time.monotonic() - start < 10.0
        assert result.score.is_solution_initialized


# ─── KONFIGURATIONSFEHLER ─────────────────────────────────────────────────────

class TestConfigurationErrors:
    def test_unbounded_termination(self):
        config = SolverConfig(termination=TerminationConfig(
            time_limit_seconds=None, stop_when_feasible=True,
        ))
        with pytest.raises(ConfigurationError):
            solve(make_four_lesson_problem(), config)

    def test_lessons_without_timeslots(self):
        problem = make_four_lesson_problem()
        problem.timeslots = []
        with pytest.raises(ConfigurationError):
            solve(problem, make_config())

    def test_lessons_without_rooms(self):
        problem = make_four_lesson_problem()
        problem.rooms = []
        with pytest.raises(ConfigurationError):
            solve(problem, make_config())

    def test_duplicate_lesson_ids(self):
        problem = make_four_lesson_problem()
        problem.lessons[3].id = 0
        with pytest.raises(ConfigurationError):
            solve(problem, make_config())

    def test_value_outside_range(self):
        problem = make_four_lesson_problem()
        problem.lessons[0].room = Room(name="Aula")
        with pytest.raises(ConfigurationError):
            solve(problem, make_config())

    def test_pinned_without_assignment(self):
        problem = make_four_lesson_problem()
        problem.lessons[0].pinned = True
        with pytest.raises(ConfigurationError):
            solve(problem, make_config())


# ─── ASYNCHRON ────────────────────────────────────────────────────────────────

class TestAsync:
    def test_solve_async_cancel(self):
        first_best = threading.Event()
        config = SolverConfig(termination=TerminationConfig(time_limit_seconds=60.0))
        job = solve_async(
            generate_demo_data(DemoData.SMALL), config,
            on_best_update=lambda s: first_best.set(),
        )
        assert first_best.wait(timeout=10.0)
        job.cancel()

        result = job.await_result(timeout=10.0)
        assert result.score.is_solution_initialized
        assert job.status == SolverStatus.NOT_SOLVING
        assert job.best_solution is result

    def test_solve_async_propagates_errors(self):
        problem = make_four_lesson_problem()
        problem.rooms = []
        job = solve_async(problem, make_config())
        with pytest.raises(ConfigurationError):
            job.await_result(timeout=10.0)

    def test_solver_manager_runs_independent_jobs(self):
        with SolverManager(make_config(steps=2000), max_workers=2) as manager:
            job_a = manager.solve("a", make_four_lesson_problem())
            job_b = manager.solve("b", generate_demo_data(DemoData.SMALL))
            result_a = job_a.await_result(timeout=30.0)
            result_b = job_b.await_result(timeout=30.0)

            assert result_a.score.hard_score == 0
            assert result_b.score.is_solution_initialized
            assert manager.get_status("a") == SolverStatus.NOT_SOLVING
            assert manager.get_status("unbekannt") == SolverStatus.NOT_SOLVING
            assert manager.terminate_early("unbekannt") is False

    def test_solver_manager_remove_releases_job(self):
        with SolverManager(make_config(steps=500), max_workers=1) as manager:
            job = manager.solve("a", make_four_lesson_problem())
            job.await_result(timeout=30.0)

            assert manager.remove("a") is True
            assert manager.get_job("a") is None
            assert manager.remove("a") is False
            # Nach dem Entfernen ist die Problem-ID wieder frei
            again = manager.solve("a", make_four_lesson_problem())
            assert again.await_result(timeout=30.0).score.hard_score == 0

    def test_solver_manager_terminate_early(self):
        started = threading.Event()
        config = SolverConfig(termination=TerminationConfig(time_limit_seconds=60.0))
        with SolverManager(config, max_workers=1) as manager:
            job = manager.solve(
                "demo", generate_demo_data(DemoData.LARGE),
                on_best_update=lambda s: started.set(),
            )
            assert started.wait(timeout=10.0)
            assert manager.terminate_early("demo") is True
            result = job.await_result(timeout=10.0)
            assert result.score.is_solution_initialized
