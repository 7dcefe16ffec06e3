"""Tests für das Konfigurationssystem (Pydantic-Schema + YAML)."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.defaults import default_solver_config, default_weights
from config.manager import ConfigManager
from config.schema import (
    AcceptorConfig,
    AcceptorType,
    ConstraintWeights,
    MoveSelectorConfig,
    SolverConfig,
    TerminationConfig,
)
from solver.constraints import build_constraints
from solver.exceptions import ConfigurationError
from solver.termination import (
    CompositeTermination,
    StepCountTermination,
    TimeLimitTermination,
    build_termination,
)


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_solver_config_valid(self):
        config = default_solver_config()
        assert config.random_seed == 0
        assert config.termination.time_limit_seconds == 30.0
        assert config.acceptor.acceptor_type == AcceptorType.SIMULATED_ANNEALING
        assert config.full_assert is False

    def test_default_weights_build_five_rules(self):
        assert len(build_constraints(default_weights())) == 5

    def test_zero_weight_disables_rule(self):
        weights = ConstraintWeights(teacher_time_efficiency=0, teacher_room_stability=0)
        names = [c.name for c in build_constraints(weights)]
        assert names == ["Room conflict", "Teacher conflict", "Student group conflict"]


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_invalid_best_score_limit(self):
        with pytest.raises(ValidationError):
            TerminationConfig(best_score_limit="gut genug")

    def test_valid_best_score_limit(self):
        tc = TerminationConfig(best_score_limit="0hard/-5soft")
        assert tc.best_score_limit == "0hard/-5soft"

    def test_negative_temperature_raises(self):
        with pytest.raises(ValidationError):
            AcceptorConfig(starting_temperature="-1hard/2soft")

    def test_swap_probability_range(self):
        with pytest.raises(ValidationError):
            MoveSelectorConfig(swap_probability=1.5)

    def test_negative_weight_raises(self):
        with pytest.raises(ValidationError):
            ConstraintWeights(room_conflict=-1)

    def test_non_positive_time_limit_raises(self):
        with pytest.raises(ValidationError):
            TerminationConfig(time_limit_seconds=0)

    def test_acceptor_type_from_string(self):
        config = SolverConfig.model_validate({"acceptor": {"acceptor_type": "late_acceptance"}})
        assert config.acceptor.acceptor_type == AcceptorType.LATE_ACCEPTANCE


# ─── ABBRUCHBEDINGUNGEN ───────────────────────────────────────────────────────

class TestBuildTermination:
    def test_single_bound(self):
        termination = build_termination(TerminationConfig(time_limit_seconds=5))
        assert isinstance(termination, TimeLimitTermination)

    def test_composite(self):
        termination = build_termination(TerminationConfig(
            time_limit_seconds=5, step_count_limit=100, stop_when_feasible=True,
        ))
        assert isinstance(termination, CompositeTermination)
        assert len(termination.terminations) == 3

    def test_step_gradient(self):
        termination = build_termination(TerminationConfig(
            time_limit_seconds=None, step_count_limit=100,
        ))
        assert isinstance(termination, StepCountTermination)
        assert termination.step_gradient(25) == pytest.approx(0.25)

    def test_unbounded_raises(self):
        with pytest.raises(ConfigurationError):
            build_termination(TerminationConfig(
                time_limit_seconds=None, best_score_limit="0hard/0soft",
            ))


# ─── YAML SPEICHERN / LADEN ───────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Config speichern, laden und validieren, vollständiger Roundtrip."""
        config = default_solver_config()
        config.random_seed = None
        config.termination.step_count_limit = 1234
        config.acceptor.acceptor_type = AcceptorType.HILL_CLIMBING
        config.constraint_weights.student_group_subject_variety = 2

        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "solver_config.yaml"

        mgr.save(config)
        assert mgr.DEFAULT_CONFIG.exists()

        loaded = mgr.load(mgr.DEFAULT_CONFIG)
        assert loaded == config

    def test_yaml_has_section_comments(self, tmp_path: Path):
        path = tmp_path / "solver_config.yaml"
        ConfigManager().save(default_solver_config(), path)
        text = path.read_text(encoding="utf-8")
        assert "─── Abbruch ───" in text
        assert "─── Gewichte ───" in text
        assert "time_limit_seconds: 30.0" in text

    def test_exists(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.exists() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Laden einer nicht-existenten Datei → FileNotFoundError."""
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text("termination:\n  time_limit_seconds: -3\n", encoding="utf-8")
        with pytest.raises(ValueError, match="ungültig"):
            ConfigManager().load(path)
