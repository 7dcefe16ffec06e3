"""Tests für die Kommandozeile (click.testing.CliRunner)."""

import json
from pathlib import Path

from click.testing import CliRunner

from main import cli
from models.timetable import Timetable


class TestCli:
    def test_demo_writes_json(self, tmp_path: Path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["demo", "--size", "SMALL"])
            assert result.exit_code == 0, result.output
            data = json.loads(Path("output/demo_small.json").read_text(encoding="utf-8"))
        assert len(data["lessons"]) == 20
        assert data["score"] is None

    def test_config_init_and_show(self, tmp_path: Path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["config", "init"])
            assert result.exit_code == 0, result.output
            assert Path("config/solver_config.yaml").exists()

            again = runner.invoke(cli, ["config", "init"])
            assert again.exit_code == 1

            shown = runner.invoke(cli, ["config", "show"])
            assert shown.exit_code == 0, shown.output
            assert "time_limit_seconds" in shown.output

    def test_solve_demo_with_output(self, tmp_path: Path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, [
                "solve", "--demo", "SMALL", "--time-limit", "1", "--seed", "3",
                "--output", "loesung.json", "--view", "teacher",
            ])
            assert result.exit_code == 0, result.output
            solution = Timetable.load_json(Path("loesung.json"))
        assert solution.score.is_solution_initialized
        assert "Lösung-Validierung" in result.output

    def test_score_command(self, tmp_path: Path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            assert runner.invoke(cli, ["demo", "--output", "plan.json"]).exit_code == 0
            result = runner.invoke(cli, ["score", "--input", "plan.json"])
        # Unzugewiesene Lessons sind Fehler → Exit-Code 1
        assert result.exit_code == 1
        assert "-20init/0hard/0soft" in result.output

    def test_solve_rejects_input_and_demo(self, tmp_path: Path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            runner.invoke(cli, ["demo", "--output", "plan.json"])
            result = runner.invoke(cli, ["solve", "--input", "plan.json", "--demo", "SMALL"])
        assert result.exit_code != 0

    def test_solve_rejects_non_positive_time_limit(self, tmp_path: Path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            for value in ("0", "-3"):
                result = runner.invoke(cli, ["solve", "--demo", "SMALL", "--time-limit", value])
                assert result.exit_code == 2
                assert "--time-limit" in result.output
