"""Tests for the command-line interface and console listener."""

import json

from click.testing import CliRunner
from rich.console import Console

from casecraft.cli import main
from casecraft.core.models import CaseStatus, ExecutionSummary
from casecraft.listeners.console import ConsoleListener, summary_line
from casecraft.messaging import AssemblyCompleted, CaseSkipped, ClassCompleted


class TestRunCommand:
    """Tests for `casecraft run`."""

    def test_failures_exit_nonzero(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(main, ["run", "sample_suite"])

        assert result.exit_code == 1
        assert "subtraction is broken" in result.output
        assert "skipped: not ready" in result.output

    def test_passing_scope_exits_zero(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(main, ["run", "sample_suite", "--type", "StringTests"])

        assert result.exit_code == 0
        assert "All tests passed!" in result.output

    def test_method_scope(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(
            main, ["run", "sample_suite", "-t", "ArithmeticTests", "-m", "adds"]
        )

        assert result.exit_code == 0

    def test_explicit_test(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(
            main, ["run", "sample_suite", "--test", "sample_suite.ArithmeticTests::subtracts"]
        )

        assert result.exit_code == 1

    def test_unknown_type_is_configuration_error(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(main, ["run", "sample_suite", "--type", "Missing"])

        assert result.exit_code == 2
        assert "Class not found" in result.output

    def test_method_requires_type(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(main, ["run", "sample_suite", "--method", "adds"])

        assert result.exit_code == 2

    def test_missing_module(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(main, ["run"])

        assert result.exit_code == 2
        assert "No module given" in result.output

    def test_module_from_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "casecraft.json").write_text(
            json.dumps({"module": "sample_suite", "custom_arguments": ["--sorted"]})
        )

        result = CliRunner().invoke(main, ["run", "--namespace", "sample_suite"])

        assert result.exit_code == 1


class TestInitCommand:
    """Tests for `casecraft init`."""

    def test_creates_config(self, tmp_path):
        output = tmp_path / "casecraft.json"

        result = CliRunner().invoke(main, ["init", "--output", str(output)])

        assert result.exit_code == 0
        assert output.exists()

    def test_refuses_to_overwrite(self, tmp_path):
        output = tmp_path / "casecraft.json"
        output.write_text("{}")

        result = CliRunner().invoke(main, ["init", "--output", str(output)])

        assert result.exit_code == 1
        assert output.read_text() == "{}"


class TestConsoleListener:
    """Tests for ConsoleListener."""

    def _listener(self):
        console = Console(record=True, width=120)
        return ConsoleListener(console), console

    def test_skip_without_reason(self):
        listener, console = self._listener()
        listener.on_case_skipped(
            CaseSkipped("m.C", "case", "m.C.case", CaseStatus.SKIPPED, 0, "")
        )
        assert console.export_text().strip() == "Test 'm.C.case' skipped"

    def test_class_summary_only_when_single_class(self):
        listener, console = self._listener()
        summary = ExecutionSummary(passed=2, failed=1)

        listener.on_class_completed(ClassCompleted("m.A", summary, is_only_class=False))
        assert console.export_text() == ""

        listener.on_class_completed(ClassCompleted("m.A", summary, is_only_class=True))
        assert "m.A: 2 passed, 1 failed" in console.export_text()

    def test_no_tests_found(self):
        listener, console = self._listener()
        listener.on_assembly_completed(AssemblyCompleted("pool", ExecutionSummary(), 0))
        assert "No tests found." in console.export_text()

    def test_summary_line(self):
        assert summary_line(ExecutionSummary(passed=1, failed=0, skipped=2)) == (
            "1 passed, 0 failed, 2 skipped"
        )
