"""Tests for the analyze and version commands."""

import json

import pytest
from typer.testing import CliRunner

from sourcescope import __version__
from sourcescope.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_user_config(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(home)


@pytest.fixture
def project(make_project):
    return make_project(
        {
            "clean.js": "export const answer = 42;\n",
            "risky.js": "eval(payload);\n",
        }
    )


class TestAnalyzeCommand:
    """Invocation through the Typer app."""

    def test_json_report_to_file(self, project, tmp_path):
        report = tmp_path / "report.json"
        result = runner.invoke(
            app, ["analyze", str(project), "--no-lint", "--format", "json", "--output", str(report)]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(report.read_text())
        assert data["analyzedFiles"] == 2
        assert [issue["code"] for issue in data["issues"]] == ["DANGEROUS_EVAL"]

    def test_json_report_to_stdout(self, project):
        result = runner.invoke(app, ["analyze", str(project), "--no-lint", "-f", "json", "-q"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["framework"] == "node"

    def test_quiet_format_lists_files(self, project):
        result = runner.invoke(app, ["analyze", str(project), "--no-lint", "-f", "quiet", "-q"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "risky.js"

    def test_fail_on_error(self, project):
        result = runner.invoke(
            app, ["analyze", str(project), "--no-lint", "-f", "quiet", "--fail-on", "error"]
        )
        assert result.exit_code == 1

    def test_fail_on_error_with_clean_project(self, make_project):
        clean = make_project({"ok.js": "export const ok = true;\n"}, root_name="clean")
        result = runner.invoke(
            app, ["analyze", str(clean), "--no-lint", "-f", "quiet", "--fail-on", "error"]
        )
        assert result.exit_code == 0

    def test_parallel_workers(self, project):
        result = runner.invoke(
            app, ["analyze", str(project), "--no-lint", "-f", "json", "-q", "--workers", "2"]
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["analyzedFiles"] == 2

    def test_rich_report(self, project):
        result = runner.invoke(app, ["analyze", str(project), "--no-lint"])
        assert result.exit_code == 0
        assert "DANGEROUS_EVAL" in result.stdout

    def test_missing_path_is_usage_error(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing"), "--no-lint"])
        assert result.exit_code == 2

    def test_invalid_config_file(self, project, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("workers = 0\n")
        result = runner.invoke(app, ["analyze", str(project), "--no-lint", "-c", str(config)])
        assert result.exit_code == 1

    def test_unknown_format_rejected(self, project):
        result = runner.invoke(app, ["analyze", str(project), "-f", "xml"])
        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_unknown_fail_level_rejected(self, project):
        result = runner.invoke(app, ["analyze", str(project), "--no-lint", "--fail-on", "fatal"])
        assert result.exit_code == 2

    def test_format_is_case_insensitive(self, project):
        result = runner.invoke(app, ["analyze", str(project), "--no-lint", "-f", "JSON", "-q"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["analyzedFiles"] == 2


class TestVersionCommand:
    def test_prints_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
