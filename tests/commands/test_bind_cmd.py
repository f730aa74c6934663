"""Tests for the bind CLI command."""

import json

import pytest
from click.testing import CliRunner

from envtag.cli import cli


class TestBindCommand:
    def test_binds_class(self, cli_runner: CliRunner, sample_module: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SAMPLE_NAME", "svc")
        monkeypatch.setenv("SAMPLE_HOSTS", "a,b")
        result = cli_runner.invoke(cli, ["bind", f"{sample_module}:Settings"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "SAMPLE_NAME" in result.output
        assert "30s" in result.output

    def test_json_output(self, cli_runner: CliRunner, sample_module: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SAMPLE_NAME", "svc")
        monkeypatch.setenv("SAMPLE_PORT", "9000")
        result = cli_runner.invoke(cli, ["--json", "bind", f"{sample_module}:Settings"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        values = {f["path"]: f["value"] for f in data["fields"]}
        assert values["port"] == 9000
        assert values["timeout"] == "30s"
        assert values["db.url"] == "sqlite://"
        assert data["policy"] == "collect-all"

    def test_binds_instance(self, cli_runner: CliRunner, sample_module: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SAMPLE_NAME", "svc")
        result = cli_runner.invoke(cli, ["--json", "bind", f"{sample_module}:settings"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["record"] == "Settings"

    def test_errors_exit_1(self, cli_runner: CliRunner, sample_module: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SAMPLE_DB_POOL", "500")
        result = cli_runner.invoke(cli, ["--json", "bind", f"{sample_module}:Settings"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert [e["code"] for e in data["errors"]] == ["MISSING_REQUIRED", "OUT_OF_RANGE"]

    def test_fail_fast_flag(self, cli_runner: CliRunner, sample_module: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SAMPLE_DB_POOL", "500")
        result = cli_runner.invoke(cli, ["--json", "--fail-fast", "bind", f"{sample_module}:Settings"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["policy"] == "fail-fast"
        assert len(data["errors"]) == 1

    def test_non_record_target(self, cli_runner: CliRunner, sample_module: str) -> None:
        result = cli_runner.invoke(cli, ["bind", f"{sample_module}:not_a_record"])
        assert result.exit_code == 1
        assert "dataclass or pydantic model" in result.output

    def test_missing_attribute(self, cli_runner: CliRunner, sample_module: str) -> None:
        result = cli_runner.invoke(cli, ["bind", f"{sample_module}:Nope"])
        assert result.exit_code == 1
        assert "no attribute" in result.output

    def test_missing_module(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bind", "envtag_does_not_exist:Settings"])
        assert result.exit_code == 1
        assert "Cannot import" in result.output

    def test_bad_target_syntax(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bind", "no_colon"])
        assert result.exit_code == 2
        assert "MODULE:ATTR" in result.output

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["bind", "--examples"])
        assert result.exit_code == 0
        assert "envtag bind myapp.config:Settings" in result.output
