"""Tests for the semconv-checker CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from google.protobuf import json_format

from semconv_checker.cli import main
from semconv_checker.types import ExitCode

from otlp_factory import (
    CATALOG_YAML,
    RULES_YAML,
    gauge_metric,
    histogram_metric,
    request,
    resource,
    scope,
)

SERVICE = ("service.name", "service.version")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def files(tmp_path: Path):
    rules = tmp_path / "rules.yaml"
    rules.write_text(RULES_YAML)
    catalog = tmp_path / "catalog.yaml"
    catalog.write_text(CATALOG_YAML)
    return tmp_path, ["--config", str(rules), "--catalog", str(catalog)]


def _write_request(path: Path, export_request) -> str:
    path.write_text(json_format.MessageToJson(export_request))
    return str(path)


class TestCheck:
    def test_violation_exit_code(self, runner, files):
        tmp_path, options = files
        payload = _write_request(
            tmp_path / "bad.json",
            request(resource(SERVICE, scope("app", gauge_metric("http.x", [])))),
        )
        result = runner.invoke(main, ["check", payload, *options])
        assert result.exit_code == ExitCode.VIOLATION, result.output
        assert "FAILED: 2 missing attribute(s) in scopes [app]" in result.output

    def test_clean_exit_code(self, runner, files):
        tmp_path, options = files
        payload = _write_request(
            tmp_path / "good.json",
            request(
                resource(
                    SERVICE,
                    scope("app", gauge_metric("http.x", ["http.method", "http.status_code"])),
                    scope("hist", histogram_metric("http.y", [])),
                )
            ),
        )
        result = runner.invoke(main, ["check", payload, *options])
        assert result.exit_code == ExitCode.CLEAN, result.output

    def test_any_bad_file_fails_the_run(self, runner, files):
        tmp_path, options = files
        good = _write_request(tmp_path / "good.json", request())
        bad = _write_request(
            tmp_path / "bad.json",
            request(resource(SERVICE, scope("app", gauge_metric("http.x", ["http.method"])))),
        )
        result = runner.invoke(main, ["check", good, bad, *options])
        assert result.exit_code == ExitCode.VIOLATION

    def test_undecodable_payload(self, runner, files):
        tmp_path, options = files
        payload = tmp_path / "junk.json"
        payload.write_text("{{{")
        result = runner.invoke(main, ["check", str(payload), *options])
        assert result.exit_code == 1
        assert "not an OTLP/JSON metrics request" in result.output

    def test_empty_payload_is_an_error(self, runner, files):
        tmp_path, options = files
        payload = tmp_path / "empty.json"
        payload.write_text("")
        result = runner.invoke(main, ["check", str(payload), *options])
        assert result.exit_code == 1
        assert "no export requests found" in result.output


class TestValidateConfig:
    def test_prints_resolved_rules(self, runner, files):
        _, options = files
        result = runner.invoke(main, ["validate-config", *options])
        assert result.exit_code == 0, result.output
        assert "Schema version: https://opentelemetry.io/schemas/1.24.0" in result.output
        assert "Resource: requires service.name, service.version" in result.output
        assert "requires: http.method, http.status_code" in result.output
        assert "1 metric rule(s)" in result.output

    def test_unknown_group_fails(self, runner, files):
        tmp_path, options = files
        (tmp_path / "rules.yaml").write_text(
            "metrics:\n  - match: x\n    groups: [does.not.exist]\n"
        )
        result = runner.invoke(main, ["validate-config", *options])
        assert result.exit_code == 1
        assert "does.not.exist" in result.output

    def test_invalid_pattern_fails(self, runner, files):
        tmp_path, options = files
        (tmp_path / "rules.yaml").write_text("metrics:\n  - match: '(['\n")
        result = runner.invoke(main, ["validate-config", *options])
        assert result.exit_code == 1
        assert "invalid match pattern" in result.output

    def test_missing_rules_file(self, runner, tmp_path):
        result = runner.invoke(main, ["validate-config", "--config", str(tmp_path / "none.yaml")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_rules_file_must_be_a_mapping(self, runner, files):
        tmp_path, options = files
        (tmp_path / "rules.yaml").write_text("- match: x\n")
        result = runner.invoke(main, ["validate-config", *options])
        assert result.exit_code == 1
        assert "rules file must be a YAML mapping, got list" in result.output

    def test_config_path_from_environment(self, runner, files, monkeypatch):
        tmp_path, _ = files
        monkeypatch.setenv("SEMCONV_CHECKER_CONFIG_PATH", str(tmp_path / "rules.yaml"))
        monkeypatch.setenv("SEMCONV_CHECKER_CATALOG_PATH", str(tmp_path / "catalog.yaml"))
        result = runner.invoke(main, ["validate-config"])
        assert result.exit_code == 0, result.output


class TestServe:
    def test_one_shot_exit_code_propagates(self, runner, files):
        _, options = files
        with patch("semconv_checker.server.app.serve", return_value=ExitCode.VIOLATION) as run:
            result = runner.invoke(main, ["serve", *options, "--one-shot", "--address", "127.0.0.1:4999"])
        assert result.exit_code == ExitCode.VIOLATION
        _, kwargs = run.call_args
        assert kwargs["one_shot"] is True
        assert run.call_args.args[1] == "127.0.0.1:4999"

    def test_one_shot_from_rules_file(self, runner, files):
        tmp_path, options = files
        (tmp_path / "rules.yaml").write_text(RULES_YAML + "oneShot: true\n")
        with patch("semconv_checker.server.app.serve", return_value=ExitCode.CLEAN) as run:
            result = runner.invoke(main, ["serve", *options])
        assert result.exit_code == 0
        assert run.call_args.kwargs["one_shot"] is True

    def test_service_mode_returns_normally(self, runner, files):
        _, options = files
        with patch("semconv_checker.server.app.serve", return_value=None) as run:
            result = runner.invoke(main, ["serve", *options, "--no-one-shot", "--report-unmatched"])
        assert result.exit_code == 0
        assert run.call_args.kwargs["one_shot"] is False
        assert run.call_args.args[0].report_unmatched is True

    def test_bad_config_never_starts_server(self, runner, files):
        tmp_path, options = files
        (tmp_path / "rules.yaml").write_text("metrics:\n  - match: '(['\n")
        with patch("semconv_checker.server.app.serve") as run:
            result = runner.invoke(main, ["serve", *options])
        assert result.exit_code == 1
        run.assert_not_called()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
