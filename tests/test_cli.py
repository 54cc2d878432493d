"""Tests for the command line entry point (no network involved)."""

import pytest

from jasper_defaults import cli
from jasper_defaults.pipeline import PipelineResult


@pytest.fixture(autouse=True)
def _quiet_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "error")


def test_missing_config_file(tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.json")]) == 1
    assert "Could not open file" in capsys.readouterr().err


def test_malformed_config_file(tmp_path, capsys):
    p = tmp_path / "bad.json"
    p.write_text("not json", encoding="utf-8")
    assert cli.main([str(p)]) == 1
    assert "Could not parse JSON" in capsys.readouterr().err


def test_default_config_from_env(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("JASPER_DEFAULTS_CONFIG", str(tmp_path / "absent.json"))
    assert cli.main([]) == 1
    assert "absent.json" in capsys.readouterr().err


def test_success_prints_summary(settings, monkeypatch, capsys):
    async def fake_set_defaults(config, settings):
        return PipelineResult(ok=True, message="Input Values have been set in report /r and in view /v")

    monkeypatch.setattr(cli, "set_defaults", fake_set_defaults)
    assert cli.main([settings.default_config_path]) == 0
    assert capsys.readouterr().out.strip() == "Input Values have been set in report /r and in view /v"


def test_failure_prints_error(settings, monkeypatch, capsys):
    async def fake_set_defaults(config, settings):
        return PipelineResult(ok=False, message="FetchDomain failed for report /r (view /v): boom")

    monkeypatch.setattr(cli, "set_defaults", fake_set_defaults)
    assert cli.main([settings.default_config_path]) == 1
    captured = capsys.readouterr()
    assert "boom" in captured.err
    assert captured.out == ""
