from __future__ import annotations

from pathlib import Path

import pytest

from healthcheck import main as cli
from healthcheck.errors import ConfigNotProvided, ScheduleNotSet


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    # structlog is configured process-wide; keep tests on the default setup.
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


def test_missing_config_flag_prints_usage_and_fails(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 1
    err = capsys.readouterr().err
    assert "SYNOPSIS" in err
    assert "Configuration file not provided" in err


def test_invalid_config_fails_before_scheduling(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    started = []
    monkeypatch.setattr(cli.CheckScheduler, "run_forever", lambda self: started.append(self))

    path = tmp_path / "check.yml"
    path.write_text("schedule: 0\njobs:\n  - endpoint: /ping\n    body: pong\n", encoding="utf-8")

    assert cli.main(["-f", str(path)]) == 1
    assert "config.schedule not set" in capsys.readouterr().err
    assert started == []


def test_unreadable_config_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["-f", str(tmp_path / "missing.yml")]) == 1
    assert "missing.yml" in capsys.readouterr().err


def test_valid_config_starts_scheduler(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    started = []
    monkeypatch.setattr(cli.CheckScheduler, "run_forever", lambda self: started.append(self))

    path = tmp_path / "check.yml"
    path.write_text("schedule: 250\njobs:\n  - endpoint: /ping\n    body: pong\n", encoding="utf-8")

    assert cli.main(["--file", str(path)]) == 0
    assert len(started) == 1
    scheduler = started[0]
    assert scheduler.schedule_ms == 250
    assert scheduler.runner.target_url(scheduler.runner.config.jobs[0]) == "http://localhost:80/ping"


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--version"])
    assert exc_info.value.code == 0
    assert "endpoint-healthcheck" in capsys.readouterr().out


def test_load_checked_config_errors(tmp_path: Path) -> None:
    with pytest.raises(ConfigNotProvided):
        cli.load_checked_config(None)

    path = tmp_path / "check.yml"
    path.write_text("jobs: []\n", encoding="utf-8")
    with pytest.raises(ScheduleNotSet):
        cli.load_checked_config(path)


def test_negative_schedule_fails_with_usage(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    started = []
    monkeypatch.setattr(cli.CheckScheduler, "run_forever", lambda self: started.append(self))

    path = tmp_path / "check.yml"
    path.write_text("schedule: -5\njobs:\n  - endpoint: /ping\n    body: pong\n", encoding="utf-8")

    assert cli.main(["-f", str(path)]) == 1
    err = capsys.readouterr().err
    assert "SYNOPSIS" in err
    assert "got -5" in err
    assert started == []
