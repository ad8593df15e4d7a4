from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
import yaml
from conftest import FIXTURES, FakeResponse, FakeSession
from rich.console import Console
from typer.testing import CliRunner

from pagertally.cli import main
from pagertally.cli.main import app
from pagertally.pagerduty import PagerDutyClient

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    payload = yaml.safe_load((FIXTURES / "config.yaml").read_text(encoding="utf-8"))
    payload["ical_url"] = str(FIXTURES / "holidays.ics")
    path = tmp_path / "pagertally.yaml"
    path.write_text(yaml.safe_dump(payload), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    monkeypatch.setattr(main, "console", Console(width=200))


@pytest.fixture
def fake_pagerduty(monkeypatch, schedule_payload) -> FakeSession:
    session = FakeSession({"/schedules/PSCHED1": FakeResponse(schedule_payload)})
    monkeypatch.setattr(main, "PagerDutyClient", lambda token: PagerDutyClient(token, session=session))
    return session


def test_report_prints_and_writes_csv(config_file, fake_pagerduty, tmp_path):
    out_dir = tmp_path / "csv"
    result = runner.invoke(
        app,
        [
            "report",
            "--config",
            str(config_file),
            "--token",
            "secret",
            "--month",
            "December",
            "--year",
            "2018",
            "--csv-dir",
            str(out_dir),
            "--workers",
            "2",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Schedule: Platform Team" in result.output
    assert "69h 30m" in result.output
    assert "103h" in result.output
    assert fake_pagerduty.calls[0][1]["since"] == "2018-12-01T00:00:00+13:00"

    frame = pd.read_csv(out_dir / "platform_team.csv")
    assert frame["User"].tolist() == ["User1", "User2"]
    assert frame["Total"].tolist() == ["69h 30m", "103h"]
    assert frame["StatDays"].tolist() == ["-", "7h"]
    assert frame["CompanyDays"].tolist() == ["-", "24h"]


def test_report_with_shift_details(config_file, fake_pagerduty):
    result = runner.invoke(
        app,
        ["report", "-c", str(config_file), "--token", "secret", "-m", "12", "-y", "2018", "--details"],
    )
    assert result.exit_code == 0, result.output
    assert "User2's shifts" in result.output
    assert "Company days" in result.output


def test_report_requires_token(config_file, monkeypatch):
    monkeypatch.delenv("PAGERDUTY_TOKEN", raising=False)
    result = runner.invoke(app, ["report", "--config", str(config_file), "-m", "12", "-y", "2018"])
    assert result.exit_code == 1
    assert "token is required" in result.output


def test_report_requires_schedules(tmp_path):
    config = tmp_path / "empty.yaml"
    config.write_text("timezone: Pacific/Auckland\n", encoding="utf-8")
    result = runner.invoke(app, ["report", "--config", str(config), "--token", "secret"])
    assert result.exit_code == 1
    assert "No schedules" in result.output


def test_report_rejects_invalid_config(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("timezone: Not/AZone\n", encoding="utf-8")
    result = runner.invoke(app, ["report", "--config", str(config), "--token", "secret"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_report_rejects_unknown_month(config_file):
    result = runner.invoke(app, ["report", "--config", str(config_file), "--token", "secret", "-m", "Smarch"])
    assert result.exit_code == 1
    assert "unable to parse month" in result.output


def test_report_surfaces_pagerduty_errors(config_file, monkeypatch):
    session = FakeSession({})
    monkeypatch.setattr(main, "PagerDutyClient", lambda token: PagerDutyClient(token, session=session))
    result = runner.invoke(app, ["report", "--config", str(config_file), "--token", "secret", "-m", "12", "-y", "2018"])
    assert result.exit_code == 1
    assert "Data source error" in result.output


def test_sources_lists_category_spans(config_file):
    result = runner.invoke(app, ["sources", "--config", str(config_file), "--month", "January", "--year", "2019"])
    assert result.exit_code == 0, result.output
    for title in ("Company days", "Stat", "Weekend", "Afterhours"):
        assert title in result.output
    assert "Fri 2019-01-04 17:30" in result.output
