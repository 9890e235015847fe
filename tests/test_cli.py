import json

import pytest
from typer.testing import CliRunner

from cli.main import app
from core.config import get_settings

runner = CliRunner()

QUOTES = """symbol,timestamp,bid,ask
EURUSD,2024-01-02T00:00:00Z,100,100
EURUSD,2024-01-02T00:00:01Z,99,99
EURUSD,2024-01-02T00:00:02Z,97,97
EURUSD,2024-01-02T00:00:03Z,98.5,99
"""

ABSOLUTE_ARGS = [
    "--absolute",
    "--threshold-up", "1",
    "--threshold-down", "1",
    "--os-size-up", "2",
    "--os-size-down", "2",
    "--log-level", "WARNING",
]


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def quotes_file(tmp_path):
    path = tmp_path / "quotes.csv"
    path.write_text(QUOTES, encoding="utf-8")
    return path


def test_replay_json_output(quotes_file):
    result = runner.invoke(app, ["replay", str(quotes_file), "--json", *ABSOLUTE_ARGS])
    assert result.exit_code == 0, result.output

    lines = [json.loads(line) for line in result.stdout.splitlines() if line.startswith("{")]
    events, summary = lines[:-1], lines[-1]
    assert [e["code"] for e in events] == [-2, 1]
    assert events[1]["kind"] == "DC"
    assert events[1]["symbol"] == "EURUSD"
    assert summary == {"summary": {"quotes": 4, "events": 2, "counts": {"-2": 1, "1": 1}}}


def test_replay_text_output(quotes_file):
    result = runner.invoke(app, ["replay", str(quotes_file), *ABSOLUTE_ARGS])
    assert result.exit_code == 0, result.output
    assert "EURUSD -2 OS down" in result.stdout
    assert "EURUSD +1 DC up" in result.stdout
    assert "4 quotes, 2 events" in result.stdout


def test_replay_rejects_bad_mode(quotes_file):
    result = runner.invoke(app, ["replay", str(quotes_file), "--initial-mode", "3"])
    assert result.exit_code == 2


def test_replay_aborts_on_invalid_price(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("symbol,timestamp,bid,ask\nEURUSD,2024-01-02T00:00:00Z,0,1\n", encoding="utf-8")
    result = runner.invoke(app, ["replay", str(path), "--relative", "--log-level", "WARNING"])
    assert result.exit_code == 1


def test_show_config(monkeypatch):
    monkeypatch.setenv("IEVENTS_THRESHOLD_DOWN", "0.03")
    result = runner.invoke(app, ["show-config"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["threshold_down"] == 0.03
    assert payload["initial_mode"] == 1
