import json

import pytest
from typer.testing import CliRunner

from posture_judge.cli import app
from posture_judge.config import Config

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_log_level(monkeypatch):
    monkeypatch.setattr(Config, "LOG_LEVEL", "WARNING")


def test_replay_prints_verdicts(recording):
    result = runner.invoke(app, ["replay", str(recording)])
    assert result.exit_code == 0, result.output
    assert "Per-frame verdicts" in result.output
    assert "CLOSE" in result.output
    assert "Overall: CORRECT" in result.output


def test_replay_without_tracked_skeletons(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"frames": [{"skeletons": []}]}), encoding="utf-8")
    result = runner.invoke(app, ["replay", str(path)])
    assert result.exit_code == 0
    assert "No tracked skeleton" in result.output


def test_missing_recording_exits_with_error(tmp_path):
    result = runner.invoke(app, ["replay", str(tmp_path / "missing.json")])
    assert result.exit_code == 1
    assert "Not ready" in result.output


def test_malformed_recording_exits_with_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{oops", encoding="utf-8")
    result = runner.invoke(app, ["replay", str(path)])
    assert result.exit_code == 1
    assert "Analysis failed" in result.output


def test_bad_log_level_is_a_configuration_error(recording):
    result = runner.invoke(app, ["--log-level", "LOUD", "replay", str(recording)])
    assert result.exit_code == 2
    assert "Configuration Error" in result.output


def test_wrong_typed_recording_exits_with_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"frames": [{"skeletons": [{"joints": {"Head": None}}]}]}), encoding="utf-8")
    result = runner.invoke(app, ["replay", str(path)])
    assert result.exit_code == 1
    assert "Analysis failed" in result.output


def test_missing_recording_writes_no_video(tmp_path):
    out = tmp_path / "overlay.mp4"
    result = runner.invoke(app, ["replay", str(tmp_path / "missing.json"), "--output", str(out)])
    assert result.exit_code == 1
    assert not out.exists()
