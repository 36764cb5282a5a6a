from dataclasses import fields

import pytest

from rehearsal_coach.config import BASELINE_SESSION_COUNT, COACH_TONE, Config, get_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("COACH_TONE", "BASELINE_SESSIONS", "TRANSCRIPTION_ENABLED", "LOG_FILE", "LOG_LEVEL"):
        monkeypatch.delenv(f"REHEARSAL_COACH_{name}", raising=False)


def test_defaults():
    config = get_config()
    assert config.coach_tone == COACH_TONE
    assert config.baseline_session_count == BASELINE_SESSION_COUNT
    assert config.transcription_enabled is True
    assert config.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REHEARSAL_COACH_COACH_TONE", " Executive ")
    monkeypatch.setenv("REHEARSAL_COACH_BASELINE_SESSIONS", "3")
    monkeypatch.setenv("REHEARSAL_COACH_TRANSCRIPTION_ENABLED", "off")
    monkeypatch.setenv("REHEARSAL_COACH_LOG_LEVEL", "debug")

    config = get_config()

    assert config.coach_tone == "executive"
    assert config.baseline_session_count == 3
    assert config.transcription_enabled is False
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("name, value", [
    ("REHEARSAL_COACH_COACH_TONE", "harsh"),
    ("REHEARSAL_COACH_BASELINE_SESSIONS", "five"),
    ("REHEARSAL_COACH_BASELINE_SESSIONS", "0"),
])
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        get_config()


def test_config_only_carries_settings_the_cli_reads():
    assert [f.name for f in fields(Config)] == [
        "coach_tone", "transcription_enabled", "baseline_session_count", "log_file", "log_level",
    ]
