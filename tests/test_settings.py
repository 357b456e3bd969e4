import logging

import pytest

from assessment_engine.errors import ConfigError
from assessment_engine.logs import CONSOLE_FORMAT, setup_logging
from assessment_engine.settings import DEFAULT_SETTINGS, SETTINGS_ENV_VAR, load_settings


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    assert load_settings(str(tmp_path / "absent.yaml")) == DEFAULT_SETTINGS
    assert load_settings() == DEFAULT_SETTINGS


def test_partial_file_is_merged_with_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("critical_gap_threshold: 4\nseconds_per_question: 60.0\n")
    settings = load_settings(str(path))
    assert settings.critical_gap_threshold == 4
    assert settings.seconds_per_question == 60
    assert isinstance(settings.seconds_per_question, int)
    assert settings.critical_escalation_threshold == DEFAULT_SETTINGS.critical_escalation_threshold


def test_env_var_names_default_file(tmp_path, monkeypatch):
    path = tmp_path / "engine.yaml"
    path.write_text("low_completeness_threshold: 30\n")
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))
    assert load_settings().low_completeness_threshold == 30


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_settings(str(path)) == DEFAULT_SETTINGS


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "settings.yaml"
    path.write_text("colour: blue\n")
    with caplog.at_level(logging.WARNING, logger="assessment_engine.settings"):
        assert load_settings(str(path)) == DEFAULT_SETTINGS
    assert "colour" in caplog.text


@pytest.mark.parametrize("body", ["critical_gap_threshold: three\n", "critical_gap_threshold: true\n", "- 1\n- 2\n", "a: [1\n"])
def test_bad_settings_raise_config_error(tmp_path, body):
    path = tmp_path / "settings.yaml"
    path.write_text(body)
    with pytest.raises(ConfigError):
        load_settings(str(path))


def test_setup_logging_installs_one_console_handler():
    root = setup_logging(logging.DEBUG)
    try:
        setup_logging(logging.DEBUG)
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == CONSOLE_FORMAT
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        root.setLevel(logging.WARNING)
