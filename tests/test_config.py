"""Tests for engine configuration."""

import pytest

from paramkit.config import (
    ParamkitConfig,
    configure,
    get_config,
    parse_bool,
    reset_config,
)


def test_defaults():
    config = get_config()
    assert config.include_cause is True
    assert config.log_failures is True


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PARAMKIT_INCLUDE_CAUSE", "off")
    monkeypatch.setenv("PARAMKIT_LOG_FAILURES", "No")
    config = ParamkitConfig.load()
    assert config.include_cause is False
    assert config.log_failures is False


def test_invalid_env_value_ignored(monkeypatch, caplog):
    monkeypatch.setenv("PARAMKIT_INCLUDE_CAUSE", "sometimes")
    with caplog.at_level("WARNING"):
        config = ParamkitConfig.load()
    assert config.include_cause is True
    assert "PARAMKIT_INCLUDE_CAUSE" in caplog.text


def test_configure_and_reset():
    custom = ParamkitConfig(include_cause=False)
    configure(custom)
    assert get_config() is custom
    reset_config()
    assert get_config() is not custom
    assert get_config().include_cause is True


def test_get_config_is_cached():
    assert get_config() is get_config()


@pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
def test_parse_bool_true(raw):
    assert parse_bool(raw) is True


@pytest.mark.parametrize("raw", ["0", "false", "No", "OFF"])
def test_parse_bool_false(raw):
    assert parse_bool(raw) is False


def test_parse_bool_invalid():
    with pytest.raises(ValueError):
        parse_bool("maybe")


def test_to_dict():
    assert ParamkitConfig().to_dict() == {"include_cause": True, "log_failures": True}
