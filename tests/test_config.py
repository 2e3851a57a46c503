import logging
from datetime import timedelta

import pytest

from httping.config import USAGE, ConfigError, ProbeConfig, Settings, parse_args


def test_parse_args_when_args_are_valid_returns_config():
    config = parse_args(["https://example.com/health", "1s"])
    assert config == ProbeConfig(url="https://example.com/health", frequency=timedelta(seconds=1))


def test_parse_args_accepts_minimum_frequency():
    assert parse_args(["http://localhost:8080", "500ms"]).frequency == timedelta(milliseconds=500)


@pytest.mark.parametrize("args", [[], ["https://example.com"], ["https://example.com", "1s", "x"]])
def test_parse_args_when_arg_count_is_wrong_raises_usage(args):
    with pytest.raises(ConfigError) as excinfo:
        parse_args(args)
    assert str(excinfo.value) == USAGE


@pytest.mark.parametrize(
    "url",
    [
        "http://[::1",
        "http://example.com:port",
        "http://exa mple.com",
        "http://example.com/%zz",
        "http://example.com/50%",
        "http://example.com/\x7f",
        "http://example.com/\x00",
        "http://example.com/\tpath",
    ],
)
def test_parse_args_when_url_is_malformed_raises(url):
    with pytest.raises(ConfigError, match="is not a valid url"):
        parse_args([url, "1s"])


def test_parse_args_when_scheme_is_missing_raises():
    with pytest.raises(ConfigError) as excinfo:
        parse_args(["example.com", "1s"])
    assert str(excinfo.value) == "protocol scheme required"


def test_parse_args_when_duration_is_malformed_raises():
    with pytest.raises(ConfigError) as excinfo:
        parse_args(["https://example.com", "soon"])
    assert str(excinfo.value) == "soon is not a valid duration"


@pytest.mark.parametrize("frequency", ["3000000h", "100000000000h"])
def test_parse_args_when_frequency_is_out_of_range_raises(frequency):
    with pytest.raises(ConfigError) as excinfo:
        parse_args(["https://example.com", frequency])
    assert str(excinfo.value) == f"{frequency} is not a valid duration"


def test_parse_args_accepts_escaped_url():
    config = parse_args(["https://example.com/a%20b?q=%2F", "1s"])
    assert config.url == "https://example.com/a%20b?q=%2F"


def test_parse_args_when_frequency_below_minimum_raises():
    with pytest.raises(ConfigError) as excinfo:
        parse_args(["https://example.com", "100ms"])
    assert str(excinfo.value) == "100ms is below the minimum frequency of 500ms"


def test_settings_when_env_is_set_reads_log_options(monkeypatch):
    monkeypatch.setenv("HTTPING_LOG_LEVEL", "debug")
    monkeypatch.setenv("HTTPING_LOG_FILE", "/tmp/httping.log")
    settings = Settings()
    assert settings.level == logging.DEBUG
    assert settings.log_file == "/tmp/httping.log"


def test_settings_when_env_is_empty_uses_defaults(monkeypatch):
    monkeypatch.delenv("HTTPING_LOG_LEVEL", raising=False)
    monkeypatch.delenv("HTTPING_LOG_FILE", raising=False)
    settings = Settings()
    assert settings.level == logging.INFO
    assert settings.log_file is None


def test_settings_when_log_level_is_unknown_raises(monkeypatch):
    monkeypatch.setenv("HTTPING_LOG_LEVEL", "chatty")
    with pytest.raises(ConfigError, match="CHATTY is not a valid log level"):
        Settings().level
