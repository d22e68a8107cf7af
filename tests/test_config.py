"""Tests for environment-driven settings."""
import logging

import pytest

from config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("QUERY_TIMEOUT_SECONDS", "LOG_LEVEL", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = Settings.from_env()
    assert cfg.query_timeout_seconds == 10.0
    assert cfg.log_level == "INFO"
    assert cfg.cors_origins == ["*"]


def test_valid_values(monkeypatch):
    monkeypatch.setenv("QUERY_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    cfg = Settings.from_env()
    assert cfg.query_timeout_seconds == 2.5
    assert cfg.log_level == "DEBUG"
    assert cfg.cors_origins == ["https://a.example", "https://b.example"]


@pytest.mark.parametrize("raw", ["soon", "0", "-3", "nan"])
def test_bad_timeout_warns_and_falls_back(monkeypatch, caplog, raw):
    monkeypatch.setenv("QUERY_TIMEOUT_SECONDS", raw)
    with caplog.at_level(logging.WARNING, logger="config"):
        cfg = Settings.from_env()
    assert cfg.query_timeout_seconds == 10.0
    assert "QUERY_TIMEOUT_SECONDS" in caplog.text


def test_bad_log_level_warns_and_falls_back(monkeypatch, caplog):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with caplog.at_level(logging.WARNING, logger="config"):
        cfg = Settings.from_env()
    assert cfg.log_level == "INFO"
    assert "LOG_LEVEL" in caplog.text
