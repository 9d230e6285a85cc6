"""
Configuration loading tests.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pageauditor.app.config import AuditorConfig


def test_defaults():
    config = AuditorConfig()

    assert config.ENABLE_WCAG is True
    assert config.WCAG_LEVEL_AAA is False
    assert config.NAVIGATION_WAIT_UNTIL == "networkidle"
    assert config.CONCURRENCY == 2
    assert config.LOG_LEVEL == "INFO"


def test_from_env(monkeypatch):
    monkeypatch.setenv("PAGEAUDITOR_ENABLE_MOBILE", "false")
    monkeypatch.setenv("PAGEAUDITOR_WCAG_LEVEL_AAA", "yes")
    monkeypatch.setenv("PAGEAUDITOR_CONCURRENCY", "4")
    monkeypatch.setenv("PAGEAUDITOR_NAVIGATION_WAIT_UNTIL", "load")
    monkeypatch.setenv("PAGEAUDITOR_LOG_LEVEL", "debug")

    config = AuditorConfig.from_env()

    assert config.ENABLE_MOBILE is False
    assert config.WCAG_LEVEL_AAA is True
    assert config.CONCURRENCY == 4
    assert config.NAVIGATION_WAIT_UNTIL == "load"
    assert config.LOG_LEVEL == "DEBUG"


def test_config_is_frozen():
    config = AuditorConfig()
    with pytest.raises(ValidationError):
        config.CONCURRENCY = 10


@pytest.mark.parametrize(
    "overrides",
    [
        {"NAVIGATION_WAIT_UNTIL": "forever"},
        {"CONCURRENCY": 0},
        {"LOG_LEVEL": "LOUD"},
        {"ENABLE_WCAG": False, "WCAG_SCREENSHOTS": True},
    ],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        AuditorConfig(**overrides)
