import logging

import pytest

from points.config import Settings, configure_logging, load_settings
from points.models import SpendMode


def test_defaults(monkeypatch):
    for name in ("POINTS_SPEND_MODE", "POINTS_LOG_LEVEL", "POINTS_HOST", "POINTS_PORT"):
        monkeypatch.delenv(name, raising=False)

    assert load_settings() == Settings()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("POINTS_SPEND_MODE", "Overwrite")
    monkeypatch.setenv("POINTS_LOG_LEVEL", "debug")
    monkeypatch.setenv("POINTS_PORT", "9000")

    settings = load_settings()

    assert settings.spend_mode == SpendMode.OVERWRITE
    assert settings.log_level == "DEBUG"
    assert settings.port == 9000


def test_unknown_spend_mode(monkeypatch):
    monkeypatch.setenv("POINTS_SPEND_MODE", "fifo")
    with pytest.raises(ValueError):
        load_settings()


def test_configure_logging_sets_level():
    configure_logging("WARNING")
    assert logging.getLogger("points").level == logging.WARNING
    configure_logging("INFO")
