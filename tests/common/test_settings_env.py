from __future__ import annotations

import logging

import pytest

from common import settings
from common.env import env_bool, env_float, env_int, env_str
from common.logging import setup_default_logging


def test_env_helpers_defaults_and_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PFR_TEST_X", raising=False)
    assert env_int("PFR_TEST_X", 3) == 3
    assert env_float("PFR_TEST_X", 0.5) == 0.5
    assert env_bool("PFR_TEST_X", True) is True
    assert env_str("PFR_TEST_X", "a") == "a"

    monkeypatch.setenv("PFR_TEST_X", "-4")
    assert env_int("PFR_TEST_X", 3, min_value=0) == 0
    assert env_float("PFR_TEST_X", 0.5) == -4.0
    assert env_bool("PFR_TEST_X", False) is True

    monkeypatch.setenv("PFR_TEST_X", "off")
    assert env_bool("PFR_TEST_X", True) is False
    assert env_int("PFR_TEST_X", 7) == 7

    monkeypatch.setenv("PFR_TEST_X", "nan")
    assert env_float("PFR_TEST_X", 1e-3) == 1e-3

    monkeypatch.setenv("PFR_TEST_X", " debug ")
    assert env_str("PFR_TEST_X", "INFO", choices={"debug"}) == "debug"


def test_settings_defaults() -> None:
    s = settings.get()
    assert s.SINGULAR_EPS == 1e-12
    assert s.USE_NUMBA is True
    assert s.VALIDATE_AFFINE is True
    assert s.LOG_LEVEL == "INFO"


def test_settings_reload_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PFR_SINGULAR_EPS", "-1")
    monkeypatch.setenv("PFR_USE_NUMBA", "0")
    monkeypatch.setenv("PFR_VALIDATE_AFFINE", "false")
    monkeypatch.setenv("PFR_LOG_LEVEL", "verbose")
    settings.reload_from_env()
    s = settings.get()
    assert s.SINGULAR_EPS == 0.0  # 下限丸め
    assert s.USE_NUMBA is False
    assert s.VALIDATE_AFFINE is False
    assert s.LOG_LEVEL == "INFO"  # 不正値は既定

    monkeypatch.setenv("PFR_LOG_LEVEL", "debug")
    settings.reload_from_env()
    assert settings.get().LOG_LEVEL == "DEBUG"


def test_setup_default_logging_is_noop_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    handler = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [handler])
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    setup_default_logging("DEBUG")
    assert calls == []


def test_setup_default_logging_uses_settings_level(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    monkeypatch.setenv("PFR_LOG_LEVEL", "WARNING")
    settings.reload_from_env()
    setup_default_logging()
    assert calls and calls[0]["level"] == logging.WARNING
