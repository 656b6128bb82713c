"""Unit tests for src/core/config.py"""

import pytest

from src.core.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KRED_DATABASE_URL", raising=False)
    monkeypatch.delenv("KRED_SQL_ECHO", raising=False)
    settings = Settings(_env_file=None)
    assert settings.database_url == "sqlite:///./kred.db"
    assert settings.sql_echo is False


def test_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KRED_DATABASE_URL", "postgresql://kred@localhost/kred")
    monkeypatch.setenv("KRED_SQL_ECHO", "true")
    settings = Settings(_env_file=None)
    assert settings.database_url == "postgresql://kred@localhost/kred"
    assert settings.sql_echo is True
