import pytest

from types import SimpleNamespace

from drawbot.util import (
    bool_env,
    build_db_url,
    guild_name,
    int_env,
    rows_from_tag,
    split_csv,
    user_name,
)

@pytest.mark.parametrize("tag,expected", [
    ("INSERT 0 1", 1),
    ("INSERT 0 0", 0),
    ("UPDATE 5", 5),
    ("bogus", 0),
    ("", 0),
])
def test_rows_from_tag(tag, expected):
    assert rows_from_tag(tag) == expected


def test_user_name_display_preferred():
    obj = SimpleNamespace(display_name="Tester", id=42)
    assert user_name(obj) == "Tester"


def test_user_name_falls_back_to_id():
    assert user_name(SimpleNamespace(display_name=None, name=None, id=42)) == "42"
    assert user_name(None) == "unknown"


def test_guild_name_from_name():
    guild = SimpleNamespace(name="Art Club")
    assert guild_name(guild) == "Art Club"


def test_bool_env_true(monkeypatch):
    monkeypatch.setenv("BOOL_ENV_TRUE_TEST", "TrUe")
    assert bool_env("BOOL_ENV_TRUE_TEST") is True


def test_bool_env_invalid_logs(monkeypatch, caplog):
    monkeypatch.setenv("BOOL_ENV_INVALID_TEST", "maybe")
    with caplog.at_level("WARNING"):
        assert bool_env("BOOL_ENV_INVALID_TEST", default=False) is False
    assert "Invalid boolean for BOOL_ENV_INVALID_TEST" in caplog.text


def test_int_env_invalid_uses_default(monkeypatch, caplog):
    monkeypatch.setenv("INT_ENV_TEST", "soon")
    with caplog.at_level("WARNING"):
        assert int_env("INT_ENV_TEST", 120) == 120
    assert "Invalid integer for INT_ENV_TEST" in caplog.text


def test_split_csv():
    assert split_csv(" Mods, ,123 ,") == ["Mods", "123"]
    assert split_csv(None) == []


def test_build_db_url_from_parts(monkeypatch):
    monkeypatch.delenv("PG_DSN", raising=False)
    monkeypatch.setenv("DATABASE_URL", "")
    monkeypatch.setenv("PG_USER", "u")
    monkeypatch.setenv("PG_PASSWORD", "p")
    monkeypatch.setenv("PG_DB", "draw")
    monkeypatch.delenv("PG_HOST", raising=False)
    assert build_db_url() == "postgresql://u:p@db:5432/draw"


def test_build_db_url_missing(monkeypatch):
    monkeypatch.delenv("PG_DSN", raising=False)
    monkeypatch.setenv("DATABASE_URL", "")
    assert build_db_url() is None
