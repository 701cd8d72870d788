"""Tests for the persisted session token store."""

import json

from core.session import SessionStore


def test_new_store_is_signed_out(tmp_path):
    store = SessionStore(tmp_path / "auth-storage.json")

    assert store.token is None
    assert store.is_authenticated is False


def test_token_survives_reload(tmp_path):
    path = tmp_path / "nested" / "auth-storage.json"
    SessionStore(path).set_token("abc")

    reloaded = SessionStore(path)

    assert reloaded.token == "abc"
    assert json.loads(path.read_text(encoding="utf-8")) == {"token": "abc"}


def test_clear_token_persists(tmp_path):
    path = tmp_path / "auth-storage.json"
    store = SessionStore(path)
    store.set_token("abc")

    store.clear_token()

    assert store.token is None
    assert SessionStore(path).token is None


def test_unreadable_file_means_signed_out(tmp_path):
    path = tmp_path / "auth-storage.json"
    path.write_text("{not json", encoding="utf-8")

    assert SessionStore(path).token is None


def test_from_settings_uses_configured_path(settings):
    store = SessionStore.from_settings(settings)

    assert store.path == settings.session_path
