"""Tests for the typer CLI, run against the fake backend."""

import pytest
from typer.testing import CliRunner

from adapters.http_client import DictionaryApiClient, build_async_client
from cli import doctor
from cli import main as cli_main
from core.session import SessionStore

runner = CliRunner()


@pytest.fixture
def session_path(tmp_path, monkeypatch):
    path = tmp_path / "auth-storage.json"
    monkeypatch.setenv("LEXIDECK_SESSION_PATH", str(path))
    return path


@pytest.fixture
def cli(monkeypatch, transport, session_path):
    def build_api(settings, *, token):
        return DictionaryApiClient(settings, token=token, transport=transport)

    monkeypatch.setattr(cli_main, "build_api", build_api)
    return cli_main.app


@pytest.fixture
def signed_in(session_path, backend):
    SessionStore(session_path).set_token(backend.token)


def test_parse_browse_command():
    assert cli_main.parse_browse_command("") == ("next", "")
    assert cli_main.parse_browse_command("o  cat ") == ("open", "cat")
    assert cli_main.parse_browse_command("F cat") == ("favorite", "cat")
    assert cli_main.parse_browse_command("t history") == ("tab", "history")
    assert cli_main.parse_browse_command("zzz") == ("unknown", "")


def test_signin_stores_token(cli, session_path):
    result = runner.invoke(cli, ["signin", "--email", "ada@example.com", "--password", "hunter2"])

    assert result.exit_code == 0, result.output
    assert "Signed in as Ada" in result.output
    assert SessionStore(session_path).token == "secret-token"


def test_signin_rejected(cli, session_path):
    result = runner.invoke(cli, ["signin", "--email", "ada@example.com", "--password", "nope"])

    assert result.exit_code == 1
    assert "Authentication failed" in result.output
    assert SessionStore(session_path).token is None


def test_signout_clears_token(cli, session_path, signed_in):
    result = runner.invoke(cli, ["signout"])

    assert result.exit_code == 0
    assert SessionStore(session_path).token is None


def test_words_loads_requested_batches(cli, backend):
    result = runner.invoke(cli, ["words", "--pages", "2"])

    assert result.exit_code == 0, result.output
    assert "word00" in result.output
    assert "word13" in result.output
    assert "No more words" in result.output
    assert backend.requested("/user/me/favorites") == []


def test_words_marks_favorites_when_signed_in(cli, backend, signed_in):
    backend.favorites = [{"word": "word01", "added": "2024-01-01"}]

    result = runner.invoke(cli, ["words"])

    assert result.exit_code == 0, result.output
    assert "★ word01" in result.output


def test_words_error_exits_non_zero(cli, backend):
    backend.fail_paths.add("/dictionary/entries/en")

    result = runner.invoke(cli, ["words"])

    assert result.exit_code == 1
    assert "Could not load words" in result.output


def test_show_prints_detail(cli, backend, sample_detail):
    backend.details["cat"] = sample_detail

    result = runner.invoke(cli, ["show", "cat"])

    assert result.exit_code == 0, result.output
    assert "/kæt/" in result.output
    assert "noun" in result.output
    assert "A small domesticated carnivorous mammal." in result.output


def test_show_unknown_word(cli):
    result = runner.invoke(cli, ["show", "zzz"])

    assert result.exit_code == 1
    assert "Could not load word detail" in result.output


def test_favorites_requires_signin(cli, backend):
    result = runner.invoke(cli, ["favorites"])

    assert result.exit_code == 1
    assert "Not signed in" in result.output
    assert backend.requests == []


def test_favorites_lists_rows(cli, backend, signed_in):
    backend.favorites = [{"word": "cat", "added": "2024-01-01"}]

    result = runner.invoke(cli, ["favorites"])

    assert result.exit_code == 0, result.output
    assert "cat" in result.output
    assert "2024-01-01" in result.output


def test_favorite_and_unfavorite(cli, backend, signed_in):
    assert runner.invoke(cli, ["favorite", "cat"]).exit_code == 0
    assert [f["word"] for f in backend.favorites] == ["cat"]

    result = runner.invoke(cli, ["unfavorite", "cat"])
    assert result.exit_code == 0
    assert "Removed" in result.output
    assert backend.favorites == []


def test_history_lists_rows(cli, backend, signed_in):
    backend.history = [{"word": "cat", "added": "2024-01-03"}]

    result = runner.invoke(cli, ["history"])

    assert result.exit_code == 0, result.output
    assert "cat" in result.output


def test_browse_session(cli, backend, signed_in, sample_detail):
    backend.details["cat"] = sample_detail

    result = runner.invoke(
        cli,
        ["browse"],
        input="n\no cat\nf cat\nt favorites\nt nowhere\nq\n",
    )

    assert result.exit_code == 0, result.output
    assert "word13" in result.output
    assert "/kæt/" in result.output
    assert "added to favorites" in result.output
    assert "Unknown tab" in result.output
    assert [f["word"] for f in backend.favorites] == ["cat"]


def test_browse_stops_on_end_of_input(cli):
    result = runner.invoke(cli, ["browse"], input="")

    assert result.exit_code == 0, result.output
    assert "word00" in result.output


def test_doctor_run(monkeypatch, transport, session_path):
    monkeypatch.setattr(
        doctor,
        "build_async_client",
        lambda settings: build_async_client(settings, transport=transport),
    )

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "HTTP 200" in result.output


def test_doctor_set_backend(monkeypatch, tmp_path):
    monkeypatch.setattr("core.config.get_user_config_dir", lambda: tmp_path)

    result = runner.invoke(cli_main.app, ["doctor", "set-backend", "https://dict.example.com/"])

    assert result.exit_code == 0, result.output
    assert "LEXIDECK_BACKEND_URL=https://dict.example.com" in (tmp_path / ".env").read_text()


def test_doctor_set_backend_rejects_bad_url():
    result = runner.invoke(cli_main.app, ["doctor", "set-backend", "ftp://nope"])

    assert result.exit_code != 0


def test_favorite_word_with_markup_characters(cli, backend, signed_in):
    result = runner.invoke(cli, ["favorite", "[/x]"])

    assert result.exit_code == 0, result.output
    assert "Added [/x]." in result.output
    assert [f["word"] for f in backend.favorites] == ["[/x]"]


def test_browse_echoes_markup_like_input_verbatim(cli, backend, signed_in):
    result = runner.invoke(cli, ["browse"], input="t [/x]\nf [/y]\nq\n")

    assert result.exit_code == 0, result.output
    assert "Unknown tab '[/x]'." in result.output
    assert "[/y] added to favorites" in result.output
    assert [f["word"] for f in backend.favorites] == ["[/y]"]


def test_failure_message_with_markup_characters(cli, backend, signed_in, monkeypatch):
    monkeypatch.setattr(
        cli_main.WordDetailController,
        "load",
        _failing_load,
    )

    result = runner.invoke(cli, ["show", "cat"])

    assert result.exit_code == 1
    assert "backend said [/oops]" in result.output


async def _failing_load(self, word):
    self.error = "backend said [/oops]"
    return None


def test_doctor_run_reports_user_env(monkeypatch, transport, session_path, tmp_path):
    monkeypatch.setattr("core.config.get_user_config_dir", lambda: tmp_path)
    monkeypatch.setattr(
        doctor,
        "build_async_client",
        lambda settings: build_async_client(settings, transport=transport),
    )
    runner.invoke(cli_main.app, ["doctor", "set-backend", "http://backend.test"])

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "User config" in result.output
    assert "variable(s)" in result.output
