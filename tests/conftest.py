# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# - Points the user config dir at a throwaway directory BEFORE any imports,
#   so a developer's real ~/.config/lexideck/.env never leaks into tests.
# - Provides an in-memory fake of the dictionary backend (httpx.MockTransport).
# =============================================================================

import json
import os
import tempfile

os.environ["XDG_CONFIG_HOME"] = tempfile.mkdtemp(prefix="lexideck-tests-")
os.environ.setdefault("LEXIDECK_BACKEND_URL", "http://backend.test")

import httpx
import pytest
import pytest_asyncio

from adapters.http_client import DictionaryApiClient
from core.config import AppSettings

BACKEND_URL = "http://backend.test"


class FakeBackend:
    """Minimal stand-in for the REST backend.

    Routes mirror the real endpoints; every request is recorded so tests can
    assert on what was (and was not) sent.
    """

    def __init__(self, words=None):
        self.words = list(words or [])
        self.favorites = []
        self.history = []
        self.details = {}
        self.token = "secret-token"
        self.fail_paths = set()
        self.requests = []

    def entries_payload(self, page, limit):
        start = (page - 1) * limit
        chunk = self.words[start : start + limit]
        total = len(self.words)
        total_pages = max(1, -(-total // limit))
        return {
            "results": [{"fields": {"word": w, "_id": f"id-{w}"}} for w in chunk],
            "totalDocs": total,
            "page": page,
            "totalPages": total_pages,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.fail_paths:
            return httpx.Response(500, json={"message": "boom"})

        if path == "/auth/signin":
            body = json.loads(request.content)
            if body.get("password") != "hunter2":
                return httpx.Response(401, json={"message": "invalid credentials"})
            return httpx.Response(
                200,
                json={
                    "token": self.token,
                    "user": {"id": "u1", "email": body["email"], "name": "Ada"},
                },
            )

        if path == "/dictionary/entries/en" and request.method == "GET":
            page = int(request.url.params["page"])
            limit = int(request.url.params["limit"])
            return httpx.Response(200, json=self.entries_payload(page, limit))

        if path.startswith("/dictionary/entries/en/") and request.method == "PATCH":
            body = json.loads(request.content)
            if path.endswith("/unfavorite"):
                self.favorites = [f for f in self.favorites if f["word"] != body["word"]]
            else:
                self.favorites.append({"word": body["word"], "added": "2024-01-02"})
            return httpx.Response(200, json={})

        if path.startswith("/dictionary/entries/en/"):
            word = path.rsplit("/", 1)[-1]
            detail = self.details.get(word)
            return httpx.Response(200, json={"results": [detail] if detail else []})

        if path == "/user/me/favorites":
            return httpx.Response(
                200,
                json={"results": self.favorites, "totalDocs": len(self.favorites), "page": 1},
            )

        if path == "/user/me/history":
            page = int(request.url.params["page"])
            limit = int(request.url.params["limit"])
            start = (page - 1) * limit
            chunk = self.history[start : start + limit]
            return httpx.Response(
                200,
                json={"results": chunk, "hasNext": start + limit < len(self.history)},
            )

        return httpx.Response(404, json={"message": "not found"})

    def requested(self, path):
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def backend():
    return FakeBackend(words=[f"word{i:02d}" for i in range(14)])


@pytest.fixture
def settings(tmp_path):
    return AppSettings(backend_url=BACKEND_URL, session_path=tmp_path / "auth-storage.json")


@pytest.fixture
def transport(backend):
    return httpx.MockTransport(backend.handler)


@pytest_asyncio.fixture
async def api(settings, transport, backend):
    client = DictionaryApiClient(settings, token=backend.token, transport=transport)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def anonymous_api(settings, transport):
    client = DictionaryApiClient(settings, transport=transport)
    yield client
    await client.aclose()


@pytest.fixture
def sample_detail():
    return {
        "word": "cat",
        "phonetics": [{"text": "/kæt/", "audio": "https://audio.test/cat.mp3"}],
        "meanings": [
            {
                "partOfSpeech": "noun",
                "definitions": [
                    {"definition": "A small domesticated carnivorous mammal.", "example": "The cat purred."},
                    {"definition": "A person."},
                ],
            },
            {"partOfSpeech": "verb", "definitions": []},
        ],
    }
