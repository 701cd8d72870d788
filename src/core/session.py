"""Session token store.

A single mutable slot holding the authentication token, persisted as JSON
(`{"token": ...}`) so it survives restarts. There is no refresh or expiry
handling: a token stays until it is cleared or replaced.

The store is not a global. Callers read `store.token` and pass it explicitly
to `DictionaryApiClient(token=...)`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from core.config import AppSettings

logger = logging.getLogger(__name__)


class SessionStore:
    """Token slot backed by a JSON file.

    Why it exists:
    - Commands run as separate processes, so the token signin obtains has to
      reach the next `lexideck favorites` through the filesystem.

    Note:
    - A missing or unreadable file loads as signed out; it is only rewritten
      on the next `set_token` / `clear_token`.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._token: str | None = None
        self._load()

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> "SessionStore":
        """Store at `settings.session_path`, or `auth-storage.json` in the user config dir."""

        settings = settings or AppSettings()
        return cls(settings.resolved_session_path())

    @property
    def path(self) -> Path:
        return self._path

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str | None) -> None:
        """Replace the token and persist it at once (empty means signed out)."""

        self._token = token or None
        self._save()

    def clear_token(self) -> None:
        self.set_token(None)

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            # An unreadable file behaves like a signed-out session.
            logger.warning("Ignoring unreadable session file %s: %s", self._path, exc)
            return
        token = data.get("token") if isinstance(data, dict) else None
        self._token = token if isinstance(token, str) and token else None

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"token": self._token}
        self._path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
