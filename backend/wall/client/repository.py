import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

# Durable keys, shared with the browser client's storage layout
TOKEN_KEY = "jwt_token"
USER_KEY = "user"


@dataclass
class StoredSession:
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None


class SessionRepository(Protocol):
    def load(self) -> StoredSession: ...

    def save(self, session: StoredSession) -> None: ...

    def clear(self) -> None: ...


class InMemorySessionRepository:
    """Keeps the two entries in a dict; nothing survives the process"""

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self.entries: Dict[str, str] = dict(entries or {})

    def load(self) -> StoredSession:
        return _decode(self.entries)

    def save(self, session: StoredSession) -> None:
        self.entries = _encode(session)

    def clear(self) -> None:
        self.entries.pop(TOKEN_KEY, None)
        self.entries.pop(USER_KEY, None)


class FileSessionRepository:
    """Persists the token and the serialized user snapshot in a small JSON file"""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            entries = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Could not read session file {self.path}: {e}")
            return {}
        return entries if isinstance(entries, dict) else {}

    def load(self) -> StoredSession:
        return _decode(self._read())

    def save(self, session: StoredSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(_encode(session)), encoding="utf-8")

    def clear(self) -> None:
        # Both entries live in the one file
        if self.path.exists():
            self.path.unlink()


def _encode(session: StoredSession) -> Dict[str, str]:
    entries = {}
    if session.token:
        entries[TOKEN_KEY] = session.token
    if session.user is not None:
        entries[USER_KEY] = json.dumps(session.user)
    return entries


def _decode(entries: Dict[str, str]) -> StoredSession:
    user = None
    user_json = entries.get(USER_KEY)
    if user_json:
        try:
            user = json.loads(user_json)
        except ValueError as e:
            # A damaged snapshot is dropped; the token alone still counts
            logger.error(f"Could not load cached user: {e}")
    return StoredSession(token=entries.get(TOKEN_KEY) or None, user=user)
