from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Session:
    token: str
    email: str


class SessionHolder:
    """
    Keeps the current Session in a small JSON file so it survives restarts.

    The owner creates it on login (save) and drops it on logout (clear).
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._current: Session | None = None

    @property
    def current(self) -> Session | None:
        return self._current

    def load(self) -> Session | None:
        if not self._path.exists():
            self._current = None
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            session = Session(token=str(data["token"]), email=str(data["email"]))
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("ignoring unreadable session file %s", self._path, exc_info=True)
            self._current = None
            return None
        self._current = session
        return session

    def save(self, session: Session) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(asdict(session)), encoding="utf-8")
        self._current = session
        logger.info("session stored for %s", session.email)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        self._current = None
        logger.info("session cleared")
