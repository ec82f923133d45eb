"""Bounded in-memory session store."""

import threading
import uuid
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from loguru import logger

from docchat.config.settings import settings
from docchat.data.errors import SessionNotFoundError
from docchat.data.models import Placeholder, Session


class SessionStore:
    """Sessions keyed by id, with idle expiry and LRU eviction.

    Entries idle for longer than ``ttl`` are dropped on access. When the store
    is full, the least recently used session makes room for a new one.
    """

    def __init__(
        self,
        max_sessions: Optional[int] = None,
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.max_sessions = max_sessions if max_sessions is not None else settings.session.max_sessions
        self.ttl = ttl if ttl is not None else timedelta(seconds=settings.session.ttl_seconds)
        self.clock = clock
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            return session is not None and not self._is_expired(session)

    def create(self, package: bytes, placeholders: List[Placeholder], filename: str = "") -> Session:
        """Register a new session and return it."""
        now = self.clock()
        session = Session(
            session_id=str(uuid.uuid4()),
            package=package,
            placeholders=placeholders,
            filename=filename,
            created_at=now,
            last_accessed=now,
        )
        with self._lock:
            self.purge_expired()
            while self._sessions and len(self._sessions) >= self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info(f"Session store full, evicted {evicted_id}")
            self._sessions[session.session_id] = session
        logger.info(f"Session created: {session.session_id}")
        return session

    def get(self, session_id: Optional[str]) -> Session:
        """Look up a live session and mark it as recently used.

        Raises:
            SessionNotFoundError: unknown or expired id
        """
        with self._lock:
            session = self._sessions.get(session_id) if session_id else None
            if session is None:
                raise SessionNotFoundError("Invalid session")
            if self._is_expired(session):
                del self._sessions[session_id]
                logger.info(f"Session expired: {session_id}")
                raise SessionNotFoundError("Session expired")
            session.last_accessed = self.clock()
            self._sessions.move_to_end(session_id)
            return session

    def purge_expired(self) -> int:
        """Drop expired sessions, return how many were removed."""
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if self._is_expired(s)]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info(f"Purged {len(expired)} expired sessions")
        return len(expired)

    def _is_expired(self, session: Session) -> bool:
        return self.clock() - session.last_accessed > self.ttl
