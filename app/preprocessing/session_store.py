"""In-memory anonymization state per conversation session.

Each session owns its value -> token map and per-category counters behind
its own lock. The store-level lock only guards the session dictionary, so
different sessions never block each other while preprocessing.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from app.logging.logger import Log


class SessionAnonymizationMap:
    """Anonymization state for one session.

    ``lock`` is re-entrant: a caller may hold it across a whole preprocess
    pass while still using the individual methods below.
    """

    def __init__(self, session_id: str, clock: Callable[[], float] = time.monotonic) -> None:
        self.session_id = session_id
        self.lock = threading.RLock()
        self._clock = clock
        self._tokens: dict[str, str] = {}
        self._counters: dict[str, int] = {}
        self.last_access = clock()

    def touch(self) -> None:
        self.last_access = self._clock()

    def lookup(self, original_value: str) -> str | None:
        with self.lock:
            return self._tokens.get(original_value)

    def record(self, original_value: str, token: str) -> None:
        with self.lock:
            self._tokens[original_value] = token

    def next_sequence(self, category: str) -> int:
        """Return 1, 2, 3, ... for successive calls with the same category."""
        with self.lock:
            value = self._counters.get(category, 0) + 1
            self._counters[category] = value
            return value

    def snapshot(self) -> dict[str, str]:
        """Copy of the original value -> token mapping."""
        with self.lock:
            return dict(self._tokens)

    def __len__(self) -> int:
        with self.lock:
            return len(self._tokens)


class SessionAnonymizationStore:
    """Owns every session's anonymization map for the process lifetime.

    With ``ttl_seconds > 0`` sessions idle longer than the TTL are evicted
    by ``purge_expired``, which ``get_or_create`` also runs at most once per
    half TTL. ``ttl_seconds == 0`` never expires anything.
    """

    def __init__(
        self,
        ttl_seconds: float = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self._sessions: dict[str, SessionAnonymizationMap] = {}
        self._lock = threading.Lock()
        self._ttl = ttl_seconds
        self._clock = clock
        self._last_purge = clock()

    def get_or_create(self, session_id: str) -> SessionAnonymizationMap:
        if self._ttl and self._clock() - self._last_purge >= self._ttl / 2:
            self.purge_expired()

        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or self._is_expired(session):
                session = SessionAnonymizationMap(session_id, clock=self._clock)
                self._sessions[session_id] = session
                Log.debug("Created anonymization session", session_id=session_id)
            session.touch()
        return session

    def get(self, session_id: str) -> SessionAnonymizationMap | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or self._is_expired(session):
                return None
            session.touch()
        return session

    def next_sequence(self, session_id: str, category: str) -> int:
        return self.get_or_create(session_id).next_sequence(category)

    def lookup(self, session_id: str, original_value: str) -> str | None:
        session = self.get(session_id)
        if session is None:
            return None
        return session.lookup(original_value)

    def record(self, session_id: str, original_value: str, token: str) -> None:
        self.get_or_create(session_id).record(original_value, token)

    def mappings(self, session_id: str) -> dict[str, str]:
        session = self.get(session_id)
        if session is None:
            return {}
        return session.snapshot()

    def evict(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            Log.debug("Evicted anonymization session", session_id=session_id)
        return removed is not None

    def purge_expired(self) -> int:
        """Drop sessions idle longer than the TTL. Returns how many."""
        if not self._ttl:
            return 0

        with self._lock:
            self._last_purge = self._clock()
            stale_ids = [
                sid for sid, session in self._sessions.items()
                if self._is_expired(session)
            ]
            for sid in stale_ids:
                del self._sessions[sid]

        if stale_ids:
            Log.info(f"Purged {len(stale_ids)} expired anonymization sessions")
        return len(stale_ids)

    def _is_expired(self, session: SessionAnonymizationMap) -> bool:
        return bool(self._ttl) and self._clock() - session.last_access > self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
