# interfaces/session_store.py
"""
Session Store for the assistant
Keeps one RecommendationOrchestrator per conversation session so that each
session owns its last result exclusively ("join the second one" always
refers to that session's own previous answer).
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from ..agents.orchestrator import RecommendationOrchestrator


@dataclass
class SessionEntry:
    """A live conversation session"""
    session_id: str
    user_id: str
    orchestrator: "RecommendationOrchestrator"
    created_at: datetime = field(default_factory=datetime.utcnow)
    last_access: datetime = field(default_factory=datetime.utcnow)


class OrchestratorSessionStore:
    """
    In-memory registry of conversation sessions.
    Sessions idle for longer than the TTL are dropped by purge_expired().
    """

    def __init__(
        self,
        orchestrator_factory: Callable[[], "RecommendationOrchestrator"],
        ttl_hours: int = 24
    ):
        self.orchestrator_factory = orchestrator_factory
        self.ttl = timedelta(hours=ttl_hours)
        self._sessions: Dict[str, SessionEntry] = {}

    def create_session(self, user_id: str, session_id: Optional[str] = None) -> str:
        """Create a new session with a fresh orchestrator"""
        if not session_id:
            session_id = f"sess_{user_id or 'anon'}_{uuid.uuid4().hex[:8]}"

        self._sessions[session_id] = SessionEntry(
            session_id=session_id,
            user_id=user_id,
            orchestrator=self.orchestrator_factory(),
        )
        logger.info(f"Created new session: {session_id}")
        return session_id

    def get_session(self, session_id: str) -> Optional[SessionEntry]:
        """Get session by ID, refreshing its last access time"""
        entry = self._sessions.get(session_id)
        if entry is not None:
            entry.last_access = datetime.utcnow()
        return entry

    def get_orchestrator(self, session_id: str) -> Optional["RecommendationOrchestrator"]:
        entry = self.get_session(session_id)
        return entry.orchestrator if entry is not None else None

    def get_or_create_session(self, user_id: str, session_id: Optional[str] = None) -> str:
        """Get existing session or create new one"""
        if session_id and self.get_session(session_id) is not None:
            return session_id
        return self.create_session(user_id, session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session; returns False if it did not exist"""
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info(f"Deleted session: {session_id}")
        return removed is not None

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Drop sessions idle for longer than the TTL; returns how many were dropped"""
        now = now or datetime.utcnow()
        expired = [sid for sid, entry in self._sessions.items() if now - entry.last_access > self.ttl]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(f"Purged {len(expired)} expired sessions")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
