"""Form Session Repository - open rule drafts kept in process memory

Drafts are transient: they exist only while a form is open and are never
persisted.
"""
from datetime import timedelta
from typing import Dict, List, Optional

from ..config.settings import settings
from ..domain.enums import FormState
from ..domain.errors import CapacityError, FormSessionNotFoundError
from ..forms import RuleFormSession
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class FormSessionRepository:
    """Repository for rule form sessions"""

    def __init__(self, limit: Optional[int] = None, idle_seconds: Optional[int] = None):
        self._sessions: Dict[str, RuleFormSession] = {}
        self._limit = limit if limit is not None else settings.form_session_limit
        self._idle = timedelta(
            seconds=idle_seconds if idle_seconds is not None else settings.form_session_idle_seconds
        )

    def add(self, session: RuleFormSession) -> RuleFormSession:
        if len(self._sessions) >= self._limit:
            self._evict_stale()
        if len(self._sessions) >= self._limit:
            raise CapacityError(
                f"Too many open rule forms (limit {self._limit})",
                details={"limit": self._limit}
            )
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[RuleFormSession]:
        return self._sessions.get(session_id)

    def get_or_raise(self, session_id: str) -> RuleFormSession:
        session = self.get(session_id)
        if session is None:
            raise FormSessionNotFoundError(
                f"Rule form {session_id} not found",
                details={"session_id": session_id}
            )
        return session

    def remove(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def list_open(self) -> List[RuleFormSession]:
        return [s for s in self._sessions.values() if s.state != FormState.CLOSED]

    def _evict_stale(self) -> None:
        """Drop closed forms and forms abandoned while editing"""
        cutoff = utc_now() - self._idle
        stale = [
            sid for sid, s in self._sessions.items()
            if s.state == FormState.CLOSED
            or (s.state == FormState.EDITING and s.updated_at < cutoff)
        ]
        for session_id in stale:
            del self._sessions[session_id]
        if stale:
            logger.info(f"Evicted {len(stale)} closed or idle rule forms")
