"""
Thread-safe per-session state machine

Phases: IDLE → TRANSLATING → SUCCEEDED | FAILED.
``exporting`` is a transient flag that can only be raised in SUCCEEDED.
"""
import copy
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from aligner.core.exceptions import (
    InputError,
    EMPTY_INPUT_MESSAGE,
    NOTHING_TO_EXPORT_MESSAGE,
)
from aligner.core.models import SegmentPair, split_title

MAX_SESSION_LOGS = 200


class SessionPhase(Enum):
    IDLE = "idle"
    TRANSLATING = "translating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SessionBusyError(Exception):
    """Raised when an action is already in flight for the session."""
    pass


class SessionNotFoundError(KeyError):
    pass


@dataclass
class SessionState:
    """State of one browser session. Pairs are replaced wholesale, never mutated."""
    session_id: str
    phase: SessionPhase = SessionPhase.IDLE
    source_text: str = ""
    pairs: List[SegmentPair] = field(default_factory=list)
    error: Optional[str] = None
    exporting: bool = False
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)
    logs: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def can_export(self) -> bool:
        return self.phase == SessionPhase.SUCCEEDED and bool(self.pairs) and not self.exporting

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot for the interface: title and rows split per the rendering contract."""
        title_pair, body_pairs = split_title(self.pairs)
        return {
            'session_id': self.session_id,
            'phase': self.phase.value,
            'source_text': self.source_text,
            'title': title_pair.to_dict() if title_pair else None,
            'rows': [pair.to_dict() for pair in body_pairs],
            'segment_count': len(self.pairs),
            'error': self.error,
            'exporting': self.exporting,
            'can_export': self.can_export,
            'updated_at': self.updated_at,
            'logs': self.logs[-50:],
        }


class SessionStateManager:
    """Thread-safe manager for session state

    Args:
        max_session_age: When set, idle sessions untouched for this many
            seconds are dropped each time a new session is created
    """

    def __init__(self, max_session_age: Optional[float] = None):
        self._sessions: Dict[str, SessionState] = {}
        self.max_session_age = max_session_age
        self._lock = threading.RLock()  # Use RLock to allow nested locking

    def create_session(self) -> str:
        """Create a new idle session and return its id"""
        session_id = f"sess_{uuid.uuid4().hex[:12]}"
        with self._lock:
            if self.max_session_age:
                self.purge_stale_sessions(self.max_session_age)
            self._sessions[session_id] = SessionState(session_id=session_id)
        return session_id

    def exists(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def get_session(self, session_id: str) -> SessionState:
        """Get a deep copy of the session state"""
        with self._lock:
            return copy.deepcopy(self._require(session_id))

    def begin_translation(self, session_id: str, text: str) -> None:
        """
        IDLE/SUCCEEDED/FAILED → TRANSLATING.

        Raises:
            InputError: If the trimmed text is empty (stored as the session error)
            SessionBusyError: If a translation is already running
        """
        with self._lock:
            session = self._require(session_id)
            if session.phase == SessionPhase.TRANSLATING:
                raise SessionBusyError("A translation is already in progress.")
            if not text or not text.strip():
                session.error = EMPTY_INPUT_MESSAGE
                self._touch(session)
                raise InputError(EMPTY_INPUT_MESSAGE)
            session.phase = SessionPhase.TRANSLATING
            session.source_text = text
            session.pairs = []
            session.error = None
            session.logs = []
            self._touch(session)

    def complete_translation(self, session_id: str, pairs: List[SegmentPair]) -> None:
        """TRANSLATING → SUCCEEDED"""
        with self._lock:
            session = self._require(session_id)
            self._expect_translating(session)
            session.phase = SessionPhase.SUCCEEDED
            session.pairs = list(pairs)
            session.error = None
            self._touch(session)

    def fail_translation(self, session_id: str, message: str) -> None:
        """TRANSLATING → FAILED. The source text is kept."""
        with self._lock:
            session = self._require(session_id)
            self._expect_translating(session)
            session.phase = SessionPhase.FAILED
            session.pairs = []
            session.error = message
            self._touch(session)

    def begin_export(self, session_id: str) -> List[SegmentPair]:
        """
        Raise the exporting flag and return the pairs to export.

        Raises:
            InputError: If there is nothing to export
            SessionBusyError: If an export is already running
        """
        with self._lock:
            session = self._require(session_id)
            if session.exporting:
                raise SessionBusyError("An export is already in progress.")
            if session.phase != SessionPhase.SUCCEEDED or not session.pairs:
                session.error = NOTHING_TO_EXPORT_MESSAGE
                self._touch(session)
                raise InputError(NOTHING_TO_EXPORT_MESSAGE)
            session.exporting = True
            session.error = None
            self._touch(session)
            return list(session.pairs)

    def end_export(self, session_id: str, error: Optional[str] = None) -> None:
        with self._lock:
            session = self._require(session_id)
            session.exporting = False
            if error:
                session.error = error
            self._touch(session)

    def append_log(self, session_id: str, log_entry: Dict[str, Any]) -> bool:
        """Append a structured log entry to the session"""
        with self._lock:
            if session_id not in self._sessions:
                return False
            logs = self._sessions[session_id].logs
            logs.append(log_entry)
            del logs[:-MAX_SESSION_LOGS]
            return True

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def purge_stale_sessions(self, max_age_seconds: float) -> int:
        """Drop idle sessions not touched for ``max_age_seconds``; returns count removed"""
        cutoff = time.time() - max_age_seconds
        with self._lock:
            stale = [
                sid for sid, s in self._sessions.items()
                if s.updated_at < cutoff and s.phase != SessionPhase.TRANSLATING and not s.exporting
            ]
            for sid in stale:
                del self._sessions[sid]
            return len(stale)

    def _require(self, session_id: str) -> SessionState:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    @staticmethod
    def _expect_translating(session: SessionState) -> None:
        if session.phase != SessionPhase.TRANSLATING:
            raise RuntimeError(
                f"Session {session.session_id} is {session.phase.value}, expected translating"
            )

    @staticmethod
    def _touch(session: SessionState) -> None:
        session.updated_at = time.time()

