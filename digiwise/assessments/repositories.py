"""
Assessment Repositories

This module defines the repository interfaces for sessions and results,
plus in-memory implementations used for development and testing.

Results are keyed by session ID: a session has at most one stored result.
"""

import asyncio
import datetime
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from digiwise.common.exceptions import DuplicateError
from digiwise.common.logger import get_logger
from digiwise.assessments.models import AssessmentSession, SessionStatus
from digiwise.scoring.models import ScoringResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredResult:
    """A scoring result as persisted for one session."""
    session_id: str
    examinee_id: str
    result: ScoringResult
    stored_at: datetime.datetime = field(default_factory=datetime.datetime.utcnow, compare=False)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "session_id": self.session_id,
            "examinee_id": self.examinee_id,
            "stored_at": self.stored_at.isoformat(),
        }
        data.update(self.result.to_dict())
        return data


class SessionRepository(ABC):
    """Abstract repository interface for assessment sessions."""

    @abstractmethod
    async def get_by_id(self, session_id: str) -> Optional[AssessmentSession]:
        """
        Retrieve a session by its ID.

        Args:
            session_id: The unique identifier for the session

        Returns:
            The session if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, session: AssessmentSession) -> AssessmentSession:
        """
        Create or update a session.

        Args:
            session: The session to save

        Returns:
            The saved session
        """
        pass

    @abstractmethod
    async def list_sessions(self, status: Optional[SessionStatus] = None) -> List[AssessmentSession]:
        """
        List sessions, optionally filtered by status.

        Args:
            status: Only return sessions in this status

        Returns:
            Matching sessions in creation order
        """
        pass


class ResultRepository(ABC):
    """
    Abstract repository interface for scoring results.

    Implementations must treat the session ID as a unique key.
    """

    @abstractmethod
    async def save(self, session_id: str, examinee_id: str, result: ScoringResult) -> StoredResult:
        """
        Persist the result of a session.

        Saving an identical result for a session that already has one is a
        no-op that returns the stored record.

        Args:
            session_id: The session the result belongs to
            examinee_id: The examinee who took the session
            result: The scoring result

        Returns:
            The stored record

        Raises:
            DuplicateError: If a different result is already stored for the session
        """
        pass

    @abstractmethod
    async def get_by_session(self, session_id: str) -> Optional[StoredResult]:
        """
        Retrieve the result stored for a session.

        Args:
            session_id: The session ID

        Returns:
            The stored record, or None if the session has no result
        """
        pass

    @abstractmethod
    async def list_results(self, examinee_id: Optional[str] = None) -> List[StoredResult]:
        """
        List stored results, optionally for one examinee.

        Args:
            examinee_id: Only return results of this examinee

        Returns:
            Stored records in the order they were saved
        """
        pass


class MemorySessionRepository(SessionRepository):
    """
    In-memory implementation of the SessionRepository.

    Intended for development and testing purposes only.
    """

    def __init__(self):
        self._sessions: Dict[str, AssessmentSession] = {}

    async def get_by_id(self, session_id: str) -> Optional[AssessmentSession]:
        return self._sessions.get(session_id)

    async def save(self, session: AssessmentSession) -> AssessmentSession:
        self._sessions[session.id] = session
        return session

    async def list_sessions(self, status: Optional[SessionStatus] = None) -> List[AssessmentSession]:
        sessions = list(self._sessions.values())
        if status is not None:
            sessions = [s for s in sessions if s.status == status]
        return sessions

    def clear(self) -> None:
        """
        Clear all sessions.

        This method is specific to the memory implementation and not part of
        the SessionRepository interface.
        """
        self._sessions.clear()


class MemoryResultRepository(ResultRepository):
    """
    In-memory implementation of the ResultRepository.

    Writes are serialised with a lock so concurrent saves for the same
    session store at most one result.
    """

    def __init__(self):
        self._results: Dict[str, StoredResult] = {}
        self._lock = asyncio.Lock()

    async def save(self, session_id: str, examinee_id: str, result: ScoringResult) -> StoredResult:
        async with self._lock:
            existing = self._results.get(session_id)
            if existing is not None:
                if existing.result == result and existing.examinee_id == examinee_id:
                    logger.debug(f"Result for session {session_id} already stored")
                    return existing
                raise DuplicateError("result", session_id)

            record = StoredResult(session_id=session_id, examinee_id=examinee_id, result=result)
            self._results[session_id] = record
            return record

    async def get_by_session(self, session_id: str) -> Optional[StoredResult]:
        return self._results.get(session_id)

    async def list_results(self, examinee_id: Optional[str] = None) -> List[StoredResult]:
        records = list(self._results.values())
        if examinee_id is not None:
            records = [r for r in records if r.examinee_id == examinee_id]
        return records

    def clear(self) -> None:
        """
        Clear all results.

        This method is specific to the memory implementation and not part of
        the ResultRepository interface.
        """
        self._results.clear()
