"""
Assessment Service

Collects an examinee's answers for a session, scores the session once it is
complete and hands the result to the result repository. The service is the
only component that calls the scoring engine; presentation code reads stored
results and never recomputes them.
"""

from typing import Any, Dict, List, Optional

from digiwise.common.config import AppConfig, get_config
from digiwise.common.exceptions import NotFoundError, ScoringError
from digiwise.common.logger import LoggerAdapter, get_logger, log_execution_time
from digiwise.domain.questions import QuestionCatalog
from digiwise.assessments.events import (
    AnswerRecordedEvent, EventDispatcher, SessionCompletedEvent, SessionStartedEvent
)
from digiwise.assessments.models import AssessmentSession, SessionStatus
from digiwise.assessments.repositories import (
    MemoryResultRepository, MemorySessionRepository, ResultRepository,
    SessionRepository, StoredResult
)
from digiwise.scoring.recommendations import recommended_actions, render_text_report

logger = get_logger(__name__)


class AssessmentService:
    """
    Service for managing DigiWise assessment sessions.

    Every session is started against the same immutable catalog. Completing a
    session scores it and stores the result exactly once; completing it again
    returns the stored result.
    """

    def __init__(
        self,
        catalog: QuestionCatalog,
        session_repository: Optional[SessionRepository] = None,
        result_repository: Optional[ResultRepository] = None,
        config: Optional[AppConfig] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        """
        Initialize the assessment service.

        Args:
            catalog: The question catalog sessions are scored against
            session_repository: Session storage; in-memory when omitted
            result_repository: Result storage; in-memory when omitted
            config: Application configuration; the global one when omitted
            event_dispatcher: Optional event dispatcher for domain events
        """
        self.catalog = catalog
        self.sessions = session_repository or MemorySessionRepository()
        self.results = result_repository or MemoryResultRepository()
        self.config = config or get_config()
        self.events = event_dispatcher or EventDispatcher()
        logger.info(f"Initialized assessment service with {len(catalog)} active questions")

    def _log(self, session: AssessmentSession) -> LoggerAdapter:
        return LoggerAdapter(logger, {"session_id": session.id, "examinee_id": session.examinee_id})

    async def _get_session(self, session_id: str) -> AssessmentSession:
        session = await self.sessions.get_by_id(session_id)
        if session is None:
            raise NotFoundError("Session", session_id)
        return session

    async def start_session(self, examinee_id: str, metadata: Optional[Dict[str, Any]] = None) -> AssessmentSession:
        """
        Start a new session for an examinee.

        Args:
            examinee_id: The examinee taking the assessment
            metadata: Additional metadata to keep with the session

        Returns:
            The new session
        """
        session = AssessmentSession(examinee_id=examinee_id, catalog=self.catalog, metadata=metadata or {})
        await self.sessions.save(session)

        self._log(session).info(f"Started session {session.id}")
        self.events.dispatch(SessionStartedEvent(session.id, examinee_id, len(self.catalog)))
        return session

    async def get_session(self, session_id: str) -> AssessmentSession:
        """
        Get a session by ID.

        Raises:
            NotFoundError: If the session does not exist
        """
        return await self._get_session(session_id)

    async def submit_answer(self, session_id: str, question_id: str, value: int) -> AssessmentSession:
        """
        Record an answer for an open session.

        Args:
            session_id: The session ID
            question_id: The question being answered
            value: Selected value on the question's scale

        Returns:
            The updated session

        Raises:
            NotFoundError: If the session does not exist
            SessionStateError: If the session is no longer open
            UnknownCategory: If the question is not in the active catalog
            InvalidAnswer: If the value is not acceptable
        """
        session = await self._get_session(session_id)
        session.record_answer(
            question_id, value, allow_change=self.config.assessment.allow_answer_changes
        )
        await self.sessions.save(session)

        self.events.dispatch(AnswerRecordedEvent(session.id, question_id, value))
        return session

    async def submit_answers(self, session_id: str, answers: Dict[str, int]) -> AssessmentSession:
        """Record several answers for an open session, in order."""
        session = await self._get_session(session_id)
        for question_id, value in answers.items():
            session = await self.submit_answer(session.id, question_id, value)
        return session

    @log_execution_time(logger)
    async def complete_session(self, session_id: str) -> StoredResult:
        """
        Score a session and store its result.

        The result is stored before the session is marked completed, so a
        failed save leaves the session open and the call can be retried.

        Args:
            session_id: The session ID

        Returns:
            The stored result

        Raises:
            NotFoundError: If the session does not exist
            SessionStateError: If the session was abandoned
            ScoringError: If the answers cannot be scored; nothing is stored
            DuplicateError: If a different result is already stored for the session
        """
        session = await self._get_session(session_id)
        log = self._log(session)

        if session.status == SessionStatus.COMPLETED:
            stored = await self.results.get_by_session(session.id)
            if stored is not None:
                log.info(f"Session {session.id} already completed, returning stored result")
                return stored

        if session.status == SessionStatus.COMPLETED and session.result is not None:
            # Completed outside the service; store the result it already holds.
            result = session.result
        else:
            try:
                result = session.evaluate(self.config.scoring)
            except ScoringError as e:
                log.warning(f"Could not score session {session.id}: {e}")
                raise

        stored = await self.results.save(session.id, session.examinee_id, result)

        if not session.is_open:
            # Closed by a concurrent call or outside the service.
            return stored

        session.mark_completed(stored.result)
        await self.sessions.save(session)

        log.info(
            f"Completed session {session.id}: overall={result.overall_score} "
            f"risk={result.risk_level.value}"
        )
        self.events.dispatch(
            SessionCompletedEvent(session.id, session.examinee_id, result.overall_score, result.risk_level.value)
        )
        return stored

    async def abandon_session(self, session_id: str) -> AssessmentSession:
        """
        Close an open session without scoring it.

        Raises:
            NotFoundError: If the session does not exist
            SessionStateError: If the session is no longer open
        """
        session = await self._get_session(session_id)
        session.abandon()
        await self.sessions.save(session)
        self._log(session).info(f"Abandoned session {session.id}")
        return session

    async def get_result(self, session_id: str) -> StoredResult:
        """
        Get the stored result of a session.

        Raises:
            NotFoundError: If the session has no stored result
        """
        stored = await self.results.get_by_session(session_id)
        if stored is None:
            raise NotFoundError("Result", session_id)
        return stored

    async def get_action_plan(self, session_id: str) -> List[Dict[str, str]]:
        """Recommended actions for the stored result of a session."""
        stored = await self.get_result(session_id)
        return [action.to_dict() for action in recommended_actions(stored.result.risk_level)]

    async def get_report(self, session_id: str, first_name: Optional[str] = None) -> str:
        """
        Render the downloadable text report for a completed session.

        Args:
            session_id: The session ID
            first_name: Examinee's first name to print on the report

        Returns:
            The report text
        """
        stored = await self.get_result(session_id)
        session = await self.sessions.get_by_id(session_id)
        completed_at = session.completed_at if session else stored.stored_at
        return render_text_report(stored.result, first_name=first_name, completed_at=completed_at)
