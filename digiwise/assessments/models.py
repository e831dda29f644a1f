"""
Assessment Session Models

This module defines the assessment session: one examinee's attempt at the
questionnaire, from the first answer to the single scored result.
"""

import enum
import uuid
import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from digiwise.common.exceptions import InvalidAnswer, SessionStateError, UnknownCategory
from digiwise.domain.questions import QuestionCatalog
from digiwise.scoring import engine
from digiwise.scoring.models import Answer, ScoringConfig, ScoringResult


class SessionStatus(enum.Enum):
    """Status of an assessment session."""
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


_OPEN_STATUSES = (SessionStatus.CREATED, SessionStatus.IN_PROGRESS)


@dataclass
class AssessmentSession:
    """
    Represents an assessment session for an examinee.

    Answers are keyed by question ID, so recording a question again replaces
    the earlier value while the session is open. Once completed the session
    holds its result and accepts no further changes.
    """

    examinee_id: str
    catalog: QuestionCatalog
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    answers: Dict[str, int] = field(default_factory=dict)
    status: SessionStatus = SessionStatus.CREATED
    created_at: datetime.datetime = field(default_factory=datetime.datetime.utcnow)
    completed_at: Optional[datetime.datetime] = None
    result: Optional[ScoringResult] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.examinee_id:
            raise ValueError("Examinee ID is required")
        if isinstance(self.status, str):
            self.status = SessionStatus(self.status)

    @property
    def is_open(self) -> bool:
        return self.status in _OPEN_STATUSES

    @property
    def unanswered(self) -> List[str]:
        """IDs of active questions that have no answer yet."""
        return [q.question_id for q in self.catalog if q.question_id not in self.answers]

    @property
    def is_complete(self) -> bool:
        """Whether every active question has been answered."""
        return not self.unanswered

    @property
    def progress(self) -> float:
        """Percentage of active questions answered."""
        total = len(self.catalog)
        if total == 0:
            return 0.0
        return len(self.answers) / total * 100

    def _require_open(self, action: str) -> None:
        if not self.is_open:
            raise SessionStateError(self.id, self.status.value, action)

    def record_answer(self, question_id: str, value: int, allow_change: bool = True) -> None:
        """
        Record the examinee's answer to one question.

        Args:
            question_id: ID of an active catalog question
            value: Selected value on the question's scale
            allow_change: Whether an earlier answer may be replaced

        Raises:
            SessionStateError: If the session is completed or abandoned
            UnknownCategory: If the question is not in the active catalog
            InvalidAnswer: If the value is off the scale, or the question was
                already answered and changes are not allowed
        """
        self._require_open("answer")

        question = self.catalog.get(question_id)
        if question is None:
            raise UnknownCategory(question_id)
        if not question.accepts(value):
            raise InvalidAnswer(question_id, f"value {value!r} is outside the scale 0-{question.max_value}")
        if not allow_change and question_id in self.answers:
            raise InvalidAnswer(question_id, "already answered")

        self.answers[question_id] = value
        self.status = SessionStatus.IN_PROGRESS

    def evaluate(self, config: Optional[ScoringConfig] = None) -> ScoringResult:
        """
        Score the current answers without changing the session.

        Args:
            config: Scoring configuration

        Returns:
            The result the session would complete with

        Raises:
            SessionStateError: If the session is already completed or abandoned
            ScoringError: If the answers cannot be scored
        """
        self._require_open("complete")
        answers = [Answer(question_id=qid, value=value) for qid, value in self.answers.items()]
        return engine.score(answers, self.catalog, config)

    def mark_completed(self, result: ScoringResult) -> None:
        """
        Close the session with a result that has already been computed.

        Raises:
            SessionStateError: If the session is already completed or abandoned
        """
        self._require_open("complete")
        self.result = result
        self.status = SessionStatus.COMPLETED
        self.completed_at = datetime.datetime.utcnow()

    def complete(self, config: Optional[ScoringConfig] = None) -> ScoringResult:
        """
        Score the session and close it.

        If scoring fails the session stays open and holds no result.

        Args:
            config: Scoring configuration

        Returns:
            The session's result

        Raises:
            SessionStateError: If the session is already completed or abandoned
            ScoringError: If the answers cannot be scored
        """
        result = self.evaluate(config)
        self.mark_completed(result)
        return result

    def abandon(self) -> None:
        """Close the session without a result."""
        self._require_open("abandon")
        self.status = SessionStatus.ABANDONED

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the session to dictionary format.

        The catalog itself is not included; only the answers against it.
        """
        return {
            "id": self.id,
            "examinee_id": self.examinee_id,
            "status": self.status.value,
            "answers": dict(self.answers),
            "progress": self.progress,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "result": self.result.to_dict() if self.result else None,
            "metadata": dict(self.metadata),
        }
