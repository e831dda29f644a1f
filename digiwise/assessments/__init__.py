"""
Assessment sessions for DigiWise.

Sessions collect an examinee's answers against the question catalog; the
service scores completed sessions and stores one result per session.
"""

from digiwise.assessments.models import AssessmentSession, SessionStatus
from digiwise.assessments.events import (
    DomainEvent, EventDispatcher, SessionStartedEvent, AnswerRecordedEvent, SessionCompletedEvent
)
from digiwise.assessments.repositories import (
    SessionRepository, ResultRepository, MemorySessionRepository, MemoryResultRepository, StoredResult
)
from digiwise.assessments.service import AssessmentService

__all__ = [
    'AssessmentSession', 'SessionStatus',
    'DomainEvent', 'EventDispatcher', 'SessionStartedEvent', 'AnswerRecordedEvent', 'SessionCompletedEvent',
    'SessionRepository', 'ResultRepository', 'MemorySessionRepository', 'MemoryResultRepository', 'StoredResult',
    'AssessmentService',
]
