"""
Assessment Domain Events

Events raised over the lifetime of an assessment session, and the
dispatcher that delivers them to subscribers.
"""

import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from digiwise.common.logger import get_logger

logger = get_logger(__name__)


class DomainEvent:
    """Base class for all domain events in the assessment system"""

    def __init__(self, event_id: Optional[str] = None, timestamp: Optional[float] = None):
        self.event_id = event_id or str(uuid.uuid4())
        self.timestamp = timestamp or time.time()
        self.event_type = self.__class__.__name__


class EventDispatcher:
    """Event dispatcher for domain events"""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[DomainEvent], Any]]] = {}

    def subscribe(self, event_type: str, handler: Callable[[DomainEvent], Any]) -> None:
        """Subscribe a handler to an event type name"""
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: str, handler: Callable[[DomainEvent], Any]) -> None:
        """Unsubscribe a handler from an event type name"""
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def dispatch(self, event: DomainEvent) -> None:
        """
        Dispatch an event to all subscribers of its type.

        A failing handler is logged and does not stop delivery to the others.
        """
        for handler in list(self._subscribers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Handler {handler!r} failed for {event.event_type}: {e}", exc_info=True)


class SessionStartedEvent(DomainEvent):
    """Event raised when an examinee starts an assessment session"""

    def __init__(self, session_id: str, examinee_id: str, question_count: int, **kwargs):
        super().__init__(**kwargs)
        self.session_id = session_id
        self.examinee_id = examinee_id
        self.question_count = question_count


class AnswerRecordedEvent(DomainEvent):
    """Event raised when an answer is recorded"""

    def __init__(self, session_id: str, question_id: str, value: int, **kwargs):
        super().__init__(**kwargs)
        self.session_id = session_id
        self.question_id = question_id
        self.value = value


class SessionCompletedEvent(DomainEvent):
    """Event raised when a session has been scored and its result stored"""

    def __init__(self, session_id: str, examinee_id: str, overall_score: int, risk_level: str, **kwargs):
        super().__init__(**kwargs)
        self.session_id = session_id
        self.examinee_id = examinee_id
        self.overall_score = overall_score
        self.risk_level = risk_level
