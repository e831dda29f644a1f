"""
Common Exception Classes

This module defines custom exceptions used throughout the application,
including the errors raised by the scoring engine when it is handed an
answer set or configuration it cannot score.
"""

from typing import Optional, Any, Iterable, List


class BaseError(Exception):
    """Base class for all custom exceptions."""

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            original_exception: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class ValidationError(BaseError):
    """Exception raised for validation errors."""

    def __init__(self, message: str, errors: Optional[dict] = None):
        """
        Initialize the validation error.

        Args:
            message: Error message
            errors: Dictionary of validation errors
        """
        super().__init__(f"Validation error: {message}")
        self.errors = errors or {}


class ConfigurationError(BaseError):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        """
        Initialize the configuration error.

        Args:
            message: Error message
            config_key: The configuration key that caused the error
        """
        super().__init__(f"Configuration error: {message}")
        self.config_key = config_key


class NotFoundError(BaseError):
    """Exception raised when a resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any):
        """
        Initialize the not found error.

        Args:
            resource_type: Type of resource that wasn't found
            resource_id: ID of the resource that wasn't found
        """
        super().__init__(f"{resource_type} with ID {resource_id} not found")
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateError(BaseError):
    """Exception raised when attempting to create a duplicate resource."""

    def __init__(self, resource_type: str, identifier: Any):
        """
        Initialize the duplicate error.

        Args:
            resource_type: Type of resource that was duplicated
            identifier: The identifier that caused the duplicate
        """
        super().__init__(f"Duplicate {resource_type} with identifier {identifier}")
        self.resource_type = resource_type
        self.identifier = identifier


class SessionStateError(BaseError):
    """Exception raised when a session operation is not allowed in its current status."""

    def __init__(self, session_id: str, status: str, action: str):
        """
        Initialize the session state error.

        Args:
            session_id: ID of the session
            status: Current status of the session
            action: The action that was attempted
        """
        super().__init__(f"Cannot {action} session {session_id} in status '{status}'")
        self.session_id = session_id
        self.status = status
        self.action = action


#------------------------------------------------------------------------------
# Scoring Errors
#------------------------------------------------------------------------------

class ScoringError(BaseError):
    """Base class for errors raised by the scoring engine.

    These indicate caller or configuration bugs, not transient conditions.
    """


class IncompleteAnswerSet(ScoringError):
    """Raised when an answer set does not cover every active catalog question."""

    def __init__(self, missing_question_ids: Iterable[str]):
        """
        Initialize the incomplete answer set error.

        Args:
            missing_question_ids: IDs of the active questions with no answer
        """
        self.missing_question_ids: List[str] = sorted(missing_question_ids)
        super().__init__(
            f"Answer set is incomplete: {len(self.missing_question_ids)} question(s) "
            f"unanswered ({', '.join(self.missing_question_ids)})"
        )


class UnknownCategory(ScoringError):
    """Raised when an answer cannot be resolved to a category of the active catalog."""

    def __init__(self, question_id: Any, category: Optional[str] = None):
        """
        Initialize the unknown category error.

        Args:
            question_id: ID of the question the answer references
            category: The unresolved category label, when known
        """
        if category is not None:
            message = f"Category '{category}' of question {question_id} is not in the active catalog"
        else:
            message = f"Question {question_id} is not in the active catalog"
        super().__init__(message)
        self.question_id = question_id
        self.category = category


class InvalidAnswer(ScoringError):
    """Raised when an answer value is off its question's scale or a question is answered twice."""

    def __init__(self, question_id: Any, reason: str):
        super().__init__(f"Invalid answer for question {question_id}: {reason}")
        self.question_id = question_id
        self.reason = reason


class InvalidWeightConfiguration(ScoringError):
    """Raised when category weights do not sum to 1.0 or do not match the scored categories."""

    def __init__(self, message: str, weights: Optional[dict] = None):
        super().__init__(f"Invalid weight configuration: {message}")
        self.weights = dict(weights) if weights else {}


class InvalidThresholdConfiguration(ScoringError):
    """Raised when risk bands are non-monotonic or do not exactly partition [0, 100]."""

    def __init__(self, message: str):
        super().__init__(f"Invalid threshold configuration: {message}")
