"""
Common Components for DigiWise

This package contains infrastructure shared by the scoring engine and the
assessment services:
1. Logging - Centralized logging configuration
2. Error Handling - The exception hierarchy
3. Configuration - Settings loaded from file and environment (``digiwise.common.config``)
"""

from digiwise.common.logger import app_logger, get_logger, configure_logger
from digiwise.common.exceptions import (
    BaseError, ValidationError, ConfigurationError, NotFoundError, DuplicateError,
    SessionStateError, ScoringError, IncompleteAnswerSet, UnknownCategory, InvalidAnswer,
    InvalidWeightConfiguration, InvalidThresholdConfiguration
)

__all__ = [
    # Logging
    'app_logger', 'get_logger', 'configure_logger',

    # Exceptions
    'BaseError', 'ValidationError', 'ConfigurationError', 'NotFoundError', 'DuplicateError',
    'SessionStateError', 'ScoringError', 'IncompleteAnswerSet', 'UnknownCategory', 'InvalidAnswer',
    'InvalidWeightConfiguration', 'InvalidThresholdConfiguration',
]
