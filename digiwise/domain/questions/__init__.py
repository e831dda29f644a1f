"""
Question domain module for DigiWise.

This module contains the question entity and the immutable catalog that
assessment sessions are scored against.
"""

from .model import Question, DEFAULT_MAX_VALUE
from .catalog import QuestionCatalog

__all__ = [
    'Question',
    'QuestionCatalog',
    'DEFAULT_MAX_VALUE',
]
