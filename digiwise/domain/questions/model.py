"""
Question Domain Model Module

This module defines the core domain entity for the question subsystem.
Questions are immutable once created; the catalog that holds them is
supplied to each assessment session at its start.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Any

DEFAULT_MAX_VALUE = 4


@dataclass(frozen=True)
class Question:
    """
    Represents a question in the DigiWise assessment.

    Every question is answered on an ordinal scale from 0 to ``max_value``.

    Attributes:
        question_id: Unique identifier for the question
        category: Category label the question contributes to (e.g. "sleep")
        text: The prompt shown to the examinee
        max_value: Highest ordinal value on the answer scale
        active: Whether the question is part of the current assessment
        created_at: When the question was created
        metadata: Additional metadata about the question
    """
    question_id: str
    category: str
    text: str
    max_value: int = DEFAULT_MAX_VALUE
    active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow, compare=False)
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not self.question_id:
            raise ValueError("Question ID is required")
        if not self.category:
            raise ValueError(f"Question {self.question_id} has no category")
        if self.max_value < 1:
            raise ValueError(f"Question {self.question_id} must have a max value of at least 1, got {self.max_value}")

    @classmethod
    def create(cls,
               category: str,
               text: str,
               max_value: int = DEFAULT_MAX_VALUE,
               metadata: Optional[Dict[str, Any]] = None) -> 'Question':
        """
        Create a new active question with a generated ID.

        Args:
            category: Category label
            text: The question prompt
            max_value: Highest ordinal value on the answer scale
            metadata: Additional metadata about the question (optional)

        Returns:
            A new Question instance
        """
        return cls(
            question_id=str(uuid.uuid4()),
            category=category,
            text=text,
            max_value=max_value,
            metadata=metadata or {}
        )

    def accepts(self, value: int) -> bool:
        """Whether ``value`` lies on this question's answer scale."""
        return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= self.max_value

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the question to a dictionary.

        Returns:
            Dictionary representation of the question
        """
        return {
            'question_id': self.question_id,
            'category': self.category,
            'text': self.text,
            'max_value': self.max_value,
            'active': self.active,
            'created_at': self.created_at.isoformat(),
            'metadata': dict(self.metadata)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_max_value: int = DEFAULT_MAX_VALUE) -> 'Question':
        """
        Create a Question from a dictionary.

        ``id`` is accepted as an alias of ``question_id`` and ``prompt`` as an
        alias of ``text``.

        Args:
            data: Dictionary containing question data
            default_max_value: Answer scale used when the item has no max_value

        Returns:
            A Question instance
        """
        created_at = data.get('created_at')
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        return cls(
            question_id=str(data.get('question_id', data.get('id', ''))),
            category=data.get('category', ''),
            text=data.get('text', data.get('prompt', '')),
            max_value=int(data.get('max_value', default_max_value)),
            active=bool(data.get('active', True)),
            created_at=created_at or datetime.utcnow(),
            metadata=data.get('metadata', {})
        )
