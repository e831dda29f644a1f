"""
Question Catalog Module

The catalog is the immutable question set an assessment session is scored
against. Inactive questions are kept for reference but never asked or scored.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from digiwise.common.exceptions import ValidationError
from digiwise.common.logger import get_logger
from .model import Question, DEFAULT_MAX_VALUE

logger = get_logger(__name__)


class QuestionCatalog:
    """
    Immutable, ordered collection of questions.

    Categories are reported in the order their first active question appears.
    """

    def __init__(self, questions: Iterable[Question]):
        """
        Initialize the catalog.

        Args:
            questions: Questions making up the catalog

        Raises:
            ValidationError: If two questions share an ID
        """
        ordered: Dict[str, Question] = {}
        for question in questions:
            if question.question_id in ordered:
                raise ValidationError(
                    f"Duplicate question ID '{question.question_id}' in catalog",
                    errors={"question_id": question.question_id}
                )
            ordered[question.question_id] = question

        self._questions: Mapping[str, Question] = MappingProxyType(ordered)
        self._active: Mapping[str, Question] = MappingProxyType(
            {qid: q for qid, q in ordered.items() if q.active}
        )

        categories: List[str] = []
        for question in self._active.values():
            if question.category not in categories:
                categories.append(question.category)
        self._categories = tuple(categories)

        logger.debug(
            f"Built catalog with {len(self._active)} active question(s) "
            f"across {len(self._categories)} categories"
        )

    @classmethod
    def from_dicts(
        cls,
        items: Iterable[Dict[str, Any]],
        default_max_value: int = DEFAULT_MAX_VALUE
    ) -> 'QuestionCatalog':
        """
        Build a catalog from plain dictionaries.

        Args:
            items: Question dictionaries as accepted by ``Question.from_dict``
            default_max_value: Answer scale for items that do not set ``max_value``

        Returns:
            A QuestionCatalog instance
        """
        return cls(Question.from_dict(item, default_max_value) for item in items)

    @property
    def categories(self) -> List[str]:
        """Categories that have at least one active question."""
        return list(self._categories)

    @property
    def active_questions(self) -> List[Question]:
        return list(self._active.values())

    def get(self, question_id: str) -> Optional[Question]:
        """
        Get an active question by ID.

        Args:
            question_id: The question ID

        Returns:
            The active question, or None if the ID is unknown or inactive
        """
        return self._active.get(question_id)

    def get_any(self, question_id: str) -> Optional[Question]:
        """Get a question by ID whether or not it is active."""
        return self._questions.get(question_id)

    def questions_in(self, category: str) -> List[Question]:
        """Active questions belonging to ``category``."""
        return [q for q in self._active.values() if q.category == category]

    def max_total(self, category: str) -> int:
        """Highest achievable answer sum for ``category``."""
        return sum(q.max_value for q in self.questions_in(category))

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._active

    def __iter__(self) -> Iterator[Question]:
        return iter(self._active.values())

    def __len__(self) -> int:
        return len(self._active)
