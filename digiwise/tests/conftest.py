"""
Pytest configuration and shared fixtures.

The standard catalog has two categories with two questions each, every
question answered on a 0-4 scale:

    sleep:        s1, s2
    social-media: m1, m2
"""

import pytest

from digiwise.common.config import AppConfig
from digiwise.domain.questions import Question, QuestionCatalog


@pytest.fixture
def catalog():
    return QuestionCatalog([
        Question(question_id="s1", category="sleep", text="Do you use screens in the hour before bed?"),
        Question(question_id="s2", category="sleep", text="Do notifications wake you at night?"),
        Question(question_id="m1", category="social-media", text="Do you check social media on waking?"),
        Question(question_id="m2", category="social-media", text="Do you lose track of time while scrolling?"),
    ])


@pytest.fixture
def full_answers():
    """Answers [4, 4, 0, 0] for the standard catalog."""
    return {"s1": 4, "s2": 4, "m1": 0, "m2": 0}


@pytest.fixture
def app_config():
    return AppConfig()
