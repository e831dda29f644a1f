"""
Tests for action plans and the downloadable text report.
"""

from datetime import date, datetime

import pytest

from digiwise.scoring.models import RiskLevel, ScoringResult
from digiwise.scoring.recommendations import (
    ACTION_PLANS, recommended_actions, render_text_report, report_filename
)


def test_every_level_has_an_action_plan():
    for level in RiskLevel:
        assert len(ACTION_PLANS[level]) == 2
        assert ACTION_PLANS[level][0].timeframe in ("Today", "Ongoing")


@pytest.mark.parametrize("level, first_action", [
    ("low", "Maintain current healthy digital boundaries"),
    ("moderate", "Implement screen time limits on social media apps"),
    ("high", "Schedule regular digital detox periods"),
    ("severe", "Set up strict device usage limitations"),
])
def test_recommended_actions_accept_level_values(level, first_action):
    actions = recommended_actions(level)
    assert actions[0].action == first_action
    assert actions == recommended_actions(RiskLevel(level))


def test_recommended_actions_returns_copy():
    actions = recommended_actions(RiskLevel.LOW)
    actions.clear()
    assert len(recommended_actions(RiskLevel.LOW)) == 2


def test_unknown_level_rejected():
    with pytest.raises(ValueError):
        recommended_actions("extreme")


def test_report_filename():
    assert report_filename(date(2024, 5, 1)) == "DigiWise_Results_2024-05-01.txt"
    assert report_filename().startswith("DigiWise_Results_")


def test_text_report_contents():
    result = ScoringResult(
        overall_score=50,
        category_scores={"sleep": 100, "social-media": 0},
        risk_level=RiskLevel.HIGH
    )
    report = render_text_report(result, first_name="Alex", completed_at=datetime(2024, 5, 1, 9, 30))
    lines = report.splitlines()

    assert lines[0] == "DigiWise Digital Wellness Assessment Results"
    assert "Name: Alex" in lines
    assert "Date: 2024-05-01" in lines
    assert "Overall Score: 50%" in lines
    assert "Risk Level: High" in lines
    assert "- sleep: 100%" in lines
    assert "- social-media: 0%" in lines
    assert "- Use app blocking tools during work hours (This week)" in lines
    assert report.endswith("\n")


def test_text_report_defaults_name():
    result = ScoringResult(overall_score=10, category_scores={"sleep": 10}, risk_level=RiskLevel.LOW)
    assert "Name: User" in render_text_report(result)
