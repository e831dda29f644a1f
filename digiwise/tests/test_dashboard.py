"""
Tests for the administrator dashboard aggregation.
"""

import pytest

from digiwise.assessments import AssessmentService
from digiwise.metrics import DashboardService, DashboardSummary


async def _complete(service, examinee_id, answers):
    session = await service.start_session(examinee_id)
    await service.submit_answers(session.id, answers)
    return await service.complete_session(session.id)


@pytest.mark.asyncio
async def test_empty_dashboard(catalog, app_config):
    service = AssessmentService(catalog, config=app_config)
    dashboard = DashboardService(service.sessions, service.results)

    summary = await dashboard.get_summary()
    assert summary.total_assessments == 0
    assert summary.completion_rate == 0.0
    assert summary.average_overall_score is None
    assert summary.risk_distribution == {"low": 0, "moderate": 0, "high": 0, "severe": 0}


@pytest.mark.asyncio
async def test_dashboard_summary(catalog, app_config):
    service = AssessmentService(catalog, config=app_config)
    dashboard = DashboardService(service.sessions, service.results)

    await _complete(service, "examinee-1", {"s1": 4, "s2": 4, "m1": 0, "m2": 0})  # 50, high
    await _complete(service, "examinee-2", {"s1": 0, "s2": 0, "m1": 1, "m2": 0})  # 7, low
    await _complete(service, "examinee-1", {"s1": 4, "s2": 4, "m1": 4, "m2": 4})  # 100, severe
    await service.start_session("examinee-3")

    summary = await dashboard.get_summary()
    assert summary.total_assessments == 4
    assert summary.completed_assessments == 3
    assert summary.completion_rate == 75.0
    assert summary.average_overall_score == 52.3
    assert summary.risk_distribution == {"low": 1, "moderate": 0, "high": 1, "severe": 1}
    assert summary.category_averages == {"sleep": 66.7, "social-media": 37.7}

    data = summary.to_dict()
    assert data["completion_rate"] == 75.0
    assert data["completed_assessments"] == 3


@pytest.mark.asyncio
async def test_examinee_history(catalog, app_config):
    service = AssessmentService(catalog, config=app_config)
    dashboard = DashboardService(service.sessions, service.results)

    first = await _complete(service, "examinee-1", {"s1": 4, "s2": 4, "m1": 0, "m2": 0})
    await _complete(service, "examinee-2", {"s1": 0, "s2": 0, "m1": 0, "m2": 0})
    second = await _complete(service, "examinee-1", {"s1": 0, "s2": 0, "m1": 0, "m2": 0})

    history = await dashboard.get_examinee_history("examinee-1")
    assert [item["session_id"] for item in history] == [first.session_id, second.session_id]
    assert history[1]["risk_level"] == "low"


def test_completion_rate_rounds_to_one_decimal():
    summary = DashboardSummary(total_assessments=3, completed_assessments=1)
    assert summary.completion_rate == 33.3
