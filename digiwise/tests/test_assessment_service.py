"""
Tests for assessment sessions and the assessment service.

This module covers:
1. Answer collection and session status changes
2. Completing a session exactly once
3. Result persistence and reports
4. Domain events
"""

import asyncio

import pytest

from digiwise import create_assessment_service
from digiwise.assessments import (
    AssessmentService, AssessmentSession, EventDispatcher, MemoryResultRepository, SessionStatus
)
from digiwise.common.config import AppConfig
from digiwise.common.exceptions import (
    BaseError, IncompleteAnswerSet, InvalidAnswer, NotFoundError, SessionStateError, UnknownCategory
)
from digiwise.scoring.models import RiskLevel


class UnavailableOnceResultRepository(MemoryResultRepository):
    """Result store whose first save fails."""

    def __init__(self):
        super().__init__()
        self.attempts = 0

    async def save(self, session_id, examinee_id, result):
        self.attempts += 1
        if self.attempts == 1:
            raise BaseError("store unavailable")
        return await super().save(session_id, examinee_id, result)


class SlowResultRepository(MemoryResultRepository):
    """Result store that yields to the event loop before every save."""

    async def save(self, session_id, examinee_id, result):
        await asyncio.sleep(0)
        return await super().save(session_id, examinee_id, result)


def test_session_tracks_progress(catalog):
    session = AssessmentSession(examinee_id="examinee-1", catalog=catalog)
    assert session.status == SessionStatus.CREATED
    assert session.progress == 0.0

    session.record_answer("s1", 3)
    assert session.status == SessionStatus.IN_PROGRESS
    assert session.progress == 25.0
    assert session.unanswered == ["s2", "m1", "m2"]
    assert not session.is_complete


def test_session_replaces_answers(catalog):
    session = AssessmentSession(examinee_id="examinee-1", catalog=catalog)
    session.record_answer("s1", 3)
    session.record_answer("s1", 1)
    assert session.answers == {"s1": 1}

    with pytest.raises(InvalidAnswer):
        session.record_answer("s1", 2, allow_change=False)


def test_session_validates_answers(catalog):
    session = AssessmentSession(examinee_id="examinee-1", catalog=catalog)
    with pytest.raises(UnknownCategory):
        session.record_answer("nope", 1)
    with pytest.raises(InvalidAnswer):
        session.record_answer("s1", 9)


def test_session_completes_once(catalog, full_answers):
    session = AssessmentSession(examinee_id="examinee-1", catalog=catalog)
    for question_id, value in full_answers.items():
        session.record_answer(question_id, value)

    result = session.complete()
    assert session.status == SessionStatus.COMPLETED
    assert session.completed_at is not None
    assert session.result is result

    with pytest.raises(SessionStateError):
        session.complete()
    with pytest.raises(SessionStateError):
        session.record_answer("s1", 0)


def test_evaluate_leaves_session_open(catalog, full_answers):
    session = AssessmentSession(examinee_id="examinee-1", catalog=catalog)
    for question_id, value in full_answers.items():
        session.record_answer(question_id, value)

    result = session.evaluate()
    assert result.overall_score == 50
    assert session.is_open
    assert session.result is None

    session.mark_completed(result)
    assert session.status == SessionStatus.COMPLETED
    with pytest.raises(SessionStateError):
        session.mark_completed(result)


def test_incomplete_session_stays_open(catalog):
    session = AssessmentSession(examinee_id="examinee-1", catalog=catalog)
    session.record_answer("s1", 4)
    with pytest.raises(IncompleteAnswerSet):
        session.complete()
    assert session.is_open
    assert session.result is None


def test_abandoned_session_cannot_complete(catalog):
    session = AssessmentSession(examinee_id="examinee-1", catalog=catalog)
    session.abandon()
    with pytest.raises(SessionStateError):
        session.complete()


@pytest.mark.asyncio
async def test_service_scores_and_stores(catalog, full_answers, app_config):
    service = AssessmentService(catalog, config=app_config)
    session = await service.start_session("examinee-1")
    await service.submit_answers(session.id, full_answers)

    stored = await service.complete_session(session.id)
    assert stored.session_id == session.id
    assert stored.examinee_id == "examinee-1"
    assert stored.result.overall_score == 50
    assert stored.result.risk_level == RiskLevel.HIGH

    fetched = await service.get_result(session.id)
    assert fetched == stored


@pytest.mark.asyncio
async def test_service_completion_is_idempotent(catalog, full_answers, app_config):
    results = MemoryResultRepository()
    service = AssessmentService(catalog, result_repository=results, config=app_config)
    session = await service.start_session("examinee-1")
    await service.submit_answers(session.id, full_answers)

    first = await service.complete_session(session.id)
    second = await service.complete_session(session.id)
    assert first is second
    assert len(await results.list_results()) == 1


@pytest.mark.asyncio
async def test_service_completion_survives_failed_save(catalog, full_answers, app_config):
    results = UnavailableOnceResultRepository()
    service = AssessmentService(catalog, result_repository=results, config=app_config)
    session = await service.start_session("examinee-1")
    await service.submit_answers(session.id, full_answers)

    with pytest.raises(BaseError):
        await service.complete_session(session.id)
    assert session.is_open
    assert session.result is None

    stored = await service.complete_session(session.id)
    assert stored.result.overall_score == 50
    assert session.status == SessionStatus.COMPLETED
    assert session.result == stored.result
    assert await service.get_result(session.id) is stored


@pytest.mark.asyncio
async def test_service_stores_result_of_session_completed_directly(catalog, full_answers, app_config):
    service = AssessmentService(catalog, config=app_config)
    session = await service.start_session("examinee-1")
    await service.submit_answers(session.id, full_answers)
    result = session.complete()

    stored = await service.complete_session(session.id)
    assert stored.result is result


@pytest.mark.asyncio
async def test_service_concurrent_completion_stores_one_result(catalog, full_answers, app_config):
    completed = []
    dispatcher = EventDispatcher()
    dispatcher.subscribe("SessionCompletedEvent", completed.append)
    results = SlowResultRepository()
    service = AssessmentService(
        catalog, result_repository=results, config=app_config, event_dispatcher=dispatcher
    )
    session = await service.start_session("examinee-1")
    await service.submit_answers(session.id, full_answers)

    first, second = await asyncio.gather(
        service.complete_session(session.id),
        service.complete_session(session.id),
    )
    assert first is second
    assert session.status == SessionStatus.COMPLETED
    assert len(await results.list_results()) == 1
    assert len(completed) == 1


@pytest.mark.asyncio
async def test_service_does_not_store_incomplete_sessions(catalog, app_config):
    results = MemoryResultRepository()
    service = AssessmentService(catalog, result_repository=results, config=app_config)
    session = await service.start_session("examinee-1")
    await service.submit_answer(session.id, "s1", 2)

    with pytest.raises(IncompleteAnswerSet):
        await service.complete_session(session.id)
    assert await results.get_by_session(session.id) is None

    with pytest.raises(NotFoundError):
        await service.get_result(session.id)


@pytest.mark.asyncio
async def test_service_unknown_session(catalog, app_config):
    service = AssessmentService(catalog, config=app_config)
    with pytest.raises(NotFoundError):
        await service.submit_answer("missing", "s1", 1)


@pytest.mark.asyncio
async def test_service_respects_answer_change_setting(catalog):
    config = AppConfig(assessment={"allow_answer_changes": False})
    service = AssessmentService(catalog, config=config)
    session = await service.start_session("examinee-1")
    await service.submit_answer(session.id, "s1", 2)
    with pytest.raises(InvalidAnswer):
        await service.submit_answer(session.id, "s1", 3)


@pytest.mark.asyncio
async def test_service_uses_configured_weights(catalog, full_answers):
    config = AppConfig(scoring={"weights": {"sleep": 0.25, "social-media": 0.75}})
    service = AssessmentService(catalog, config=config)
    session = await service.start_session("examinee-1")
    await service.submit_answers(session.id, full_answers)

    stored = await service.complete_session(session.id)
    assert stored.result.overall_score == 25
    assert stored.result.risk_level == RiskLevel.MODERATE


@pytest.mark.asyncio
async def test_service_abandon(catalog, app_config):
    service = AssessmentService(catalog, config=app_config)
    session = await service.start_session("examinee-1")
    abandoned = await service.abandon_session(session.id)
    assert abandoned.status == SessionStatus.ABANDONED
    with pytest.raises(SessionStateError):
        await service.complete_session(session.id)


@pytest.mark.asyncio
async def test_service_report_and_action_plan(catalog, full_answers, app_config):
    service = AssessmentService(catalog, config=app_config)
    session = await service.start_session("examinee-1")
    await service.submit_answers(session.id, full_answers)
    await service.complete_session(session.id)

    plan = await service.get_action_plan(session.id)
    assert plan[0] == {"action": "Schedule regular digital detox periods", "timeframe": "Today"}

    report = await service.get_report(session.id, first_name="Sam")
    assert "Name: Sam" in report
    assert "Overall Score: 50%" in report
    assert "Risk Level: High" in report


@pytest.mark.asyncio
async def test_service_dispatches_events(catalog, full_answers, app_config):
    received = []
    dispatcher = EventDispatcher()
    for name in ("SessionStartedEvent", "AnswerRecordedEvent", "SessionCompletedEvent"):
        dispatcher.subscribe(name, received.append)

    service = AssessmentService(catalog, config=app_config, event_dispatcher=dispatcher)
    session = await service.start_session("examinee-1")
    await service.submit_answers(session.id, full_answers)
    await service.complete_session(session.id)

    kinds = [event.event_type for event in received]
    assert kinds[0] == "SessionStartedEvent"
    assert kinds.count("AnswerRecordedEvent") == 4
    assert kinds[-1] == "SessionCompletedEvent"
    assert received[-1].risk_level == "high"


def test_dispatcher_isolates_failing_handlers():
    received = []
    dispatcher = EventDispatcher()

    def broken(event):
        raise RuntimeError("boom")

    dispatcher.subscribe("SessionStartedEvent", broken)
    dispatcher.subscribe("SessionStartedEvent", received.append)

    from digiwise.assessments.events import SessionStartedEvent
    dispatcher.dispatch(SessionStartedEvent("s", "e", 4))
    assert len(received) == 1


def test_factory_builds_catalog_with_configured_scale():
    config = AppConfig(assessment={"default_max_value": 5})
    service = create_assessment_service(
        [
            {"id": "q1", "category": "sleep", "prompt": "Screens in bed?"},
            {"id": "q2", "category": "sleep", "prompt": "Night alerts?", "max_value": 3},
        ],
        config=config,
    )
    assert service.catalog.get("q1").max_value == 5
    assert service.catalog.get("q2").max_value == 3
    assert service.config is config
