"""
Tests for the in-memory session and result repositories.
"""

import pytest

from digiwise.assessments import (
    AssessmentSession, MemoryResultRepository, MemorySessionRepository, SessionStatus
)
from digiwise.common.exceptions import DuplicateError
from digiwise.scoring.models import RiskLevel, ScoringResult


def _result(overall=50, level=RiskLevel.HIGH):
    return ScoringResult(overall_score=overall, category_scores={"sleep": overall}, risk_level=level)


@pytest.mark.asyncio
async def test_result_saved_once_per_session():
    repository = MemoryResultRepository()
    stored = await repository.save("session-1", "examinee-1", _result())

    again = await repository.save("session-1", "examinee-1", _result())
    assert again is stored

    with pytest.raises(DuplicateError):
        await repository.save("session-1", "examinee-1", _result(overall=10, level=RiskLevel.LOW))

    assert await repository.get_by_session("session-1") is stored
    assert await repository.get_by_session("session-2") is None


@pytest.mark.asyncio
async def test_result_listing_by_examinee():
    repository = MemoryResultRepository()
    await repository.save("session-1", "examinee-1", _result())
    await repository.save("session-2", "examinee-2", _result(20, RiskLevel.LOW))
    await repository.save("session-3", "examinee-1", _result(80, RiskLevel.SEVERE))

    assert len(await repository.list_results()) == 3
    mine = await repository.list_results(examinee_id="examinee-1")
    assert [r.session_id for r in mine] == ["session-1", "session-3"]

    repository.clear()
    assert await repository.list_results() == []


@pytest.mark.asyncio
async def test_stored_result_dict():
    repository = MemoryResultRepository()
    stored = await repository.save("session-1", "examinee-1", _result())
    data = stored.to_dict()
    assert data["session_id"] == "session-1"
    assert data["overall_score"] == 50
    assert data["risk_level"] == "high"
    assert data["category_scores"] == {"sleep": 50}


@pytest.mark.asyncio
async def test_session_repository(catalog):
    repository = MemorySessionRepository()
    first = AssessmentSession(examinee_id="examinee-1", catalog=catalog)
    second = AssessmentSession(examinee_id="examinee-2", catalog=catalog)
    await repository.save(first)
    await repository.save(second)
    second.abandon()
    await repository.save(second)

    assert await repository.get_by_id(first.id) is first
    assert await repository.get_by_id("missing") is None
    assert len(await repository.list_sessions()) == 2
    abandoned = await repository.list_sessions(SessionStatus.ABANDONED)
    assert [s.id for s in abandoned] == [second.id]
