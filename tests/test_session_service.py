import asyncio

import pytest
from fastapi import HTTPException

from dooriq.models.session import SessionGrade
from dooriq.schema.grading import GradeSource, TranscriptEntry
from dooriq.services.grading import session as session_handler


def test_grade_stores_raw_payload(db, payload):
    result = asyncio.run(session_handler.grade("s-1", payload, db))

    record = db.query(SessionGrade).filter(SessionGrade.session_id == "s-1").one()
    assert record.ai_payload == payload
    assert record.total == result.grade.total == 75
    assert record.letter == "C+"
    assert record.passed is True
    assert record.source == GradeSource.PAYLOAD.value


def test_get_returns_none_when_missing(db):
    assert asyncio.run(session_handler.get("missing", db)) is None


def test_delete_missing_raises_not_found(db):
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(session_handler.delete("missing", db))

    assert exc_info.value.status_code == 404


def test_regrade_all_recomputes_stale_rows(db, payload):
    asyncio.run(session_handler.grade("s-1", payload, db))
    asyncio.run(session_handler.grade("s-2", {"closing": {"points": 40}}, db))

    # Simulate a row graded under an older rubric
    stale = db.query(SessionGrade).filter(SessionGrade.session_id == "s-1").one()
    stale.total = 90
    stale.letter = "B+"
    db.commit()

    assert session_handler.regrade_all(db) == 1

    db.refresh(stale)
    assert stale.total == 75
    assert stale.letter == "C+"
    assert session_handler.regrade_all(db) == 0


def test_grade_from_payload_has_no_analytics(db, payload):
    result = asyncio.run(session_handler.grade("s-1", payload, db))

    assert result.analytics is None


def test_grade_with_transcript_stores_analytics(db, payload):
    transcript = [
        TranscriptEntry(speaker="rep", text="You need to act now."),
        TranscriptEntry(speaker="homeowner", text="I'm good, thanks."),
    ]

    result = asyncio.run(
        session_handler.grade(
            "s-1",
            payload,
            db,
            source=GradeSource.TRANSCRIPT,
            transcript=transcript,
        )
    )

    record = db.query(SessionGrade).filter(SessionGrade.session_id == "s-1").one()
    assert record.analytics == result.analytics
    assert result.analytics["deductions_pressure_tactics"] is True
    assert result.analytics["outcome"] == "FAILURE"
    assert result.analytics["sale_closed"] is False


def test_concurrent_first_grade_updates_existing_row(db, payload, monkeypatch):
    asyncio.run(session_handler.grade("s-1", {"closing": {"points": 40}}, db))

    # The first lookup misses, as if another request inserted the row
    # between the lookup and the commit
    real_select = session_handler._select
    calls = []

    def racing_select(session_id, db):
        calls.append(session_id)
        if len(calls) == 1:
            return None
        return real_select(session_id, db)

    monkeypatch.setattr(session_handler, "_select", racing_select)

    result = asyncio.run(session_handler.grade("s-1", payload, db))

    assert result.grade.total == 75
    assert len(calls) == 2
    assert db.query(SessionGrade).filter(SessionGrade.session_id == "s-1").count() == 1
