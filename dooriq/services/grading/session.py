# dooriq/services/grading/session.py
from typing import Any, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dooriq.logging_config import app_logger
from dooriq.models.session import SessionGrade
from dooriq.schema.grading import (
    GradeBreakdown,
    GradeSource,
    SessionGradeData,
    TranscriptEntry,
)
from dooriq.services.grading.calculator import calculate_grade
from dooriq.services.grading.chains import request_ai_grading
from dooriq.services.grading.transcript import analyze_transcript


def _apply_breakdown(record: SessionGrade, breakdown: GradeBreakdown) -> None:
    record.total = breakdown.total
    record.letter = breakdown.letter.value
    record.passed = breakdown.passed
    record.categories = dict(breakdown.categories)
    record.deductions = list(breakdown.deductions)


def _select(session_id: str, db: Session) -> Optional[SessionGrade]:
    return (
        db.query(SessionGrade)
        .filter(SessionGrade.session_id == session_id)
        .first()
    )


def _store(
    record: SessionGrade,
    breakdown: GradeBreakdown,
    payload: Any,
    source: GradeSource,
    analytics: Optional[dict],
) -> None:
    record.source = source.value
    record.ai_payload = payload
    record.analytics = analytics
    _apply_breakdown(record, breakdown)


async def grade(
    session_id: str,
    payload: Any,
    db: Session,
    source: GradeSource = GradeSource.PAYLOAD,
    transcript: Optional[List[TranscriptEntry]] = None,
) -> SessionGradeData:
    """
    PUT Endpoint implementation: grade a session from an AI grading payload.
    Regrading an already graded session overwrites the stored result.
    When the transcript is given, deterministic transcript signals are
    stored with the grade.
    """
    breakdown = calculate_grade(payload)
    analytics = (
        analyze_transcript(transcript, breakdown.total) if transcript else None
    )

    record = _select(session_id, db)
    if record is None:
        record = SessionGrade(session_id=session_id)
        db.add(record)
    _store(record, breakdown, payload, source, analytics)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the row first; update that one
        db.rollback()
        app_logger.info(f"Session {session_id} was graded concurrently, updating")
        record = _select(session_id, db)
        _store(record, breakdown, payload, source, analytics)
        db.commit()
    db.refresh(record)

    app_logger.info(
        f"Graded session {session_id}: {breakdown.total} ({breakdown.letter.value}),"
        f" source={source.value}"
    )
    return SessionGradeData.from_record(record)


async def grade_transcript(
    session_id: str,
    transcript: List[TranscriptEntry],
    db: Session,
) -> SessionGradeData:
    """
    POST Endpoint implementation: have the AI grader score a transcript,
    then store the result like any other payload.
    """
    if not transcript:
        raise HTTPException(status_code=400, detail="No transcript available")

    payload = await request_ai_grading(transcript)
    return await grade(
        session_id,
        payload,
        db,
        source=GradeSource.TRANSCRIPT,
        transcript=transcript,
    )


async def get(session_id: str, db: Session) -> Optional[SessionGradeData]:
    record = _select(session_id, db)
    if not record:
        return None
    return SessionGradeData.from_record(record)


async def delete(session_id: str, db: Session) -> bool:
    record = _select(session_id, db)
    if not record:
        raise HTTPException(status_code=404, detail="Session grade not found")

    db.delete(record)
    db.commit()
    app_logger.info(f"Deleted grade for session {session_id}")
    return True


def regrade_all(db: Session) -> int:
    """
    Recompute every stored grade from its saved AI payload.

    Returns:
        Number of sessions whose stored result changed
    """
    changed = 0
    for record in db.query(SessionGrade).all():
        breakdown = calculate_grade(record.ai_payload)
        if SessionGradeData.from_record(record).grade == breakdown:
            continue

        app_logger.info(
            f"Regraded session {record.session_id}: "
            f"{record.total} -> {breakdown.total}"
        )
        _apply_breakdown(record, breakdown)
        changed += 1

    db.commit()
    return changed
