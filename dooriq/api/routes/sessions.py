# dooriq/api/routes/sessions.py
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from dooriq.database import get_db
from dooriq.schema.grading import SessionGradeResponse, TranscriptGradeRequest
from dooriq.services.grading import session as session_handler

router = APIRouter(prefix="/sessions")


@router.put("/{session_id}/grade", response_model=SessionGradeResponse)
async def grade_session(
    session_id: str,
    payload: Any = Body(...),
    db: Session = Depends(get_db),
) -> SessionGradeResponse:
    grade = await session_handler.grade(session_id, payload, db)
    return SessionGradeResponse(data=grade, message="Session graded")


@router.post("/{session_id}/grade/transcript", response_model=SessionGradeResponse)
async def grade_session_transcript(
    session_id: str,
    request: TranscriptGradeRequest,
    db: Session = Depends(get_db),
) -> SessionGradeResponse:
    """
    Grade a session by sending its transcript to the AI grader
    """
    grade = await session_handler.grade_transcript(
        session_id,
        request.transcript,
        db
    )
    return SessionGradeResponse(data=grade, message="Session graded from transcript")


@router.get("/{session_id}/grade", response_model=SessionGradeResponse)
async def get_session_grade(
    session_id: str,
    db: Session = Depends(get_db)
) -> SessionGradeResponse:
    grade = await session_handler.get(session_id, db)
    if not grade:
        raise HTTPException(status_code=404, detail="Session grade not found")
    return SessionGradeResponse(data=grade)


@router.delete("/{session_id}/grade", response_model=SessionGradeResponse)
async def delete_session_grade(
    session_id: str,
    db: Session = Depends(get_db)
) -> SessionGradeResponse:
    await session_handler.delete(session_id, db)
    return SessionGradeResponse(
        message=f"Grade for session {session_id} has been deleted",
        data=None,
    )
