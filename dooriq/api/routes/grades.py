# dooriq/api/routes/grades.py
from typing import Any

from fastapi import APIRouter, Body

from dooriq.schema.grading import GradeResponse
from dooriq.services.grading.calculator import calculate_grade

router = APIRouter(prefix="/grades")


@router.post("", response_model=GradeResponse)
async def compute_grade(payload: Any = Body(...)) -> GradeResponse:
    """
    Compute a grade breakdown from an AI grading payload without storing it.
    Malformed payloads grade as zero rather than failing.
    """
    return GradeResponse(data=calculate_grade(payload))
