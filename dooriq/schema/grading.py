# dooriq/schema/grading.py
import math
import sys

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from dooriq.logging_config import app_logger
from dooriq.schema.base import BaseResponse

Points = Union[int, float]


class Category(str, Enum):
    # Declaration order is the order of the breakdown
    OPENING_INTRODUCTION = "opening_introduction"
    RAPPORT_BUILDING = "rapport_building"
    NEEDS_DISCOVERY = "needs_discovery"
    VALUE_COMMUNICATION = "value_communication"
    OBJECTION_HANDLING = "objection_handling"
    CLOSING = "closing"


CATEGORY_NAMES = tuple(category.value for category in Category)


class LetterGrade(str, Enum):
    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C_PLUS = "C+"
    C = "C"
    D = "D"
    F = "F"


class GradeSource(str, Enum):
    PAYLOAD = "payload"
    TRANSCRIPT = "transcript"


def resolve_points(value: Any) -> Points:
    """
    Resolve a raw ``points`` value to a number.

    Anything that is not a finite int or float (missing, null, bool,
    numeric-looking strings, NaN) resolves to 0. A legitimate score of 0 and
    a missing score are therefore indistinguishable. Ints too large for a
    float are clamped to the largest finite float of the same sign.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, int):
        try:
            float(value)
        except OverflowError:
            return sys.float_info.max if value > 0 else -sys.float_info.max
    return value


def resolve_deductions(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    app_logger.warning(
        f"Ignoring malformed deductions of type {type(value).__name__}"
    )
    return []


def deduction_points(entry: Any) -> Points:
    if not isinstance(entry, Mapping):
        return 0
    return resolve_points(entry.get("points"))


class CategoryScore(BaseModel):
    points: Points = 0

    class Config:
        extra = "allow"

    @field_validator("points", mode="before")
    @classmethod
    def coerce_points(cls, points):
        return resolve_points(points)


class AIGradingInput(BaseModel):
    """
    Raw AI grading payload, normalized at the boundary.

    Validation never rejects a payload: non-mapping payloads, missing or
    malformed categories and non-list deductions all degrade to zero/empty
    defaults so the calculator can work on partially-populated AI output.
    """
    opening_introduction: CategoryScore = Field(default_factory=CategoryScore)
    rapport_building: CategoryScore = Field(default_factory=CategoryScore)
    needs_discovery: CategoryScore = Field(default_factory=CategoryScore)
    value_communication: CategoryScore = Field(default_factory=CategoryScore)
    objection_handling: CategoryScore = Field(default_factory=CategoryScore)
    closing: CategoryScore = Field(default_factory=CategoryScore)
    deductions: List[Any] = Field(default_factory=list)

    class Config:
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def normalize_payload(cls, data):
        if isinstance(data, AIGradingInput):
            return data.model_dump()
        if not isinstance(data, Mapping):
            return {}

        normalized = {}
        for name in CATEGORY_NAMES:
            entry = data.get(name)
            normalized[name] = (
                {k: v for k, v in entry.items() if isinstance(k, str)}
                if isinstance(entry, Mapping)
                else {}
            )
        normalized["deductions"] = resolve_deductions(data.get("deductions"))
        return normalized

    def category_points(self) -> Dict[str, Points]:
        return {name: getattr(self, name).points for name in CATEGORY_NAMES}


class GradeBreakdown(BaseModel):
    total: int = Field(..., ge=0, le=100)
    letter: LetterGrade
    passed: bool = Field(..., alias="pass")
    categories: Dict[str, Points]
    deductions: List[Any] = Field(default_factory=list)

    class Config:
        frozen = True
        populate_by_name = True


class GradeResponse(BaseResponse[GradeBreakdown]):
    pass


class TranscriptEntry(BaseModel):
    speaker: str
    text: str
    timestamp: Optional[Union[float, str]] = None


class TranscriptGradeRequest(BaseModel):
    transcript: List[TranscriptEntry]


class SessionGradeData(BaseModel):
    id: UUID
    session_id: str
    source: GradeSource
    grade: GradeBreakdown
    analytics: Optional[Dict[str, Any]] = None
    created_on: datetime
    updated_on: datetime

    @classmethod
    def from_record(cls, record) -> "SessionGradeData":
        return cls(
            id=record.id,
            session_id=record.session_id,
            source=record.source,
            grade=GradeBreakdown(
                total=record.total,
                letter=record.letter,
                passed=record.passed,
                categories=record.categories,
                deductions=record.deductions or [],
            ),
            analytics=record.analytics,
            created_on=record.created_on,
            updated_on=record.updated_on,
        )


class SessionGradeResponse(BaseResponse[SessionGradeData]):
    pass
