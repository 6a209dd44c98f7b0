# dooriq/services/grading/calculator.py
import math

from fractions import Fraction
from typing import Any, Tuple, Union

from dooriq.schema.grading import (
    AIGradingInput,
    GradeBreakdown,
    LetterGrade,
    Points,
    deduction_points,
)

PASSING_SCORE = 70
MIN_SCORE = 0
MAX_SCORE = 100

# Evaluated top-down, first match wins
LETTER_THRESHOLDS: Tuple[Tuple[int, LetterGrade], ...] = (
    (97, LetterGrade.A_PLUS),
    (93, LetterGrade.A),
    (87, LetterGrade.B_PLUS),
    (83, LetterGrade.B),
    (77, LetterGrade.C_PLUS),
    (70, LetterGrade.C),
    (60, LetterGrade.D),
)


def round_half_up(value: Points) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + Fraction(1, 2))


def clamp_score(value: Points) -> Points:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def score_to_letter(total: int) -> LetterGrade:
    for threshold, letter in LETTER_THRESHOLDS:
        if total >= threshold:
            return letter
    return LetterGrade.F


def is_passing(total: int) -> bool:
    return total >= PASSING_SCORE


def calculate_grade(payload: Union[AIGradingInput, Any]) -> GradeBreakdown:
    """
    Convert an AI grading payload into a normalized grade breakdown.

    Args:
        payload: An AIGradingInput, or any raw value (usually the decoded
            JSON returned by the AI grader). Raw values are normalized
            through AIGradingInput, so missing categories, non-numeric
            points and non-list deductions count as zero/empty.

    Returns:
        A frozen GradeBreakdown. Never raises.
    """
    grading_input = (
        payload
        if isinstance(payload, AIGradingInput)
        else AIGradingInput.model_validate(payload)
    )

    categories = grading_input.category_points()
    deductions = list(grading_input.deductions)

    # Exact sum: float addition can overflow to inf, or to nan when huge
    # awards and huge deductions cancel
    raw_total = sum(Fraction(points) for points in categories.values()) + sum(
        Fraction(deduction_points(entry)) for entry in deductions
    )
    total = round_half_up(clamp_score(raw_total))

    return GradeBreakdown(
        total=total,
        letter=score_to_letter(total),
        passed=is_passing(total),
        categories=categories,
        deductions=deductions,
    )
