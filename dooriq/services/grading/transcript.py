# dooriq/services/grading/transcript.py
import re

from enum import Enum
from typing import Any, Dict, List

from dooriq.schema.grading import TranscriptEntry

REP_SPEAKERS = {"rep", "user"}

PRICE_QUESTION = re.compile(r"(how much|cost|price|pricing|\$)", re.IGNORECASE)
VALUE_FRAMING = re.compile(r"(value|investment|protect|save|worth)", re.IGNORECASE)
DEFLECTION = re.compile(r"(let me|first|depends|varies|i'll need to)", re.IGNORECASE)

PRESSURE_PATTERNS = [
    re.compile(r"you need to (decide|act) (now|today)", re.IGNORECASE),
    re.compile(r"this offer won't last", re.IGNORECASE),
    re.compile(r"i need an answer (now|today)", re.IGNORECASE),
    re.compile(r"what's stopping you", re.IGNORECASE),
    re.compile(r"you're making a mistake", re.IGNORECASE),
    re.compile(r"everyone else (is doing|has already)", re.IGNORECASE),
]

RUDE_PATTERNS = [
    re.compile(r"that's (dumb|stupid|ridiculous)", re.IGNORECASE),
    re.compile(r"you don't (understand|get it)", re.IGNORECASE),
    re.compile(r"whatever", re.IGNORECASE),
    re.compile(r"i don't care", re.IGNORECASE),
    re.compile(r"that doesn't make sense", re.IGNORECASE),
    re.compile(r"you're wrong", re.IGNORECASE),
]

SUCCESS_PATTERNS = [
    re.compile(r"yes|yeah|sure|okay|sounds good|let'?s do it|book it|schedule|sign me up", re.IGNORECASE),
    re.compile(r"when can you come", re.IGNORECASE),
    re.compile(r"what'?s the next step", re.IGNORECASE),
]

FAILURE_PATTERNS = [
    re.compile(r"no|not interested|i'll pass|not right now|i'm good", re.IGNORECASE),
    re.compile(r"i gotta go|talk to (my )?(wife|husband|spouse)", re.IGNORECASE),
    re.compile(r"maybe later|think about it|let me think", re.IGNORECASE),
]

PARTIAL_PATTERNS = [
    re.compile(r"interesting|tell me more|i'll consider", re.IGNORECASE),
    re.compile(r"send me (info|information)", re.IGNORECASE),
    re.compile(r"call me back", re.IGNORECASE),
]

SALE_CLOSED_PATTERNS = [
    re.compile(r"yes|yeah|sure|okay, let'?s do it", re.IGNORECASE),
    re.compile(r"book it|schedule me|sign me up|when can you", re.IGNORECASE),
    re.compile(r"i'll take it|sounds good, (let'?s|when)", re.IGNORECASE),
]


class Outcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    PARTIAL = "PARTIAL"


def is_rep(entry: TranscriptEntry) -> bool:
    return entry.speaker.strip().lower() in REP_SPEAKERS


def _rep_turns(transcript: List[TranscriptEntry]) -> List[TranscriptEntry]:
    return [entry for entry in transcript if is_rep(entry)]


def _homeowner_text(transcript: List[TranscriptEntry], last: int) -> str:
    turns = [entry for entry in transcript if not is_rep(entry)]
    return " ".join(entry.text.lower() for entry in turns[-last:])


def count_pricing_deflections(transcript: List[TranscriptEntry]) -> int:
    """
    Count homeowner price questions the rep answered by stalling
    instead of framing value.
    """
    deflections = 0
    for turn, next_turn in zip(transcript, transcript[1:]):
        if is_rep(turn) or not PRICE_QUESTION.search(turn.text):
            continue
        if (
            is_rep(next_turn)
            and not VALUE_FRAMING.search(next_turn.text)
            and DEFLECTION.search(next_turn.text)
        ):
            deflections += 1
    return deflections


def detect_pressure_tactics(transcript: List[TranscriptEntry]) -> bool:
    rep_text = " ".join(entry.text.lower() for entry in _rep_turns(transcript))
    return any(pattern.search(rep_text) for pattern in PRESSURE_PATTERNS)


def detect_rudeness(transcript: List[TranscriptEntry]) -> bool:
    return any(
        pattern.search(entry.text)
        for entry in _rep_turns(transcript)
        for pattern in RUDE_PATTERNS
    )


def detect_sale_closed(transcript: List[TranscriptEntry]) -> bool:
    final_text = _homeowner_text(transcript, last=2)
    return any(pattern.search(final_text) for pattern in SALE_CLOSED_PATTERNS)


def detect_outcome(transcript: List[TranscriptEntry], total: int) -> Outcome:
    """
    Classify how the conversation ended from the homeowner's last three
    turns, falling back to the session score when they are inconclusive.
    """
    final_text = _homeowner_text(transcript, last=3)

    if any(pattern.search(final_text) for pattern in SUCCESS_PATTERNS):
        return Outcome.SUCCESS
    if any(pattern.search(final_text) for pattern in FAILURE_PATTERNS):
        return Outcome.FAILURE
    if any(pattern.search(final_text) for pattern in PARTIAL_PATTERNS):
        return Outcome.PARTIAL

    if total >= 85:
        return Outcome.SUCCESS
    if total < 60:
        return Outcome.FAILURE
    return Outcome.PARTIAL


def analyze_transcript(transcript: List[TranscriptEntry], total: int) -> Dict[str, Any]:
    """Deterministic signals stored next to the AI grade."""
    return {
        "deductions_pricing_deflections": count_pricing_deflections(transcript),
        "deductions_pressure_tactics": detect_pressure_tactics(transcript),
        "deductions_rude_or_dismissive": detect_rudeness(transcript),
        "outcome": detect_outcome(transcript, total).value,
        "sale_closed": detect_sale_closed(transcript),
    }
