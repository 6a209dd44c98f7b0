# dooriq/services/grading/chains.py
from typing import Any, Dict, List

from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from dooriq.logging_config import app_logger
from dooriq.schema.grading import CATEGORY_NAMES, TranscriptEntry
from dooriq.settings import settings


class AIGradingError(Exception):
    """The AI grader could not produce a grading payload."""


GRADING_SYSTEM_PROMPT = """You grade door-to-door sales rehearsals.
A sales rep is pitching a homeowner. Score the rep on each rubric category
and list any deductions for specific bad behavior (interrupting the
homeowner, pressure tactics, made-up information, rude or dismissive
language, deflecting pricing questions).

Category maximums add up to 100:
{rubric}

Respond with a single JSON object and nothing else:
{{
  "opening_introduction": {{"points": <number>, "reason": "<text>"}},
  "rapport_building": {{"points": <number>, "reason": "<text>"}},
  "needs_discovery": {{"points": <number>, "reason": "<text>"}},
  "value_communication": {{"points": <number>, "reason": "<text>"}},
  "objection_handling": {{"points": <number>, "reason": "<text>"}},
  "closing": {{"points": <number>, "reason": "<text>"}},
  "deductions": [{{"reason": "<text>", "points": <negative number>}}]
}}"""

CATEGORY_MAX_POINTS = {
    "opening_introduction": 15,
    "rapport_building": 15,
    "needs_discovery": 20,
    "value_communication": 15,
    "objection_handling": 20,
    "closing": 15,
}


def format_rubric() -> str:
    return "\n".join(
        f"- {name}: 0-{CATEGORY_MAX_POINTS[name]}" for name in CATEGORY_NAMES
    )


def format_transcript(entries: List[TranscriptEntry]) -> str:
    return "\n".join(
        f"{entry.speaker.strip().title()}: {entry.text.strip()}" for entry in entries
    )


def create_chat_model() -> ChatOpenAI:
    """Initialize the grading chat model"""
    return ChatOpenAI(
        temperature=0,
        model=settings.OPENAI_MODEL,
        api_key=settings.OPENAI_API_KEY,
        timeout=settings.OPENAI_TIMEOUT,
        max_retries=settings.OPENAI_MAX_RETRIES,
    )


def create_grading_chain() -> Runnable:
    """Create chain for transcript grading"""
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", GRADING_SYSTEM_PROMPT),
            ("human", "Transcript:\n{transcript}"),
        ]
    ).partial(rubric=format_rubric())
    return prompt | create_chat_model() | JsonOutputParser()


async def request_ai_grading(transcript: List[TranscriptEntry]) -> Dict[str, Any]:
    """
    Ask the AI grader for a grading payload.

    The result has the AIGradingInput shape but is not validated here;
    calculate_grade tolerates whatever comes back.
    """
    if not settings.OPENAI_API_KEY:
        raise AIGradingError("OpenAI API key not configured")

    chain = create_grading_chain()
    try:
        payload = await chain.ainvoke({"transcript": format_transcript(transcript)})
    except Exception as e:
        app_logger.error(f"AI grading request failed: {e}")
        raise AIGradingError(f"AI grading request failed: {e}") from e

    if not isinstance(payload, dict):
        raise AIGradingError(
            f"AI grader returned {type(payload).__name__}, expected a JSON object"
        )

    app_logger.info(f"AI grading returned {len(payload)} fields")
    return payload
