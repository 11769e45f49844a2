import json
import logging
import re
from typing import Any

from quiz_bot.quiz.exceptions import QuestionParseError
from quiz_bot.quiz.validator import ValidationResult, validate_questions

logger = logging.getLogger(__name__)

_FENCED_RE = re.compile(r"```(?:json)?\s*(.+?)\s*```", re.DOTALL)
_ARRAY_RE = re.compile(r"(\[\s*\{.+}\s*])", re.DOTALL)


def parse_questions_json(raw_text: str) -> Any:
    """Decode question JSON from pasted text or an LLM reply.

    Accepts plain JSON, JSON inside a markdown code block, or an array of
    objects embedded in surrounding text. Raises QuestionParseError otherwise.
    """
    if not raw_text or not raw_text.strip():
        raise QuestionParseError("Input is empty.")

    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as e:
        first_error = e

    # Try extracting from markdown code block
    match = _FENCED_RE.search(raw_text)
    if match:
        data = _try_parse_json(match.group(1))
        if data is not None:
            return data

    # Try finding array in the text
    match = _ARRAY_RE.search(raw_text)
    if match:
        data = _try_parse_json(match.group(1))
        if data is not None:
            return data

    raise QuestionParseError(f"Invalid JSON format: {first_error}")


def _try_parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None


def load_question_set(raw_text: str) -> ValidationResult:
    """Parse and validate in one step. A decode failure becomes a one-error result."""
    try:
        data = parse_questions_json(raw_text)
    except QuestionParseError as e:
        logger.info("Rejected question input: %s", e)
        return ValidationResult(is_valid=False, errors=[e])
    return validate_questions(data)
