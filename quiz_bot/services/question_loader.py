import json
import logging

from quiz_bot.llm.client import chat_completion
from quiz_bot.llm.prompts import JSON_ONLY_SUFFIX, build_conversion_prompt, build_fix_prompt
from quiz_bot.quiz.exceptions import LLMError
from quiz_bot.quiz.parser import load_question_set
from quiz_bot.quiz.validator import ValidationResult

logger = logging.getLogger(__name__)


def dump_questions_json(data) -> str:
    """Pretty JSON for sending a (possibly repaired) question set back to the user."""
    return json.dumps(data, ensure_ascii=False, indent=2)


async def generate_question_set(source_text: str) -> ValidationResult:
    """Ask the LLM to turn free text into quiz JSON and validate the reply."""
    prompt = build_conversion_prompt(source_text)

    # First attempt
    raw = await chat_completion(prompt)
    result = load_question_set(raw) if raw else None

    if result and result.is_valid:
        return result

    # Retry once with a stricter prompt
    logger.info("First conversion attempt didn't produce a valid question set, retrying...")
    raw = await chat_completion(prompt + JSON_ONLY_SUFFIX)
    if not raw:
        if result is not None:
            return result
        raise LLMError("LLM returned no response")
    return load_question_set(raw)


async def fix_question_set(json_text: str, errors: list[str]) -> ValidationResult:
    """Send the broken JSON and its errors to the LLM and validate the corrected reply."""
    raw = await chat_completion(build_fix_prompt(json_text, errors))
    if not raw:
        logger.error("LLM did not return a fixed question set")
        raise LLMError("LLM returned no response")
    return load_question_set(raw)
