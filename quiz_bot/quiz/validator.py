import copy
import uuid
from dataclasses import dataclass, field
from typing import Any

from quiz_bot.quiz.exceptions import (
    CorrectnessError,
    FieldError,
    ItemError,
    QuizValidationError,
    StructuralError,
)
from quiz_bot.quiz.models import Question

OPTIONAL_TEXT_FIELDS = ("background_knowledge", "explanation")


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[QuizValidationError] = field(default_factory=list)
    data: list[Question] = field(default_factory=list)
    # Deep copy of the input with ids generated and is_correct defaulted.
    # Filled even when the batch is invalid so it can be offered back to the user.
    normalized: Any = None

    @property
    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]


def validate_questions(raw: Any) -> ValidationResult:
    """Validate and repair an untyped question batch.

    The batch is all-or-nothing: any error anywhere leaves ``data`` empty.
    The caller's object is never modified; repairs go to ``normalized``.
    """
    if not isinstance(raw, list):
        return ValidationResult(
            is_valid=False,
            errors=[StructuralError("Input must be a top-level JSON array of questions.")],
            normalized=copy.deepcopy(raw),
        )
    if not raw:
        return ValidationResult(
            is_valid=False,
            errors=[StructuralError("No questions found in the array. The array is empty.")],
            normalized=[],
        )

    normalized = copy.deepcopy(raw)
    errors: list[QuizValidationError] = []
    seen_ids: set[str] = set()

    for index, item in enumerate(normalized):
        if not isinstance(item, dict):
            errors.append(ItemError(f"Item at index {index} is not a valid object.", index))
            continue

        errors.extend(_check_id(item, index, seen_ids))
        errors.extend(_check_question_fields(item, index))
        errors.extend(_check_choices(item, index))

    if errors:
        return ValidationResult(is_valid=False, errors=errors, normalized=normalized)

    return ValidationResult(
        is_valid=True,
        data=[Question.from_dict(item) for item in normalized],
        normalized=normalized,
    )


def _check_id(item: dict, index: int, seen_ids: set[str]) -> list[QuizValidationError]:
    # Missing, null and "" count as absent and get a fresh id
    if item.get("id") in (None, ""):
        item["id"] = _new_id(seen_ids)
    elif not isinstance(item["id"], str):
        return [FieldError(f"Question at index {index} 'id' must be a string if provided.", index)]
    elif item["id"] in seen_ids:
        return [FieldError(
            f"Question at index {index} has duplicate 'id' \"{item['id']}\"; ids must be unique.", index
        )]
    seen_ids.add(item["id"])
    return []


def _new_id(seen_ids: set[str]) -> str:
    while True:
        candidate = str(uuid.uuid4())
        if candidate not in seen_ids:
            return candidate


def _check_question_fields(item: dict, index: int) -> list[QuizValidationError]:
    errors: list[QuizValidationError] = []
    text = item.get("question")
    if not isinstance(text, str) or not text.strip():
        errors.append(FieldError(f"Question at index {index} must have a non-empty string 'question'.", index))
    for name in OPTIONAL_TEXT_FIELDS:
        if name in item and not isinstance(item[name], str):
            errors.append(FieldError(f"Question at index {index} '{name}' must be a string if provided.", index))
    return errors


def _check_choices(item: dict, index: int) -> list[QuizValidationError]:
    choices = item.get("choices")
    if not isinstance(choices, list):
        return [FieldError(f"Question at index {index} must have a 'choices' array.", index)]
    if not choices:
        return [FieldError(f"Question at index {index} 'choices' array must not be empty.", index)]

    errors: list[QuizValidationError] = []
    has_correct_choice = False

    for c_index, choice in enumerate(choices):
        if not isinstance(choice, dict):
            errors.append(FieldError(f"Choice {c_index} in question {index} is not a valid object.", index, c_index))
            continue
        if not isinstance(choice.get("text"), str):
            errors.append(FieldError(f"Choice {c_index} in question {index} must have a string 'text'.", index, c_index))
        if "explanation" in choice and not isinstance(choice["explanation"], str):
            errors.append(FieldError(
                f"Choice {c_index} in question {index} 'explanation' must be a string if provided.", index, c_index
            ))
        if "is_correct" not in choice:
            choice["is_correct"] = False
        elif not isinstance(choice["is_correct"], bool):
            errors.append(FieldError(
                f"Choice {c_index} in question {index} 'is_correct' must be a boolean.", index, c_index
            ))
        if choice["is_correct"] is True:
            has_correct_choice = True

    if not has_correct_choice:
        errors.append(CorrectnessError(
            f"Question at index {index} must have at least one choice where 'is_correct' is true.", index
        ))
    return errors
