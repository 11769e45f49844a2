"""Exceptions for question loading and validation."""
from typing import Optional


class QuizValidationError(Exception):
    """Base class for problems found while validating a question batch.

    Validation collects these instead of raising them, so the caller sees
    every problem in one pass. ``str(error)`` is the message shown to the user.
    """

    def __init__(self, message: str, index: Optional[int] = None, choice_index: Optional[int] = None):
        super().__init__(message)
        self.index = index
        self.choice_index = choice_index

    @property
    def message(self) -> str:
        return self.args[0]


class StructuralError(QuizValidationError):
    """Input is not an array, or the array is empty."""
    pass


class ItemError(QuizValidationError):
    """An array element is not an object."""
    pass


class FieldError(QuizValidationError):
    """A present field has the wrong type or value."""
    pass


class CorrectnessError(QuizValidationError):
    """No choice of a question is marked correct."""
    pass


class QuestionParseError(QuizValidationError):
    """Text could not be decoded as JSON."""
    pass


class LLMError(Exception):
    """LLM request failed or returned nothing usable."""
    pass
