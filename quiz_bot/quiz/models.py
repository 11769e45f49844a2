"""Quiz domain models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# Answer value recorded when the countdown expires before a choice is made.
# Distinct from None (never answered) and from any choice index.
TIMEOUT = -1


class QuizMode(str, Enum):
    LEARNING = "learning"
    TEST = "test"


@dataclass
class Choice:
    """Single answer option."""
    text: str
    is_correct: bool = False
    explanation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Choice":
        return cls(
            text=data["text"],
            is_correct=data.get("is_correct", False),
            explanation=data.get("explanation"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"text": self.text, "is_correct": self.is_correct}
        if self.explanation is not None:
            result["explanation"] = self.explanation
        return result


@dataclass
class Question:
    """Validated multiple-choice question."""
    id: str
    question: str
    choices: list[Choice] = field(default_factory=list)
    background_knowledge: Optional[str] = None
    explanation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        """Build from an already validated dict."""
        return cls(
            id=data["id"],
            question=data["question"],
            choices=[Choice.from_dict(c) for c in data["choices"]],
            background_knowledge=data.get("background_knowledge"),
            explanation=data.get("explanation"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id, "question": self.question}
        if self.background_knowledge is not None:
            result["background_knowledge"] = self.background_knowledge
        if self.explanation is not None:
            result["explanation"] = self.explanation
        result["choices"] = [c.to_dict() for c in self.choices]
        return result

    @property
    def correct_indexes(self) -> list[int]:
        return [i for i, c in enumerate(self.choices) if c.is_correct]
