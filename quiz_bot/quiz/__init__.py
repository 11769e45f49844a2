from quiz_bot.quiz.models import TIMEOUT, Choice, Question, QuizMode
from quiz_bot.quiz.validator import ValidationResult, validate_questions
from quiz_bot.quiz.selector import select_questions
from quiz_bot.quiz.history import QuestionHistory, merge_history
from quiz_bot.quiz.session import QuizSession, SessionState

__all__ = [
    "TIMEOUT",
    "Choice",
    "Question",
    "QuizMode",
    "ValidationResult",
    "validate_questions",
    "select_questions",
    "QuestionHistory",
    "merge_history",
    "QuizSession",
    "SessionState",
]
