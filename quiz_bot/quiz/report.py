from dataclasses import dataclass
from typing import Optional

from quiz_bot.quiz.models import TIMEOUT, Question


@dataclass
class QuizScore:
    correct: int
    total: int

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 0
        # Round half up, not Python's banker's rounding
        return int(self.correct * 100 / self.total + 0.5)


def is_answer_correct(question: Question, answer: Optional[int]) -> bool:
    if answer is None or answer == TIMEOUT:
        return False
    if not 0 <= answer < len(question.choices):
        return False
    return question.choices[answer].is_correct


def score(questions: list[Question], answers: list[Optional[int]]) -> QuizScore:
    correct = sum(1 for q, a in zip(questions, answers) if is_answer_correct(q, a))
    return QuizScore(correct=correct, total=len(questions))


def correct_choice_text(question: Question) -> str:
    for choice in question.choices:
        if choice.is_correct:
            return choice.text
    return "Unknown"


def answer_text(question: Question, answer: Optional[int]) -> str:
    if answer is None:
        return "Skipped"
    if answer == TIMEOUT:
        return "Time ran out"
    return question.choices[answer].text


def format_results_for_ai(questions: list[Question], answers: list[Optional[int]]) -> str:
    """Plain-text summary of a finished quiz, ready to paste into a chat with an AI."""
    result = score(questions, answers)
    text = f"Quiz Results:\nScore: {result.correct} / {result.total} ({result.percent}%)\n\n"
    for i, (q, a) in enumerate(zip(questions, answers)):
        correct = is_answer_correct(q, a)
        text += f"Question {i + 1}: {q.question}\n"
        text += f"Status: {'Correct' if correct else 'Incorrect'}\n"
        text += f"User Answer: {answer_text(q, a)}\n"
        if not correct:
            text += f"Correct Answer: {correct_choice_text(q)}\n"
        text += f"Explanation: {q.explanation or 'None provided'}\n\n"
    text += "Please analyze these results and tell me what areas I need to study more."
    return text


def format_question_for_ai(question: Question, answer: Optional[int]) -> str:
    correct = is_answer_correct(question, answer)
    return (
        f"I just answered a quiz question and got it {'correct' if correct else 'wrong'}.\n"
        f"Question: {question.question}\n"
        f"My Answer: {answer_text(question, answer)}\n"
        f"Correct Answer: {correct_choice_text(question)}\n"
        f"Explanation given: {question.explanation or 'None provided'}\n\n"
        f"Can you explain this concept in more detail for me?"
    )
