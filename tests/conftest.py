"""Общие фикстуры для тестов квиз-бота."""
import pytest

from quiz_bot.quiz.models import Choice, Question


class ManualTimer:
    """Таймер, который тикает только по команде теста."""

    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.callback()


@pytest.fixture
def timer_factory():
    """Фабрика ручных таймеров; созданные таймеры лежат в .created."""
    created = []

    def factory(callback):
        timer = ManualTimer(callback)
        created.append(timer)
        return timer

    factory.created = created
    return factory


@pytest.fixture
def raw_question():
    """Один корректный вопрос в виде сырого JSON-объекта."""
    return {
        "id": "q1",
        "question": "What is a Firewall?",
        "background_knowledge": "A firewall is a network security device.",
        "explanation": "Firewalls use rules to block unauthorized access.",
        "choices": [
            {"text": "A barrier blocking unauthorized networks", "is_correct": True, "explanation": "It filters traffic."},
            {"text": "A kind of antivirus", "is_correct": False, "explanation": "Antivirus scans files."},
        ],
    }


def make_question(qid: str, correct: int = 0, choice_count: int = 4) -> Question:
    return Question(
        id=qid,
        question=f"Question {qid}?",
        choices=[
            Choice(text=f"{qid}-{i}", is_correct=(i == correct), explanation=f"why {qid}-{i}")
            for i in range(choice_count)
        ],
        explanation=f"Explanation {qid}",
    )


@pytest.fixture
def pool():
    """Пул из четырёх вопросов a, b, c, d; правильный ответ всегда первый."""
    return [make_question(qid) for qid in ("a", "b", "c", "d")]


@pytest.fixture
def question_factory():
    return make_question
