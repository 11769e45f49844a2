"""Тесты запуска сессии и реестра сессий."""
import random

import pytest

from quiz_bot.quiz.history import MemoryHistoryStore, QuestionHistory
from quiz_bot.quiz.models import QuizMode
from quiz_bot.quiz.session import SessionState
from quiz_bot.services.quiz_runner import SessionRegistry, start_session


class TestStartSession:

    async def test_selects_and_records_history(self, pool):
        """Выбранные id попадают в начало истории."""
        history = QuestionHistory(MemoryHistoryStore(["b"]))

        session = await start_session(pool, QuizMode.LEARNING, 3, history, rng=random.Random(1))

        ids = [q.id for q in session.questions]
        assert sorted(ids) == ["a", "c", "d"]
        stored = await history.load()
        assert stored[:3] == ids
        assert stored[3] == "b"

    async def test_session_started(self, pool, timer_factory):
        history = QuestionHistory(MemoryHistoryStore())

        session = await start_session(pool, QuizMode.TEST, 2, history, timer_factory=timer_factory)

        assert session.total == 2
        assert session.state == SessionState.ANSWERING
        assert len(timer_factory.created) == 1

    async def test_second_run_prefers_unseen(self, pool):
        history = QuestionHistory(MemoryHistoryStore())

        first = await start_session(pool, QuizMode.LEARNING, 2, history)
        second = await start_session(pool, QuizMode.LEARNING, 2, history)

        assert not {q.id for q in first.questions} & {q.id for q in second.questions}

    async def test_zero_count_rejected(self, pool):
        history = QuestionHistory(MemoryHistoryStore())

        with pytest.raises(ValueError):
            await start_session(pool, QuizMode.LEARNING, 0, history)

        assert await history.load() == []


class TestSessionRegistry:

    async def test_put_replaces_and_quits_previous(self, pool, timer_factory):
        registry = SessionRegistry()
        history = QuestionHistory(MemoryHistoryStore())
        old = await start_session(pool, QuizMode.TEST, 2, history, timer_factory=timer_factory)
        new = await start_session(pool, QuizMode.TEST, 2, history, timer_factory=timer_factory)

        registry.put(1, old)
        registry.put(1, new)

        assert registry.get(1) is new
        assert old.state == SessionState.ABORTED
        assert timer_factory.created[0].cancelled is True
        assert len(registry) == 1

    async def test_discard(self, pool):
        registry = SessionRegistry()
        session = await start_session(pool, QuizMode.LEARNING, 1, QuestionHistory(MemoryHistoryStore()))
        registry.put(5, session)

        assert registry.discard(5) is session
        assert session.state == SessionState.ABORTED
        assert registry.get(5) is None
        assert registry.discard(5) is None
