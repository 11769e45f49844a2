"""Тесты asyncio-таймера обратного отсчёта."""
import asyncio

from quiz_bot.quiz.models import TIMEOUT, QuizMode
from quiz_bot.quiz.session import QuizSession, SessionState
from quiz_bot.quiz.timer import AsyncioTicker, asyncio_timer_factory


class TestAsyncioTicker:

    async def test_ticks_until_cancelled(self):
        ticks = []
        ticker = AsyncioTicker(lambda: ticks.append(1), interval=0.01)

        await asyncio.sleep(0.055)
        ticker.cancel()
        count = len(ticks)
        await asyncio.sleep(0.03)

        assert count >= 2
        assert len(ticks) == count
        assert ticker.cancelled is True

    async def test_cancel_from_callback(self):
        """Колбэк, отменивший таймер, больше не вызывается."""
        calls = []

        def callback():
            calls.append(1)
            ticker.cancel()

        ticker = AsyncioTicker(callback, interval=0.01)
        await asyncio.sleep(0.05)

        assert calls == [1]

    async def test_cancel_twice(self):
        ticker = AsyncioTicker(lambda: None, interval=0.01)

        ticker.cancel()
        ticker.cancel()

        assert ticker.cancelled is True

    async def test_failing_callback_stops_ticker(self):
        calls = []

        def callback():
            calls.append(1)
            raise RuntimeError("boom")

        ticker = AsyncioTicker(callback, interval=0.01)
        await asyncio.sleep(0.05)

        assert calls == [1]
        assert ticker.cancelled is True


class TestSessionWithRealTimer:

    async def test_timeout_advances_session(self, pool):
        """Реальный таймер доводит вопрос до таймаута и переходит дальше."""
        timeouts = []
        session = QuizSession(
            pool[:2],
            QuizMode.TEST,
            time_limit=3,
            timer_factory=asyncio_timer_factory(0.01),
            on_timeout=timeouts.append,
        )
        session.start()

        await asyncio.sleep(0.3)

        assert timeouts[:2] == [0, 1]
        assert session.answers == [TIMEOUT, TIMEOUT]
        assert session.state == SessionState.FINISHED
        assert session.timer_running is False

    async def test_answer_stops_countdown(self, pool):
        session = QuizSession(pool, QuizMode.TEST, time_limit=3, timer_factory=asyncio_timer_factory(0.01))
        session.start()

        session.select(0)
        await asyncio.sleep(0.06)

        assert session.answers[0] == 0
        assert session.current_index == 0
        assert session.state == SessionState.ADVANCING
