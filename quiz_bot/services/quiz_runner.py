import logging
import random
from typing import Callable, Optional

from quiz_bot.quiz.history import QuestionHistory
from quiz_bot.quiz.models import Question, QuizMode
from quiz_bot.quiz.selector import select_questions
from quiz_bot.quiz.session import QuizSession
from quiz_bot.quiz.timer import TimerFactory

logger = logging.getLogger(__name__)


class SessionRegistry:
    """At most one live quiz session per user."""

    def __init__(self):
        self._sessions: dict[int, QuizSession] = {}

    def get(self, user_id: int) -> Optional[QuizSession]:
        return self._sessions.get(user_id)

    def put(self, user_id: int, session: QuizSession) -> None:
        previous = self._sessions.get(user_id)
        if previous is not None and previous is not session:
            previous.quit()
        self._sessions[user_id] = session

    def discard(self, user_id: int) -> Optional[QuizSession]:
        """Forget the user's session, quitting it if it is still running."""
        session = self._sessions.pop(user_id, None)
        if session is not None:
            session.quit()
        return session

    def __len__(self) -> int:
        return len(self._sessions)


SESSION_STORE = SessionRegistry()


async def start_session(
    questions: list[Question],
    mode: QuizMode,
    desired_count: int,
    history: QuestionHistory,
    *,
    timer_factory: Optional[TimerFactory] = None,
    on_timeout: Optional[Callable[[int], None]] = None,
    on_tick: Optional[Callable[[int, int], None]] = None,
    rng: Optional[random.Random] = None,
) -> QuizSession:
    """Select a history-biased subset, remember it in history, and start the session."""
    seen = await history.load()
    selected = select_questions(questions, desired_count, seen, rng)
    if not selected:
        raise ValueError("No questions selected for the session")

    await history.record([q.id for q in selected])

    session = QuizSession(
        selected, mode, timer_factory=timer_factory, on_timeout=on_timeout, on_tick=on_tick
    )
    seen_ids = set(seen)
    unseen = sum(1 for q in selected if q.id not in seen_ids)
    logger.info("Selected %d of %d questions (%d unseen)", len(selected), len(questions), unseen)
    session.start()
    return session
