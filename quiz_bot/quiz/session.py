"""Per-question state machine for one quiz run.

ANSWERING -> FEEDBACK (learning) or ADVANCING (test) -> next ANSWERING | FINISHED.
QUIT is accepted from any state and ends in ABORTED without an answer log.

Disallowed input (answering a locked question, advancing before an answer,
anything after the session ended) is a silent no-op: the methods return
False and change nothing.
"""
import logging
from enum import Enum
from typing import Callable, Optional

from quiz_bot.quiz.models import TIMEOUT, Question, QuizMode
from quiz_bot.quiz.timer import TimerFactory, TimerHandle

logger = logging.getLogger(__name__)

TEST_MODE_TIME_LIMIT = 30  # ticks (seconds) per question

AnswerRecord = Optional[int]

_KEY_TO_CHOICE = {
    "1": 0, "a": 0,
    "2": 1, "b": 1,
    "3": 2, "c": 2,
    "4": 3, "d": 3,
}


def choice_index_for_key(key: str) -> Optional[int]:
    """Map a keyboard key (1-4 or A-D, any case) to a choice index."""
    return _KEY_TO_CHOICE.get(key.strip().lower())


class SessionState(str, Enum):
    ANSWERING = "answering"
    FEEDBACK = "feedback"
    ADVANCING = "advancing"
    FINISHED = "finished"
    ABORTED = "aborted"


class QuizSession:
    def __init__(
        self,
        questions: list[Question],
        mode: QuizMode,
        *,
        time_limit: int = TEST_MODE_TIME_LIMIT,
        timer_factory: Optional[TimerFactory] = None,
        on_timeout: Optional[Callable[[int], None]] = None,
        on_tick: Optional[Callable[[int, int], None]] = None,
        on_finish: Optional[Callable[[list[AnswerRecord]], None]] = None,
    ):
        if not questions:
            raise ValueError("A quiz session needs at least one question")
        self.questions = list(questions)
        self.mode = QuizMode(mode)
        self.time_limit = time_limit
        self.on_timeout = on_timeout
        self.on_tick = on_tick
        self.on_finish = on_finish

        self._timer_factory = timer_factory
        self._timer: Optional[TimerHandle] = None
        self._answers: list[AnswerRecord] = [None] * len(self.questions)
        self._index = 0
        self._state = SessionState.ANSWERING
        self._started = False
        self.time_remaining = time_limit

    # --- read-only view -------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Question:
        return self.questions[self._index]

    @property
    def current_answer(self) -> AnswerRecord:
        return self._answers[self._index]

    @property
    def answers(self) -> list[AnswerRecord]:
        return list(self._answers)

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def is_last_question(self) -> bool:
        return self._index == len(self.questions) - 1

    @property
    def is_locked(self) -> bool:
        return self._answers[self._index] is not None

    @property
    def feedback_visible(self) -> bool:
        return self._state == SessionState.FEEDBACK

    @property
    def can_advance(self) -> bool:
        return self._state in (SessionState.FEEDBACK, SessionState.ADVANCING)

    @property
    def is_active(self) -> bool:
        return self._state not in (SessionState.FINISHED, SessionState.ABORTED)

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and not self._timer.cancelled

    @property
    def answer_log(self) -> Optional[list[AnswerRecord]]:
        """Final answers in question order; only available once finished."""
        if self._state != SessionState.FINISHED:
            return None
        return list(self._answers)

    # --- transitions ----------------------------------------------------

    def start(self) -> None:
        if self._started or not self.is_active:
            return
        self._started = True
        logger.info("Quiz session started: %d questions, mode=%s", self.total, self.mode.value)
        self._arm_timer()

    def select(self, choice_index: int) -> bool:
        """Record an answer for the current question and lock it."""
        if self._state != SessionState.ANSWERING or self.is_locked:
            return False
        if not 0 <= choice_index < len(self.current_question.choices):
            return False

        self._answers[self._index] = choice_index
        self._cancel_timer()
        if self.mode == QuizMode.LEARNING:
            self._state = SessionState.FEEDBACK
        else:
            self._state = SessionState.ADVANCING
        return True

    def select_key(self, key: str) -> bool:
        choice_index = choice_index_for_key(key)
        if choice_index is None:
            return False
        return self.select(choice_index)

    def advance(self) -> bool:
        if not self.can_advance:
            return False
        self._move_on()
        return True

    def tick(self) -> None:
        """One unit of countdown. Stale ticks outside ANSWERING are ignored."""
        if self.mode != QuizMode.TEST or self._state != SessionState.ANSWERING or self.is_locked:
            return
        self.time_remaining -= 1
        if self.time_remaining > 0:
            if self.on_tick:
                self.on_tick(self._index, self.time_remaining)
            return

        index = self._index
        self._answers[index] = TIMEOUT
        self._cancel_timer()
        logger.info("Question %d timed out", index + 1)
        self._move_on()
        if self.on_timeout:
            self.on_timeout(index)

    def quit(self) -> None:
        self._cancel_timer()
        if not self.is_active:
            return
        self._state = SessionState.ABORTED
        logger.info("Quiz session aborted at question %d of %d", self._index + 1, self.total)

    # --- internals ------------------------------------------------------

    def _move_on(self) -> None:
        self._cancel_timer()
        if self.is_last_question:
            self._state = SessionState.FINISHED
            logger.info("Quiz session finished")
            if self.on_finish:
                self.on_finish(list(self._answers))
            return

        self._index += 1
        self._state = SessionState.ANSWERING
        self._arm_timer()

    def _arm_timer(self) -> None:
        self._cancel_timer()
        self.time_remaining = self.time_limit
        if self.mode != QuizMode.TEST or self.is_locked or self._timer_factory is None:
            return
        self._timer = self._timer_factory(self.tick)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
