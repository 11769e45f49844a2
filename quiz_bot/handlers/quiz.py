import asyncio
import logging

from aiogram import Router, F
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from quiz_bot.db.history_store import SqliteHistoryStore
from quiz_bot.handlers.results import show_results
from quiz_bot.keyboards.main_menu import main_menu_keyboard
from quiz_bot.keyboards.quiz_kb import choice_label, choices_keyboard, next_keyboard
from quiz_bot.keyboards.settings_kb import mode_keyboard
from quiz_bot.quiz.history import QuestionHistory
from quiz_bot.quiz.models import Question, QuizMode
from quiz_bot.quiz.report import is_answer_correct
from quiz_bot.quiz.session import QuizSession, SessionState, choice_index_for_key
from quiz_bot.quiz.timer import asyncio_timer_factory
from quiz_bot.services.quiz_runner import SESSION_STORE, start_session
from quiz_bot.states.quiz_states import QuizFlow
from quiz_bot.utils.text import format_time

logger = logging.getLogger(__name__)

router = Router()

COUNTDOWN_REFRESH = 5  # seconds between edits of the timer badge

# Keeps timeout notifications and countdown edits alive until they finish
_background_tasks: set[asyncio.Task] = set()

# Last question message per user, edited while the countdown runs
_question_messages: dict[int, Message] = {}


async def start_quiz(message: Message, state: FSMContext, user_id: int):
    """Select questions from the loaded pool and send the first one."""
    data = await state.get_data()
    pool = [Question.from_dict(q) for q in data["pool"]]
    mode = QuizMode(data["mode"])
    count = data["question_count"]

    session = await start_session(
        pool,
        mode,
        count,
        QuestionHistory(SqliteHistoryStore(user_id)),
        timer_factory=asyncio_timer_factory(),
        on_timeout=_timeout_notifier(message, state, user_id),
        on_tick=_countdown_notifier(user_id),
    )
    SESSION_STORE.put(user_id, session)

    await state.set_state(QuizFlow.answering_question)
    await state.update_data(session_questions=[q.to_dict() for q in session.questions], answers=None)
    await send_current_question(message, session, user_id)


def question_text(session: QuizSession, with_timer: bool = True) -> str:
    q = session.current_question
    index = session.current_index
    if session.mode == QuizMode.LEARNING:
        badge = "📚 Режим обучения"
    else:
        badge = "📝 Режим теста"
        if with_timer:
            badge += f" · ⏱ {format_time(session.time_remaining)}"

    parts = [f"❓ Вопрос {index + 1} из {session.total}\n{badge}"]
    if q.background_knowledge:
        parts.append(f"📖 {q.background_knowledge}")
    parts.append(q.question)
    parts.append("\n".join(f"{choice_label(i)}. {c.text}" for i, c in enumerate(q.choices)))
    return "\n\n".join(parts)


def feedback_text(question: Question, answer: int) -> str:
    """Learning-mode feedback: correctness plus explanations of the picked and correct choices."""
    chosen = question.choices[answer]
    if is_answer_correct(question, answer):
        lines = ["✅ Правильно!"]
    else:
        lines = ["❌ Неправильно."]

    lines.append(f"\nТвой ответ: {choice_label(answer)}. {chosen.text}")
    if chosen.explanation:
        lines.append(f"💬 {chosen.explanation}")

    for i in question.correct_indexes:
        if i == answer:
            continue
        correct = question.choices[i]
        lines.append(f"\n📝 Правильный ответ: {choice_label(i)}. {correct.text}")
        if correct.explanation:
            lines.append(f"💬 {correct.explanation}")

    if question.explanation:
        lines.append(f"\n💡 {question.explanation}")
    return "\n".join(lines)


def after_answer_text(session: QuizSession) -> str:
    answer = session.current_answer
    if session.feedback_visible:
        return feedback_text(session.current_question, answer)
    return f"📝 Ответ принят: {choice_label(answer)}"


async def send_current_question(message: Message, session: QuizSession, user_id: int):
    q = session.current_question
    sent = await message.answer(
        question_text(session),
        reply_markup=choices_keyboard(session.current_index, len(q.choices)),
    )
    _question_messages[user_id] = sent


async def _show_progress(message: Message, state: FSMContext, session: QuizSession, user_id: int):
    """After an advance: next question, or results when the session is over."""
    if session.state == SessionState.FINISHED:
        _question_messages.pop(user_id, None)
        await show_results(message, state, session, user_id)
    elif session.state == SessionState.ANSWERING:
        await send_current_question(message, session, user_id)


def _spawn(coro) -> None:
    task = asyncio.create_task(coro)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


def _timeout_notifier(message: Message, state: FSMContext, user_id: int):
    def notify(index: int) -> None:
        _spawn(_after_timeout(message, state, user_id, index))
    return notify


def _countdown_notifier(user_id: int):
    def notify(index: int, remaining: int) -> None:
        if remaining % COUNTDOWN_REFRESH == 0:
            _spawn(_refresh_countdown(user_id, index))
    return notify


async def _refresh_countdown(user_id: int, index: int):
    """Re-render the question message with the current time left."""
    session = SESSION_STORE.get(user_id)
    sent = _question_messages.get(user_id)
    if session is None or sent is None:
        return
    # The question may have been answered or timed out meanwhile
    if session.state != SessionState.ANSWERING or session.current_index != index:
        return
    try:
        await sent.edit_text(
            question_text(session),
            reply_markup=choices_keyboard(index, len(session.current_question.choices)),
        )
    except TelegramBadRequest as e:
        logger.warning("Failed to update countdown for user %s: %s", user_id, e)


async def _after_timeout(message: Message, state: FSMContext, user_id: int, index: int):
    session = SESSION_STORE.get(user_id)
    if session is None:
        return
    await message.answer(f"⏱ Время вышло! Вопрос {index + 1} остался без ответа.")
    await _show_progress(message, state, session, user_id)


def _parse_answer_data(data: str) -> tuple[int, int] | None:
    try:
        _, q_index, choice_index = data.split(":")
        return int(q_index), int(choice_index)
    except ValueError:
        return None


@router.callback_query(QuizFlow.answering_question, F.data.startswith("ans:"))
async def answer_via_button(callback: CallbackQuery, state: FSMContext):
    """Handle answers from inline keyboard buttons."""
    await callback.answer()
    session = SESSION_STORE.get(callback.from_user.id)
    parsed = _parse_answer_data(callback.data)
    if session is None or parsed is None:
        return

    q_index, choice_index = parsed
    # Buttons of an earlier question must not answer the current one
    if q_index != session.current_index or not session.select(choice_index):
        return

    await callback.message.edit_text(
        question_text(session, with_timer=False) + "\n\n" + after_answer_text(session),
        reply_markup=next_keyboard(session.current_index, session.is_last_question, session.mode == QuizMode.TEST),
    )


@router.callback_query(QuizFlow.answering_question, F.data.startswith("next:"))
async def next_question(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    session = SESSION_STORE.get(callback.from_user.id)
    if session is None:
        return
    try:
        q_index = int(callback.data.split(":")[1])
    except ValueError:
        return
    if q_index != session.current_index or not session.advance():
        return
    await _show_progress(callback.message, state, session, callback.from_user.id)


@router.callback_query(F.data == "cancel_quiz")
async def cancel_quiz(callback: CallbackQuery, state: FSMContext):
    """Abort the running quiz and go back to mode selection with the same questions."""
    SESSION_STORE.discard(callback.from_user.id)
    _question_messages.pop(callback.from_user.id, None)
    await callback.answer()

    data = await state.get_data()
    if not data.get("pool"):
        await state.clear()
        await callback.message.answer("Тест отменён.", reply_markup=main_menu_keyboard())
        return

    await state.set_state(QuizFlow.choosing_mode)
    await callback.message.answer(
        "Тест отменён. Выбери режим, чтобы начать заново:",
        reply_markup=mode_keyboard(),
    )


@router.message(QuizFlow.answering_question)
async def answer_via_text(message: Message, state: FSMContext):
    """Handle answers typed as 1-4 or A-D."""
    session = SESSION_STORE.get(message.from_user.id)
    if session is None or not session.is_active:
        return

    key = message.text.strip() if message.text else ""
    choice_index = choice_index_for_key(key) if key else None
    if choice_index is None or choice_index >= len(session.current_question.choices):
        if not session.is_locked:
            await message.answer("Выбери вариант кнопкой или отправь номер (1-4) или букву (A-D).")
        return

    if not session.select_key(key):
        return

    await message.answer(
        after_answer_text(session),
        reply_markup=next_keyboard(session.current_index, session.is_last_question, session.mode == QuizMode.TEST),
    )
