from aiogram import Router, F
from aiogram.types import CallbackQuery, Message
from aiogram.fsm.context import FSMContext

from quiz_bot.keyboards.main_menu import main_menu_keyboard
from quiz_bot.keyboards.quiz_kb import results_keyboard
from quiz_bot.keyboards.settings_kb import mode_keyboard
from quiz_bot.quiz.models import TIMEOUT, Question, QuizMode
from quiz_bot.quiz.report import (
    correct_choice_text,
    format_question_for_ai,
    format_results_for_ai,
    is_answer_correct,
    score,
)
from quiz_bot.quiz.session import QuizSession
from quiz_bot.services.quiz_runner import SESSION_STORE
from quiz_bot.states.quiz_states import QuizFlow
from quiz_bot.utils.text import split_message

router = Router()


def _answer_display(question: Question, answer: int | None) -> str:
    if answer is None:
        return "пропущен"
    if answer == TIMEOUT:
        return "время вышло"
    return question.choices[answer].text


def format_results(questions: list[Question], answers: list[int | None]) -> str:
    result = score(questions, answers)
    percent = result.percent

    # Pick an emoji based on score
    if percent >= 90:
        emoji = "🏆"
        comment = "Отличный результат!"
    elif percent >= 70:
        emoji = "👍"
        comment = "Хороший результат!"
    elif percent >= 50:
        emoji = "📖"
        comment = "Неплохо, но есть над чем поработать."
    else:
        emoji = "💪"
        comment = "Нужно ещё потренироваться. Ты справишься!"

    lines = [
        "📊 Результаты\n",
        f"{emoji} Правильных: {result.correct} из {result.total} ({percent}%)",
        f"{comment}\n",
    ]
    for i, (q, a) in enumerate(zip(questions, answers)):
        correct = is_answer_correct(q, a)
        lines.append(f"{'✅' if correct else '❌'} {i + 1}. {q.question}")
        lines.append(f"Твой ответ: {_answer_display(q, a)}")
        if not correct:
            lines.append(f"Правильный ответ: {correct_choice_text(q)}")
        if q.explanation:
            lines.append(f"💡 {q.explanation}")
        lines.append("")
    return "\n".join(lines).rstrip()


async def show_results(message: Message, state: FSMContext, session: QuizSession, user_id: int):
    """Show the final quiz results."""
    answers = session.answer_log or session.answers
    SESSION_STORE.discard(user_id)

    await state.set_state(QuizFlow.viewing_results)
    await state.update_data(answers=answers)

    chunks = split_message(format_results(session.questions, answers))
    for chunk in chunks[:-1]:
        await message.answer(chunk)
    await message.answer(chunks[-1], reply_markup=results_keyboard(len(session.questions)))


@router.callback_query(QuizFlow.viewing_results, F.data == "results_for_ai")
async def results_for_ai(callback: CallbackQuery, state: FSMContext):
    """Send the plain-text summary meant to be pasted into an AI chat."""
    await callback.answer()
    data = await state.get_data()
    questions = [Question.from_dict(q) for q in data.get("session_questions", [])]
    answers = data.get("answers") or []
    if not questions:
        await callback.message.answer("Нет результатов.", reply_markup=main_menu_keyboard())
        return

    for chunk in split_message(format_results_for_ai(questions, answers)):
        await callback.message.answer(chunk)


@router.callback_query(F.data.startswith("ask_ai:"))
async def question_for_ai(callback: CallbackQuery, state: FSMContext):
    """Send one answered question as a prompt to paste into an AI chat."""
    await callback.answer()
    try:
        q_index = int(callback.data.split(":")[1])
    except ValueError:
        return
    if q_index < 0:
        return

    session = SESSION_STORE.get(callback.from_user.id)
    if session is not None:
        # Nothing is revealed while a test is running
        if session.mode == QuizMode.TEST or q_index >= session.total:
            return
        question = session.questions[q_index]
        answer = session.answers[q_index]
        if answer is None:
            return
    else:
        data = await state.get_data()
        questions = data.get("session_questions") or []
        answers = data.get("answers") or []
        if q_index >= min(len(questions), len(answers)):
            await callback.message.answer("Нет результатов.", reply_markup=main_menu_keyboard())
            return
        question = Question.from_dict(questions[q_index])
        answer = answers[q_index]

    await callback.message.answer(format_question_for_ai(question, answer))


@router.callback_query(F.data == "restart_quiz")
async def restart_quiz(callback: CallbackQuery, state: FSMContext):
    """Take another quiz from the same loaded questions."""
    # An old results button may be pressed while a new quiz is running
    SESSION_STORE.discard(callback.from_user.id)
    await callback.answer()
    data = await state.get_data()
    if not data.get("pool"):
        await state.clear()
        await callback.message.answer("Сначала загрузи вопросы.", reply_markup=main_menu_keyboard())
        return

    await state.set_state(QuizFlow.choosing_mode)
    await callback.message.answer(
        f"📚 Загружено вопросов: {len(data['pool'])}\n\nВыбери режим:",
        reply_markup=mode_keyboard(),
    )
