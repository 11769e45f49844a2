from aiogram import Router, F
from aiogram.types import CallbackQuery, Message
from aiogram.fsm.context import FSMContext

from quiz_bot.handlers.quiz import start_quiz
from quiz_bot.keyboards.main_menu import main_menu_keyboard
from quiz_bot.keyboards.settings_kb import mode_keyboard, question_count_keyboard
from quiz_bot.quiz.models import QuizMode
from quiz_bot.services.quiz_runner import SESSION_STORE
from quiz_bot.states.quiz_states import QuizFlow

router = Router()

MODE_NAMES = {
    QuizMode.LEARNING.value: "📚 Обучение",
    QuizMode.TEST.value: "📝 Тест",
}


async def _ask_for_questions(callback: CallbackQuery, state: FSMContext):
    await state.clear()
    await callback.message.answer("Сначала загрузи вопросы.", reply_markup=main_menu_keyboard())


@router.callback_query(QuizFlow.choosing_mode, F.data.startswith("mode:"))
async def mode_selected(callback: CallbackQuery, state: FSMContext):
    mode = callback.data.split(":")[1]
    await callback.answer()
    if mode not in MODE_NAMES:
        return

    data = await state.get_data()
    pool = data.get("pool")
    if not pool:
        await _ask_for_questions(callback, state)
        return

    await state.update_data(mode=mode)
    await state.set_state(QuizFlow.choosing_question_count)
    await callback.message.edit_text(
        f"Режим: {MODE_NAMES[mode]}\n\nСколько вопросов в тесте?",
        reply_markup=question_count_keyboard(len(pool)),
    )


@router.callback_query(F.data == "back_to_mode")
async def back_to_mode(callback: CallbackQuery, state: FSMContext):
    # An old button may be pressed while a quiz is running
    SESSION_STORE.discard(callback.from_user.id)
    await callback.answer()

    data = await state.get_data()
    if not data.get("pool"):
        await _ask_for_questions(callback, state)
        return

    await state.set_state(QuizFlow.choosing_mode)
    await callback.message.edit_text("Выбери режим:", reply_markup=mode_keyboard())


@router.callback_query(QuizFlow.choosing_question_count, F.data.startswith("count:"))
async def count_selected(callback: CallbackQuery, state: FSMContext):
    value = callback.data.split(":")[1]
    await callback.answer()

    if value == "custom":
        await state.set_state(QuizFlow.entering_custom_count)
        await callback.message.edit_text("✏️ Напиши, сколько вопросов ты хочешь (число от 1):")
        return

    await state.update_data(question_count=int(value))

    await start_quiz(callback.message, state, callback.from_user.id)


@router.message(QuizFlow.entering_custom_count)
async def custom_count_entered(message: Message, state: FSMContext):
    text = message.text.strip() if message.text else ""
    if not text.isdigit() or int(text) < 1:
        await message.answer("Нужно целое число от 1. Попробуй ещё раз:")
        return

    await state.update_data(question_count=int(text))

    await start_quiz(message, state, message.from_user.id)
