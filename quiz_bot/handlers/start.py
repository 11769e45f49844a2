from aiogram import Router, F
from aiogram.filters import CommandStart
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from quiz_bot.db.queries import ensure_user
from quiz_bot.keyboards.main_menu import main_menu_keyboard
from quiz_bot.services.quiz_runner import SESSION_STORE

router = Router()

WELCOME_TEXT = (
    "👋 Привет! Я Quiz Bot. Загрузи свои вопросы в формате JSON, "
    "и я устрою по ним тренировку или тест.\n\n"
    "Выбери, что хочешь сделать:"
)


@router.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext):
    SESSION_STORE.discard(message.from_user.id)
    await state.clear()
    await ensure_user(message.from_user.id, message.from_user.username, message.from_user.first_name)
    await message.answer(WELCOME_TEXT, reply_markup=main_menu_keyboard())


@router.callback_query(F.data == "go_home")
async def go_home(callback: CallbackQuery, state: FSMContext):
    SESSION_STORE.discard(callback.from_user.id)
    await state.clear()
    await callback.message.edit_text(WELCOME_TEXT, reply_markup=main_menu_keyboard())
    await callback.answer()
