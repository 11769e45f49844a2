from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from quiz_bot.config import settings
from quiz_bot.quiz.models import QuizMode


def mode_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="📚 Обучение", callback_data=f"mode:{QuizMode.LEARNING.value}")],
        [InlineKeyboardButton(text="📝 Тест (30 сек. на вопрос)", callback_data=f"mode:{QuizMode.TEST.value}")],
        [InlineKeyboardButton(text="🏠 Главное меню", callback_data="go_home")],
    ])


def question_count_keyboard(pool_size: int) -> InlineKeyboardMarkup:
    counts = sorted({settings.DEFAULT_QUESTION_COUNT, *settings.QUESTION_COUNTS})
    buttons = []
    for count in counts:
        if count >= pool_size:
            break
        buttons.append([InlineKeyboardButton(
            text=f"{count} вопросов",
            callback_data=f"count:{count}",
        )])
    buttons.append([InlineKeyboardButton(text=f"Все ({pool_size})", callback_data=f"count:{pool_size}")])
    buttons.append([InlineKeyboardButton(text="✏️ Другое число", callback_data="count:custom")])
    buttons.append([InlineKeyboardButton(text="🔙 Назад к выбору режима", callback_data="back_to_mode")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)
