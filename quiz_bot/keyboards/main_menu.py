from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton


def main_menu_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="📥 Загрузить вопросы (JSON)", callback_data="upload_questions")],
        [InlineKeyboardButton(text="🤖 Вопросы из текста через ИИ", callback_data="ai_generate")],
        [InlineKeyboardButton(text="📋 Промпт для ИИ", callback_data="ai_prompt")],
        [InlineKeyboardButton(text="📄 Формат JSON", callback_data="json_format")],
    ])


def home_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🏠 Главное меню", callback_data="go_home")],
    ])


def validation_errors_keyboard() -> InlineKeyboardMarkup:
    """Shown under the error list when a question set fails validation."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🤖 Исправить с помощью ИИ", callback_data="ai_fix")],
        [InlineKeyboardButton(text="🏠 Главное меню", callback_data="go_home")],
    ])
