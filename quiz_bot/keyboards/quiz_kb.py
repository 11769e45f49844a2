from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton


def choice_label(index: int) -> str:
    return chr(ord("A") + index)


def choices_keyboard(question_index: int, choice_count: int) -> InlineKeyboardMarkup:
    """One button per choice; callback data carries the question and choice index."""
    row = [
        InlineKeyboardButton(text=choice_label(i), callback_data=f"ans:{question_index}:{i}")
        for i in range(choice_count)
    ]
    rows = [row[i:i + 4] for i in range(0, len(row), 4)]
    rows.append([InlineKeyboardButton(text="❌ Отменить тест", callback_data="cancel_quiz")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def next_keyboard(question_index: int, is_last: bool, test_mode: bool) -> InlineKeyboardMarkup:
    if is_last:
        text = "🏁 Завершить и посмотреть результаты" if test_mode else "🏁 Посмотреть результаты"
    else:
        text = "Следующий вопрос →"
    rows = [[InlineKeyboardButton(text=text, callback_data=f"next:{question_index}")]]
    if not test_mode:
        rows.append([InlineKeyboardButton(text="🤖 Спросить ИИ об этом вопросе", callback_data=f"ask_ai:{question_index}")])
    rows.append([InlineKeyboardButton(text="❌ Отменить тест", callback_data="cancel_quiz")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def results_keyboard(question_count: int) -> InlineKeyboardMarkup:
    """Results actions plus one "ask AI" button per reviewed question."""
    ask_buttons = [
        InlineKeyboardButton(text=f"🤖 {i + 1}", callback_data=f"ask_ai:{i}")
        for i in range(question_count)
    ]
    rows = [ask_buttons[i:i + 5] for i in range(0, len(ask_buttons), 5)]
    rows.append([InlineKeyboardButton(text="📋 Результаты для анализа ИИ", callback_data="results_for_ai")])
    rows.append([InlineKeyboardButton(text="🔁 Пройти ещё раз", callback_data="restart_quiz")])
    rows.append([InlineKeyboardButton(text="🏠 Главное меню", callback_data="go_home")])
    return InlineKeyboardMarkup(inline_keyboard=rows)
