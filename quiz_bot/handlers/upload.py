import logging

from aiogram import Router, F
from aiogram.filters import StateFilter
from aiogram.types import BufferedInputFile, CallbackQuery, Message
from aiogram.fsm.context import FSMContext

from quiz_bot.keyboards.main_menu import home_keyboard, validation_errors_keyboard
from quiz_bot.keyboards.settings_kb import mode_keyboard
from quiz_bot.llm.prompts import CONVERSION_PROMPT, QUESTION_FORMAT_EXAMPLE
from quiz_bot.quiz.exceptions import LLMError
from quiz_bot.quiz.parser import load_question_set
from quiz_bot.quiz.validator import ValidationResult
from quiz_bot.services.question_loader import dump_questions_json, fix_question_set, generate_question_set
from quiz_bot.states.quiz_states import QuizFlow
from quiz_bot.utils.text import split_message

logger = logging.getLogger(__name__)

router = Router()

MAX_FILE_SIZE = 1024 * 1024  # 1 MB
MAX_ERRORS_SHOWN = 30

LLM_UNAVAILABLE_TEXT = (
    "😞 Не удалось получить ответ от ИИ. Возможно, LM Studio не запущен.\n\n"
    "Проверь, что сервер работает и модель загружена, затем попробуй снова."
)


@router.callback_query(F.data == "upload_questions")
async def ask_for_json(callback: CallbackQuery, state: FSMContext):
    await state.set_state(QuizFlow.waiting_for_json)
    await callback.message.edit_text(
        "📥 Отправь вопросы в формате JSON: текстом или файлом .json.",
        reply_markup=home_keyboard(),
    )
    await callback.answer()


@router.callback_query(F.data == "json_format")
async def show_json_format(callback: CallbackQuery):
    await callback.message.answer(
        f"📄 Ожидаемый формат JSON:\n\n{QUESTION_FORMAT_EXAMPLE}\n\n"
        "Поля id, background_knowledge и explanation необязательны. "
        "Хотя бы один вариант в каждом вопросе должен иметь \"is_correct\": true.",
        reply_markup=home_keyboard(),
    )
    await callback.answer()


@router.callback_query(F.data == "ai_prompt")
async def show_ai_prompt(callback: CallbackQuery):
    """Prompt to paste into any AI chat together with study material."""
    await callback.message.answer(
        "🤖 Скопируй этот промпт и отправь его любому ИИ (ChatGPT, Gemini и т.д.) вместе со своим текстом:"
    )
    await callback.message.answer(CONVERSION_PROMPT, reply_markup=home_keyboard())
    await callback.answer()


@router.callback_query(F.data == "ai_generate")
async def ask_for_source_text(callback: CallbackQuery, state: FSMContext):
    await state.set_state(QuizFlow.waiting_for_source_text)
    await callback.message.edit_text(
        "✏️ Отправь текст или конспект, и ИИ составит по нему вопросы.",
        reply_markup=home_keyboard(),
    )
    await callback.answer()


@router.message(StateFilter(QuizFlow.waiting_for_json, None), F.document)
async def json_document_received(message: Message, state: FSMContext):
    document = message.document
    if document.file_size and document.file_size > MAX_FILE_SIZE:
        await message.answer("Файл слишком большой (максимум 1 МБ).")
        return

    file = await message.bot.download(document)
    try:
        text = file.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        await message.answer("Не удалось прочитать файл: нужна кодировка UTF-8.")
        return

    await process_question_text(message, state, text)


@router.message(QuizFlow.waiting_for_json, F.text)
async def json_text_received(message: Message, state: FSMContext):
    await process_question_text(message, state, message.text)


@router.message(QuizFlow.waiting_for_source_text, F.text)
async def source_text_received(message: Message, state: FSMContext):
    await message.answer("⏳ Составляю вопросы... Это может занять до минуты.")
    try:
        result = await generate_question_set(message.text)
    except LLMError:
        await message.answer(LLM_UNAVAILABLE_TEXT, reply_markup=home_keyboard())
        return
    await show_validation_result(message, state, result, message.text)


@router.callback_query(QuizFlow.waiting_for_json, F.data == "ai_fix")
async def fix_with_ai(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    data = await state.get_data()
    json_text = data.get("last_json")
    if not json_text:
        await callback.message.answer("Нечего исправлять. Отправь JSON с вопросами.")
        return

    await callback.message.answer("⏳ Прошу ИИ исправить ошибки...")
    try:
        result = await fix_question_set(json_text, data.get("errors") or [])
    except LLMError:
        await callback.message.answer(LLM_UNAVAILABLE_TEXT, reply_markup=validation_errors_keyboard())
        return
    await show_validation_result(callback.message, state, result, json_text)


async def process_question_text(message: Message, state: FSMContext, text: str):
    result = load_question_set(text)
    await show_validation_result(message, state, result, text)


def format_errors(messages: list[str]) -> str:
    lines = ["❗ Проверка не пройдена:\n"]
    for i, error in enumerate(messages[:MAX_ERRORS_SHOWN]):
        lines.append(f"{i + 1}. {error}")
    hidden = len(messages) - MAX_ERRORS_SHOWN
    if hidden > 0:
        lines.append(f"... и ещё {hidden}")
    return "\n".join(lines)


async def show_validation_result(message: Message, state: FSMContext, result: ValidationResult, raw_text: str):
    """Either keep the question pool and ask for a mode, or report every error."""
    if result.is_valid:
        await state.update_data(
            pool=[q.to_dict() for q in result.data],
            last_json=None,
            errors=None,
        )
        await state.set_state(QuizFlow.choosing_mode)
        await message.answer(
            f"✅ Загружено вопросов: {len(result.data)}\n\nВыбери режим:",
            reply_markup=mode_keyboard(),
        )
        return

    logger.info("Question set rejected with %d errors", len(result.errors))
    repaired = isinstance(result.normalized, list) and bool(result.normalized)
    json_text = dump_questions_json(result.normalized) if repaired else raw_text
    await state.update_data(pool=None, last_json=json_text, errors=result.messages)
    await state.set_state(QuizFlow.waiting_for_json)

    if repaired:
        await message.answer_document(
            BufferedInputFile(json_text.encode("utf-8"), filename="questions_fixed.json"),
            caption="Версия с автоисправлениями (добавлены id и is_correct). Ошибки ниже нужно поправить вручную.",
        )

    chunks = split_message(format_errors(result.messages))
    for chunk in chunks[:-1]:
        await message.answer(chunk)
    await message.answer(chunks[-1], reply_markup=validation_errors_keyboard())
