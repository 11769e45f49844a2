import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import BotCommand

from quiz_bot.config import settings
from quiz_bot.db.database import get_db, close_db
from quiz_bot.handlers import start, upload, settings as settings_handlers, quiz, results

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


async def main():
    if not settings.BOT_TOKEN:
        print("Ошибка: BOT_TOKEN не задан. Создайте файл .env на основе .env.example")
        sys.exit(1)

    # Инициализируем базу данных
    await get_db()

    bot = Bot(token=settings.BOT_TOKEN)
    dp = Dispatcher(storage=MemoryStorage())

    dp.include_router(start.router)
    dp.include_router(quiz.router)
    dp.include_router(results.router)
    dp.include_router(settings_handlers.router)
    dp.include_router(upload.router)

    await bot.set_my_commands([
        BotCommand(command="start", description="Главное меню"),
    ])

    logger.info("Bot started")

    try:
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await bot.session.close()
        await close_db()
        logger.info("Bot stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
