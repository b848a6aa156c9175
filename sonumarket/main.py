import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from sonumarket.bot.handlers import router
from sonumarket.config import require_bot_token, settings
from sonumarket.db.sqlite import SqliteStorage
from sonumarket.session import Session


async def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    token = require_bot_token()
    session = Session.restore(SqliteStorage())

    bot = Bot(token=token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    dp = Dispatcher()
    dp["session"] = session
    dp["wizards"] = {}
    dp.include_router(router)

    await dp.start_polling(bot)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
