from __future__ import annotations

import asyncio

import uvloop
from aiogram.types import BotCommand, BotCommandScopeDefault
from aiohttp import web
from loguru import logger

from app.bot import bot, dp, settings
from app.core.logging import setup_logging
from app.db import init_engine
from app.web import create_app


USERS_COMMANDS: dict[str, str] = {
    "start": "start",
    "help": "how to write a draw",
    "draw": "draw Secret Santa pairs",
}


async def set_default_commands() -> None:
    await bot.set_my_commands(
        [
            BotCommand(command=command, description=description)
            for command, description in USERS_COMMANDS.items()
        ],
        scope=BotCommandScopeDefault(),
    )


async def on_startup() -> None:
    logger.info("bot starting...")

    await set_default_commands()

    bot_info = await bot.get_me()

    logger.info("Name     - {name}", name=bot_info.full_name)
    logger.info("Username - @{username}", username=bot_info.username)
    logger.info("ID       - {id}", id=bot_info.id)
    logger.info("Reveal links - {url}", url=settings.public_base_url)

    logger.info("bot started")


async def on_shutdown() -> None:
    logger.info("bot stopping...")

    await dp.storage.close()

    await bot.session.close()

    logger.info("bot stopped")


async def start_web() -> web.AppRunner:
    runner = web.AppRunner(create_app())
    await runner.setup()
    site = web.TCPSite(runner, settings.web_host, settings.web_port)
    await site.start()
    logger.info("reveal server listening on {host}:{port}", host=settings.web_host, port=settings.web_port)
    return runner


async def main() -> None:
    setup_logging(settings.log_level, settings.log_path)
    init_engine(settings.database_url, create_schema=settings.create_schema)

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    runner = await start_web()
    try:
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await runner.cleanup()
        logger.info("reveal server stopped")


if __name__ == "__main__":
    if not getattr(asyncio, "debug", False):
        uvloop.install()

    asyncio.run(main())
