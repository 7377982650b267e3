from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from app.core.config import load_settings

# Handlers import ``settings`` from this package, so it must exist before they load.
settings = load_settings()

from app.bot.handlers import router as handlers_router  # noqa: E402

bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))

dp = Dispatcher()
dp.include_router(handlers_router)
