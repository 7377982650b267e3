from aiogram import Router

from app.bot.handlers import draw, start

router = Router()
router.include_router(start.router)
router.include_router(draw.router)
