import html

from aiogram import Router, types
from aiogram.filters import Command, CommandStart

from app.services.parsing import DRAW_USAGE
from app.bot.utils import check_rate_limit, log_handler_exception

router = Router()


@router.message(CommandStart())
@router.message(Command("help"))
async def command_start_handler(message: types.Message) -> None:
    if not check_rate_limit(message.from_user.id, "start"):
        await message.answer("You're doing that too often. Please slow down.")
        return

    try:
        await message.answer(
            "Hello! I'm your Secret Santa organizer!\n\n"
            "Send me one /draw message with the group name on the first line "
            "and one participant per line. You can add a budget, blocked groups "
            "(people who must not draw each other) and forced matches:\n\n"
            f"<pre>{html.escape(DRAW_USAGE)}</pre>\n\n"
            "I'll answer with a private link for every participant. "
            "Each link only reveals that person's match."
        )
    except Exception as exc:
        log_handler_exception("start", message.from_user.id, message.chat.id, exc)
        await message.answer("Something went wrong. Please try again later.")
