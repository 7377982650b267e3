from __future__ import annotations

import html

from aiogram import Router, types
from aiogram.filters import Command

from app.bot import settings
from app.bot.utils import check_rate_limit, log_handler_exception
from app.services import organizer
from app.services.assignment import AssignmentError
from app.services.messages import format_draw_messages
from app.services.organizer import ValidationError
from app.services.parsing import DRAW_USAGE, parse_draw_message
from app.services.rate_limit import draw_limiter
from app.services.store import StoreUnavailable

router = Router()


@router.message(Command("draw"))
async def draw_command_handler(message: types.Message) -> None:
    if not check_rate_limit(message.from_user.id, "draw", draw_limiter):
        await message.answer("You're doing that too often. Please slow down.")
        return

    if message.chat.type != "private":
        await message.answer("Send /draw in a private chat with me so the links stay secret.")
        return

    try:
        form, replace_record_id = parse_draw_message(message.text or "")
        result = organizer.draw_group(
            form,
            settings.public_base_url,
            organizer_telegram_id=message.from_user.id,
            replace_record_id=replace_record_id,
            max_attempts=settings.max_attempts,
            ttl_days=settings.record_ttl_days,
        )
        for chunk in format_draw_messages(result):
            await message.answer(chunk)
    except ValidationError as exc:
        await message.answer(
            f"{html.escape(str(exc))}\n\nExample:\n<pre>{html.escape(DRAW_USAGE)}</pre>"
        )
    except AssignmentError as exc:
        await message.answer(html.escape(str(exc)))
    except StoreUnavailable:
        await message.answer("I couldn't save the draw right now. Please try again in a moment.")
    except Exception as exc:
        log_handler_exception("draw", message.from_user.id, message.chat.id, exc)
        await message.answer("Something went wrong. Please try again later.")
