from __future__ import annotations

from loguru import logger

from app.services.rate_limit import RateLimiter, command_limiter


def check_rate_limit(user_id: int, action: str, limiter: RateLimiter = command_limiter) -> bool:
    key = f"{user_id}:{action}"
    result = limiter.allow(key)
    return result.allowed


def log_handler_exception(action: str, user_id: int | None, chat_id: int | None, error: Exception) -> None:
    logger.bind(action=action, user_id=user_id, chat_id=chat_id).exception(
        "Handler error: {error}", error=str(error)
    )
