from __future__ import annotations

from typing import Optional

from aiohttp import web
from loguru import logger

from app.services import reveal as reveal_service
from app.services.organizer import format_budget
from app.services.rate_limit import RateLimiter
from app.services.store import StoreUnavailable

REVEAL_LIMITER = web.AppKey("reveal_limiter", RateLimiter)

routes = web.RouteTableDef()


def _error(status: int, code: str, message: str) -> web.Response:
    return web.json_response({"error": code, "message": message}, status=status)


@routes.get("/reveal/{url_id}/{record_id}/{participant_id}/{secret_key}")
async def reveal_handler(request: web.Request) -> web.Response:
    limit = request.app[REVEAL_LIMITER].allow(request.remote or "unknown")
    if not limit.allowed:
        return web.json_response(
            {"error": "rate_limited", "message": "Too many lookups. Please slow down."},
            status=429,
            headers={"Retry-After": str(int(limit.retry_after) + 1)},
        )

    info = request.match_info
    try:
        revelation = reveal_service.reveal(
            info["url_id"],
            info["record_id"],
            info["participant_id"],
            info["secret_key"],
        )
    except reveal_service.RecordExpired as exc:
        return _error(410, "expired", str(exc))
    except reveal_service.RecordNotFound as exc:
        return _error(404, "not_found", str(exc))
    except reveal_service.InvalidKey as exc:
        return _error(404, "invalid_key", str(exc))
    except StoreUnavailable:
        return _error(503, "store_unavailable", "Couldn't check right now. Please try again later.")
    except Exception as exc:
        logger.bind(record_id=info["record_id"]).exception("Reveal failed: {error}", error=str(exc))
        return _error(500, "internal_error", "Something went wrong. Please try again later.")

    return web.json_response(
        {
            "group_name": revelation.group_name,
            "giver": revelation.giver,
            "receiver": revelation.receiver,
            "budget": format_budget(revelation.budget),
        }
    )


def create_app(reveal_limiter: Optional[RateLimiter] = None) -> web.Application:
    app = web.Application()
    app[REVEAL_LIMITER] = reveal_limiter or RateLimiter(max_calls=20, period_seconds=60)
    app.add_routes(routes)
    return app
