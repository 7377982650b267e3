from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from loguru import logger

from app.services import store


class RevealError(RuntimeError):
    pass


class RecordNotFound(RevealError):
    pass


class RecordExpired(RevealError):
    pass


class InvalidKey(RevealError):
    pass


@dataclass(frozen=True)
class Revelation:
    group_name: str
    giver: str
    receiver: str
    budget: Optional[Decimal]


def _is_expired(expires_at: Optional[datetime.datetime], now: datetime.datetime) -> bool:
    if expires_at is None:
        return False
    # SQLite hands timestamps back without a timezone; they are stored as UTC.
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=datetime.timezone.utc)
    return expires_at <= now


def reveal(
    url_id: str,
    record_id: str,
    participant_id: str,
    secret_key: str,
    now: Optional[datetime.datetime] = None,
) -> Revelation:
    """Return one giver's receiver, or raise a ``RevealError``.

    Both the participant id and the secret key must match the same stored
    pairing exactly. Errors carry no assignment data.
    """
    now = now or datetime.datetime.now(tz=datetime.timezone.utc)
    log = logger.bind(record_id=record_id)

    group = store.load(record_id)
    if group is None or group.url_id != url_id:
        log.info("Reveal refused: record not found")
        raise RecordNotFound("This Secret Santa group could not be found.")

    if _is_expired(group.expires_at, now):
        log.info("Reveal refused: record expired")
        raise RecordExpired("This Secret Santa group has expired.")

    for item in group.assignments:
        if item.giver_id == participant_id and item.secret_key == secret_key:
            log.info("Reveal served")
            return Revelation(
                group_name=group.name,
                giver=item.giver,
                receiver=item.receiver,
                budget=group.budget,
            )

    log.info("Reveal refused: invalid key")
    raise InvalidKey("Invalid link or pairing not found.")
