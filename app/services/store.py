from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from loguru import logger
from sqlalchemy.exc import OperationalError

from app.db import GroupRecord, Pairing, get_session, repo
from app.services.assignment import Assignment


class StoreUnavailable(RuntimeError):
    pass


@dataclass(frozen=True)
class StoredGroup:
    record_id: str
    url_id: str
    name: str
    budget: Optional[Decimal]
    assignments: Tuple[Assignment, ...]
    expires_at: Optional[datetime.datetime] = None
    organizer_telegram_id: Optional[int] = None
    seed: Optional[int] = None
    created_at: Optional[datetime.datetime] = None


def _to_stored(record: GroupRecord) -> StoredGroup:
    return StoredGroup(
        record_id=record.id,
        url_id=record.url_id,
        name=record.name,
        budget=record.budget,
        assignments=tuple(
            Assignment(
                giver_id=pairing.giver_id,
                giver=pairing.giver_name,
                receiver_id=pairing.receiver_id,
                receiver=pairing.receiver_name,
                secret_key=pairing.secret_key,
            )
            for pairing in record.pairings
        ),
        expires_at=record.expires_at,
        organizer_telegram_id=record.organizer_telegram_id,
        seed=record.seed,
        created_at=record.created_at,
    )


def save(group: StoredGroup) -> StoredGroup:
    """Persist a group and its whole pairing set, replacing any previous set."""
    try:
        with get_session() as session:
            record = repo.upsert_group_record(
                session,
                group.record_id,
                group.url_id,
                group.name,
                group.budget,
                group.organizer_telegram_id,
                group.seed,
                group.expires_at,
            )
            repo.replace_pairings(
                session,
                record,
                [
                    Pairing(
                        position=position,
                        giver_id=item.giver_id,
                        giver_name=item.giver,
                        receiver_id=item.receiver_id,
                        receiver_name=item.receiver,
                        secret_key=item.secret_key,
                    )
                    for position, item in enumerate(group.assignments)
                ],
            )
            session.refresh(record)
            stored = _to_stored(record)
    except OperationalError as exc:
        logger.bind(record_id=group.record_id).error("Store unavailable on save: {error}", error=str(exc))
        raise StoreUnavailable("The assignment store is unavailable.") from exc

    logger.bind(record_id=group.record_id, pairings=len(group.assignments)).info("Group record saved")
    return stored


def load(record_id: str) -> Optional[StoredGroup]:
    try:
        with get_session() as session:
            record = repo.get_group_record(session, record_id)
            return _to_stored(record) if record else None
    except OperationalError as exc:
        logger.bind(record_id=record_id).error("Store unavailable on load: {error}", error=str(exc))
        raise StoreUnavailable("The assignment store is unavailable.") from exc
