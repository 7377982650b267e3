from __future__ import annotations

import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, select

from app.db.models import GroupRecord, Pairing


def get_group_record(session, record_id: str) -> Optional[GroupRecord]:
    return session.scalar(select(GroupRecord).where(GroupRecord.id == record_id))


def upsert_group_record(
    session,
    record_id: str,
    url_id: str,
    name: str,
    budget: Optional[Decimal],
    organizer_telegram_id: Optional[int],
    seed: Optional[int],
    expires_at: Optional[datetime.datetime],
) -> GroupRecord:
    record = get_group_record(session, record_id)
    if record is None:
        record = GroupRecord(id=record_id)
        session.add(record)

    record.url_id = url_id
    record.name = name
    record.budget = budget
    record.organizer_telegram_id = organizer_telegram_id
    record.seed = seed
    record.expires_at = expires_at
    session.flush()
    return record


def replace_pairings(session, record: GroupRecord, pairings: List[Pairing]) -> None:
    session.execute(delete(Pairing).where(Pairing.group_id == record.id))
    session.expire(record, ["pairings"])
    record.pairings = pairings
    session.flush()
