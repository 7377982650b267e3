from __future__ import annotations

import datetime
import random
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from app.services import store
from app.services.assignment import (
    DEFAULT_MAX_ATTEMPTS,
    AssignmentError,
    Infeasible,
    generate_assignments,
)
from app.services.constraints import ConstraintSet, Participant, build_constraints
from app.services.identity import new_id

DEFAULT_TTL_DAYS = 60

# Fits the Numeric(10, 2) budget column.
BUDGET_QUANTUM = Decimal("0.01")
MAX_BUDGET = Decimal("100000000")

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


class ValidationError(RuntimeError):
    pass


@dataclass(frozen=True)
class OrganizerForm:
    group_name: str
    participant_names: Tuple[str, ...]
    budget: Optional[Decimal] = None
    exclusion_groups: Tuple[Tuple[str, ...], ...] = ()
    forced_pairs: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class RevealLink:
    participant_id: str
    name: str
    url: str


@dataclass(frozen=True)
class DrawResult:
    group: store.StoredGroup
    links: Tuple[RevealLink, ...]
    attempts: int


def _name_key(name: str) -> str:
    return name.strip().casefold()


def validate_form(form: OrganizerForm) -> None:
    if not form.group_name.strip():
        raise ValidationError("Please give the group a name.")
    if not form.participant_names:
        raise ValidationError("Add at least one participant.")
    if any(not name.strip() for name in form.participant_names):
        raise ValidationError("Please fill in all participant names.")

    seen = set()
    for name in form.participant_names:
        key = _name_key(name)
        if key in seen:
            raise ValidationError(f"Participant names must be unique: {name.strip()} appears twice.")
        seen.add(key)

    if form.budget is not None:
        if not form.budget.is_finite():
            raise ValidationError("Budget must be a number.")
        if form.budget < 0:
            raise ValidationError("Budget cannot be negative.")
        if form.budget >= MAX_BUDGET:
            raise ValidationError("Budget is too large.")
        if form.budget != form.budget.quantize(BUDGET_QUANTUM):
            raise ValidationError("Budget can have at most two decimal places.")

    for members in form.exclusion_groups:
        unknown = [name for name in members if _name_key(name) not in seen]
        if unknown:
            raise ValidationError(f"Unknown participant in blocked group: {unknown[0].strip()}")
        if len({_name_key(name) for name in members}) < 2:
            raise ValidationError("A blocked group needs at least two different people.")

    for giver, receiver in form.forced_pairs:
        for name in (giver, receiver):
            if _name_key(name) not in seen:
                raise ValidationError(f"Unknown participant in forced match: {name.strip()}")
        if _name_key(giver) == _name_key(receiver):
            raise ValidationError("A forced match needs two different people.")


def build_draw_input(
    form: OrganizerForm,
    new_participant_id: Callable[[], str] = new_id,
) -> Tuple[List[Participant], ConstraintSet]:
    """Give every participant an id and key all constraints by those ids."""
    participants = [Participant(id=new_participant_id(), name=name.strip()) for name in form.participant_names]
    ids_by_name: Dict[str, str] = {_name_key(p.name): p.id for p in participants}

    constraints = build_constraints(
        exclusion_groups=[
            [ids_by_name[_name_key(name)] for name in members] for members in form.exclusion_groups
        ],
        forced_pairs=[
            (ids_by_name[_name_key(giver)], ids_by_name[_name_key(receiver)])
            for giver, receiver in form.forced_pairs
        ],
    )
    return participants, constraints


def slugify_group_name(group_name: str) -> str:
    slug = _SLUG_PATTERN.sub("-", group_name.strip().lower()).strip("-")
    return slug or "group"


def build_reveal_link(base_url: str, url_id: str, record_id: str, participant_id: str, secret_key: str) -> str:
    return f"{base_url.rstrip('/')}/reveal/{url_id}/{record_id}/{participant_id}/{secret_key}"


def format_budget(budget: Optional[Decimal]) -> Optional[str]:
    if budget is None:
        return None
    return f"{budget:.2f}"


def _resolve_record_id(replace_record_id: Optional[str], organizer_telegram_id: Optional[int]) -> str:
    if not replace_record_id:
        return new_id()

    existing = store.load(replace_record_id)
    if existing is None or existing.organizer_telegram_id != organizer_telegram_id:
        raise ValidationError(f"No Secret Santa group of yours has the id {replace_record_id}.")
    return existing.record_id


def draw_group(
    form: OrganizerForm,
    base_url: str,
    organizer_telegram_id: Optional[int] = None,
    replace_record_id: Optional[str] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ttl_days: int = DEFAULT_TTL_DAYS,
    seed: Optional[int] = None,
    now: Optional[datetime.datetime] = None,
) -> DrawResult:
    validate_form(form)
    record_id = _resolve_record_id(replace_record_id, organizer_telegram_id)

    participants, constraints = build_draw_input(form)
    if seed is None:
        seed = random.randint(1, 2**31 - 1)

    result = generate_assignments(participants, constraints, max_attempts=max_attempts, seed=seed)
    if isinstance(result, Infeasible):
        logger.bind(record_id=record_id, attempts=result.attempts, seed=seed).info(
            "Draw failed: {reason}", reason=result.reason
        )
        raise AssignmentError(
            f"Failed to generate valid pairings after {result.attempts} attempts. "
            "You may have too many blocked combinations."
        )

    now = now or datetime.datetime.now(tz=datetime.timezone.utc)
    expires_at = now + datetime.timedelta(days=ttl_days) if ttl_days > 0 else None
    order = {participant.id: position for position, participant in enumerate(participants)}

    group = store.save(
        store.StoredGroup(
            record_id=record_id,
            url_id=slugify_group_name(form.group_name),
            name=form.group_name.strip(),
            budget=form.budget,
            assignments=tuple(sorted(result.assignments, key=lambda item: order[item.giver_id])),
            expires_at=expires_at,
            organizer_telegram_id=organizer_telegram_id,
            seed=seed,
        )
    )
    links = tuple(
        RevealLink(
            participant_id=item.giver_id,
            name=item.giver,
            url=build_reveal_link(base_url, group.url_id, group.record_id, item.giver_id, item.secret_key),
        )
        for item in group.assignments
    )
    logger.bind(record_id=record_id, attempts=result.attempts, seed=seed).info("Assignments generated")

    return DrawResult(group=group, links=links, attempts=result.attempts)
