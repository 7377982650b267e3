from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from app.services.organizer import OrganizerForm, ValidationError

DRAW_USAGE = (
    "/draw Office Party\n"
    "budget: 25\n"
    "Alice\n"
    "Bob\n"
    "people: Carol, Dan\n"
    "block: Alice, Bob\n"
    "force: Carol -> Dan"
)

_DIRECTIVES = {"group", "budget", "people", "block", "force", "replace"}


def _split_names(value: str) -> List[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


def _parse_budget(value: str) -> Optional[Decimal]:
    value = value.strip().lstrip("$").strip()
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ValidationError("Budget should be a number, e.g. budget: 25") from None
    if not amount.is_finite():
        raise ValidationError("Budget should be a number, e.g. budget: 25")
    return amount


def parse_draw_message(text: str) -> Tuple[OrganizerForm, Optional[str]]:
    """Turn a /draw message into a form and an optional record id to replace.

    The first line carries the command and the group name. Every following
    line is either ``key: value`` for a known key or a participant name.
    """
    lines = text.splitlines()
    head = lines[0].split(maxsplit=1) if lines else []
    group_name = head[1].strip() if len(head) > 1 else ""

    names: List[str] = []
    blocked: List[Tuple[str, ...]] = []
    forced: List[Tuple[str, str]] = []
    budget: Optional[Decimal] = None
    replace_record_id: Optional[str] = None

    for raw_line in lines[1:]:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, separator, value = line.partition(":")
        key = key.strip().lower()
        if not separator or key not in _DIRECTIVES:
            names.append(line)
            continue

        if key == "group":
            group_name = value.strip()
        elif key == "budget":
            budget = _parse_budget(value)
        elif key == "people":
            names.extend(_split_names(value))
        elif key == "block":
            blocked.append(tuple(_split_names(value)))
        elif key == "force":
            giver, arrow, receiver = value.partition("->")
            if not arrow or not giver.strip() or not receiver.strip():
                raise ValidationError("Forced matches look like: force: Alice -> Bob")
            forced.append((giver.strip(), receiver.strip()))
        elif key == "replace":
            replace_record_id = value.strip() or None

    form = OrganizerForm(
        group_name=group_name,
        participant_names=tuple(names),
        budget=budget,
        exclusion_groups=tuple(blocked),
        forced_pairs=tuple(forced),
    )
    return form, replace_record_id
