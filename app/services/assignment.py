from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger

from app.services.constraints import ConstraintSet, Participant
from app.services.identity import new_id

DEFAULT_MAX_ATTEMPTS = 100


class AssignmentError(RuntimeError):
    pass


@dataclass(frozen=True)
class Assignment:
    giver_id: str
    giver: str
    receiver_id: str
    receiver: str
    secret_key: str


@dataclass(frozen=True)
class Matching:
    assignments: Tuple[Assignment, ...]
    attempts: int

    def as_dict(self) -> Dict[str, str]:
        return {item.giver_id: item.receiver_id for item in self.assignments}


@dataclass(frozen=True)
class Infeasible:
    attempts: int
    reason: str


class _AttemptFailed(Exception):
    pass


def _attempt(
    participants: Sequence[Participant],
    constraints: ConstraintSet,
    rng: random.Random,
    new_key: Callable[[], str],
) -> List[Assignment]:
    by_id = {participant.id: participant for participant in participants}
    matches: List[Assignment] = []
    available_givers = list(participants)
    available_receivers = list(participants)
    forced_givers = set()
    forced_receivers = set()

    for pair in constraints.forced_pairs:
        giver = by_id.get(pair.giver_id)
        receiver = by_id.get(pair.receiver_id)
        if giver is None or receiver is None:
            raise _AttemptFailed("forced pair references an unknown participant")
        if giver.id in forced_givers or receiver.id in forced_receivers:
            raise _AttemptFailed("forced pairs overlap")
        if giver.id == receiver.id or constraints.is_blocked(giver.id, receiver.id):
            raise _AttemptFailed(f"forced pair {giver.name} -> {receiver.name} is blocked")

        matches.append(Assignment(giver.id, giver.name, receiver.id, receiver.name, new_key()))
        forced_givers.add(giver.id)
        forced_receivers.add(receiver.id)
        available_givers = [p for p in available_givers if p.id != giver.id]
        available_receivers = [p for p in available_receivers if p.id != receiver.id]

    for giver in available_givers:
        candidates = [
            receiver
            for receiver in available_receivers
            if receiver.id != giver.id and not constraints.is_blocked(giver.id, receiver.id)
        ]
        if not candidates:
            raise _AttemptFailed(f"no receiver left for {giver.name}")

        receiver = rng.choice(candidates)
        matches.append(Assignment(giver.id, giver.name, receiver.id, receiver.name, new_key()))
        available_receivers = [p for p in available_receivers if p.id != receiver.id]

    return matches


def generate_assignments(
    participants: Sequence[Participant],
    constraints: Optional[ConstraintSet] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    new_key: Callable[[], str] = new_id,
) -> Union[Matching, Infeasible]:
    """Draw a giver -> receiver permutation with no self-gifting.

    Forced pairs are placed first, then every remaining giver (in participant
    order) picks a random receiver among those still free and not blocked.
    An attempt that corners itself is thrown away and retried with fresh
    randomness, up to ``max_attempts`` times.

    This is a best-effort heuristic: there is no backtracking, so a feasible
    instance can still come back as ``Infeasible``. Infeasibility is returned,
    not raised.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1.")
    if not participants:
        return Infeasible(attempts=0, reason="no participants")

    constraints = constraints or ConstraintSet()
    rng = rng or random.Random(seed)

    reason = ""
    for attempt in range(1, max_attempts + 1):
        try:
            matches = _attempt(participants, constraints, rng, new_key)
        except _AttemptFailed as exc:
            reason = str(exc)
            continue
        return Matching(assignments=tuple(matches), attempts=attempt)

    logger.bind(participants=len(participants), attempts=max_attempts).debug(
        "No assignment found: {reason}", reason=reason
    )
    return Infeasible(attempts=max_attempts, reason=reason)
