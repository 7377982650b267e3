from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Tuple


@dataclass(frozen=True)
class Participant:
    id: str
    name: str


@dataclass(frozen=True)
class ExclusionGroup:
    members: FrozenSet[str]


@dataclass(frozen=True)
class ForcedPair:
    giver_id: str
    receiver_id: str


@dataclass(frozen=True)
class ConstraintSet:
    exclusion_groups: Tuple[ExclusionGroup, ...] = ()
    forced_pairs: Tuple[ForcedPair, ...] = ()
    _groups_by_member: Dict[str, FrozenSet[int]] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        index: Dict[str, set] = {}
        for position, group in enumerate(self.exclusion_groups):
            for member in group.members:
                index.setdefault(member, set()).add(position)
        object.__setattr__(
            self,
            "_groups_by_member",
            {member: frozenset(positions) for member, positions in index.items()},
        )

    def is_blocked(self, giver_id: str, receiver_id: str) -> bool:
        giver_groups = self._groups_by_member.get(giver_id)
        if not giver_groups:
            return False
        return not giver_groups.isdisjoint(self._groups_by_member.get(receiver_id, ()))


def build_constraints(
    exclusion_groups: Iterable[Iterable[str]] = (),
    forced_pairs: Iterable[Tuple[str, str]] = (),
) -> ConstraintSet:
    return ConstraintSet(
        exclusion_groups=tuple(ExclusionGroup(frozenset(members)) for members in exclusion_groups),
        forced_pairs=tuple(ForcedPair(giver, receiver) for giver, receiver in forced_pairs),
    )
