import itertools

from app.services.constraints import build_constraints


def test_blocked_when_both_in_same_group():
    constraints = build_constraints(exclusion_groups=[["a", "b", "c"]])
    assert constraints.is_blocked("a", "c")
    assert constraints.is_blocked("c", "b")


def test_not_blocked_across_groups():
    constraints = build_constraints(exclusion_groups=[["a", "b"], ["c", "d"]])
    assert not constraints.is_blocked("a", "c")
    assert not constraints.is_blocked("d", "b")


def test_unknown_ids_are_never_blocked():
    constraints = build_constraints(exclusion_groups=[["a", "b"]])
    assert not constraints.is_blocked("a", "z")
    assert not constraints.is_blocked("y", "z")


def test_member_of_several_groups():
    constraints = build_constraints(exclusion_groups=[["a", "b"], ["a", "c"]])
    assert constraints.is_blocked("a", "b")
    assert constraints.is_blocked("a", "c")
    assert not constraints.is_blocked("b", "c")


def test_is_blocked_is_symmetric():
    ids = ["a", "b", "c", "d", "e"]
    constraints = build_constraints(exclusion_groups=[["a", "b"], ["b", "c", "d"]])
    for first, second in itertools.product(ids, repeat=2):
        assert constraints.is_blocked(first, second) == constraints.is_blocked(second, first)


def test_forced_pairs_are_kept_in_order():
    constraints = build_constraints(forced_pairs=[("a", "b"), ("c", "d")])
    assert [(p.giver_id, p.receiver_id) for p in constraints.forced_pairs] == [("a", "b"), ("c", "d")]
