import datetime
from decimal import Decimal

import pytest

from app.services import organizer, store
from app.services.assignment import AssignmentError
from app.services.organizer import OrganizerForm, ValidationError


def make_form(**overrides):
    values = dict(
        group_name="Office Party",
        participant_names=("Alice", "Bob", "Carol", "Dan"),
        budget=Decimal("25"),
    )
    values.update(overrides)
    return OrganizerForm(**values)


@pytest.mark.parametrize(
    "overrides",
    [
        {"group_name": "  "},
        {"participant_names": ()},
        {"participant_names": ("Alice", " ")},
        {"participant_names": ("Alice", "Bob", "alice ")},
        {"budget": Decimal("-1")},
        {"budget": Decimal("25.555")},
        {"budget": Decimal("100000000")},
        {"budget": Decimal("1E+30")},
        {"budget": Decimal("NaN")},
        {"exclusion_groups": (("Alice",),)},
        {"exclusion_groups": (("Alice", "ALICE"),)},
        {"exclusion_groups": (("Alice", "Zed"),)},
        {"forced_pairs": (("Alice", "Alice"),)},
        {"forced_pairs": (("Alice", "Zed"),)},
    ],
)
def test_validate_form_rejects_bad_input(overrides):
    with pytest.raises(ValidationError):
        organizer.validate_form(make_form(**overrides))


def test_validate_form_accepts_zero_budget_and_no_budget():
    organizer.validate_form(make_form(budget=Decimal("0")))
    organizer.validate_form(make_form(budget=None))


def test_validate_form_accepts_budgets_that_fit_the_column():
    organizer.validate_form(make_form(budget=Decimal("12.5")))
    organizer.validate_form(make_form(budget=Decimal("99999999.99")))
    organizer.validate_form(make_form(budget=Decimal("1E+2")))


def test_single_participant_passes_validation():
    organizer.validate_form(make_form(participant_names=("Alice",)))


def test_build_draw_input_keys_constraints_by_id():
    form = make_form(
        exclusion_groups=(("alice", "Bob"),),
        forced_pairs=(("Carol", " dan"),),
    )
    ids = iter(["id-a", "id-b", "id-c", "id-d"])
    participants, constraints = organizer.build_draw_input(form, new_participant_id=lambda: next(ids))

    assert [(p.id, p.name) for p in participants] == [
        ("id-a", "Alice"),
        ("id-b", "Bob"),
        ("id-c", "Carol"),
        ("id-d", "Dan"),
    ]
    assert constraints.is_blocked("id-a", "id-b")
    assert not constraints.is_blocked("id-a", "id-c")
    assert [(p.giver_id, p.receiver_id) for p in constraints.forced_pairs] == [("id-c", "id-d")]


def test_form_is_immutable():
    form = make_form()
    with pytest.raises(AttributeError):
        form.group_name = "Other"


@pytest.mark.parametrize(
    "name, slug",
    [
        ("Office Party", "office-party"),
        ("  Família García 2025! ", "fam-lia-garc-a-2025"),
        ("🎄🎄", "group"),
    ],
)
def test_slugify_group_name(name, slug):
    assert organizer.slugify_group_name(name) == slug


def test_build_reveal_link():
    link = organizer.build_reveal_link("https://santa.example/", "office-party", "rec", "pid", "key")
    assert link == "https://santa.example/reveal/office-party/rec/pid/key"


def test_format_budget():
    assert organizer.format_budget(None) is None
    assert organizer.format_budget(Decimal("25")) == "25.00"
    assert organizer.format_budget(Decimal("12.5")) == "12.50"


def test_draw_group_persists_record_and_links(database):
    now = datetime.datetime(2026, 12, 1, tzinfo=datetime.timezone.utc)
    form = make_form(forced_pairs=(("Alice", "Bob"),))
    result = organizer.draw_group(
        form,
        "https://santa.example",
        organizer_telegram_id=42,
        ttl_days=30,
        seed=99,
        now=now,
    )

    group = result.group
    assert group.name == "Office Party"
    assert group.url_id == "office-party"
    assert group.seed == 99
    assert group.budget == Decimal("25")
    assert [item.giver for item in group.assignments] == ["Alice", "Bob", "Carol", "Dan"]
    assert sorted(item.receiver for item in group.assignments) == ["Alice", "Bob", "Carol", "Dan"]
    assert ("Alice", "Bob") in {(item.giver, item.receiver) for item in group.assignments}

    assert [link.name for link in result.links] == ["Alice", "Bob", "Carol", "Dan"]
    for link, item in zip(result.links, group.assignments):
        assert link.url == (
            f"https://santa.example/reveal/office-party/{group.record_id}/{item.giver_id}/{item.secret_key}"
        )

    loaded = store.load(group.record_id)
    assert loaded.assignments == group.assignments
    assert loaded.organizer_telegram_id == 42
    assert loaded.expires_at.replace(tzinfo=datetime.timezone.utc) == now + datetime.timedelta(days=30)


def test_draw_group_without_ttl_never_expires(database):
    result = organizer.draw_group(make_form(), "https://santa.example", ttl_days=0)
    assert result.group.expires_at is None


def test_draw_group_infeasible_raises_assignment_error(database):
    form = make_form(participant_names=("A", "B", "C"), exclusion_groups=(("A", "B"),))
    with pytest.raises(AssignmentError, match="too many blocked combinations"):
        organizer.draw_group(form, "https://santa.example", max_attempts=5)


def test_draw_group_validates_before_drawing(database):
    with pytest.raises(ValidationError):
        organizer.draw_group(make_form(participant_names=("Alice", "alice")), "https://santa.example")


def test_draw_group_replaces_existing_record(database):
    first = organizer.draw_group(make_form(), "https://santa.example", organizer_telegram_id=7)
    second = organizer.draw_group(
        make_form(participant_names=("Xena", "Yuri")),
        "https://santa.example",
        organizer_telegram_id=7,
        replace_record_id=first.group.record_id,
    )

    assert second.group.record_id == first.group.record_id
    loaded = store.load(first.group.record_id)
    assert [item.giver for item in loaded.assignments] == ["Xena", "Yuri"]
    old_keys = {item.secret_key for item in first.group.assignments}
    assert not old_keys & {item.secret_key for item in loaded.assignments}


def test_draw_group_refuses_to_replace_someone_elses_record(database):
    first = organizer.draw_group(make_form(), "https://santa.example", organizer_telegram_id=7)
    with pytest.raises(ValidationError):
        organizer.draw_group(
            make_form(),
            "https://santa.example",
            organizer_telegram_id=8,
            replace_record_id=first.group.record_id,
        )


def test_draw_group_refuses_to_replace_unknown_record(database):
    with pytest.raises(ValidationError):
        organizer.draw_group(
            make_form(),
            "https://santa.example",
            organizer_telegram_id=7,
            replace_record_id="0000000000000000",
        )
