from __future__ import annotations

import pytest

from virtus.engagements import get_active_engagements, get_engagements_by_category, has_penance_engagements
from virtus.errors import ValidationError
from virtus.roster import normalize_titles, replace_penances, setup_penances
from virtus.user_settings import has_completed_onboarding, set_onboarding_completed

FIVE = ["A", "B", "C", "D", "E"]


@pytest.mark.parametrize("count", [0, 2, 4, 6])
def test_wrong_count_rejected(session, count):
    with pytest.raises(ValidationError, match=f"Expected exactly 5 penance engagements, got {count}"):
        setup_penances(session, [f"t{i}" for i in range(count)])
    assert not has_penance_engagements(session)
    assert not has_completed_onboarding(session)


def test_blank_title_rejected(session):
    with pytest.raises(ValidationError, match="cannot be empty"):
        setup_penances(session, ["A", "B", "   ", "D", "E"])
    assert not has_penance_engagements(session)


def test_duplicate_titles_rejected():
    with pytest.raises(ValidationError, match="distinct"):
        normalize_titles(["A", "B", "C", "D", " A "])


def test_titles_are_trimmed():
    assert normalize_titles([" A", "B ", " C ", "D", "E"]) == FIVE


def test_setup_creates_roster_after_fixed_engagements(session):
    rows = setup_penances(session, FIVE)
    assert [r.title for r in rows] == FIVE
    assert all(r.is_custom and r.is_active for r in rows)
    assert [r.sort_order for r in rows] == [10, 11, 12, 13, 14]
    assert has_completed_onboarding(session)
    assert len(get_active_engagements(session)) == 15


def test_replace_reconciles_by_title(session):
    setup_penances(session, FIVE)
    before = {r.title: r.id for r in get_engagements_by_category(session, "penance")}

    roster = replace_penances(session, ["A", "B", "F", "G", "H"])
    assert [r.title for r in roster] == ["A", "B", "F", "G", "H"]

    rows = {r.title: r for r in get_engagements_by_category(session, "penance")}
    assert len(rows) == 8
    assert rows["A"].id == before["A"]
    assert rows["B"].id == before["B"]
    assert {t for t, r in rows.items() if r.is_active} == {"A", "B", "F", "G", "H"}
    assert {t for t, r in rows.items() if not r.is_active} == {"C", "D", "E"}


def test_replace_reactivates_and_resequences(session):
    setup_penances(session, FIVE)
    replace_penances(session, ["F", "G", "H", "I", "J"])
    replace_penances(session, ["E", "D", "C", "B", "A"])

    active = [e for e in get_active_engagements(session) if e.category == "penance"]
    assert [e.title for e in active] == ["E", "D", "C", "B", "A"]
    assert [e.sort_order for e in active] == [10, 11, 12, 13, 14]
    assert len(get_engagements_by_category(session, "penance")) == 10


def test_invalid_replace_changes_nothing(session):
    setup_penances(session, FIVE)
    with pytest.raises(ValidationError):
        replace_penances(session, ["A", "B"])
    active = [e.title for e in get_active_engagements(session) if e.category == "penance"]
    assert active == FIVE


def test_single_string_rejected():
    with pytest.raises(ValidationError):
        normalize_titles("ABCDE")


def test_second_setup_rejected(session):
    setup_penances(session, FIVE)
    with pytest.raises(ValidationError, match="already set up"):
        setup_penances(session, ["F", "G", "H", "I", "J"])
    active = [e.title for e in get_active_engagements(session) if e.category == "penance"]
    assert active == FIVE
    assert len(get_engagements_by_category(session, "penance")) == 5


def test_setup_rejected_once_onboarding_completed(session):
    set_onboarding_completed(session)
    session.commit()
    with pytest.raises(ValidationError):
        setup_penances(session, FIVE)
    assert not has_penance_engagements(session)
