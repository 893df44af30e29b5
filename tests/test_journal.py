from __future__ import annotations

from datetime import date

import pytest

from virtus.checks import get_check
from virtus.errors import NotFound, ValidationError
from virtus.journal import (
    finish_examen,
    get_entries_for_date,
    get_examen_for_date,
    load_examen,
    save_journal_entry,
    update_journal_entry,
)

DAY = date(2026, 2, 5)


def test_saving_same_step_updates_in_place(session):
    first = save_journal_entry(session, DAY, "examen", "merci", step=1)
    second = save_journal_entry(session, DAY, "examen", "merci pour la journée", step=1)
    assert first.id == second.id
    entries = get_examen_for_date(session, DAY)
    assert len(entries) == 1
    assert entries[0].content == "merci pour la journée"


def test_steps_are_independent(session):
    save_journal_entry(session, DAY, "examen", "trois", step=3)
    save_journal_entry(session, DAY, "examen", "un", step=1)
    assert [e.step for e in get_examen_for_date(session, DAY)] == [1, 3]


@pytest.mark.parametrize("step", [None, 0, 6])
def test_examen_needs_valid_step(session, step):
    with pytest.raises(ValidationError):
        save_journal_entry(session, DAY, "examen", "x", step=step)


def test_graces_take_no_step(session):
    with pytest.raises(ValidationError):
        save_journal_entry(session, DAY, "graces", "x", step=2)


def test_unknown_type(session):
    with pytest.raises(ValidationError):
        save_journal_entry(session, DAY, "diary", "x")


def test_load_examen_fills_missing_steps(session):
    save_journal_entry(session, DAY, "examen", "pardon", step=4)
    save_journal_entry(session, DAY, "graces", "la paix")
    save_journal_entry(session, DAY, "notes", "à relire")
    data = load_examen(session, DAY)
    assert data["steps"] == {1: "", 2: "", 3: "", 4: "pardon", 5: ""}
    assert data["graces"] == "la paix"
    assert len(get_entries_for_date(session, DAY)) == 3


def test_update_entry(session):
    row = save_journal_entry(session, DAY, "notes", "brouillon")
    updated = update_journal_entry(session, row.id, "propre")
    assert updated.content == "propre"


def test_update_missing_entry(session):
    with pytest.raises(NotFound):
        update_journal_entry(session, "nope", "x")


def test_finish_examen_checks_engagement_once(session):
    row = finish_examen(session, DAY)
    assert row.engagement_id == "spiritual-4"
    assert row.checked
    stamp = row.checked_at

    again = finish_examen(session, DAY)
    assert again.checked
    assert again.checked_at == stamp
    assert get_check(session, "spiritual-4", DAY).checked
