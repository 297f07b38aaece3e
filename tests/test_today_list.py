from datetime import timedelta

import pytest

from conftest import MONDAY_9AM, USER
from core.errors import InvalidRequest, NotFound
from services.today_list import FOCUSED, SCHEDULED, state_of


@pytest.fixture()
def subs(repo, main_task):
    return [
        repo.create_sub_task("Design", None, 120, main_task.id, 1),
        repo.create_sub_task("Coding", None, 240, main_task.id, 2),
        repo.create_sub_task("Testing", None, 120, main_task.id, 3),
    ]


def test_new_sub_tasks_are_scheduled(subs):
    assert all(state_of(sub) == SCHEDULED for sub in subs)


def test_promote_appends_to_end(today, subs):
    first = today.promote(subs[1].id)
    second = today.promote(subs[0].id)

    assert state_of(first) == FOCUSED
    assert first.today_order == 1
    assert second.today_order == 2
    assert [s.id for s in today.list_today(USER)] == [subs[1].id, subs[0].id]


def test_promote_twice_is_a_no_op(today, subs):
    promoted = today.promote(subs[0].id)
    again = today.promote(subs[0].id)

    assert again.today_order == promoted.today_order
    assert [s.id for s in today.list_today(USER)] == [subs[0].id]


def test_demote_clears_rank_and_keeps_time(repo, today, main_task, subs):
    today.promote(subs[0].id)
    demoted = today.demote(subs[0].id, main_task.id)

    assert state_of(demoted) == SCHEDULED
    assert demoted.today_order is None
    assert demoted.estimated_time == 120
    assert today.list_today(USER) == []
    assert repo.get_main_task(main_task.id).total_duration == 480


def test_demote_when_scheduled_is_a_no_op(today, subs):
    result = today.demote(subs[0].id)
    assert state_of(result) == SCHEDULED


def test_demote_leaves_gaps(today, subs):
    for sub in subs:
        today.promote(sub.id)
    today.demote(subs[1].id)

    remaining = today.list_today(USER)
    assert [s.today_order for s in remaining] == [1, 3]

    again = today.promote(subs[1].id)
    assert again.today_order == 4
    assert [s.id for s in today.list_today(USER)] == [subs[0].id, subs[2].id, subs[1].id]


def test_demote_checks_owner(repo, today, subs):
    other = repo.create_main_task("English", None, MONDAY_9AM, None, USER)
    today.promote(subs[0].id)

    with pytest.raises(NotFound):
        today.demote(subs[0].id, other.id)
    assert state_of(repo.get_sub_task(subs[0].id)) == FOCUSED


def test_unknown_sub_task(today):
    with pytest.raises(NotFound):
        today.promote("missing")
    with pytest.raises(NotFound):
        today.demote("missing")


def test_today_rank_is_global_across_main_tasks(repo, today, subs):
    other = repo.create_main_task("English", None, MONDAY_9AM + timedelta(days=1), None, USER)
    grammar = repo.create_sub_task("Grammar", None, 100, other.id, 1)

    today.promote(subs[2].id)
    promoted = today.promote(grammar.id)

    assert promoted.today_order == 2
    assert [s.id for s in today.list_today(USER)] == [subs[2].id, grammar.id]


def test_list_today_is_scoped_to_user(repo, today, subs):
    stranger_task = repo.create_main_task("Other", None, MONDAY_9AM, None, "user-2")
    stranger_sub = repo.create_sub_task("Theirs", None, 30, stranger_task.id, 1)
    today.promote(subs[0].id)
    today.promote(stranger_sub.id)

    assert [s.id for s in today.list_today(USER)] == [subs[0].id]
    assert [s.id for s in today.list_today("user-2")] == [stranger_sub.id]

    with pytest.raises(InvalidRequest):
        today.list_today("")


def test_cut_part_of_focused_sub_task_starts_scheduled(today, splitter, subs):
    today.promote(subs[1].id)
    result = splitter.cut(subs[1].id, 60)

    assert state_of(result.updated_original) == FOCUSED
    assert state_of(result.new_sub_task) == SCHEDULED
