from datetime import timedelta

import pytest

from core.errors import InvalidRequest, NotFound
from core.statuses import COMPLETED, IN_PROGRESS, PENDING
from datetime_utils import ensure_utc
from conftest import MONDAY_9AM, USER


@pytest.mark.parametrize("user_id", [None, "", "   "])
def test_list_requires_user_id(repo, user_id):
    with pytest.raises(InvalidRequest):
        repo.list_main_tasks(user_id)


def test_list_unknown_user_is_empty(repo, main_task):
    assert repo.list_main_tasks("someone-else") == []


def test_create_main_task_starts_empty(repo):
    task = repo.create_main_task("English", None, "2025-01-06T09:00:00Z", None, USER)

    assert task.total_duration == 0
    assert task.description is None
    assert task.user_id == USER
    assert ensure_utc(task.start_time) == MONDAY_9AM
    assert repo.list_sub_tasks(task.id) == []


def test_create_main_task_validates_input(repo):
    with pytest.raises(InvalidRequest):
        repo.create_main_task("  ", None, MONDAY_9AM, None, USER)
    with pytest.raises(InvalidRequest):
        repo.create_main_task("Title", None, None, None, USER)
    with pytest.raises(InvalidRequest):
        repo.create_main_task("Title", None, MONDAY_9AM, None, None)


def test_create_main_task_unknown_project(repo):
    with pytest.raises(NotFound):
        repo.create_main_task("Title", None, MONDAY_9AM, "missing-project", USER)


def test_list_orders_tasks_and_resolves_project(repo):
    project = repo.create_project("Client A", "#d5ab63", USER)
    later = repo.create_main_task("Later", None, MONDAY_9AM + timedelta(hours=3), project.id, USER)
    earlier = repo.create_main_task("Earlier", None, MONDAY_9AM, None, USER)

    repo.create_sub_task("third", None, 10, later.id, 3)
    repo.create_sub_task("first", None, 10, later.id, 1)
    repo.create_sub_task("second", None, 10, later.id, 2)

    listed = repo.list_main_tasks(USER)

    assert [entry.main_task.id for entry in listed] == [earlier.id, later.id]
    assert listed[0].project is None
    assert listed[0].sub_tasks == []
    assert listed[1].project.title == "Client A"
    assert [sub.title for sub in listed[1].sub_tasks] == ["first", "second", "third"]


def test_total_duration_follows_created_sub_tasks(repo, main_task):
    assert repo.get_main_task(main_task.id).total_duration == 0

    repo.create_sub_task("Design", None, 60, main_task.id, 1)
    assert repo.get_main_task(main_task.id).total_duration == 60

    repo.create_sub_task("Coding", None, 30, main_task.id, 2)
    assert repo.get_main_task(main_task.id).total_duration == 90


def test_total_duration_over_many_creations(repo, main_task):
    estimates = [15, 45, 5, 120, 30]
    for index, minutes in enumerate(estimates, start=1):
        repo.create_sub_task(f"step {index}", None, minutes, main_task.id, index)
        expected = sum(estimates[:index])
        assert repo.get_main_task(main_task.id).total_duration == expected


def test_create_sub_task_defaults(repo, main_task):
    sub = repo.create_sub_task("Design", "wireframes", 60, main_task.id, 1)

    assert sub.status == PENDING
    assert sub.is_in_today is False
    assert sub.today_order is None
    assert sub.parent_id is None
    assert sub.description == "wireframes"


def test_create_sub_task_appends_when_order_missing(repo, main_task):
    repo.create_sub_task("a", None, 10, main_task.id, 4)
    appended = repo.create_sub_task("b", None, 10, main_task.id)

    assert appended.order == 5.0


def test_create_sub_task_unknown_main_task(repo):
    with pytest.raises(NotFound):
        repo.create_sub_task("Design", None, 60, "nope", 1)


@pytest.mark.parametrize("minutes", [0, -5, 2.5, True, "60", None])
def test_create_sub_task_rejects_bad_estimate(repo, main_task, minutes):
    with pytest.raises(InvalidRequest):
        repo.create_sub_task("Design", None, minutes, main_task.id, 1)
    assert repo.get_main_task(main_task.id).total_duration == 0


def test_update_today_state_only_touches_today_fields(repo, main_task):
    sub = repo.create_sub_task("Design", None, 60, main_task.id, 1)

    focused = repo.update_sub_task_today_state(sub.id, True, 3)
    assert focused.is_in_today is True
    assert focused.today_order == 3
    assert focused.today_added_at is not None
    assert focused.estimated_time == 60
    assert repo.get_main_task(main_task.id).total_duration == 60

    cleared = repo.update_sub_task_today_state(sub.id, False, 7)
    assert cleared.is_in_today is False
    assert cleared.today_order is None
    assert cleared.today_added_at is None


def test_update_today_state_requires_rank(repo, main_task):
    sub = repo.create_sub_task("Design", None, 60, main_task.id, 1)
    with pytest.raises(InvalidRequest):
        repo.update_sub_task_today_state(sub.id, True, None)


def test_update_today_state_unknown_sub_task(repo):
    with pytest.raises(NotFound):
        repo.update_sub_task_today_state("missing", True, 1)


def test_set_status(repo, main_task):
    sub = repo.create_sub_task("Design", None, 60, main_task.id, 1)

    assert repo.set_sub_task_status(sub.id, IN_PROGRESS).status == IN_PROGRESS
    done = repo.set_sub_task_status(sub.id, COMPLETED, actual_time=75)
    assert done.status == COMPLETED
    assert done.actual_time == 75

    with pytest.raises(InvalidRequest):
        repo.set_sub_task_status(sub.id, "ARCHIVED")


def test_recompute_is_a_no_op_when_consistent(repo, main_task):
    repo.create_sub_task("Design", None, 60, main_task.id, 1)
    repo.create_sub_task("Coding", None, 40, main_task.id, 2)

    assert repo.recompute_total_duration(main_task.id).total_duration == 100
    assert repo.get_main_task(main_task.id).total_duration == 100
