# tests/test_policies.py

from __future__ import annotations

import uuid

import pytest

from taskboard.core import policies
from taskboard.core.errors import AccessDenied
from taskboard.core.policies import Subject
from taskboard.models import Profile, Task, TaskAttachment, TaskComment
from taskboard.schemas.profile import ProfileStatus, Role


def subject(role: Role | None = Role.employee) -> Subject:
    return Subject(id=uuid.uuid4(), role=role, status=ProfileStatus.active)


ADMIN = subject(Role.admin)
EMPLOYEE = subject()
OTHER = subject()


def live_task() -> Task:
    return Task(id=uuid.uuid4(), title="t", is_deleted=False)


def trashed_task() -> Task:
    return Task(id=uuid.uuid4(), title="t", is_deleted=True)


def test_profile_visibility_active_or_self() -> None:
    active = Profile(id=OTHER.id, username="o", status="active")
    disabled = Profile(id=OTHER.id, username="o", status="disabled")
    own_disabled = Profile(id=EMPLOYEE.id, username="me", status="disabled")

    assert policies.can_view_profile(EMPLOYEE, active)
    assert not policies.can_view_profile(EMPLOYEE, disabled)
    # admins get no special read access to disabled profiles
    assert not policies.can_view_profile(ADMIN, disabled)
    assert policies.can_view_profile(EMPLOYEE, own_disabled)


def test_profile_update_self_username_only_admin_anything() -> None:
    own = Profile(id=EMPLOYEE.id, username="me", status="active")
    other = Profile(id=OTHER.id, username="o", status="active")

    assert policies.can_update_profile(EMPLOYEE, own, ["username"])
    assert not policies.can_update_profile(EMPLOYEE, own, ["role"])
    assert not policies.can_update_profile(EMPLOYEE, own, ["status"])
    assert not policies.can_update_profile(EMPLOYEE, other, ["username"])
    assert policies.can_update_profile(ADMIN, other, ["role", "status", "username"])


def test_profile_insert_only_for_own_id() -> None:
    assert policies.can_insert_profile(EMPLOYEE, EMPLOYEE.id)
    assert not policies.can_insert_profile(EMPLOYEE, OTHER.id)


def test_task_visibility_depends_on_trash_state() -> None:
    assert policies.can_view_task(EMPLOYEE, live_task())
    assert not policies.can_view_task(EMPLOYEE, trashed_task())
    assert policies.can_view_task(ADMIN, trashed_task())


def test_only_admin_creates_trashes_restores_and_purges() -> None:
    task = live_task()
    assert policies.can_create_task(ADMIN)
    assert not policies.can_create_task(EMPLOYEE)
    for check in (policies.can_trash_task, policies.can_restore_task, policies.can_purge_task):
        assert check(ADMIN, task)
        assert not check(EMPLOYEE, task)


@pytest.mark.parametrize(
    "fields, expected",
    [
        (["status"], True),
        (["title"], False),
        (["status", "priority"], False),
        (["due_date"], False),
        (["tags"], False),
        ([], False),
    ],
)
def test_assignee_update_is_status_only(fields: list[str], expected: bool) -> None:
    task = live_task()
    assert policies.can_update_task(EMPLOYEE, task, fields, [EMPLOYEE.id]) is expected


def test_status_update_requires_membership_and_live_task() -> None:
    assert policies.can_update_task_status(EMPLOYEE, live_task(), [EMPLOYEE.id])
    assert not policies.can_update_task_status(EMPLOYEE, live_task(), [OTHER.id])
    assert not policies.can_update_task_status(EMPLOYEE, trashed_task(), [EMPLOYEE.id])
    assert policies.can_update_task(ADMIN, live_task(), ["title", "status"], [])


def test_disabled_employee_keeps_action_rights() -> None:
    disabled = Subject(id=uuid.uuid4(), role=Role.employee, status=ProfileStatus.disabled)
    assert policies.can_update_task_status(disabled, live_task(), [disabled.id])
    assert policies.can_add_task_child(disabled, live_task())


def test_assignment_rules() -> None:
    assert policies.can_view_assignments(EMPLOYEE)
    assert policies.can_manage_assignments(ADMIN)
    assert not policies.can_manage_assignments(EMPLOYEE)


def test_children_follow_parent_trash_state() -> None:
    assert policies.can_view_task_children(EMPLOYEE, live_task())
    assert not policies.can_view_task_children(ADMIN, trashed_task())
    assert not policies.can_add_task_child(ADMIN, trashed_task())


def test_comment_edit_and_delete_by_author_only() -> None:
    comment = TaskComment(user_id=EMPLOYEE.id, content="hi")
    assert policies.can_edit_comment(EMPLOYEE, comment)
    assert policies.can_delete_comment(EMPLOYEE, comment)
    assert not policies.can_edit_comment(ADMIN, comment)
    assert not policies.can_delete_comment(OTHER, comment)


def test_attachment_delete_by_uploader_or_admin() -> None:
    attachment = TaskAttachment(uploaded_by=EMPLOYEE.id, file_name="a", file_url="u")
    assert policies.can_delete_attachment(EMPLOYEE, attachment)
    assert policies.can_delete_attachment(ADMIN, attachment)
    assert not policies.can_delete_attachment(OTHER, attachment)


def test_subject_without_profile_is_not_admin() -> None:
    bare = Subject(id=uuid.uuid4())
    assert not bare.is_admin
    assert not policies.can_create_task(bare)


def test_require_raises_access_denied() -> None:
    policies.require(True, EMPLOYEE, "noop")
    with pytest.raises(AccessDenied):
        policies.require(False, EMPLOYEE, "create_task")
