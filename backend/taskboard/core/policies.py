"""Row-access rules for every table, evaluated in application code.

Each ``can_*`` predicate answers one (resource, action) question for an
explicit :class:`Subject`. Rules that cover the same action are OR-ed
together inside the predicate. List queries use the ``*_clause`` helpers so
that rows a subject may not read never leave the database.

Two behaviours are kept permissive on purpose until product decides
otherwise: a ``disabled`` profile is only hidden from others and is not
blocked from acting, and an assignee may move a task between any two
statuses.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import and_, or_, true

from taskboard.core.errors import AccessDenied
from taskboard.models import Profile, Task
from taskboard.schemas.profile import ProfileStatus, Role

logger = logging.getLogger(__name__)

# Columns an assignee may touch through the status-only update path.
STATUS_ONLY_FIELDS = frozenset({"status"})
PROFILE_ADMIN_FIELDS = frozenset({"role", "status"})


@dataclass(frozen=True)
class Subject:
    """The authenticated caller of a single request."""

    id: uuid.UUID
    role: Optional[Role] = None
    status: Optional[ProfileStatus] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin

    @classmethod
    def from_profile(cls, profile: Profile) -> "Subject":
        return cls(id=profile.id, role=Role(profile.role), status=ProfileStatus(profile.status))


def require(allowed: bool, subject: Subject, action: str) -> None:
    """Raise :class:`AccessDenied` unless ``allowed``."""
    if not allowed:
        logger.info("access denied: subject=%s action=%s", subject.id, action)
        raise AccessDenied()


# Profiles

def can_view_profile(subject: Subject, profile: Profile) -> bool:
    return profile.status == ProfileStatus.active.value or profile.id == subject.id


def can_update_profile(subject: Subject, profile: Profile, fields: Iterable[str] = ()) -> bool:
    if subject.is_admin:
        return True
    if profile.id != subject.id:
        return False
    # self-edit covers the username only; role and status are admin-managed
    return not (set(fields) & PROFILE_ADMIN_FIELDS)


def can_insert_profile(subject: Subject, profile_id: uuid.UUID) -> bool:
    return profile_id == subject.id


def visible_profiles_clause(subject: Subject):
    return or_(Profile.status == ProfileStatus.active.value, Profile.id == subject.id)


# Tasks

def can_view_task(subject: Subject, task: Task) -> bool:
    if not task.is_deleted:
        return True
    return subject.is_admin


def visible_tasks_clause(subject: Subject):
    if subject.is_admin:
        return true()
    return Task.is_deleted.is_(False)


def can_create_task(subject: Subject) -> bool:
    return subject.is_admin


def can_update_task(
    subject: Subject,
    task: Task,
    fields: Iterable[str],
    assignee_ids: Iterable[uuid.UUID] = (),
) -> bool:
    """Full update for admins, status-only update for assignees of a live task."""
    if subject.is_admin:
        return True
    fields = set(fields)
    if not fields or not fields <= STATUS_ONLY_FIELDS:
        return False
    return can_update_task_status(subject, task, assignee_ids)


def can_update_task_status(
    subject: Subject, task: Task, assignee_ids: Iterable[uuid.UUID]
) -> bool:
    if subject.is_admin:
        return True
    return subject.id in set(assignee_ids) and not task.is_deleted


def can_trash_task(subject: Subject, task: Task) -> bool:
    return subject.is_admin


def can_restore_task(subject: Subject, task: Task) -> bool:
    return subject.is_admin


def can_purge_task(subject: Subject, task: Task) -> bool:
    return subject.is_admin


# Assignments

def can_view_assignments(subject: Subject) -> bool:
    return True


def can_manage_assignments(subject: Subject) -> bool:
    return subject.is_admin


# Comments and attachments inherit visibility from the parent task

def can_view_task_children(subject: Subject, task: Task) -> bool:
    return not task.is_deleted


def can_add_task_child(subject: Subject, task: Task) -> bool:
    return not task.is_deleted


def visible_children_clause(task_id_column):
    """SQL filter for comment/attachment rows whose parent task is live."""
    return and_(Task.id == task_id_column, Task.is_deleted.is_(False))


def can_edit_comment(subject: Subject, comment) -> bool:
    return comment.user_id == subject.id


def can_delete_comment(subject: Subject, comment) -> bool:
    return comment.user_id == subject.id


def can_delete_attachment(subject: Subject, attachment) -> bool:
    return attachment.uploaded_by == subject.id or subject.is_admin
