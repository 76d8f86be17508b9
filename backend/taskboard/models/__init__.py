# Importing the package registers every table on Base.metadata.
from taskboard.models.account import Account
from taskboard.models.profile import Profile
from taskboard.models.task import Task, TaskAssignee
from taskboard.models.comment import TaskComment
from taskboard.models.attachment import TaskAttachment

__all__ = ["Account", "Profile", "Task", "TaskAssignee", "TaskComment", "TaskAttachment"]
