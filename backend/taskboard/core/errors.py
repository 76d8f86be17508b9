class TaskboardError(Exception):
    """Base class for errors raised by the service layer."""

    detail = "Request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class AccessDenied(TaskboardError):
    detail = "Access denied"


class NotFound(TaskboardError):
    detail = "Not found"


class Conflict(TaskboardError):
    detail = "Conflict"


class InvalidTransition(Conflict):
    """A soft-delete lifecycle move that the state machine does not allow."""

    detail = "Invalid state transition"
