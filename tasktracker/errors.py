"""Error taxonomy shared by the auth and task services.

Every error carries the HTTP status and the generic message the API
returns for it; nothing else about the failure reaches a response body.
"""

from __future__ import annotations


class TaskTrackerError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(TaskTrackerError):
    status_code = 400
    message = "Invalid input"


class Conflict(TaskTrackerError):
    status_code = 400
    message = "User already exists"


class InvalidCredentials(TaskTrackerError):
    status_code = 400
    message = "Invalid email or password"


class Unauthenticated(TaskTrackerError):
    status_code = 401
    message = "Access Denied"


class InvalidToken(TaskTrackerError):
    status_code = 400
    message = "Invalid Token"


class NotFound(TaskTrackerError):
    status_code = 404
    message = "Task not found"


class StoreFailure(TaskTrackerError):
    status_code = 500
    message = "Server error"
