from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from .api import ApiClient, ApiError
from .models import Task
from .pipeline import QueryConfig, due_soon, process_tasks
from .session import Session

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], None]


def _log_notice(title: str, message: str) -> None:
    logger.warning("%s: %s", title, message)


class TaskBoard:
    """
    The task list a signed-in user works with.

    Holds the last fetched tasks; every mutation re-fetches. Failures are
    logged and surfaced through ``notify`` with a retry hint, and the call
    returns a falsy value.
    """

    def __init__(self, api: ApiClient, session: Session, notify: Notify | None = None) -> None:
        self.api = api
        self.session = session
        self.notify = notify or _log_notice
        self.tasks: list[Task] = []

    def _failed(self, action: str, exc: ApiError) -> None:
        logger.error("%s failed status=%s: %s", action, exc.status_code, exc.message)
        self.notify("Error", f"Could not {action}. Please try again.")

    def refresh(self, now: datetime | None = None) -> bool:
        try:
            tasks = self.api.list_tasks(self.session)
        except ApiError as e:
            self._failed("fetch tasks", e)
            return False
        self.tasks = tasks
        urgent = due_soon(tasks, now)
        if urgent:
            self.notify(
                "Upcoming Deadlines",
                f"You have {len(urgent)} task(s) due within 24 hours! Check them out.",
            )
        return True

    def visible(self, config: QueryConfig, now: datetime | None = None) -> list[Task]:
        return process_tasks(self.tasks, config, now)

    def add(self, **fields: Any) -> Task | None:
        try:
            task = self.api.create_task(self.session, **fields)
        except ApiError as e:
            self._failed("save the task", e)
            return None
        self.refresh()
        return task

    def toggle_complete(self, task: Task) -> bool:
        try:
            self.api.update_task(self.session, task.id, is_completed=not task.is_completed)
        except ApiError as e:
            self._failed("update the task", e)
            return False
        return self.refresh()

    def delete(self, task: Task) -> bool:
        try:
            self.api.delete_task(self.session, task.id)
        except ApiError as e:
            self._failed("delete the task", e)
            return False
        return self.refresh()
