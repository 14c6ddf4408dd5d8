from .api import ApiClient, ApiError
from .board import TaskBoard
from .models import Task
from .pipeline import (
    ALL,
    CATEGORIES,
    QueryConfig,
    SortBy,
    TimeFilter,
    due_soon,
    process_tasks,
)
from .session import Session, SessionHolder

__all__ = [
    "ALL",
    "CATEGORIES",
    "ApiClient",
    "ApiError",
    "QueryConfig",
    "Session",
    "SessionHolder",
    "SortBy",
    "Task",
    "TaskBoard",
    "TimeFilter",
    "due_soon",
    "process_tasks",
]
