"""Derives the displayed task list from the full set a user owns.

``process_tasks`` runs three stages (category filter, time filter, sort)
and is pure: the same tasks, config and ``now`` always give the same
ordered list, and malformed input never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import StrEnum
from typing import Any, Iterable, Sequence

from .models import EPOCH, Task

ALL = "All"
CATEGORIES = ("Work", "Personal", "Study", "Health", "Others", "General")

ONE_DAY = timedelta(days=1)

PRIORITY_WEIGHT = {"High": 3, "Medium": 2, "Low": 1}
SMART_PRIORITY_POINTS = {"High": 50, "Medium": 30, "Low": 10}
SMART_OVERDUE_POINTS = 100
SMART_DUE_SOON_POINTS = 40


class TimeFilter(StrEnum):
    ANYTIME = "Anytime"
    TODAY = "Today"
    THIS_WEEK = "This Week"
    OVERDUE = "Overdue"
    CUSTOM_RANGE = "Custom Range"


class SortBy(StrEnum):
    DEFAULT = "Default"
    SMART_MIX = "Smart Mix"
    DEADLINE = "Deadline"
    PRIORITY = "Priority"


@dataclass(frozen=True, slots=True)
class QueryConfig:
    category: str = ALL
    time_filter: TimeFilter = TimeFilter.ANYTIME
    # date-only bounds, "YYYY-MM-DD" or date objects
    custom_start: str | date | None = None
    custom_end: str | date | None = None
    sort_by: SortBy = SortBy.DEFAULT


def _local_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now().astimezone()
    # naive values are taken as local time
    return now.astimezone()


def _local_at(day: date, at: time) -> datetime:
    # offset in force on that day, not today's
    return datetime.combine(day, at).astimezone()


def _parse_day(raw: Any) -> date | None:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            return None
    return None


def filter_category(tasks: Iterable[Task], category: str) -> list[Task]:
    if category == ALL:
        return list(tasks)
    return [t for t in tasks if t.category == category]


def filter_time(tasks: Iterable[Task], config: QueryConfig, now: datetime) -> list[Task]:
    if config.time_filter == TimeFilter.ANYTIME:
        return list(tasks)

    today_start = _local_at(now.date(), time.min)
    next_week = today_start + 7 * ONE_DAY

    start_day = _parse_day(config.custom_start)
    end_day = _parse_day(config.custom_end)
    start = _local_at(start_day, time.min) if start_day else None
    end = _local_at(end_day, time(23, 59, 59)) if end_day else None

    def keep(task: Task) -> bool:
        due = task.deadline
        if due is None:
            return False
        if config.time_filter == TimeFilter.TODAY:
            return today_start <= due < today_start + ONE_DAY
        if config.time_filter == TimeFilter.THIS_WEEK:
            return today_start <= due < next_week
        if config.time_filter == TimeFilter.OVERDUE:
            return due < now and not task.is_completed
        if config.time_filter == TimeFilter.CUSTOM_RANGE:
            return (start is None or start <= due) and (end is None or due <= end)
        return True

    return [t for t in tasks if keep(t)]


def smart_score(task: Task, now: datetime) -> int:
    """Priority points plus urgency; a task with no deadline counts as overdue."""
    score = SMART_PRIORITY_POINTS.get(task.priority, 0)
    due = task.deadline or EPOCH
    if due < now:
        score += SMART_OVERDUE_POINTS
    elif due - now < ONE_DAY:
        score += SMART_DUE_SOON_POINTS
    return score


def sort_tasks(tasks: Iterable[Task], sort_by: SortBy, now: datetime) -> list[Task]:
    def secondary(task: Task) -> float:
        if sort_by == SortBy.DEADLINE:
            return (task.deadline or EPOCH).timestamp()
        if sort_by == SortBy.PRIORITY:
            return -PRIORITY_WEIGHT.get(task.priority, 0)
        if sort_by == SortBy.SMART_MIX:
            return -smart_score(task, now)
        return -task.created_at.timestamp()

    # sorted() is stable: equal keys keep their input order
    return sorted(tasks, key=lambda t: (t.is_completed, secondary(t)))


def process_tasks(
    tasks: Sequence[Task], config: QueryConfig, now: datetime | None = None
) -> list[Task]:
    now = _local_now(now)
    processed = filter_category(tasks, config.category)
    processed = filter_time(processed, config, now)
    return sort_tasks(processed, config.sort_by, now)


def due_soon(tasks: Iterable[Task], now: datetime | None = None) -> list[Task]:
    """Incomplete tasks due in the future but within the next 24 hours."""
    now = _local_now(now)
    return [
        t
        for t in tasks
        if t.deadline is not None
        and not t.is_completed
        and now < t.deadline
        and t.deadline - now < ONE_DAY
    ]
