# tests/test_pipeline.py

from __future__ import annotations

import time
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest

from tasktracker.client.models import EPOCH, Task
from tasktracker.client.pipeline import (
    ALL,
    QueryConfig,
    SortBy,
    TimeFilter,
    due_soon,
    process_tasks,
    smart_score,
)

# Noon local time keeps "+/- a few hours" inside today.
NOW = datetime.now().astimezone().replace(hour=12, minute=0, second=0, microsecond=0)
TODAY = datetime(NOW.year, NOW.month, NOW.day).astimezone()
DAY = timedelta(days=1)


def make(title: str, **kw) -> Task:
    kw.setdefault("created_at", NOW - timedelta(days=30))
    return Task(id=title, title=title, **kw)


def titles(tasks: list[Task]) -> list[str]:
    return [t.title for t in tasks]


def run(tasks: list[Task], **config) -> list[str]:
    return titles(process_tasks(tasks, QueryConfig(**config), now=NOW))


# ---- category ----


def test_all_category_is_identity_and_superset() -> None:
    tasks = [
        make("w", category="Work"),
        make("p", category="Personal"),
        make("none", category=None),
    ]
    everything = set(run(tasks, category=ALL))
    assert everything == {"w", "p", "none"}
    for cat in ("Work", "Personal", "Study"):
        assert set(run(tasks, category=cat)) <= everything


def test_category_match_is_exact_and_case_sensitive() -> None:
    tasks = [make("a", category="Work"), make("b", category="work"), make("c", category=None)]
    assert run(tasks, category="Work") == ["a"]
    assert run(tasks, category="General") == []


# ---- time filter ----


def test_time_filters_drop_tasks_without_deadline() -> None:
    tasks = [make("nodl")]
    assert run(tasks) == ["nodl"]
    for tf in (TimeFilter.TODAY, TimeFilter.THIS_WEEK, TimeFilter.OVERDUE, TimeFilter.CUSTOM_RANGE):
        assert run(tasks, time_filter=tf) == []


def test_today_window() -> None:
    tasks = [
        make("start", deadline=TODAY),
        make("evening", deadline=TODAY + timedelta(hours=23)),
        make("tomorrow", deadline=TODAY + DAY),
        make("yesterday", deadline=TODAY - timedelta(seconds=1)),
    ]
    assert sorted(run(tasks, time_filter=TimeFilter.TODAY)) == ["evening", "start"]


def test_this_week_window() -> None:
    tasks = [
        make("today", deadline=TODAY + timedelta(hours=1)),
        make("day6", deadline=TODAY + 6 * DAY),
        make("day7", deadline=TODAY + 7 * DAY),
        make("past", deadline=TODAY - DAY),
    ]
    assert sorted(run(tasks, time_filter=TimeFilter.THIS_WEEK)) == ["day6", "today"]


def test_overdue_excludes_completed_and_future() -> None:
    tasks = [
        make("late", deadline=NOW - DAY),
        make("late-done", deadline=NOW - DAY, is_completed=True),
        make("future", deadline=NOW + DAY),
    ]
    assert run(tasks, time_filter=TimeFilter.OVERDUE) == ["late"]


def test_custom_range_covers_whole_days() -> None:
    start = (TODAY + DAY).date()
    end = (TODAY + 3 * DAY).date()
    tasks = [
        make("before", deadline=TODAY + DAY - timedelta(seconds=1)),
        make("first", deadline=TODAY + DAY),
        make("last", deadline=TODAY + 3 * DAY + timedelta(hours=23, minutes=59, seconds=59)),
        make("after", deadline=TODAY + 4 * DAY),
    ]
    got = run(
        tasks,
        time_filter=TimeFilter.CUSTOM_RANGE,
        custom_start=start.isoformat(),
        custom_end=end.isoformat(),
        sort_by=SortBy.DEADLINE,
    )
    assert got == ["first", "last"]


def test_custom_range_open_ends() -> None:
    tasks = [make("old", deadline=NOW - 400 * DAY), make("far", deadline=NOW + 400 * DAY)]
    rng = TimeFilter.CUSTOM_RANGE
    assert sorted(run(tasks, time_filter=rng)) == ["far", "old"]
    assert run(tasks, time_filter=rng, custom_start=NOW.date()) == ["far"]
    assert run(tasks, time_filter=rng, custom_end=NOW.date()) == ["old"]
    # an unreadable bound counts as missing
    assert sorted(run(tasks, time_filter=rng, custom_start="not-a-date")) == ["far", "old"]


# ---- sorting ----


def test_incomplete_tasks_always_come_first() -> None:
    tasks = [
        make("done-high", priority="High", is_completed=True),
        make("open-low", priority="Low"),
        make("done-low", priority="Low", is_completed=True),
        make("open-high", priority="High"),
    ]
    for sort_by in SortBy:
        out = process_tasks(tasks, QueryConfig(sort_by=sort_by), now=NOW)
        flags = [t.is_completed for t in out]
        assert flags == sorted(flags), sort_by


def test_default_sort_is_newest_first() -> None:
    tasks = [
        make("old", created_at=NOW - 3 * DAY),
        make("new", created_at=NOW - DAY),
        make("mid", created_at=NOW - 2 * DAY),
    ]
    assert run(tasks) == ["new", "mid", "old"]


def test_deadline_sort_puts_missing_deadline_first() -> None:
    tasks = [
        make("later", deadline=NOW + 2 * DAY),
        make("none"),
        make("sooner", deadline=NOW + DAY),
    ]
    assert run(tasks, sort_by=SortBy.DEADLINE) == ["none", "sooner", "later"]


def test_priority_sort() -> None:
    tasks = [make("l", priority="Low"), make("h", priority="High"), make("m", priority="Medium")]
    assert run(tasks, sort_by=SortBy.PRIORITY) == ["h", "m", "l"]


def test_smart_mix_overdue_low_beats_high_due_after_a_day() -> None:
    a = make("A", deadline=NOW + DAY + timedelta(hours=1), priority="High")
    b = make("B", deadline=NOW - DAY, priority="Low")
    assert smart_score(a, NOW) == 50
    assert smart_score(b, NOW) == 110
    assert run([a, b], sort_by=SortBy.SMART_MIX) == ["B", "A"]


def test_smart_mix_due_within_a_day_bonus() -> None:
    a = make("A", deadline=NOW + timedelta(hours=20), priority="High")
    assert smart_score(a, NOW) == 90


def test_smart_mix_counts_missing_deadline_as_overdue() -> None:
    # A task with no deadline scores as if due at the epoch.
    nodl = make("nodl", priority="Low")
    soon = make("soon", deadline=NOW + timedelta(hours=2), priority="High")
    assert smart_score(nodl, NOW) == 110
    assert run([soon, nodl], sort_by=SortBy.SMART_MIX) == ["nodl", "soon"]


@pytest.mark.parametrize("sort_by", list(SortBy))
def test_sort_is_stable_for_equal_keys(sort_by: SortBy) -> None:
    created = NOW - DAY
    deadline = NOW + 3 * DAY
    tasks = [
        make(name, priority="Medium", created_at=created, deadline=deadline)
        for name in ("first", "second", "third")
    ]
    assert run(tasks, sort_by=sort_by) == ["first", "second", "third"]


def test_pipeline_is_idempotent_and_does_not_mutate_input() -> None:
    tasks = [
        make("x", priority="Low", deadline=NOW + DAY, category="Work"),
        make("y", priority="High", is_completed=True, category="Work"),
        make("z", priority="Medium", deadline=NOW - DAY, category="Work"),
    ]
    before = list(tasks)
    config = QueryConfig(category="Work", sort_by=SortBy.SMART_MIX)
    first = process_tasks(tasks, config, now=NOW)
    second = process_tasks(tasks, config, now=NOW)
    assert first == second
    assert tasks == before


# ---- lenient parsing ----


def test_unparseable_deadline_degrades_to_no_deadline() -> None:
    task = Task.from_json(
        {"_id": "1", "title": "t", "deadline": "someday", "createdAt": "garbage"}
    )
    assert task.deadline is None
    assert task.created_at == EPOCH
    assert task.category is None
    assert run([task], time_filter=TimeFilter.TODAY) == []
    assert run([task]) == ["t"]


def test_from_json_reads_api_shape() -> None:
    task = Task.from_json(
        {
            "_id": "abc",
            "title": "Pay rent",
            "deadline": "2026-10-20T09:00:00Z",
            "priority": "High",
            "category": "Personal",
            "isCompleted": True,
            "createdAt": "2026-10-01T08:00:00+00:00",
        }
    )
    assert task.id == "abc"
    assert task.deadline == datetime(2026, 10, 20, 9, tzinfo=timezone.utc)
    assert task.is_completed is True


# ---- upcoming deadlines ----


def test_due_soon_counts_future_incomplete_within_a_day() -> None:
    tasks = [
        make("soon", deadline=NOW + timedelta(hours=3)),
        make("soon-done", deadline=NOW + timedelta(hours=3), is_completed=True),
        make("late", deadline=NOW - timedelta(hours=1)),
        make("later", deadline=NOW + DAY + timedelta(minutes=1)),
        make("nodl"),
    ]
    assert titles(due_soon(tasks, NOW)) == ["soon"]


def test_smart_mix_overdue_low_beats_due_within_a_day_high() -> None:
    a = make("A", deadline=NOW + timedelta(hours=20), priority="High")
    b = make("B", deadline=NOW - DAY, priority="Low")
    assert (smart_score(b, NOW), smart_score(a, NOW)) == (110, 90)
    assert run([a, b], sort_by=SortBy.SMART_MIX) == ["B", "A"]


# ---- naive datetimes and loose JSON ----


def test_naive_datetimes_are_taken_as_utc() -> None:
    task = Task(
        id="n", title="n", deadline=datetime(2026, 1, 1), created_at=datetime(2025, 12, 1)
    )
    assert task.deadline == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert task.created_at.tzinfo is not None

    naive_now = datetime(2026, 1, 2)
    for sort_by in SortBy:
        out = process_tasks([task], QueryConfig(sort_by=sort_by), now=naive_now)
        assert titles(out) == ["n"]
    overdue = QueryConfig(time_filter=TimeFilter.OVERDUE)
    assert titles(process_tasks([task], overdue, now=naive_now)) == ["n"]
    assert due_soon([task], naive_now) == []


@pytest.mark.parametrize("raw", ["false", "true", 1, None])
def test_is_completed_needs_a_real_boolean(raw) -> None:
    task = Task.from_json({"_id": "1", "title": "t", "isCompleted": raw})
    assert task.is_completed is False


# ---- local time zone with daylight saving ----


@pytest.fixture()
def new_york(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_custom_range_uses_the_offset_of_the_chosen_day(new_york: None) -> None:
    # now is in winter (EST), the range and the deadline in summer (EDT)
    now = datetime(2026, 11, 20, 12, 0).astimezone()
    due = datetime(2026, 7, 1, 0, 30).astimezone()
    assert now.utcoffset() != due.utcoffset()

    task = Task(id="x", title="x", deadline=due)
    config = QueryConfig(
        time_filter=TimeFilter.CUSTOM_RANGE, custom_start="2026-07-01", custom_end="2026-07-01"
    )
    assert titles(process_tasks([task], config, now=now)) == ["x"]

    # 23:30 EDT on June 30 is the day before the range
    before = Task(id="b", title="b", deadline=datetime(2026, 6, 30, 23, 30).astimezone())
    assert process_tasks([before], config, now=now) == []


def test_today_starts_at_local_midnight_on_dst_change_day(new_york: None) -> None:
    # 2026-11-01: clocks fall back at 02:00 EDT, so midnight is still EDT
    now = datetime(2026, 11, 1, 12, 0).astimezone()
    just_after_midnight = Task(
        id="m", title="m", deadline=datetime(2026, 11, 1, 0, 15).astimezone()
    )
    config = QueryConfig(time_filter=TimeFilter.TODAY)
    assert titles(process_tasks([just_after_midnight], config, now=now)) == ["m"]
