from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def parse_instant(raw: Any) -> datetime | None:
    """ISO-8601 string (or datetime) to an aware datetime; anything else is None."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw.strip():
        try:
            value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    return _as_utc(value)


@dataclass(frozen=True, slots=True)
class Task:
    """A task as the client sees it, parsed leniently from the API's JSON."""

    id: str
    title: str
    description: str | None = None
    deadline: datetime | None = None
    priority: str = "Medium"
    category: str | None = "General"
    is_completed: bool = False
    created_at: datetime = EPOCH

    def __post_init__(self) -> None:
        # naive instants are taken as UTC, same as the API's JSON
        if self.deadline is not None:
            object.__setattr__(self, "deadline", _as_utc(self.deadline))
        object.__setattr__(self, "created_at", _as_utc(self.created_at))

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Task:
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            title=str(data.get("title") or ""),
            description=data.get("description"),
            deadline=parse_instant(data.get("deadline")),
            priority=str(data.get("priority") or "Medium"),
            category=data.get("category"),
            is_completed=data.get("isCompleted") is True,
            created_at=parse_instant(data.get("createdAt")) or EPOCH,
        )
