"""Owner-scoped task CRUD.

Every query filters on ``owner_id`` itself, so a task that belongs to
someone else is indistinguishable from one that does not exist.
"""

from __future__ import annotations
import logging
from typing import Any, Sequence
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import NotFound, StoreFailure, ValidationError
from .models import Task, now_utc
from .security import AuthenticatedUserId

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "Medium"
DEFAULT_CATEGORY = "General"

# fields a partial update may touch; id, owner_id and created_at never are
UPDATABLE = ("title", "description", "deadline", "priority", "category", "is_completed")
NULLABLE = ("description", "deadline")


def _owned(user_id: AuthenticatedUserId, task_id: str):
    return select(Task).where(Task.id == task_id, Task.owner_id == user_id)


def _commit(db: Session, message: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(message)
        raise StoreFailure(message)


def list_tasks(db: Session, user_id: AuthenticatedUserId) -> Sequence[Task]:
    try:
        return db.scalars(select(Task).where(Task.owner_id == user_id)).all()
    except SQLAlchemyError:
        logger.exception("Error fetching tasks")
        raise StoreFailure("Error fetching tasks")


def create_task(db: Session, user_id: AuthenticatedUserId, fields: dict[str, Any]) -> Task:
    title = fields.get("title") or ""
    if not title.strip():
        raise ValidationError("Title is required")

    task = Task(
        owner_id=user_id,
        title=title,
        description=fields.get("description"),
        deadline=fields.get("deadline"),
        priority=fields.get("priority") or DEFAULT_PRIORITY,
        category=fields.get("category") or DEFAULT_CATEGORY,
        is_completed=False,
        created_at=now_utc(),
    )
    db.add(task)
    _commit(db, "Error creating task")
    db.refresh(task)
    logger.info("created task id=%s owner=%s", task.id, user_id)
    return task


def update_task(
    db: Session, user_id: AuthenticatedUserId, task_id: str, fields: dict[str, Any]
) -> Task:
    if "title" in fields and fields["title"] is not None and not fields["title"].strip():
        raise ValidationError("Title is required")

    try:
        task = db.scalar(_owned(user_id, task_id))
    except SQLAlchemyError:
        logger.exception("Error updating task")
        raise StoreFailure("Error updating task")
    if task is None:
        raise NotFound()

    for key in UPDATABLE:
        if key not in fields:
            continue
        value = fields[key]
        if value is None and key not in NULLABLE:
            continue
        setattr(task, key, value)

    _commit(db, "Error updating task")
    db.refresh(task)
    logger.info("updated task id=%s fields=%s", task.id, sorted(k for k in fields if k in UPDATABLE))
    return task


def delete_task(db: Session, user_id: AuthenticatedUserId, task_id: str) -> None:
    try:
        task = db.scalar(_owned(user_id, task_id))
    except SQLAlchemyError:
        logger.exception("Error deleting task")
        raise StoreFailure("Error deleting task")
    if task is None:
        raise NotFound()
    db.delete(task)
    _commit(db, "Error deleting task")
    logger.info("deleted task id=%s", task_id)
