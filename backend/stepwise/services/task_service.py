"""Persistence glue between stored tasks and task records."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import asc, nulls_last
from sqlalchemy.orm import Session

from stepwise.db.models.goal import Goal
from stepwise.db.models.task import Task
from stepwise.scheduling.records import TaskRecord


def is_bundle(task: Task) -> bool:
    metadata = task.metadata_json or {}
    return bool(metadata.get("bundle"))


def task_to_record(task: Task) -> TaskRecord:
    return TaskRecord(
        id=task.id,
        title=task.title,
        due_date=task.due_date,
        is_completed=bool(task.completed),
        estimated_duration=task.estimated_duration,
        is_bundle=is_bundle(task),
    )


def _ordered(query):
    return query.order_by(nulls_last(asc(Task.due_date)), asc(Task.title), asc(Task.created_at))


def list_user_tasks(db: Session, user_id: UUID) -> List[Task]:
    """Tasks owned by ``user_id`` ordered by due date (undated last), then title."""
    return _ordered(db.query(Task).filter(Task.user_id == user_id)).all()


def load_task_records(db: Session, user_id: UUID) -> List[TaskRecord]:
    """Snapshot every task of a user as immutable records for the analytics core."""
    return [task_to_record(task) for task in list_user_tasks(db, user_id)]


def tasks_for_day(db: Session, user_id: UUID, day: date) -> List[Task]:
    """Tasks of ``user_id`` due on ``day``, ordered by title."""
    return _ordered(db.query(Task).filter(Task.user_id == user_id, Task.due_date == day)).all()


def replace_goal_tasks(db: Session, goal: Goal, records: Iterable[TaskRecord], *, source: str) -> List[Task]:
    """
    Swap a goal's stored tasks for ``records``.

    The caller commits; rows are flushed so their ids are available.
    """
    db.query(Task).filter(Task.goal_id == goal.id).delete(synchronize_session=False)

    created: List[Task] = []
    for record in records:
        task = Task(
            id=record.id,
            user_id=goal.user_id,
            goal_id=goal.id,
            title=record.title,
            due_date=record.due_date,
            estimated_duration=record.estimated_duration,
            completed=record.is_completed,
            metadata_json={"bundle": record.is_bundle, "source": source},
        )
        db.add(task)
        created.append(task)
    db.flush()
    return created


def set_task_completion(task: Task, completed: bool, *, now: Optional[datetime] = None) -> bool:
    """Update completion state; returns True when the row changed."""
    if bool(task.completed) == completed:
        return False
    task.completed = completed
    task.completed_at = (now or datetime.now(timezone.utc)) if completed else None
    return True
