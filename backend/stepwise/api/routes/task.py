"""Task listing and completion API routes."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from stepwise.api.schemas.task import TaskSummary, TaskUpdateRequest, TaskUpdateResponse
from stepwise.db.deps import get_db
from stepwise.db.models.task import Task
from stepwise.observability.metrics import log_metric
from stepwise.observability.tracing import trace
from stepwise.services.task_service import is_bundle, list_user_tasks, set_task_completion, tasks_for_day

router = APIRouter()


def serialize_task(task: Task) -> TaskSummary:
    return TaskSummary(
        id=task.id,
        goal_id=task.goal_id,
        title=task.title,
        due_date=task.due_date,
        estimated_duration=task.estimated_duration,
        completed=bool(task.completed),
        completed_at=task.completed_at,
        is_bundle=is_bundle(task),
    )


@router.get("/tasks", response_model=List[TaskSummary], tags=["tasks"])
def list_tasks(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the tasks"),
    on: Optional[date] = Query(default=None, description="Only tasks due on this day"),
    db: Session = Depends(get_db),
) -> List[TaskSummary]:
    """List a user's tasks, optionally only those due on one day."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": "/tasks",
        "user_id": str(user_id),
        "on": on.isoformat() if on else None,
    }

    with trace("task.list", metadata=metadata, user_id=str(user_id), request_id=request_id):
        tasks = tasks_for_day(db, user_id, on) if on else list_user_tasks(db, user_id)

    log_metric("task.list.count", len(tasks), metadata={"user_id": str(user_id)})
    return [serialize_task(task) for task in tasks]


@router.patch("/tasks/{task_id}", response_model=TaskUpdateResponse, tags=["tasks"])
def update_task_completion(
    task_id: UUID,
    payload: TaskUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskUpdateResponse:
    """Mark a task complete or incomplete."""
    task = db.get(Task, task_id)
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    if task.user_id != payload.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Task does not belong to user")

    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": f"/tasks/{task_id}",
        "task_id": str(task_id),
        "completed": payload.completed,
    }

    start_time = datetime.now(timezone.utc)
    try:
        with trace("task.complete", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
            changed = set_task_completion(task, payload.completed, now=start_time)
            db.add(task)
            db.commit()
    except Exception:
        db.rollback()
        raise

    latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    log_metric("task.complete.changed", 1 if changed else 0, metadata={"task_id": str(task_id)})
    log_metric("task.complete.latency_ms", latency_ms, metadata={"task_id": str(task_id)})

    return TaskUpdateResponse(
        id=task.id,
        completed=bool(task.completed),
        completed_at=task.completed_at,
        request_id=request_id or "",
    )
