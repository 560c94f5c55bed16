"""Goal intake and breakdown API routes."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from stepwise.api.routes.task import serialize_task
from stepwise.api.schemas.activity import DateWindow
from stepwise.api.schemas.goal import (
    BreakdownRequest,
    BreakdownResponse,
    GoalCreateRequest,
    GoalResponse,
    GoalSummary,
)
from stepwise.db.deps import get_db
from stepwise.db.models.goal import Goal
from stepwise.observability.metrics import log_metric
from stepwise.observability.tracing import trace
from stepwise.scheduling.records import completion_rate
from stepwise.services.goal_breakdown import GoalBreakdownError, breakdown_goal
from stepwise.services.task_service import replace_goal_tasks, task_to_record
from stepwise.services.user_service import get_or_create_user

router = APIRouter()


def _summarize_goal(goal: Goal) -> GoalSummary:
    records = [task_to_record(task) for task in goal.tasks]
    return GoalSummary(
        id=goal.id,
        user_id=goal.user_id,
        title=goal.title,
        description=goal.description,
        deadline=goal.deadline,
        tasks_total=len(records),
        tasks_completed=sum(1 for record in records if record.is_completed),
        completion_rate=completion_rate(records),
    )


@router.post("/goals", response_model=GoalResponse, status_code=status.HTTP_201_CREATED, tags=["goals"])
def create_goal(
    payload: GoalCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> GoalResponse:
    """Store a new goal; its tasks are produced later by a breakdown."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": "/goals",
        "title_length": len(payload.title),
        "has_deadline": payload.deadline is not None,
    }

    try:
        with trace("goal.create", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
            get_or_create_user(db, payload.user_id)
            goal = Goal(
                user_id=payload.user_id,
                title=payload.title,
                description=payload.description,
                deadline=payload.deadline,
                metadata_json={},
            )
            db.add(goal)
            db.commit()
            db.refresh(goal)
    except Exception:
        db.rollback()
        raise

    log_metric("goal.create.success", 1, metadata={"user_id": str(payload.user_id)})
    summary = _summarize_goal(goal)
    return GoalResponse(**summary.model_dump(), request_id=request_id or "")


@router.get("/goals", response_model=List[GoalSummary], tags=["goals"])
def list_goals(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> List[GoalSummary]:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("goal.list", metadata={"route": "/goals"}, user_id=str(user_id), request_id=request_id):
        goals = db.query(Goal).filter(Goal.user_id == user_id).order_by(desc(Goal.created_at)).all()
        summaries = [_summarize_goal(goal) for goal in goals]

    log_metric("goal.list.count", len(summaries), metadata={"user_id": str(user_id)})
    return summaries


@router.post("/goals/{goal_id}/breakdown", response_model=BreakdownResponse, tags=["goals"])
def breakdown_goal_endpoint(
    goal_id: UUID,
    payload: BreakdownRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> BreakdownResponse:
    """Generate a schedule for the goal and replace its stored tasks with it."""
    goal = db.get(Goal, goal_id)
    if not goal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    if goal.user_id != payload.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Goal does not belong to user")

    request_id = getattr(http_request.state, "request_id", None)
    today = payload.today or date.today()
    start_time = datetime.now(timezone.utc)

    try:
        result = breakdown_goal(
            goal.title,
            goal.description,
            today=today,
            deadline=goal.deadline,
            request_id=request_id,
        )
    except GoalBreakdownError as exc:
        log_metric("goal.breakdown.failure", 1, metadata={"goal_id": str(goal_id)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    try:
        source = "fallback" if result.fallback_used else "breakdown"
        tasks = replace_goal_tasks(db, goal, result.tasks, source=source)
        metadata = dict(goal.metadata_json or {})
        metadata.update({"chat_reply": result.chat_reply, "fallback_used": result.fallback_used})
        goal.metadata_json = metadata
        db.add(goal)
        db.commit()
        for task in tasks:
            db.refresh(task)
    except Exception:
        db.rollback()
        raise

    latency_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    log_metric("goal.breakdown.latency_ms", latency_ms, metadata={"goal_id": str(goal_id)})

    return BreakdownResponse(
        goal_id=goal.id,
        chat_reply=result.chat_reply,
        window=DateWindow(start=result.window.start, end=result.window.end),
        fallback_used=result.fallback_used,
        tasks=[serialize_task(task) for task in tasks],
        request_id=request_id or "",
    )
