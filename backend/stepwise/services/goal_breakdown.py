"""LLM-backed goal breakdown with local schedule normalization."""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, List, Optional
from uuid import uuid4

import openai
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stepwise.core.config import settings
from stepwise.observability.metrics import log_metric
from stepwise.observability.tracing import trace
from stepwise.scheduling.normalizer import normalize_tasks
from stepwise.scheduling.periods import Period
from stepwise.scheduling.records import TaskRecord

logger = logging.getLogger(__name__)

PREVIEW_TASK_LIMIT = 5

FALLBACK_STEPS = [
    ("10-minute starter: jot 3 bullet points about {focus}", "10 minutes"),
    ("Write down what done looks like for {focus}", "15 minutes"),
    ("Focused work block on {focus}", "25-35 minutes"),
    ("Second work block: push {focus} forward", "25-35 minutes"),
    ("Review progress and note the next step", "20 minutes"),
    ("Final pass and wrap-up for {focus}", "30 minutes"),
]


class GoalBreakdownError(Exception):
    """The generation service failed or returned something unusable."""


class GoalBreakdownResponse(BaseModel):
    """Shape the breakdown model must return."""

    model_config = ConfigDict(populate_by_name=True)

    chat_reply: str = Field(default="", alias="chatReply")
    tasks: List[TaskRecord] = Field(default_factory=list)

    @field_validator("tasks")
    @classmethod
    def fresh_identity(cls, tasks: List[TaskRecord]) -> List[TaskRecord]:
        # Generated tasks get new ids and are never bundles, whatever the model sent.
        return [task.model_copy(update={"id": uuid4(), "is_bundle": False}) for task in tasks]


@dataclass
class BreakdownResult:
    chat_reply: str
    tasks: List[TaskRecord]
    window: Period
    fallback_used: bool

    @property
    def bundles_count(self) -> int:
        return sum(1 for task in self.tasks if task.is_bundle)


def breakdown_window(today: date, deadline: Optional[date], *, default_days: int) -> Period:
    """Scheduling window from today to the deadline (inclusive); past deadlines collapse to today."""
    end = deadline if deadline is not None else today + timedelta(days=default_days)
    return Period(start=today, end=max(end, today))


def goal_focus_phrase(goal_title: Optional[str]) -> str:
    tokens = (goal_title or "").replace("\n", " ").split()
    return " ".join(tokens[:6]) or "your goal"


def build_breakdown_prompt(
    goal_title: str,
    description: Optional[str],
    window: Period,
    max_per_day: int,
) -> str:
    start = window.start.isoformat()
    end = window.end.isoformat()
    return (
        "You are a supportive, detail-oriented productivity coach. STRICTLY follow all constraints.\n\n"
        "## The User's Goal\n"
        f'- Title: "{goal_title}"\n'
        f'- Description: "{description or "No description provided."}"\n'
        f"- Deadline (inclusive): {end}\n"
        f"- Today's Date: {start}\n\n"
        "## Output Format (JSON ONLY)\n"
        'Return a single JSON object with exactly two keys: "chatReply" (string) and "tasks" (array).\n\n'
        '### 1) "tasks" (array of objects)\n'
        "- Represent the FULL actionable plan.\n"
        "- Each task object MUST have EXACTLY these 4 keys:\n"
        '  1. "title": String (clear, specific action; do not micro-split one step into fragments)\n'
        '  2. "isCompleted": Boolean (always false)\n'
        f'  3. "dueDate": String in "YYYY-MM-DD" format, within [{start}, {end}] inclusive\n'
        '  4. "estimatedDuration": String, e.g. "25-35 minutes", "30 minutes", or "1 hour"\n'
        f"- HARD LIMIT: for ANY calendar date, DO NOT output more than {max_per_day} tasks.\n"
        "- Start within the next 24 hours with a simple, low-friction task and avoid clustering work on the last day.\n\n"
        '### 2) "chatReply" (string, user-facing)\n'
        "- Friendly, encouraging, personalized.\n"
        '- Present tasks as a bulleted list: "- (MMM dd) <title> (Est: <duration>)".\n'
        f"- If the plan has more than {PREVIEW_TASK_LIMIT} tasks, list only the first few and add: "
        '"Here are your first few steps! You can see the full plan on your home screen."\n\n'
        "Output RAW JSON only (no markdown fences)."
    )


def clean_model_output(text: str) -> str:
    """Strip markdown code fences the model sometimes wraps around JSON."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_breakdown_response(text: str) -> GoalBreakdownResponse:
    """Validate raw model output; anything malformed is rejected."""
    cleaned = clean_model_output(text)
    try:
        return GoalBreakdownResponse.model_validate_json(cleaned)
    except ValidationError as exc:
        raise GoalBreakdownError(f"Breakdown response failed validation: {exc.error_count()} error(s)") from exc


def compose_chat_reply(goal_title: str, tasks: List[TaskRecord]) -> str:
    lines = [f'Great goal! Here is a plan for "{goal_title}":']
    for task in tasks[:PREVIEW_TASK_LIMIT]:
        due = task.due_date
        label = f"{calendar.month_abbr[due.month]} {due.day:02d}" if due else "Anytime"
        estimate = task.estimated_duration or "flexible"
        lines.append(f"- ({label}) {task.title} (Est: {estimate})")
    if len(tasks) > PREVIEW_TASK_LIMIT:
        lines.append("Here are your first few steps! You can see the full plan on your home screen.")
    return "\n".join(lines)


def fallback_breakdown(goal_title: str, window: Period) -> GoalBreakdownResponse:
    """Deterministic plan used when no model is configured, spread evenly over the window."""
    focus = goal_focus_phrase(goal_title)
    span = window.days - 1
    steps = len(FALLBACK_STEPS)
    tasks = []
    for index, (title, duration) in enumerate(FALLBACK_STEPS):
        offset = round(index * span / (steps - 1)) if steps > 1 else 0
        tasks.append(
            TaskRecord(
                title=title.format(focus=focus),
                due_date=window.start + timedelta(days=offset),
                estimated_duration=duration,
            )
        )
    return GoalBreakdownResponse(chat_reply="", tasks=tasks)


def request_breakdown_from_llm(client: Any, prompt: str, *, model: str) -> str:
    try:
        completion = client.chat.completions.create(
            model=model,
            response_format={"type": "json_object"},
            messages=[{"role": "user", "content": prompt}],
        )
    except openai.OpenAIError as exc:
        raise GoalBreakdownError(f"Breakdown generation failed: {exc}") from exc
    content = completion.choices[0].message.content
    if not content:
        raise GoalBreakdownError("Breakdown generation returned no content")
    return content


def _default_client() -> Any | None:
    if not settings.openai_api_key:
        return None
    return openai.OpenAI(api_key=settings.openai_api_key)


def breakdown_goal(
    goal_title: str,
    description: Optional[str] = None,
    *,
    today: date,
    deadline: Optional[date] = None,
    client: Any | None = None,
    request_id: Optional[str] = None,
) -> BreakdownResult:
    """
    Turn a goal into a capacity-checked schedule between ``today`` and ``deadline``.

    The model's tasks are always clamped into the window and folded into
    bundles where a day exceeds ``settings.max_tasks_per_day``.
    """
    window = breakdown_window(today, deadline, default_days=settings.default_deadline_days)
    llm_client = client if client is not None else _default_client()
    metadata = {
        "window_start": window.start.isoformat(),
        "window_end": window.end.isoformat(),
        "max_per_day": settings.max_tasks_per_day,
        "model": settings.openai_model if llm_client else None,
    }

    with trace("goal.breakdown", metadata=metadata, request_id=request_id) as span:
        if llm_client is None:
            logger.info("No OpenAI API key configured; using fallback breakdown.")
            response = fallback_breakdown(goal_title, window)
        else:
            prompt = build_breakdown_prompt(goal_title, description, window, settings.max_tasks_per_day)
            raw = request_breakdown_from_llm(llm_client, prompt, model=settings.openai_model)
            response = parse_breakdown_response(raw)

        tasks = normalize_tasks(
            response.tasks,
            window.start,
            window.end,
            settings.max_tasks_per_day,
            default_minutes=settings.default_task_minutes,
        )
        chat_reply = response.chat_reply or compose_chat_reply(goal_title, tasks)
        result = BreakdownResult(
            chat_reply=chat_reply,
            tasks=tasks,
            window=window,
            fallback_used=llm_client is None,
        )
        if span:
            span.update(metadata={**metadata, "tasks_count": len(tasks), "bundles_count": result.bundles_count})

    log_metric("goal.breakdown.tasks_count", len(result.tasks))
    log_metric("goal.breakdown.bundles_count", result.bundles_count)
    log_metric("goal.breakdown.fallback_used", 1 if result.fallback_used else 0)
    logger.debug("Breakdown produced %d task(s), %d bundle(s)", len(result.tasks), result.bundles_count)
    return result
