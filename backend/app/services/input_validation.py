"""Boundary checks for the analysis and breakdown endpoints."""
from __future__ import annotations

from typing import Any, List, Mapping

from app.api.schemas.ai import BreakdownRequest, TodoInput
from app.core.errors import ValidationError

GOAL_MIN_LENGTH = 5
MAX_INPUT_LENGTH = 500
MAX_TASKS_LOWER = 1
MAX_TASKS_UPPER = 20


def sanitize_input(value: str) -> str:
    """Trim and cap free text at the accepted length (silently)."""
    return value.strip()[:MAX_INPUT_LENGTH]


def validate_goal(goal: str) -> None:
    trimmed = goal.strip()
    if not trimmed:
        raise ValidationError("Goal cannot be empty")
    if len(trimmed) < GOAL_MIN_LENGTH:
        raise ValidationError(
            f"Please provide a more specific goal (at least {GOAL_MIN_LENGTH} characters)"
        )
    if len(trimmed) > MAX_INPUT_LENGTH:
        raise ValidationError(f"Goal is too long (maximum {MAX_INPUT_LENGTH} characters)")


def parse_breakdown_request(payload: Mapping[str, Any]) -> BreakdownRequest:
    """Turn a raw JSON body into a sanitized BreakdownRequest or raise ValidationError."""
    goal = payload.get("goal")
    context = payload.get("context")
    max_tasks = payload.get("maxTasks")

    if not goal:
        raise ValidationError("Goal is required")
    if not isinstance(goal, str):
        raise ValidationError("Goal must be a string")
    if context is not None and not isinstance(context, str):
        raise ValidationError("Context must be a string")
    if max_tasks is not None and not _is_valid_max_tasks(max_tasks):
        raise ValidationError(
            f"maxTasks must be a number between {MAX_TASKS_LOWER} and {MAX_TASKS_UPPER}"
        )

    validate_goal(goal)
    sanitized_context = sanitize_input(context) if context else None
    return BreakdownRequest(
        goal=sanitize_input(goal),
        context=sanitized_context or None,
        max_tasks=int(max_tasks) if max_tasks is not None else None,
    )


def parse_todos(payload: Mapping[str, Any]) -> List[TodoInput]:
    """Extract the todo list for analysis, skipping entries without a string title.

    Other fields are taken leniently: a non-string description is dropped and
    ``completed`` is read for truthiness.
    """
    if "todos" not in payload or payload["todos"] is None:
        raise ValidationError("Todos array is required")
    raw_todos = payload["todos"]
    if not isinstance(raw_todos, list):
        raise ValidationError("Todos must be an array")

    todos: List[TodoInput] = []
    for entry in raw_todos:
        if not isinstance(entry, dict) or not isinstance(entry.get("title"), str):
            continue
        raw_id = entry.get("id")
        description = entry.get("description")
        todos.append(
            TodoInput(
                id=str(raw_id) if raw_id is not None else None,
                title=entry["title"],
                description=description if isinstance(description, str) else None,
                completed=bool(entry.get("completed")),
            )
        )
    return todos


def _is_valid_max_tasks(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a task count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return MAX_TASKS_LOWER <= value <= MAX_TASKS_UPPER and float(value).is_integer()
