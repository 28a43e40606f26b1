from __future__ import annotations

from app.api.schemas.ai import TodoInput
from app.services.prompts import (
    build_analysis_prompts,
    build_breakdown_prompts,
    format_todo_line,
    resolve_max_tasks,
)


def _todos() -> list[TodoInput]:
    return [
        TodoInput(title="Write report", description="Q3 numbers", completed=False),
        TodoInput(title="Book flights", completed=True),
        TodoInput(title="Call plumber"),
    ]


def test_format_todo_line_checklist_style() -> None:
    assert format_todo_line(TodoInput(title="Write report", description="Q3", completed=False)) == "- [ ] Write report: Q3"
    assert format_todo_line(TodoInput(title="Book flights", completed=True)) == "- [x] Book flights"


def test_analysis_prompt_lists_todos_and_counts() -> None:
    system_prompt, user_prompt = build_analysis_prompts(_todos())

    assert "task management assistant" in system_prompt
    assert "Format as JSON" in system_prompt
    assert "- [ ] Write report: Q3 numbers" in user_prompt
    assert "- [x] Book flights" in user_prompt
    assert "Statistics: 3 total (2 pending, 1 completed)" in user_prompt
    assert '"prioritySuggestions"' in user_prompt


def test_analysis_prompt_is_deterministic() -> None:
    assert build_analysis_prompts(_todos()) == build_analysis_prompts(_todos())


def test_breakdown_prompt_embeds_goal_context_and_range() -> None:
    system_prompt, user_prompt = build_breakdown_prompts("Plan a weekend camping trip", "Two adults", 8)

    assert "Generate 4-8 concrete, actionable tasks" in system_prompt
    assert "Return ONLY valid JSON" in system_prompt
    assert 'Goal: "Plan a weekend camping trip"' in user_prompt
    assert 'Additional context: "Two adults"' in user_prompt
    assert '"suggestedTasks"' in user_prompt


def test_breakdown_prompt_without_context() -> None:
    _, user_prompt = build_breakdown_prompts("Plan a weekend camping trip", None, 6)

    assert "Additional context" not in user_prompt


def test_breakdown_prompt_small_task_ceiling() -> None:
    system_prompt, _ = build_breakdown_prompts("Plan a weekend camping trip", None, 2)

    assert "Generate 1-2 concrete, actionable tasks" in system_prompt


def test_resolve_max_tasks_bounded_by_ceiling() -> None:
    assert resolve_max_tasks(None, 8) == 8
    assert resolve_max_tasks(5, 8) == 5
    assert resolve_max_tasks(20, 8) == 8
