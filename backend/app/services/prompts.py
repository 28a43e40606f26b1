"""Prompt templates for todo analysis and goal breakdown."""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

from app.api.schemas.ai import TodoInput

MIN_SUGGESTED_TASKS = 4

ANALYSIS_SYSTEM_PROMPT = (
    "You are a task management assistant. Analyze the user's todo list and provide:\n"
    "1. A brief summary of their workload (1-2 sentences)\n"
    "2. 2-3 actionable insights about task organization\n"
    "3. Priority recommendations if tasks seem urgent\n\n"
    "Keep responses concise and actionable. Format as JSON."
)

ANALYSIS_RESPONSE_FORMAT = """{
  "summary": "Brief workload summary",
  "insights": ["insight 1", "insight 2"],
  "prioritySuggestions": ["suggestion 1", "suggestion 2"]
}"""

BREAKDOWN_RESPONSE_FORMAT = """{
  "suggestedTasks": [
    {
      "title": "Task title here",
      "description": "Brief explanation",
      "estimatedPriority": "high|medium|low"
    }
  ],
  "reasoning": "Brief explanation of breakdown approach"
}"""


def format_todo_line(todo: TodoInput) -> str:
    mark = "x" if todo.completed else " "
    suffix = f": {todo.description}" if todo.description else ""
    return f"- [{mark}] {todo.title}{suffix}"


def build_analysis_prompts(todos: Sequence[TodoInput]) -> Tuple[str, str]:
    """Render the (system, user) prompt pair for a non-empty todo list."""
    completed = sum(1 for todo in todos if todo.completed)
    pending = len(todos) - completed
    todo_lines = "\n".join(format_todo_line(todo) for todo in todos)

    user_prompt = (
        "Analyze these todos:\n"
        f"{todo_lines}\n\n"
        f"Statistics: {len(todos)} total ({pending} pending, {completed} completed)\n\n"
        "Provide analysis in this JSON format:\n"
        f"{ANALYSIS_RESPONSE_FORMAT}"
    )
    return ANALYSIS_SYSTEM_PROMPT, user_prompt


def build_breakdown_prompts(goal: str, context: Optional[str], max_tasks: int) -> Tuple[str, str]:
    """Render the (system, user) prompt pair for an already sanitized goal."""
    upper = max(max_tasks, 1)
    task_range = f"{MIN_SUGGESTED_TASKS}-{upper}" if upper > MIN_SUGGESTED_TASKS else f"1-{upper}"
    system_prompt = (
        "You are a task decomposition assistant. Break down high-level goals into specific, "
        "actionable sub-tasks.\n\n"
        "Guidelines:\n"
        f"1. Generate {task_range} concrete, actionable tasks\n"
        "2. Each task should be clear and specific\n"
        "3. Order tasks logically (dependencies first)\n"
        "4. Keep task titles concise (5-10 words)\n"
        "5. Add brief descriptions for clarity\n"
        "6. Suggest priority levels where applicable\n\n"
        "Return ONLY valid JSON, no additional text."
    )

    context_line = f'Additional context: "{context}"\n' if context else ""
    user_prompt = (
        "Break down this goal into actionable sub-tasks:\n\n"
        f'Goal: "{goal}"\n'
        f"{context_line}\n"
        "Return JSON in this exact format:\n"
        f"{BREAKDOWN_RESPONSE_FORMAT}"
    )
    return system_prompt, user_prompt


def resolve_max_tasks(requested: Optional[int], ceiling: int) -> int:
    """Requested task count bounded by the configured ceiling (default = ceiling)."""
    return min(requested or ceiling, ceiling)
