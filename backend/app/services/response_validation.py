"""Validate-and-filter for parsed provider payloads.

Nothing the provider returns reaches a response body without passing through
one of these functions. Analysis payloads are coerced toward defaults; breakdown
payloads are filtered entry by entry and must leave at least one task.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from app.api.schemas.ai import AnalysisResult, SuggestedTask
from app.core.errors import EmptyResultError, MalformedResponseError

SUMMARY_FALLBACK = "Analysis completed"
VALID_PRIORITIES = frozenset({"low", "medium", "high"})


@dataclass(frozen=True)
class TaskFilterResult:
    kept: List[SuggestedTask] = field(default_factory=list)
    dropped_count: int = 0


@dataclass(frozen=True)
class ValidatedBreakdown:
    suggested_tasks: List[SuggestedTask]
    reasoning: Optional[str]
    dropped_count: int


def coerce_analysis_result(payload: Any) -> AnalysisResult:
    data = payload if isinstance(payload, dict) else {}

    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = SUMMARY_FALLBACK

    raw_suggestions = data.get("prioritySuggestions")
    return AnalysisResult(
        summary=summary.strip(),
        insights=_string_items(data.get("insights")),
        priority_suggestions=_string_items(raw_suggestions) if isinstance(raw_suggestions, list) else None,
    )


def filter_suggested_tasks(items: List[Any]) -> TaskFilterResult:
    """Keep well-formed tasks in order; count the rest."""
    kept: List[SuggestedTask] = []
    dropped = 0
    for item in items:
        task = _coerce_task(item)
        if task is None:
            dropped += 1
            continue
        kept.append(task)
    return TaskFilterResult(kept=kept, dropped_count=dropped)


def validate_breakdown_payload(payload: Any) -> ValidatedBreakdown:
    if not isinstance(payload, dict):
        raise MalformedResponseError("AI response did not contain valid suggested tasks")

    raw_tasks = payload.get("suggestedTasks")
    if not isinstance(raw_tasks, list):
        raise MalformedResponseError("AI response did not contain valid suggested tasks")

    filtered = filter_suggested_tasks(raw_tasks)
    if not filtered.kept:
        raise EmptyResultError("AI response did not contain valid suggested tasks")

    reasoning = payload.get("reasoning")
    return ValidatedBreakdown(
        suggested_tasks=filtered.kept,
        reasoning=reasoning if isinstance(reasoning, str) else None,
        dropped_count=filtered.dropped_count,
    )


def _coerce_task(item: Any) -> Optional[SuggestedTask]:
    if not isinstance(item, dict):
        return None

    title = item.get("title")
    if not isinstance(title, str) or not title.strip():
        return None

    description = item.get("description")
    priority = item.get("estimatedPriority")
    return SuggestedTask(
        title=title.strip(),
        description=description.strip() if isinstance(description, str) and description.strip() else None,
        estimated_priority=priority if _is_priority(priority) else None,
    )


def _is_priority(value: Any) -> bool:
    return isinstance(value, str) and value in VALID_PRIORITIES


def _string_items(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]

