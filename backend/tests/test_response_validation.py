from __future__ import annotations

import pytest

from app.core.errors import EmptyResultError, MalformedResponseError
from app.services.response_validation import (
    SUMMARY_FALLBACK,
    coerce_analysis_result,
    filter_suggested_tasks,
    validate_breakdown_payload,
)


def test_analysis_passthrough() -> None:
    result = coerce_analysis_result(
        {"summary": "Busy week", "insights": ["Batch errands"], "prioritySuggestions": ["Report first"]}
    )

    assert result.summary == "Busy week"
    assert result.insights == ["Batch errands"]
    assert result.priority_suggestions == ["Report first"]


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"summary": ""},
        {"summary": None, "insights": None},
        {"summary": 12, "insights": "not a list"},
        ["not", "an", "object"],
    ],
)
def test_analysis_defaults_for_missing_fields(payload) -> None:
    result = coerce_analysis_result(payload)

    assert result.summary == SUMMARY_FALLBACK
    assert result.insights == []
    assert result.priority_suggestions is None


def test_analysis_drops_non_string_insights() -> None:
    result = coerce_analysis_result({"summary": "ok", "insights": ["keep", 3, {"x": 1}, "  ", " also "]})

    assert result.insights == ["keep", "also"]


def test_filter_keeps_order_and_counts_dropped() -> None:
    items = [
        {"title": "First", "estimatedPriority": "high"},
        {"title": "   "},
        {"description": "no title"},
        "string entry",
        {"title": "Second", "description": "  details  "},
        None,
        {"title": " Third "},
    ]

    result = filter_suggested_tasks(items)

    assert [task.title for task in result.kept] == ["First", "Second", "Third"]
    assert result.kept[1].description == "details"
    assert result.dropped_count == 4


@pytest.mark.parametrize("priority", ["HIGH", "urgent", "", 1, None, "Medium"])
def test_invalid_priority_is_stripped_not_defaulted(priority) -> None:
    result = filter_suggested_tasks([{"title": "Task", "estimatedPriority": priority}])

    assert result.kept[0].estimated_priority is None


@pytest.mark.parametrize("priority", ["low", "medium", "high"])
def test_valid_priorities_kept(priority: str) -> None:
    result = filter_suggested_tasks([{"title": "Task", "estimatedPriority": priority}])

    assert result.kept[0].estimated_priority == priority


def test_non_string_description_dropped() -> None:
    result = filter_suggested_tasks([{"title": "Task", "description": ["a", "b"]}])

    assert result.kept[0].description is None


def test_breakdown_payload_with_reasoning() -> None:
    validated = validate_breakdown_payload(
        {"suggestedTasks": [{"title": "Pack tent"}, {"title": ""}], "reasoning": "By dependency"}
    )

    assert [task.title for task in validated.suggested_tasks] == ["Pack tent"]
    assert validated.reasoning == "By dependency"
    assert validated.dropped_count == 1


def test_breakdown_payload_non_string_reasoning_ignored() -> None:
    validated = validate_breakdown_payload({"suggestedTasks": [{"title": "Pack tent"}], "reasoning": 42})

    assert validated.reasoning is None


@pytest.mark.parametrize("payload", [None, [], "text", {"tasks": []}, {"suggestedTasks": "Pack tent"}])
def test_breakdown_payload_wrong_shape(payload) -> None:
    with pytest.raises(MalformedResponseError):
        validate_breakdown_payload(payload)


@pytest.mark.parametrize("tasks", [[], [{"title": ""}, {"description": "x"}, 5]])
def test_breakdown_payload_all_invalid_is_empty_result(tasks) -> None:
    with pytest.raises(EmptyResultError):
        validate_breakdown_payload({"suggestedTasks": tasks})


def test_validation_is_pure() -> None:
    payload = {"suggestedTasks": [{"title": " A ", "estimatedPriority": "low"}, {"title": 1}]}

    first = validate_breakdown_payload(payload)
    second = validate_breakdown_payload(payload)

    assert first == second
    assert payload["suggestedTasks"][0]["title"] == " A "
