from __future__ import annotations

import pytest

from app.core.errors import MalformedResponseError
from app.services.response_parsing import extract_json_object


def test_extracts_bare_object() -> None:
    assert extract_json_object('{"summary": "ok", "insights": []}') == {"summary": "ok", "insights": []}


def test_extracts_object_wrapped_in_prose_and_fences() -> None:
    text = 'Here you go:\n```json\n{"suggestedTasks": [{"title": "Pack tent"}]}\n```\nEnjoy!'

    assert extract_json_object(text) == {"suggestedTasks": [{"title": "Pack tent"}]}


def test_nested_braces_inside_strings_survive() -> None:
    text = 'Result: {"summary": "Use {braces} freely", "insights": ["a"]}'

    assert extract_json_object(text)["summary"] == "Use {braces} freely"


def test_recovers_when_trailing_prose_has_braces() -> None:
    text = '{"summary": "ok"} and a stray } brace'

    assert extract_json_object(text) == {"summary": "ok"}


def test_recovers_first_object_when_prose_precedes_with_brace() -> None:
    text = 'Note {not json here} then {"summary": "real"}'

    assert extract_json_object(text) == {"summary": "real"}


@pytest.mark.parametrize(
    "text",
    [
        "I'm sorry, I cannot help with that.",
        "",
        "{not: valid, json}",
        "[1, 2, 3]",
    ],
)
def test_rejects_completions_without_json_object(text: str) -> None:
    with pytest.raises(MalformedResponseError, match="not in expected JSON format"):
        extract_json_object(text)
