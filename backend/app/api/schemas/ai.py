"""Schemas for the AI analysis and task breakdown endpoints."""
from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TodoInput(CamelModel):
    """A todo as submitted for analysis; only title/description/completed matter."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    title: str
    description: Optional[str] = None
    completed: bool = False


class AnalysisResult(CamelModel):
    summary: str
    insights: List[str] = Field(default_factory=list)
    priority_suggestions: Optional[List[str]] = None


class BreakdownRequest(CamelModel):
    goal: str = Field(..., min_length=5, max_length=500)
    context: Optional[str] = Field(default=None, max_length=500)
    max_tasks: Optional[int] = Field(default=None, ge=1, le=20)


class SuggestedTask(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    estimated_priority: Optional[Priority] = None


class BreakdownResult(CamelModel):
    goal: str
    suggested_tasks: List[SuggestedTask] = Field(..., min_length=1)
    reasoning: Optional[str] = None


class ErrorBody(BaseModel):
    error: str
    details: Optional[Any] = None

