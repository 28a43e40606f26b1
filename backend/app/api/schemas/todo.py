"""Schemas for todo CRUD."""
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator
from pydantic.alias_generators import to_camel


class TodoRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    completed: bool
    created_at: datetime
    updated_at: datetime


class TodoList(BaseModel):
    todos: List[TodoRead]


class TodoCreateRequest(BaseModel):
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required and must be a non-empty string")
        return value


class TodoUpdateRequest(BaseModel):
    """Partial update; a field that is present must carry a value of its own type."""

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[StrictBool] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_not_blank(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Title must be a non-empty string")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _description_is_string(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("Description must be a string")
        return value

    @field_validator("completed", mode="before")
    @classmethod
    def _completed_is_bool(cls, value: Any) -> Any:
        if not isinstance(value, bool):
            raise ValueError("Completed must be a boolean")
        return value


class DeleteResponse(BaseModel):
    success: bool
