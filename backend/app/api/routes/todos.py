"""Todo CRUD routes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import asc
from sqlalchemy.orm import Session

from app.api.schemas.todo import (
    DeleteResponse,
    TodoCreateRequest,
    TodoList,
    TodoRead,
    TodoUpdateRequest,
)
from app.db.deps import get_db
from app.db.models.todo import Todo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("", response_model=TodoList)
def list_todos(db: Session = Depends(get_db)) -> TodoList:
    todos = db.query(Todo).order_by(asc(Todo.created_at)).all()
    return TodoList(todos=[TodoRead.model_validate(todo) for todo in todos])


@router.post("", response_model=TodoRead, status_code=status.HTTP_201_CREATED, response_model_exclude_none=True)
def create_todo(payload: TodoCreateRequest, db: Session = Depends(get_db)) -> TodoRead:
    todo = Todo(title=payload.title, description=payload.description or None)
    db.add(todo)
    db.commit()
    db.refresh(todo)
    logger.info("Created todo %s", todo.id)
    return TodoRead.model_validate(todo)


@router.put("/{todo_id}", response_model=TodoRead, response_model_exclude_none=True)
def update_todo(todo_id: str, payload: TodoUpdateRequest, db: Session = Depends(get_db)) -> TodoRead:
    todo = _get_or_404(db, todo_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(todo, field, value)
    db.commit()
    db.refresh(todo)
    return TodoRead.model_validate(todo)


@router.delete("/{todo_id}", response_model=DeleteResponse)
def delete_todo(todo_id: str, db: Session = Depends(get_db)) -> DeleteResponse:
    todo = db.get(Todo, todo_id)
    if todo is not None:
        db.delete(todo)
        db.commit()
    return DeleteResponse(success=True)


@router.post("/{todo_id}/toggle", response_model=TodoRead, response_model_exclude_none=True)
def toggle_todo(todo_id: str, db: Session = Depends(get_db)) -> TodoRead:
    todo = _get_or_404(db, todo_id)
    todo.completed = not todo.completed
    db.commit()
    db.refresh(todo)
    return TodoRead.model_validate(todo)


def _get_or_404(db: Session, todo_id: str) -> Todo:
    todo = db.get(Todo, todo_id)
    if todo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return todo
