"""ORM models exposed for metadata discovery."""
from app.db.models.todo import Todo

__all__ = ["Todo"]
