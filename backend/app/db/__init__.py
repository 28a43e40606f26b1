"""Todo persistence: declarative base, models, sessions."""

from app.db.base import Base
from app.db import models  # noqa: F401  registers Todo on Base.metadata

__all__ = ["Base"]
