"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.user import User, UserRole, parse_role

__all__ = ["Base", "User", "UserRole", "parse_role"]
