"""ORM model for user accounts (credentials, role, profile)."""

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base


class UserRole(str, Enum):
    """Closed set of roles. Stored in the database by name."""

    ADMIN = "Admin"
    READ_ONLY = "ReadOnly"


def parse_role(value: str | None) -> UserRole | None:
    """Case-insensitive role lookup by name; None if unrecognized."""
    if value is None:
        return None
    wanted = value.strip().lower()
    for role in UserRole:
        if role.value.lower() == wanted:
            return role
    return None


class User(Base):
    """
    User account for Basic/JWT authentication and role-based access control.

    password_hash is a lowercase hex SHA-256 digest; role is a UserRole value.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_name = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    role = Column(String(32), nullable=False, default=UserRole.READ_ONLY.value)
    email_id = Column(String(255), nullable=False)
    mobile_num = Column(String(20), nullable=False)
    profile_pic_url = Column(String(500), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
