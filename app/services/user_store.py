"""User store: lookup protocol used by authentication, plus the SQLAlchemy repository."""

from typing import Protocol

from sqlalchemy.orm import Query, Session

from app.models import User


class UserStore(Protocol):
    """Read-only lookups the authentication core needs."""

    def find_by_username(self, username: str) -> User | None: ...

    def find_by_id(self, user_id: int) -> User | None: ...


def _apply_filters(
    query: Query,
    user_name: str | None,
    role: str | None,
    email_id: str | None,
    mobile_num: str | None,
) -> Query:
    """Substring match on text fields, exact match on role; blank values are ignored."""
    if user_name and user_name.strip():
        query = query.filter(User.user_name.contains(user_name, autoescape=True))
    if role and role.strip():
        query = query.filter(User.role == role)
    if email_id and email_id.strip():
        query = query.filter(User.email_id.contains(email_id, autoescape=True))
    if mobile_num and mobile_num.strip():
        query = query.filter(User.mobile_num.contains(mobile_num, autoescape=True))
    return query


class SqlUserStore:
    """UserStore backed by a SQLAlchemy session. Listings are ordered by id."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.user_name == username).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.query(User).filter(User.id == user_id).first()

    def list_all(self) -> list[User]:
        return self.session.query(User).order_by(User.id).all()

    def list_page(self, skip: int, take: int) -> list[User]:
        return (
            self.session.query(User)
            .order_by(User.id)
            .offset(skip)
            .limit(take)
            .all()
        )

    def list_filtered(
        self,
        user_name: str | None = None,
        role: str | None = None,
        email_id: str | None = None,
        mobile_num: str | None = None,
        skip: int | None = None,
        take: int | None = None,
    ) -> list[User]:
        query = _apply_filters(
            self.session.query(User), user_name, role, email_id, mobile_num
        ).order_by(User.id)
        if skip is not None:
            query = query.offset(skip)
        if take is not None:
            query = query.limit(take)
        return query.all()

    def count_all(self) -> int:
        return self.session.query(User).count()

    def count_filtered(
        self,
        user_name: str | None = None,
        role: str | None = None,
        email_id: str | None = None,
        mobile_num: str | None = None,
    ) -> int:
        return _apply_filters(
            self.session.query(User), user_name, role, email_id, mobile_num
        ).count()

    def username_exists(self, username: str, exclude_user_id: int | None = None) -> bool:
        query = self.session.query(User.id).filter(User.user_name == username)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    def add(self, user: User) -> User:
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def save(self, user: User) -> User:
        self.session.commit()
        self.session.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.commit()
