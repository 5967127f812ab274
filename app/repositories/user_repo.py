# app/repositories/user_repo.py
import threading
from abc import ABC, abstractmethod

from sqlalchemy import Engine, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models.user import Role, User
from app.repositories.errors import DuplicateEmailError


class UserRepository(ABC):
    """
    Data access layer for User.

    Responsibilities:
      - Pure storage operations (lookup + create)
      - No FastAPI, no HTTP, no business logic
    """

    @abstractmethod
    def get_by_id(self, user_id: str) -> User | None:
        """Return a User by primary key, or None if not found."""

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        """Return a User by email (case-insensitive), or None if not found."""

    @abstractmethod
    def create(self, email: str, password_hash: str, role: Role = Role.USER) -> User:
        """
        Insert a new User with a fresh id.

        Raises:
            DuplicateEmailError: if the email is already taken.
        """

    @abstractmethod
    def count_by_role(self, role: Role) -> int:
        """Number of accounts holding `role`."""


def _new_user(email: str, password_hash: str, role: Role) -> User:
    return User(
        email=email,
        email_lower=email.lower(),
        password_hash=password_hash,
        role=role,
    )


def _copy(user: User) -> User:
    return User(**user.model_dump())


class InMemoryUserRepository(UserRepository):
    """
    Volatile store backed by a dict.

    Lookups return copies so callers cannot mutate stored records.
    """

    def __init__(self):
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    def _find_by_email(self, email: str) -> User | None:
        needle = email.lower()
        for user in self._users.values():
            if user.email_lower == needle:
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
            return _copy(user) if user else None

    def get_by_email(self, email: str) -> User | None:
        with self._lock:
            user = self._find_by_email(email)
            return _copy(user) if user else None

    def create(self, email: str, password_hash: str, role: Role = Role.USER) -> User:
        with self._lock:
            if self._find_by_email(email) is not None:
                raise DuplicateEmailError(email)
            user = _new_user(email, password_hash, role)
            self._users[user.id] = user
            return _copy(user)

    def count_by_role(self, role: Role) -> int:
        with self._lock:
            return sum(1 for u in self._users.values() if u.role == role)


class SqlUserRepository(UserRepository):
    """
    Durable store on top of a SQLModel engine.

    Each call runs in its own short-lived Session. Email uniqueness is
    enforced by the unique `email_lower` column, so concurrent registrations
    of case variants cannot both commit.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def get_by_id(self, user_id: str) -> User | None:
        with self._session() as session:
            return session.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        with self._session() as session:
            stmt = select(User).where(User.email_lower == email.lower())
            return session.exec(stmt).first()

    def create(self, email: str, password_hash: str, role: Role = Role.USER) -> User:
        with self._session() as session:
            stmt = select(User).where(User.email_lower == email.lower())
            if session.exec(stmt).first() is not None:
                raise DuplicateEmailError(email)

            user = _new_user(email, password_hash, role)
            session.add(user)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(email) from exc
            session.refresh(user)
            return user

    def count_by_role(self, role: Role) -> int:
        with self._session() as session:
            stmt = select(func.count()).select_from(User).where(User.role == role)
            value = session.exec(stmt).one()
            return int(value or 0)
