# app/repositories/sweet_repo.py
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Engine, func, update
from sqlmodel import Session, select

from app.models.sweet import MAX_QUANTITY, Sweet
from app.repositories.errors import OutOfStockError, StockLimitError

# Never written by update(), even when present in the payload.
PROTECTED_FIELDS = frozenset({"id", "admin_id"})


@dataclass(frozen=True)
class SweetFilter:
    """
    Search criteria. Provided criteria are ANDed, `None` means no constraint.

    - name: case-insensitive substring
    - category: exact match
    - min_price / max_price: inclusive bounds
    """

    name: str | None = None
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None

    def matches(self, sweet: Sweet) -> bool:
        if self.name and self.name.lower() not in sweet.name.lower():
            return False
        if self.category and sweet.category != self.category:
            return False
        if self.min_price is not None and sweet.price < self.min_price:
            return False
        if self.max_price is not None and sweet.price > self.max_price:
            return False
        return True


class SweetRepository(ABC):
    """
    Data access layer for Sweet.

    - Pure storage operations (CRUD + search + stock counters).
    - Role agnostic and assumes pre-validated input.
    """

    @abstractmethod
    def list_all(self) -> list[Sweet]:
        ...

    @abstractmethod
    def get_by_id(self, sweet_id: str) -> Sweet | None:
        ...

    @abstractmethod
    def search(self, criteria: SweetFilter) -> list[Sweet]:
        ...

    @abstractmethod
    def create(self, fields: dict[str, Any], admin_id: str) -> Sweet:
        """
        Insert a sweet owned by `admin_id`.

        `quantity` defaults to 0, `image_url` / `description` to None.
        """

    @abstractmethod
    def update(self, sweet_id: str, fields: dict[str, Any]) -> Sweet | None:
        """
        Apply only the supplied fields. `id` and `admin_id` are never overwritten.

        Returns None if the sweet does not exist.
        """

    @abstractmethod
    def delete(self, sweet_id: str) -> bool:
        """True if a record existed and was removed."""

    @abstractmethod
    def purchase(self, sweet_id: str) -> Sweet | None:
        """
        Atomically take one unit out of stock.

        Returns None if the sweet does not exist.

        Raises:
            OutOfStockError: if quantity is already 0 (quantity is left unchanged).
        """

    @abstractmethod
    def restock(self, sweet_id: str, amount: int) -> Sweet | None:
        """
        Atomically add `amount` (> 0, caller-validated) units.

        Returns None if the sweet does not exist.

        Raises:
            StockLimitError: if the result would exceed MAX_QUANTITY
                (quantity is left unchanged).
        """


def _new_sweet(fields: dict[str, Any], admin_id: str) -> Sweet:
    data = {k: v for k, v in fields.items() if k not in PROTECTED_FIELDS}
    data.setdefault("quantity", 0)
    return Sweet(**data, admin_id=admin_id)


def _copy(sweet: Sweet) -> Sweet:
    return Sweet(**sweet.model_dump())


class InMemorySweetRepository(SweetRepository):
    """
    Volatile store backed by a dict.

    A single lock serialises every read-modify-write so that concurrent
    purchases can never drive quantity below zero.
    """

    def __init__(self):
        self._sweets: dict[str, Sweet] = {}
        self._lock = threading.Lock()

    def list_all(self) -> list[Sweet]:
        with self._lock:
            return [_copy(s) for s in self._sweets.values()]

    def get_by_id(self, sweet_id: str) -> Sweet | None:
        with self._lock:
            sweet = self._sweets.get(sweet_id)
            return _copy(sweet) if sweet else None

    def search(self, criteria: SweetFilter) -> list[Sweet]:
        with self._lock:
            return [_copy(s) for s in self._sweets.values() if criteria.matches(s)]

    def create(self, fields: dict[str, Any], admin_id: str) -> Sweet:
        sweet = _new_sweet(fields, admin_id)
        with self._lock:
            self._sweets[sweet.id] = sweet
            return _copy(sweet)

    def update(self, sweet_id: str, fields: dict[str, Any]) -> Sweet | None:
        with self._lock:
            sweet = self._sweets.get(sweet_id)
            if sweet is None:
                return None
            for key, value in fields.items():
                if key not in PROTECTED_FIELDS:
                    setattr(sweet, key, value)
            return _copy(sweet)

    def delete(self, sweet_id: str) -> bool:
        with self._lock:
            return self._sweets.pop(sweet_id, None) is not None

    def purchase(self, sweet_id: str) -> Sweet | None:
        with self._lock:
            sweet = self._sweets.get(sweet_id)
            if sweet is None:
                return None
            if sweet.quantity <= 0:
                raise OutOfStockError(sweet_id)
            sweet.quantity -= 1
            return _copy(sweet)

    def restock(self, sweet_id: str, amount: int) -> Sweet | None:
        with self._lock:
            sweet = self._sweets.get(sweet_id)
            if sweet is None:
                return None
            if sweet.quantity > MAX_QUANTITY - amount:
                raise StockLimitError(sweet_id, amount)
            sweet.quantity += amount
            return _copy(sweet)


class SqlSweetRepository(SweetRepository):
    """
    Durable store on top of a SQLModel engine.

    Stock counters are changed with single conditional UPDATE statements,
    so the database serialises concurrent purchases.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def list_all(self) -> list[Sweet]:
        with self._session() as session:
            return list(session.exec(select(Sweet)).all())

    def get_by_id(self, sweet_id: str) -> Sweet | None:
        with self._session() as session:
            return session.get(Sweet, sweet_id)

    def search(self, criteria: SweetFilter) -> list[Sweet]:
        stmt = select(Sweet)
        if criteria.name:
            stmt = stmt.where(
                func.lower(Sweet.name).contains(criteria.name.lower(), autoescape=True)
            )
        if criteria.category:
            stmt = stmt.where(Sweet.category == criteria.category)
        if criteria.min_price is not None:
            stmt = stmt.where(Sweet.price >= criteria.min_price)
        if criteria.max_price is not None:
            stmt = stmt.where(Sweet.price <= criteria.max_price)

        with self._session() as session:
            return list(session.exec(stmt).all())

    def create(self, fields: dict[str, Any], admin_id: str) -> Sweet:
        sweet = _new_sweet(fields, admin_id)
        with self._session() as session:
            session.add(sweet)
            session.commit()
            session.refresh(sweet)
            return sweet

    def update(self, sweet_id: str, fields: dict[str, Any]) -> Sweet | None:
        with self._session() as session:
            sweet = session.get(Sweet, sweet_id)
            if sweet is None:
                return None
            for key, value in fields.items():
                if key not in PROTECTED_FIELDS:
                    setattr(sweet, key, value)
            session.add(sweet)
            session.commit()
            session.refresh(sweet)
            return sweet

    def delete(self, sweet_id: str) -> bool:
        with self._session() as session:
            sweet = session.get(Sweet, sweet_id)
            if sweet is None:
                return False
            session.delete(sweet)
            session.commit()
            return True

    def purchase(self, sweet_id: str) -> Sweet | None:
        stmt = (
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity > 0)
            .values(quantity=Sweet.quantity - 1)
        )
        with self._session() as session:
            result = session.execute(stmt)
            session.commit()
            sweet = session.get(Sweet, sweet_id)
            if sweet is None:
                return None
            if result.rowcount == 0:
                raise OutOfStockError(sweet_id)
            session.refresh(sweet)
            return sweet

    def restock(self, sweet_id: str, amount: int) -> Sweet | None:
        stmt = (
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_QUANTITY - amount)
            .values(quantity=Sweet.quantity + amount)
        )
        with self._session() as session:
            result = session.execute(stmt)
            session.commit()
            sweet = session.get(Sweet, sweet_id)
            if sweet is None:
                return None
            if result.rowcount == 0:
                raise StockLimitError(sweet_id, amount)
            session.refresh(sweet)
            return sweet
