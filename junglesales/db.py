"""
junglesales.db
==============

SQLite persistence layer for Jungle Sales.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at *junglesales.db*
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``create_all()`` / ``drop_all()`` – schema helpers
* ``fetch`` / ``save`` / ``update`` / ``upsert`` – the store adapter the
  repositories are written against.  Every SQLAlchemy failure surfaces
  as :class:`junglesales.errors.StoreError`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, create_engine, select

from junglesales.errors import DuplicateEmail, DuplicateName, StoreError
from junglesales.models import UNOWNED, Company, User
from junglesales.settings import DB_ECHO, DB_URL

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Engine (SQLite file lives in project root unless JUNGLESALES_DB_FILE is set)
# ---------------------------------------------------------------------------
engine = create_engine(
    DB_URL,
    echo=DB_ECHO,
    connect_args={"check_same_thread": False},
)


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal() -> Session:  # noqa: N802 (factory camel‑case for consistency with FastAPI docs)
    """Return a new Session bound to the global engine."""
    return Session(engine)


# ---------------------------------------------------------------------------
# ORM models mirroring junglesales.models
# ---------------------------------------------------------------------------
class CompanyDB(SQLModel, table=True):
    """
    SQLite‑backed representation of a :class:`junglesales.models.Company`.

    ``name`` carries a unique constraint so the name‑keyed update and
    upsert always address a single row.
    """

    __tablename__ = "companies"

    id: Optional[int] = Field(default=None, primary_key=True)
    user: int = Field(default=UNOWNED, index=True)
    name: str = Field(index=True, unique=True)
    phone_number: Optional[str] = None
    time_stamp: Optional[int] = None
    level: Optional[int] = None
    tier: Optional[str] = None

    def to_company(self) -> Company:
        """Convert the DB row back into a plain Company."""
        return Company(
            id=self.id,
            user=self.user,
            name=self.name,
            phone_number=self.phone_number,
            time_stamp=self.time_stamp,
            level=self.level,
            tier=self.tier,
        )


class UserDB(SQLModel, table=True):
    """SQLite‑backed representation of a :class:`junglesales.models.User`."""

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    password: str

    def to_user(self) -> User:
        return User(id=self.id, name=self.name, email=self.email, password=self.password)


Row = TypeVar("Row", bound=SQLModel)


# ---------------------------------------------------------------------------
# Store adapter
# ---------------------------------------------------------------------------
@contextmanager
def store_errors(s: Session, name: Optional[str] = None, email: Optional[str] = None) -> Iterator[None]:
    """
    Roll back and re‑raise any SQLAlchemy failure as StoreError.

    A unique‑constraint hit on ``companies.name`` becomes DuplicateName
    carrying *name*, one on ``users.email`` becomes DuplicateEmail.
    """
    try:
        yield
    except IntegrityError as exc:
        s.rollback()
        if "companies.name" in str(exc.orig):
            raise DuplicateName(name or "") from exc
        if "users.email" in str(exc.orig):
            raise DuplicateEmail(email or "") from exc
        raise StoreError(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        s.rollback()
        logger.error("store operation failed: %s", exc)
        raise StoreError(str(exc)) from exc


def _where(model: Type[Row], criteria: Mapping[str, Any]):
    """Equality filter on every field in *criteria* (empty = match all)."""
    # rows written by another session must not be served from the identity map
    stmt = select(model).execution_options(populate_existing=True)
    for column, value in criteria.items():
        stmt = stmt.where(getattr(model, column) == value)
    return stmt


def fetch(s: Session, model: Type[Row], criteria: Optional[Mapping[str, Any]] = None) -> List[Row]:
    """Return every row of *model* whose fields equal *criteria*."""
    with store_errors(s):
        return list(s.exec(_where(model, criteria or {})).all())


def save(s: Session, row: Row) -> int:
    """Insert *row* and return its new primary key."""
    with store_errors(s, getattr(row, "name", None), getattr(row, "email", None)):
        s.add(row)
        s.commit()
        s.refresh(row)
    return row.id


def update(s: Session, model: Type[Row], criteria: Mapping[str, Any], values: Dict[str, Any]) -> int:
    """Merge *values* into every matching row; return the number matched."""
    with store_errors(s, values.get("name", criteria.get("name")), values.get("email")):
        rows = list(s.exec(_where(model, criteria)).all())
        for row in rows:
            for column, value in values.items():
                setattr(row, column, value)
            s.add(row)
        s.commit()
    return len(rows)


def upsert(s: Session, model: Type[Row], criteria: Mapping[str, Any], values: Dict[str, Any]) -> int:
    """
    Like :func:`update`, but insert ``{**criteria, **values}`` when no row
    matches.  Returns the id of the (first) affected row.
    """
    with store_errors(s):
        rows = list(s.exec(_where(model, criteria)).all())
    if not rows:
        return save(s, model(**{**criteria, **values}))
    row_id = rows[0].id
    update(s, model, criteria, values)
    return row_id


# ---------------------------------------------------------------------------
# Utility: create / drop tables
# ---------------------------------------------------------------------------
def create_all() -> None:
    """Create all tables for imported SQLModel subclasses."""
    SQLModel.metadata.create_all(engine)


def drop_all() -> None:
    """Drop every table (tests and ``create-db --reset``)."""
    SQLModel.metadata.drop_all(engine)
