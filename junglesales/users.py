"""
junglesales.users
=================

User accounts: registration, authentication and password changes.
Passwords are stored as passlib ``pbkdf2_sha256`` hashes.
"""

from __future__ import annotations

import logging
from typing import Optional

from passlib.context import CryptContext
from sqlmodel import Session

from junglesales import db
from junglesales.db import SessionLocal, UserDB
from junglesales.errors import DuplicateEmail, NotFound
from junglesales.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


class UserRepository:
    """SQLite‑backed user accounts."""

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session = session or SessionLocal()

    def create(self, name: str, email: str, password: str) -> int:
        """Register a user and return its id.  Raises DuplicateEmail."""
        if db.fetch(self._session, UserDB, {"email": email}):
            raise DuplicateEmail(email)
        row = UserDB(name=name, email=email, password=hash_password(password))
        user_id = db.save(self._session, row)
        logger.info("registered user %s (id=%s)", email, user_id)
        return user_id

    def get(self, user_id: int) -> User:
        rows = db.fetch(self._session, UserDB, {"id": user_id})
        if not rows:
            raise NotFound(user_id)
        return rows[0].to_user()

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when *password* matches, else ``None``."""
        rows = db.fetch(self._session, UserDB, {"email": email})
        if not rows:
            return None
        user = rows[0].to_user()
        if not verify_password(password, user.password):
            return None
        return user

    def change_password(self, user_id: int, password: str) -> bool:
        """Replace the password hash; ``False`` when the user does not exist."""
        affected = db.update(self._session, UserDB, {"id": user_id}, {"password": hash_password(password)})
        return affected > 0

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "UserRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
