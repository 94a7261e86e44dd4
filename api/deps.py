"""
api.deps
========

FastAPI dependency providers.

Each request gets its own repository (and therefore its own session),
closed once the response is sent.  Authenticated routes depend on
:func:`get_context`, which resolves HTTP Basic credentials to a
:class:`RequestContext` carrying the current user.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from junglesales.company_repo import CompanyRepository
from junglesales.errors import StoreError
from junglesales.models import User
from junglesales.settings import settings
from junglesales.users import UserRepository

security = HTTPBasic()


@dataclass(frozen=True)
class RequestContext:
    """Per‑request state handed to route handlers."""
    user: User


@lru_cache
def get_settings():
    """Return application settings."""
    return settings


def get_companies() -> Iterator[CompanyRepository]:
    """Company repository scoped to one request."""
    with CompanyRepository() as repo:
        yield repo


def get_users() -> Iterator[UserRepository]:
    """User repository scoped to one request."""
    with UserRepository() as repo:
        yield repo


def get_context(
    credentials: HTTPBasicCredentials = Depends(security),
    users: UserRepository = Depends(get_users),
) -> RequestContext:
    """
    Authenticate the caller (email + password) or answer 401.

    Args:
        credentials: HTTP Basic username/password; the username is the email
        users: user repository for the lookup

    Returns:
        RequestContext: the authenticated user
    """
    try:
        user = users.authenticate(credentials.username, credentials.password)
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=f"Store error: {exc}")
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Basic"},
        )
    return RequestContext(user=user)
