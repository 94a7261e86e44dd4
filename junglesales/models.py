"""
junglesales.models
==================

Dataclasses and enums for a company record, its decay state and the
users who own companies.  Like the rest of the core these objects carry
**no** external‑library dependencies; persistence lives in
:pymod:`junglesales.db`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum, auto
from typing import Any, Dict, Optional

# Owner id written to a company released on expiry.
UNOWNED = 0

GRAVEYARD = "graveyard"
DEFAULT_LEVEL = 5


class DecayState(Enum):
    """Where a company sits in the countdown life‑cycle."""
    UNENROLLED = auto()
    ACTIVE = auto()
    GRAVEYARD = auto()

    def __str__(self) -> str:
        return self.name


@dataclass
class Company:
    """
    A company registered by a user.

    Parameters
    ----------
    name : str
        Display name; also the key used by update/upsert.
    user : int, default=UNOWNED
        Id of the owning user.
    phone_number : str | None
        Optional contact number.
    time_stamp : int | None
        Countdown in ticks; ``None`` while the company is not enrolled.
    level : int | None
        Engagement level, read as 5 when absent.
    tier : str | None
        ``"graveyard"`` once the countdown has run out.
    id : int | None
        Store‑assigned identifier.
    """
    name: str
    user: int = UNOWNED
    phone_number: Optional[str] = None
    time_stamp: Optional[int] = None
    level: Optional[int] = None
    tier: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CompanyUpdate:
    """
    Partial update for a :class:`Company`.

    Only fields that are not ``None`` are written, so an update can never
    touch a column the caller did not mean to set.
    """
    user: Optional[int] = None
    phone_number: Optional[str] = None
    time_stamp: Optional[int] = None
    level: Optional[int] = None
    tier: Optional[str] = None

    def as_fields(self) -> Dict[str, Any]:
        """Return the set fields as a ``{column: value}`` mapping."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def __bool__(self) -> bool:
        return bool(self.as_fields())


@dataclass
class User:
    """An account that can own companies.  ``password`` holds a hash."""
    name: str
    email: str
    password: str
    id: Optional[int] = None
