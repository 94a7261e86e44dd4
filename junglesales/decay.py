"""
junglesales.decay
=================

Countdown transition applied to every company once per scheduler tick.

:pyfunc:`next_state` is pure: it reads a :class:`~junglesales.models.Company`
and returns the :class:`~junglesales.models.CompanyUpdate` to persist, or
``None`` when the company is not enrolled.

    time_stamp - 1 == 1000   ->  reset to a 7 tick window
    time_stamp - 1 <= 0      ->  graveyard, owner released, time_stamp 0
    otherwise                ->  decrement by one

``level`` is carried through unchanged (5 when absent).  The tier is not
inspected, so a graveyard company at 0 keeps landing on the same terminal
fields.
"""

from __future__ import annotations

from typing import Optional

from .models import (
    DEFAULT_LEVEL,
    GRAVEYARD,
    UNOWNED,
    Company,
    CompanyUpdate,
    DecayState,
)

# Out‑of‑range countdown that is pulled back to a short window.
SENTINEL = 1000
RESET_WINDOW = 7


def next_state(company: Company, reset_window: int = RESET_WINDOW) -> Optional[CompanyUpdate]:
    """
    Return the update one tick applies to *company*.

    Examples
    --------
    >>> next_state(Company("Acme", time_stamp=5, level=3))
    CompanyUpdate(user=None, phone_number=None, time_stamp=4, level=3, tier=None)
    >>> next_state(Company("Acme")) is None
    True
    """
    if company.time_stamp is None:
        return None

    level = company.level if company.level is not None else DEFAULT_LEVEL
    remaining = company.time_stamp - 1

    if remaining == SENTINEL:
        return CompanyUpdate(time_stamp=reset_window, level=level)
    if remaining <= 0:
        return CompanyUpdate(tier=GRAVEYARD, user=UNOWNED, level=level, time_stamp=0)
    return CompanyUpdate(time_stamp=remaining, level=level)


def state_of(company: Company) -> DecayState:
    """Classify *company* for reporting."""
    if company.tier == GRAVEYARD:
        return DecayState.GRAVEYARD
    if company.time_stamp is None:
        return DecayState.UNENROLLED
    return DecayState.ACTIVE
