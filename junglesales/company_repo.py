"""
junglesales.company_repo
========================

CRUD façade over the store adapter in :pymod:`junglesales.db`.

Look‑ups are by id; updates are keyed on the company *name*, which the
schema keeps unique so an update always addresses exactly one record.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlmodel import Session

from junglesales import db
from junglesales.db import CompanyDB, SessionLocal
from junglesales.decay import RESET_WINDOW
from junglesales.errors import NotFound
from junglesales.models import DEFAULT_LEVEL, Company, CompanyUpdate

logger = logging.getLogger(__name__)


class CompanyRepository:
    """
    Company store backed by SQLite.

    * create(user, name, phone_number)
    * get(id) / all() / all_by_user(user)
    * update(name, fields) / upsert(name, fields)
    * enroll(id)
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session = session or SessionLocal()

    # ------------------------------------------------------------------ CRUD
    def create(self, user: int, name: str, phone_number: Optional[str] = None) -> int:
        """Insert a new, unenrolled company and return its id."""
        row = CompanyDB(user=user, name=name, phone_number=phone_number)
        company_id = db.save(self._session, row)
        logger.info("created company %r (id=%s) for user %s", name, company_id, user)
        return company_id

    def get(self, company_id: int) -> Company:
        rows = db.fetch(self._session, CompanyDB, {"id": company_id})
        if not rows:
            raise NotFound(company_id)
        return rows[0].to_company()

    def all(self) -> List[Company]:
        return [row.to_company() for row in db.fetch(self._session, CompanyDB)]

    def all_by_user(self, user: int) -> List[Company]:
        return [row.to_company() for row in db.fetch(self._session, CompanyDB, {"user": user})]

    def update(self, name: str, fields: CompanyUpdate) -> int:
        """Merge *fields* into the company called *name*; 0 when none matches."""
        values = fields.as_fields()
        if not values:
            return 0
        return db.update(self._session, CompanyDB, {"name": name}, values)

    def upsert(self, name: str, fields: CompanyUpdate) -> int:
        """Update the company called *name*, creating it if missing.  Returns its id."""
        return db.upsert(self._session, CompanyDB, {"name": name}, fields.as_fields())

    # ------------------------------------------------------------ life‑cycle
    def enroll(self, company_id: int, window: int = RESET_WINDOW) -> Company:
        """
        Start (or restart) the countdown for a company.

        Sets ``time_stamp`` to *window* and fills in the default level if
        the company has none yet.
        """
        company = self.get(company_id)
        level = company.level if company.level is not None else DEFAULT_LEVEL
        self.update(company.name, CompanyUpdate(time_stamp=window, level=level))
        return self.get(company_id)

    # ------------------------------------------------------ dunder helpers
    def __len__(self) -> int:
        return len(self.all())

    # ----------------------------------------------------- context manager
    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "CompanyRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
