"""
api.companies
=============

Endpoints for registering and reading companies.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from junglesales.company_repo import CompanyRepository
from junglesales.decay import state_of
from junglesales.errors import DuplicateName, NotFound, StoreError
from junglesales.models import Company
from junglesales.settings import Settings
from api.deps import RequestContext, get_companies, get_context, get_settings

router = APIRouter(prefix="/companies", tags=["companies"])


class CompanyCreate(BaseModel):
    """Body of ``POST /companies``."""
    name: str = Field(..., min_length=1)
    phone_number: Optional[str] = None


class CompanyOut(BaseModel):
    id: int
    user: int
    name: str
    phone_number: Optional[str] = None
    time_stamp: Optional[int] = None
    level: Optional[int] = None
    tier: Optional[str] = None
    state: str

    @classmethod
    def from_company(cls, company: Company) -> "CompanyOut":
        return cls(**company.to_dict(), state=state_of(company).name)


def _store_unavailable(exc: StoreError) -> HTTPException:
    return HTTPException(status_code=503, detail=f"Store error: {exc}")


@router.post("", status_code=201)
def create_company(
    body: CompanyCreate,
    ctx: RequestContext = Depends(get_context),
    repo: CompanyRepository = Depends(get_companies),
):
    """Register a company owned by the authenticated user."""
    try:
        company_id = repo.create(ctx.user.id, body.name, body.phone_number)
    except DuplicateName as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except StoreError as exc:
        raise _store_unavailable(exc)
    return {"id": company_id}


@router.get("", response_model=List[CompanyOut])
def list_companies(repo: CompanyRepository = Depends(get_companies)):
    """Every company in the store, in store order."""
    try:
        return [CompanyOut.from_company(c) for c in repo.all()]
    except StoreError as exc:
        raise _store_unavailable(exc)


@router.get("/mine", response_model=List[CompanyOut])
def list_my_companies(
    ctx: RequestContext = Depends(get_context),
    repo: CompanyRepository = Depends(get_companies),
):
    """Companies owned by the authenticated user."""
    try:
        return [CompanyOut.from_company(c) for c in repo.all_by_user(ctx.user.id)]
    except StoreError as exc:
        raise _store_unavailable(exc)


@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: int, repo: CompanyRepository = Depends(get_companies)):
    try:
        return CompanyOut.from_company(repo.get(company_id))
    except NotFound:
        raise HTTPException(status_code=404, detail="Company not found")
    except StoreError as exc:
        raise _store_unavailable(exc)


@router.post("/{company_id}/enroll", response_model=CompanyOut)
def enroll_company(
    company_id: int,
    ctx: RequestContext = Depends(get_context),
    repo: CompanyRepository = Depends(get_companies),
    config: Settings = Depends(get_settings),
):
    """
    Start the countdown for a company the caller owns.

    Re‑enrolling resets the window.  Graveyard companies belong to nobody,
    so they cannot be enrolled through this route.
    """
    try:
        company = repo.get(company_id)
        if company.user != ctx.user.id:
            raise HTTPException(status_code=403, detail="Company belongs to another user")
        return CompanyOut.from_company(repo.enroll(company_id, config.decay_enroll_window))
    except NotFound:
        raise HTTPException(status_code=404, detail="Company not found")
    except StoreError as exc:
        raise _store_unavailable(exc)
