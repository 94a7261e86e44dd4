"""
api.users
=========

Registration and current‑user endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from junglesales.errors import DuplicateEmail, StoreError
from junglesales.users import UserRepository
from api.deps import RequestContext, get_context, get_users

router = APIRouter(prefix="/users", tags=["users"])


class UserCreate(BaseModel):
    """Body of ``POST /users``."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)


class PasswordChange(BaseModel):
    password: str = Field(..., min_length=6)


@router.post("", status_code=201)
def register(body: UserCreate, users: UserRepository = Depends(get_users)):
    try:
        user_id = users.create(body.name, body.email, body.password)
    except DuplicateEmail as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=f"Store error: {exc}")
    return {"id": user_id}


@router.get("/me")
def me(ctx: RequestContext = Depends(get_context)):
    """The authenticated user, without the password hash."""
    return {"id": ctx.user.id, "name": ctx.user.name, "email": ctx.user.email}


@router.put("/me/password", status_code=204)
def change_password(
    body: PasswordChange,
    ctx: RequestContext = Depends(get_context),
    users: UserRepository = Depends(get_users),
):
    if not users.change_password(ctx.user.id, body.password):
        raise HTTPException(status_code=404, detail="User not found")
