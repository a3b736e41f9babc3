"""User Routes — listing, signup, profile, edit, and cascading delete.

Invariants:
    - Signup (POST) is the only unauthenticated write
    - Edit/delete require path id == body user_id == requester (two checks)
    - DELETE runs the full cascade in one transaction
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from codify.api.requester import get_requester_id
from codify.core.enforce_ownership import ensure_acting_as
from codify.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from codify.schemas.user import (
    UserCreate, UserDelete, UserEdit, UserProfileOut, UserSummary,
)
from codify.services import users as user_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserSummary])
async def list_users(db: AsyncSession = Depends(get_db)):
    users = await user_service.list_users(db)
    return [UserSummary(id=u.id, name=u.name) for u in users]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    """Signup: no requester yet, the account is what the caller becomes."""
    async with manager.transaction() as db:
        user_id = await user_service.create_user(
            db, body.email, body.name, body.password_hash,
        )
    return {"user_id": user_id}


@router.get("/email-exists")
async def email_exists(
    email: str = Query(..., min_length=3, max_length=255),
    db: AsyncSession = Depends(get_db),
):
    """Signup helper: whether an account already uses this email."""
    user = await user_service.get_user_by_email(db, email)
    return {"email_exists": user is not None}


@router.get("/{user_id}", response_model=UserProfileOut)
async def get_user_profile(user_id: int, db: AsyncSession = Depends(get_db)):
    profile = await user_service.get_user_profile(db, user_id)
    return UserProfileOut(
        id=profile.id,
        name=profile.name,
        email_digest=profile.email_digest,
        created_at=profile.created_at,
        projects_count=profile.projects_count,
    )


@router.patch("/{user_id}")
async def edit_user(
    user_id: int,
    body: UserEdit,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    ensure_acting_as(user_id, requester_id)
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        await user_service.edit_user(
            db, user_id, body.name, body.email, body.password_hash,
        )
    return {"user_updated": True}


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    body: UserDelete,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    """Delete the account and everything that references it."""
    ensure_acting_as(user_id, requester_id)
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        await user_service.delete_user(db, user_id)
    return {"user_deleted": True}
