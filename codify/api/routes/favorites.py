"""Favorite Routes — user→user and user→project favorite edges.

Invariants:
    - Body user_id must equal the requester for every check/add/remove
    - add/remove run their existence checks and write in one transaction
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codify.api.requester import get_requester_id
from codify.core.enforce_ownership import ensure_acting_as
from codify.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from codify.schemas.favorite import FavoriteRequest
from codify.schemas.project import ProjectOut
from codify.schemas.user import UserSummary
from codify.services.favorites import FavoriteRelationships

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/favorites", tags=["favorites"])


# ─── listings ────────────────────────────────────────────────────

@router.get("/users/{user_id}", response_model=list[UserSummary])
async def list_favorite_users(user_id: int, db: AsyncSession = Depends(get_db)):
    users = await FavoriteRelationships(db).list_favorite_users(user_id)
    return [UserSummary(id=u.id, name=u.name) for u in users]


@router.get("/projects/{user_id}", response_model=list[ProjectOut])
async def list_favorite_projects(user_id: int, db: AsyncSession = Depends(get_db)):
    views = await FavoriteRelationships(db).list_favorite_projects(user_id)
    return [ProjectOut.from_view(v) for v in views]


@router.get("/project-ids/{user_id}")
async def list_favorite_project_ids(
    user_id: int,
    requester_id: int = Depends(get_requester_id),
    db: AsyncSession = Depends(get_db),
):
    ensure_acting_as(user_id, requester_id)
    ids = await FavoriteRelationships(db).list_favorite_project_ids(user_id)
    return {"project_ids": ids}


# ─── user → user ─────────────────────────────────────────────────

@router.post("/users/{target_id}/check")
async def check_user_favorite(
    target_id: int,
    body: FavoriteRequest,
    requester_id: int = Depends(get_requester_id),
    db: AsyncSession = Depends(get_db),
):
    ensure_acting_as(body.user_id, requester_id)
    is_fav = await FavoriteRelationships(db).is_user_favorite(body.user_id, target_id)
    return {"is_favorite": is_fav}


@router.post("/users/{target_id}", status_code=status.HTTP_201_CREATED)
async def add_user_favorite(
    target_id: int,
    body: FavoriteRequest,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        await FavoriteRelationships(db).add_user_favorite(body.user_id, target_id)
    return {"user_added": True}


@router.delete("/users/{target_id}")
async def remove_user_favorite(
    target_id: int,
    body: FavoriteRequest,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        await FavoriteRelationships(db).remove_user_favorite(body.user_id, target_id)
    return {"user_removed": True}


# ─── user → project ──────────────────────────────────────────────

@router.post("/projects/{project_id}/check")
async def check_project_favorite(
    project_id: int,
    body: FavoriteRequest,
    requester_id: int = Depends(get_requester_id),
    db: AsyncSession = Depends(get_db),
):
    ensure_acting_as(body.user_id, requester_id)
    is_fav = await FavoriteRelationships(db).is_project_favorite(body.user_id, project_id)
    return {"is_favorite": is_fav}


@router.post("/projects/{project_id}", status_code=status.HTTP_201_CREATED)
async def add_project_favorite(
    project_id: int,
    body: FavoriteRequest,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        await FavoriteRelationships(db).add_project_favorite(body.user_id, project_id)
    return {"project_added": True}


@router.delete("/projects/{project_id}")
async def remove_project_favorite(
    project_id: int,
    body: FavoriteRequest,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        await FavoriteRelationships(db).remove_project_favorite(body.user_id, project_id)
    return {"project_removed": True}
