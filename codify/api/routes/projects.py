"""Project Routes — catalog, listings, and create/edit/delete.

Invariants:
    - Body user_id must equal the requester; edit/delete additionally require
      the requester to be the project's creator (checked in services/projects.py)
    - Project row and technology set are written in one transaction
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codify.api.requester import get_requester_id
from codify.core.enforce_ownership import ensure_acting_as
from codify.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from codify.schemas.project import (
    ProjectDelete, ProjectOut, ProjectWrite, TechnologyOut,
)
from codify.services import projects as project_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("", response_model=list[ProjectOut])
async def list_projects(db: AsyncSession = Depends(get_db)):
    views = await project_service.list_projects_with_technologies(db)
    return [ProjectOut.from_view(v) for v in views]


@router.get("/technologies", response_model=list[TechnologyOut])
async def list_technologies(db: AsyncSession = Depends(get_db)):
    technologies = await project_service.list_technologies(db)
    return [TechnologyOut(id=t.id, name=t.name) for t in technologies]


@router.get("/by-user/{user_id}", response_model=list[ProjectOut])
async def list_projects_by_user(user_id: int, db: AsyncSession = Depends(get_db)):
    views = await project_service.list_projects_with_technologies(db, owner_id=user_id)
    return [ProjectOut.from_view(v) for v in views]


@router.get("/{project_id}", response_model=ProjectOut)
async def get_project(project_id: int, db: AsyncSession = Depends(get_db)):
    return ProjectOut.from_view(await project_service.get_project(db, project_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectWrite,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        project_id = await project_service.create_project(
            db, body.user_id, body.name, body.description, body.technologies,
        )
    return {"project_id": project_id}


@router.patch("/{project_id}")
async def edit_project(
    project_id: int,
    body: ProjectWrite,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        await project_service.edit_project(
            db, project_id, body.user_id,
            body.name, body.description, body.technologies,
        )
    return {"project_edited": True}


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    body: ProjectDelete,
    requester_id: int = Depends(get_requester_id),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    ensure_acting_as(body.user_id, requester_id)
    async with manager.transaction() as db:
        await project_service.delete_project(db, project_id, body.user_id)
    return {"project_deleted": True}
