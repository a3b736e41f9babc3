"""Projects — create/edit/delete orchestration and project read queries.

Invariants:
    - Mutations run inside the caller's transaction; the project row write and
      the technology reconcile commit or roll back together
    - Create inserts the row first (flush for its id), then reconciles
    - Edit updates the row first, then reconciles against the existing id
    - Only the creator may edit or delete; creator_id is never rewritten
    - Delete removes association and favorite rows before the project row

Design Decisions:
    - Reads build one flat joined SELECT and hand the rows to
      core.fold_joined_rows; the nested ProjectView never reaches a statement
    - project_rows_query() is shared with services/favorites.py
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codify.core.domain_types import ProjectId
from codify.core.enforce_ownership import ensure_creator
from codify.core.errors import NotFoundError
from codify.core.fold_joined_rows import (
    ProjectTechnologyRow, ProjectView, fold_project_rows,
)
from codify.models.favorites import ProjectFavorite
from codify.models.project import Project
from codify.models.project_technology import ProjectTechnology
from codify.models.technology import Technology
from codify.models.user import User
from codify.services.project_technologies import reconcile_project_technologies

logger = logging.getLogger(__name__)


# ─── Mutations ───────────────────────────────────────────────────

async def create_project(
    db: AsyncSession,
    creator_id: int,
    name: str,
    description: str | None,
    technology_ids: Iterable[int] | None,
) -> ProjectId:
    """Insert a project and its technology set. Returns the new id."""
    if await db.get(User, creator_id) is None:
        raise NotFoundError("User", creator_id)

    project = Project(name=name, description=description, creator_id=creator_id)
    db.add(project)
    await db.flush()

    await reconcile_project_technologies(db, project.id, technology_ids)
    logger.info(
        f"Project {project.id} created by user {creator_id}",
        extra={"user_id": creator_id, "project_id": project.id},
    )
    return ProjectId(project.id)


async def edit_project(
    db: AsyncSession,
    project_id: int,
    editor_id: int,
    name: str,
    description: str | None,
    technology_ids: Iterable[int] | None,
) -> None:
    """Update name/description and replace the technology set."""
    project = await get_project_or_404(db, project_id)
    ensure_creator(editor_id, project.creator_id, project_id)

    project.name = name
    project.description = description
    project.updated_at = datetime.now(timezone.utc)
    await db.flush()

    await reconcile_project_technologies(db, project_id, technology_ids)
    logger.info(
        f"Project {project_id} edited",
        extra={"user_id": editor_id, "project_id": project_id},
    )


async def delete_project(
    db: AsyncSession, project_id: int, requester_id: int,
) -> None:
    """Delete a project with its association and favorite rows."""
    project = await get_project_or_404(db, project_id)
    ensure_creator(requester_id, project.creator_id, project_id)

    await db.execute(
        delete(ProjectTechnology).where(ProjectTechnology.project_id == project_id),
    )
    await db.execute(
        delete(ProjectFavorite).where(ProjectFavorite.project_id == project_id),
    )
    await db.execute(delete(Project).where(Project.id == project_id))
    logger.info(
        f"Project {project_id} deleted",
        extra={"user_id": requester_id, "project_id": project_id},
    )


async def get_project_or_404(db: AsyncSession, project_id: int) -> Project:
    project = await db.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


# ─── Reads ───────────────────────────────────────────────────────

def project_rows_query() -> Select:
    """Flat project ⋈ users ⟕ projects_technologies ⟕ technologies rows."""
    return (
        select(
            Project.id.label("project_id"),
            Project.name.label("project_name"),
            Project.description.label("project_description"),
            Project.created_at.label("project_created_at"),
            Project.updated_at.label("project_updated_at"),
            Project.creator_id.label("creator_id"),
            User.name.label("creator_name"),
            User.email.label("creator_email"),
            Technology.id.label("technology_id"),
            Technology.name.label("technology_name"),
        )
        .join(User, Project.creator_id == User.id)
        .outerjoin(ProjectTechnology, ProjectTechnology.project_id == Project.id)
        .outerjoin(Technology, ProjectTechnology.technology_id == Technology.id)
        .order_by(Project.id, ProjectTechnology.technology_id)
    )


async def fetch_project_views(db: AsyncSession, query: Select) -> list[ProjectView]:
    """Execute a project_rows_query() variant and fold the rows."""
    result = await db.execute(query)
    rows = [ProjectTechnologyRow(**row._mapping) for row in result]
    return fold_project_rows(rows)


async def list_projects_with_technologies(
    db: AsyncSession, owner_id: int | None = None,
) -> list[ProjectView]:
    query = project_rows_query()
    if owner_id is not None:
        query = query.where(Project.creator_id == owner_id)
    return await fetch_project_views(db, query)


async def get_project(db: AsyncSession, project_id: int) -> ProjectView:
    views = await fetch_project_views(
        db, project_rows_query().where(Project.id == project_id),
    )
    if not views:
        raise NotFoundError("Project", project_id)
    return views[0]


async def list_technologies(db: AsyncSession) -> Sequence[Technology]:
    """Technology catalog, ordered by id."""
    result = await db.execute(select(Technology).order_by(Technology.id))
    return result.scalars().all()
