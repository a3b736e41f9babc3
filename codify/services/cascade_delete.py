"""Cascade Delete Orchestrator — removes a user and every row that depends on it.

Invariants:
    - Runs inside the caller's transaction: the cascade is all-or-nothing
    - Statement order follows foreign-key direction, children before parents:
        1. users_favorites where the user is source OR target
        2. enumerate the user's project ids
        3. projects_technologies for those projects
        4. projects_favorites for those projects, and the user's own
           favorite-project edges
        5. the user's projects
        6. the user row
    - Afterwards no row anywhere references the user id or its former project ids

Design Decisions:
    - Explicit ordered DELETEs instead of ON DELETE CASCADE: the schema keeps
      plain foreign keys and this module is the single owner of the order
"""

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from codify.core.errors import NotFoundError
from codify.models.favorites import ProjectFavorite, UserFavorite
from codify.models.project import Project
from codify.models.project_technology import ProjectTechnology
from codify.models.user import User

logger = logging.getLogger(__name__)


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Delete user_id and its projects, associations and favorite edges."""
    if await db.get(User, user_id) is None:
        raise NotFoundError("User", user_id)

    await _delete_user_edges(db, user_id)
    project_ids = await _owned_project_ids(db, user_id)
    await _delete_project_dependents(db, user_id, project_ids)
    if project_ids:
        await db.execute(delete(Project).where(Project.creator_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))

    logger.info(
        f"User {user_id} deleted with {len(project_ids)} project(s)",
        extra={"user_id": user_id},
    )


async def _delete_user_edges(db: AsyncSession, user_id: int) -> None:
    await db.execute(
        delete(UserFavorite).where(
            or_(UserFavorite.user_id == user_id, UserFavorite.fav_user_id == user_id),
        ),
    )


async def _owned_project_ids(db: AsyncSession, user_id: int) -> list[int]:
    result = await db.execute(
        select(Project.id).where(Project.creator_id == user_id),
    )
    return list(result.scalars().all())


async def _delete_project_dependents(
    db: AsyncSession, user_id: int, project_ids: list[int],
) -> None:
    if project_ids:
        await db.execute(
            delete(ProjectTechnology).where(
                ProjectTechnology.project_id.in_(project_ids),
            ),
        )
        favorites_filter = or_(
            ProjectFavorite.project_id.in_(project_ids),
            ProjectFavorite.user_id == user_id,
        )
    else:
        favorites_filter = ProjectFavorite.user_id == user_id
    await db.execute(delete(ProjectFavorite).where(favorites_filter))
