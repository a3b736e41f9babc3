"""Association Reconciler — replace-all sync of a project's technology set.

Invariants:
    - Runs inside the caller's transaction (same one as the project row write)
    - After success the association rows for project_id are exactly
      set(technology_ids): no duplicates, no leftovers
    - Unknown technology ids raise NotFoundError before any row is touched
    - None or [] leaves the project with zero technologies

Design Decisions:
    - Replace-all over diff-and-patch: delete every row then batch-insert
    - Core-style insert (no ORM identity map) so repeated reconciles in one
      session never collide with stale association instances
"""

import logging
from typing import Iterable

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from codify.core.errors import ErrorContext, NotFoundError
from codify.models.project_technology import ProjectTechnology
from codify.models.technology import Technology

logger = logging.getLogger(__name__)


def dedupe_ids(ids: Iterable[int] | None) -> list[int]:
    """Drop repeats, keep first occurrence order."""
    if not ids:
        return []
    return list(dict.fromkeys(ids))


async def reconcile_project_technologies(
    db: AsyncSession, project_id: int, technology_ids: Iterable[int] | None,
) -> list[int]:
    """Replace the technology set of project_id. Returns the ids now associated."""
    wanted = dedupe_ids(technology_ids)
    await _ensure_technologies_exist(db, wanted, project_id)

    await db.execute(
        delete(ProjectTechnology).where(ProjectTechnology.project_id == project_id),
    )
    if wanted:
        await db.execute(
            insert(ProjectTechnology),
            [{"project_id": project_id, "technology_id": t} for t in wanted],
        )

    logger.info(
        f"Project {project_id} technologies set to {wanted}",
        extra={"project_id": project_id},
    )
    return wanted


async def _ensure_technologies_exist(
    db: AsyncSession, technology_ids: list[int], project_id: int,
) -> None:
    if not technology_ids:
        return
    result = await db.execute(
        select(Technology.id).where(Technology.id.in_(technology_ids)),
    )
    known = set(result.scalars().all())
    for tech_id in technology_ids:
        if tech_id not in known:
            raise NotFoundError(
                "Technology", tech_id, ErrorContext(project_id=project_id),
            )
