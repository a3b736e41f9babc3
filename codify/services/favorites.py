"""Favorite Relationship Manager — directed user→user and user→project edges.

Invariants:
    - User-edge operations reject source == target with InvalidOperationError
      before touching storage
    - add_*: both endpoints exist (NotFound), edge absent (Conflict), then insert
    - remove_*: both endpoints exist (NotFound), edge present (NotFound), then delete
    - A unique violation on insert (two concurrent adds) surfaces as
      ConflictError; a foreign-key violation (endpoint deleted meanwhile) as
      NotFoundError; any other IntegrityError propagates as StorageFailure
    - Edges are directed: add_user_favorite(a, b) never creates b→a
    - All checks and the write of one call share the caller's transaction

Design Decisions:
    - One handler class bound to a session handle, like the other stateful
      handlers: routes build it inside their transaction() block
    - Listing helpers live here as well since they read the same tables
"""

import logging
from typing import Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codify.core.enforce_ownership import ensure_not_self
from codify.core.errors import ConflictError, ErrorContext, NotFoundError
from codify.core.fold_joined_rows import ProjectView
from codify.infrastructure.database import (
    FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION, constraint_violation,
)
from codify.models.favorites import ProjectFavorite, UserFavorite
from codify.models.project import Project
from codify.models.user import User
from codify.services.projects import fetch_project_views, project_rows_query

logger = logging.getLogger(__name__)


class FavoriteRelationships:
    """Add/remove/check favorite edges on one session handle.

    is_* checks only look for the edge row: an unknown endpoint reads as
    False rather than NotFoundError.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── user → user ─────────────────────────────────────────────

    async def is_user_favorite(self, source_id: int, target_id: int) -> bool:
        ensure_not_self(source_id, target_id)
        return await self._user_edge_exists(source_id, target_id)

    async def add_user_favorite(self, source_id: int, target_id: int) -> None:
        ensure_not_self(source_id, target_id)
        await self._ensure_users_exist(source_id, target_id)
        if await self._user_edge_exists(source_id, target_id):
            raise _duplicate_edge("user", source_id)

        await self._insert_edge(
            insert(UserFavorite).values(user_id=source_id, fav_user_id=target_id),
            "user", source_id, target_id,
        )
        logger.info(
            f"User {source_id} favorited user {target_id}",
            extra={"user_id": source_id, "target_id": target_id},
        )

    async def remove_user_favorite(self, source_id: int, target_id: int) -> None:
        ensure_not_self(source_id, target_id)
        await self._ensure_users_exist(source_id, target_id)
        if not await self._user_edge_exists(source_id, target_id):
            raise NotFoundError("UserFavorite", f"{source_id}->{target_id}")

        await self.db.execute(
            delete(UserFavorite).where(
                UserFavorite.user_id == source_id,
                UserFavorite.fav_user_id == target_id,
            ),
        )
        logger.info(
            f"User {source_id} unfavorited user {target_id}",
            extra={"user_id": source_id, "target_id": target_id},
        )

    # ─── user → project ──────────────────────────────────────────

    async def is_project_favorite(self, user_id: int, project_id: int) -> bool:
        return await self._project_edge_exists(user_id, project_id)

    async def add_project_favorite(self, user_id: int, project_id: int) -> None:
        await self._ensure_user_and_project_exist(user_id, project_id)
        if await self._project_edge_exists(user_id, project_id):
            raise _duplicate_edge("project", user_id, project_id)

        await self._insert_edge(
            insert(ProjectFavorite).values(user_id=user_id, project_id=project_id),
            "project", user_id, project_id,
        )
        logger.info(
            f"User {user_id} favorited project {project_id}",
            extra={"user_id": user_id, "project_id": project_id},
        )

    async def remove_project_favorite(self, user_id: int, project_id: int) -> None:
        await self._ensure_user_and_project_exist(user_id, project_id)
        if not await self._project_edge_exists(user_id, project_id):
            raise NotFoundError("ProjectFavorite", f"{user_id}->{project_id}")

        await self.db.execute(
            delete(ProjectFavorite).where(
                ProjectFavorite.user_id == user_id,
                ProjectFavorite.project_id == project_id,
            ),
        )
        logger.info(
            f"User {user_id} unfavorited project {project_id}",
            extra={"user_id": user_id, "project_id": project_id},
        )

    # ─── listings ────────────────────────────────────────────────

    async def list_favorite_users(self, user_id: int) -> Sequence[User]:
        """Users that user_id has favorited."""
        result = await self.db.execute(
            select(User)
            .join(UserFavorite, UserFavorite.fav_user_id == User.id)
            .where(UserFavorite.user_id == user_id)
            .order_by(User.id),
        )
        return result.scalars().all()

    async def list_favorite_project_ids(self, user_id: int) -> list[int]:
        result = await self.db.execute(
            select(ProjectFavorite.project_id)
            .where(ProjectFavorite.user_id == user_id)
            .order_by(ProjectFavorite.project_id),
        )
        return list(result.scalars().all())

    async def list_favorite_projects(self, user_id: int) -> list[ProjectView]:
        """Favorited projects with their technologies."""
        query = project_rows_query().join(
            ProjectFavorite, ProjectFavorite.project_id == Project.id,
        ).where(ProjectFavorite.user_id == user_id)
        return await fetch_project_views(self.db, query)

    # ─── helpers ─────────────────────────────────────────────────

    async def _insert_edge(
        self, stmt, kind: str, user_id: int, target_id: int,
    ) -> None:
        """Insert one edge row; a concurrent add or delete can still win the race."""
        project_id = target_id if kind == "project" else None
        try:
            await self.db.execute(stmt)
        except IntegrityError as e:
            violation = constraint_violation(e)
            if violation == UNIQUE_VIOLATION:
                logger.warning(
                    f"Concurrent duplicate {kind} favorite rejected",
                    extra={"user_id": user_id, "project_id": project_id},
                )
                raise _duplicate_edge(kind, user_id, project_id) from e
            if violation == FOREIGN_KEY_VIOLATION:
                logger.warning(
                    f"{kind.capitalize()} favorite endpoint vanished before insert",
                    extra={"user_id": user_id, "target_id": target_id},
                )
                raise NotFoundError(
                    f"{kind.capitalize()} favorite endpoint",
                    f"{user_id}->{target_id}",
                    ErrorContext(user_id=user_id, project_id=project_id),
                ) from e
            raise

    async def _ensure_users_exist(self, source_id: int, target_id: int) -> None:
        for uid in (source_id, target_id):
            if await self.db.get(User, uid) is None:
                raise NotFoundError("User", uid)

    async def _ensure_user_and_project_exist(
        self, user_id: int, project_id: int,
    ) -> None:
        if await self.db.get(User, user_id) is None:
            raise NotFoundError("User", user_id)
        if await self.db.get(Project, project_id) is None:
            raise NotFoundError(
                "Project", project_id, ErrorContext(user_id=user_id),
            )

    async def _user_edge_exists(self, source_id: int, target_id: int) -> bool:
        result = await self.db.execute(
            select(UserFavorite.user_id).where(
                UserFavorite.user_id == source_id,
                UserFavorite.fav_user_id == target_id,
            ),
        )
        return result.first() is not None

    async def _project_edge_exists(self, user_id: int, project_id: int) -> bool:
        result = await self.db.execute(
            select(ProjectFavorite.user_id).where(
                ProjectFavorite.user_id == user_id,
                ProjectFavorite.project_id == project_id,
            ),
        )
        return result.first() is not None


def _duplicate_edge(
    kind: str, user_id: int, project_id: int | None = None,
) -> ConflictError:
    return ConflictError(
        f"This {kind} is already in your favorites.",
        ErrorContext(user_id=user_id, project_id=project_id),
    )
