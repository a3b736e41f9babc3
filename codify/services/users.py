"""Users — account creation, edit, profile reads, and cascade deletion entry point.

Invariants:
    - Emails are unique: a duplicate raises ConflictError, whether caught by the
      pre-check or by the unique constraint at flush time; other constraint
      failures propagate and leave the transaction as StorageFailure
    - password_hash arrives already hashed; this module never sees plaintext
    - delete_user is the cascade orchestrator (services/cascade_delete.py)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codify.core.domain_types import UserId
from codify.core.errors import ConflictError, ErrorContext, NotFoundError
from codify.core.fold_joined_rows import email_digest
from codify.infrastructure.database import UNIQUE_VIOLATION, constraint_violation
from codify.models.project import Project
from codify.models.user import User
from codify.services.cascade_delete import delete_user  # noqa: F401

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserProfile:
    id: int
    name: str
    email_digest: str | None
    created_at: datetime
    projects_count: int


async def create_user(
    db: AsyncSession, email: str, name: str, password_hash: str,
) -> UserId:
    """Insert a user row. Returns the new id."""
    await _ensure_email_free(db, email)
    user = User(email=email, name=name, password=password_hash)
    db.add(user)
    await _flush_unique(db)
    logger.info(f"User {user.id} created", extra={"user_id": user.id})
    return UserId(user.id)


async def edit_user(
    db: AsyncSession,
    user_id: int,
    name: str,
    email: str,
    password_hash: str | None = None,
) -> None:
    """Update name/email and, when given, the hashed credential."""
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    await _ensure_email_free(db, email, exclude_user_id=user_id)

    user.name = name
    user.email = email
    if password_hash is not None:
        user.password = password_hash
    user.updated_at = datetime.now(timezone.utc)
    await _flush_unique(db)
    logger.info(f"User {user_id} edited", extra={"user_id": user_id})


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_profile(db: AsyncSession, user_id: int) -> UserProfile:
    result = await db.execute(
        select(User, func.count(Project.id))
        .outerjoin(Project, Project.creator_id == User.id)
        .where(User.id == user_id)
        .group_by(User.id),
    )
    row = result.first()
    if row is None:
        raise NotFoundError("User", user_id)
    user, projects_count = row
    return UserProfile(
        id=user.id,
        name=user.name,
        email_digest=email_digest(user.email),
        created_at=user.created_at,
        projects_count=projects_count,
    )


async def list_users(db: AsyncSession) -> Sequence[User]:
    result = await db.execute(select(User).order_by(User.id))
    return result.scalars().all()


async def _ensure_email_free(
    db: AsyncSession, email: str, exclude_user_id: int | None = None,
) -> None:
    query = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise ConflictError(
            "Email already in use by another user.",
            ErrorContext(user_id=exclude_user_id),
        )


async def _flush_unique(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        if constraint_violation(e) != UNIQUE_VIOLATION:
            raise
        logger.warning("Concurrent duplicate email rejected")
        raise ConflictError("Email already in use by another user.") from e
