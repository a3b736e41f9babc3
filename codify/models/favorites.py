"""Favorite Edge ORMs — directed user→user and user→project favorites.

Invariants:
    - UserFavorite (user_id, fav_user_id) is unique and user_id <> fav_user_id
    - ProjectFavorite (user_id, project_id) is unique
    - Edges are directed: a row for A→B says nothing about B→A

Design Decisions:
    - Composite primary keys double as the uniqueness constraint that turns a
      lost add-race into an IntegrityError (translated to ConflictError)
    - Both edge kinds share this file: they are only ever read together by
      services/favorites.py
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from codify.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserFavorite(Base):
    """user_id has marked fav_user_id as a favorite."""
    __tablename__ = "users_favorites"
    __table_args__ = (
        CheckConstraint("user_id <> fav_user_id", name="ck_users_favorites_not_self"),
    )

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True,
    )
    fav_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )


class ProjectFavorite(Base):
    """user_id has marked project_id as a favorite."""
    __tablename__ = "projects_favorites"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True,
    )
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id"), primary_key=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
