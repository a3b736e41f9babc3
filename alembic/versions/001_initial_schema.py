"""Initial schema — users, technologies, projects, associations, favorites.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

Foreign keys are plain (no ON DELETE CASCADE): user and project deletion
order is orchestrated by the service layer. Composite primary keys on the
association and favorite tables enforce set semantics.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_TECHNOLOGIES = [
    "HTML", "CSS", "JavaScript", "TypeScript", "Python", "PHP", "Java",
    "C#", "Go", "Rust", "SQL", "React", "Vue", "Angular", "Node.js",
]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    technologies = op.create_table(
        "technologies",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("creator_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_projects_creator_id", "projects", ["creator_id"])

    op.create_table(
        "projects_technologies",
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id"), primary_key=True),
        sa.Column("technology_id", sa.Integer, sa.ForeignKey("technologies.id"), primary_key=True),
    )

    op.create_table(
        "users_favorites",
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("fav_user_id", sa.Integer, sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("user_id <> fav_user_id", name="ck_users_favorites_not_self"),
    )
    op.create_index("ix_users_favorites_fav_user_id", "users_favorites", ["fav_user_id"])

    op.create_table(
        "projects_favorites",
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_projects_favorites_project_id", "projects_favorites", ["project_id"])

    op.bulk_insert(technologies, [{"name": name} for name in _TECHNOLOGIES])


def downgrade() -> None:
    op.drop_table("projects_favorites")
    op.drop_table("users_favorites")
    op.drop_table("projects_technologies")
    op.drop_table("projects")
    op.drop_table("technologies")
    op.drop_table("users")
