"""ProjectTechnology ORM — many-to-many association between projects and technologies.

Invariants:
    - (project_id, technology_id) is the primary key: no duplicate pairs
    - Rows are only written by services/project_technologies.py (replace-all)
"""

from sqlalchemy import Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from codify.db.base import Base


class ProjectTechnology(Base):
    __tablename__ = "projects_technologies"

    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id"), primary_key=True,
    )
    technology_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("technologies.id"), primary_key=True,
    )
