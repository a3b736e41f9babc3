"""ORM Models — SQLAlchemy declarative models for the portfolio schema.

Invariants:
    - All models inherit from Base (db/base.py)
    - Foreign keys carry no ON DELETE cascade: deletion order is orchestrated
      by services/cascade_delete.py and services/projects.py
    - Association and favorite tables use composite primary keys (set semantics)

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from codify.models.user import User  # noqa: F401
from codify.models.technology import Technology  # noqa: F401
from codify.models.project import Project  # noqa: F401
from codify.models.project_technology import ProjectTechnology  # noqa: F401
from codify.models.favorites import UserFavorite, ProjectFavorite  # noqa: F401
