"""Join Aggregator — folds flat project ⟕ technology rows into nested projects.

Invariants:
    - One left-to-right scan; parents keep first-seen order
    - A row with technology_id None contributes the parent only (left-join miss)
    - A parent seen only with a null child ends up with technologies == []
    - A technology id is appended at most once per parent
    - Nested shapes never flow back into storage calls

Design Decisions:
    - ProjectTechnologyRow is the only shape the read queries produce; the same
      row serves project listings and favorite-project listings
    - email_digest lives here because listings publish it instead of the raw
      creator email (avatar lookup key)
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable


@dataclass(frozen=True)
class ProjectTechnologyRow:
    """One row of project ⋈ users ⟕ projects_technologies ⟕ technologies."""
    project_id: int
    project_name: str
    project_description: str | None
    project_created_at: datetime | None
    project_updated_at: datetime | None
    creator_id: int
    creator_name: str | None = None
    creator_email: str | None = None
    technology_id: int | None = None
    technology_name: str | None = None


@dataclass(frozen=True)
class TechnologyRef:
    id: int
    name: str | None


@dataclass
class ProjectView:
    """Nested project as returned by read operations."""
    id: int
    name: str
    description: str | None
    created_at: datetime | None
    updated_at: datetime | None
    creator_id: int
    creator_name: str | None = None
    creator_email_digest: str | None = None
    technologies: list[TechnologyRef] = field(default_factory=list)


def email_digest(email: str | None) -> str | None:
    """md5 hex digest of a normalized email, or None."""
    if email is None:
        return None
    return hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()


def fold_project_rows(rows: Iterable[ProjectTechnologyRow]) -> list[ProjectView]:
    """Group joined rows by project id, collecting non-null technologies."""
    projects: dict[int, ProjectView] = {}
    seen_children: dict[int, set[int]] = {}

    for row in rows:
        project = projects.get(row.project_id)
        if project is None:
            project = _project_from_row(row)
            projects[row.project_id] = project
            seen_children[row.project_id] = set()

        if row.technology_id is None:
            continue
        children = seen_children[row.project_id]
        if row.technology_id in children:
            continue
        children.add(row.technology_id)
        project.technologies.append(
            TechnologyRef(id=row.technology_id, name=row.technology_name),
        )

    return list(projects.values())


def _project_from_row(row: ProjectTechnologyRow) -> ProjectView:
    return ProjectView(
        id=row.project_id,
        name=row.project_name,
        description=row.project_description,
        created_at=row.project_created_at,
        updated_at=row.project_updated_at,
        creator_id=row.creator_id,
        creator_name=row.creator_name,
        creator_email_digest=email_digest(row.creator_email),
    )
