"""Project Schemas — create/edit payloads and nested project responses.

Invariants:
    - user_id is the subject the requester claims to act as
    - technologies is a list of catalog ids; duplicates are tolerated here and
      dropped by the reconciler
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from codify.core.fold_joined_rows import ProjectView


class ProjectWrite(BaseModel):
    """Create and edit share one payload shape."""
    user_id: int = Field(gt=0)
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=5000)
    technologies: list[int] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ProjectDelete(BaseModel):
    user_id: int = Field(gt=0)


class TechnologyOut(BaseModel):
    id: int
    name: str | None


class ProjectOut(BaseModel):
    id: int
    name: str
    description: str | None
    created_at: datetime | None
    updated_at: datetime | None
    creator_id: int
    creator_name: str | None = None
    creator_email_digest: str | None = None
    technologies: list[TechnologyOut]

    @classmethod
    def from_view(cls, view: ProjectView) -> "ProjectOut":
        return cls(
            id=view.id,
            name=view.name,
            description=view.description,
            created_at=view.created_at,
            updated_at=view.updated_at,
            creator_id=view.creator_id,
            creator_name=view.creator_name,
            creator_email_digest=view.creator_email_digest,
            technologies=[
                TechnologyOut(id=t.id, name=t.name) for t in view.technologies
            ],
        )
