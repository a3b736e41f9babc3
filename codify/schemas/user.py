"""User Schemas — signup and edit payloads, profile responses."""

from datetime import datetime

from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    """Signup payload; the upstream auth layer has already hashed the password."""
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    name: str = Field(min_length=1, max_length=100)
    password_hash: str = Field(min_length=1, max_length=255)


class UserEdit(BaseModel):
    """Password hashing happens upstream; only the resulting hash arrives here."""
    user_id: int = Field(gt=0)
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    password_hash: str | None = Field(None, min_length=1, max_length=255)


class UserDelete(BaseModel):
    user_id: int = Field(gt=0)


class UserSummary(BaseModel):
    id: int
    name: str


class UserProfileOut(BaseModel):
    id: int
    name: str
    email_digest: str | None
    created_at: datetime
    projects_count: int
