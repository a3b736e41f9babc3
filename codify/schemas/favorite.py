"""Favorite Schemas — every favorite mutation names the acting user in the body."""

from pydantic import BaseModel, Field


class FavoriteRequest(BaseModel):
    user_id: int = Field(gt=0)
