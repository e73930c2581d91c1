"""Pydantic schemas for Comment."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from baanboard.schemas.user import UserPublic


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    id: UUID
    text: str
    owner: UserPublic | None = None
    created_at: datetime
