"""Pydantic schemas for Post."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from baanboard.schemas.comment import CommentResponse
from baanboard.schemas.user import UserPublic


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    tag: str = Field(..., min_length=1, max_length=50)


class PostUpdate(BaseModel):
    title: str | None = Field(None, max_length=255)
    content: str | None = None
    tag: str | None = Field(None, max_length=50)


class PostResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    content: str
    tag: str
    image: str | None = None
    owner: UserPublic | None = None
    likes: list[UUID] = []
    comments: list[CommentResponse] = []
    created_at: datetime


class PostFeedItem(PostResponse):
    like_count: int = Field(0, alias="likeCount")


class UserPostItem(PostFeedItem):
    comment_count: int = Field(0, alias="commentCount")


class LikeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    like_count: int = Field(..., alias="likeCount")


class MessageResponse(BaseModel):
    message: str
