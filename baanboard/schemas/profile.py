"""Self profile with the three post reference lists expanded."""
from pydantic import Field

from baanboard.schemas.post import PostFeedItem
from baanboard.schemas.user import UserResponse


class ProfileResponse(UserResponse):
    my_posts: list[PostFeedItem] = Field(default_factory=list, alias="myPosts")
    liked_posts: list[PostFeedItem] = Field(default_factory=list, alias="likedPosts")
    commented_posts: list[PostFeedItem] = Field(default_factory=list, alias="commentedPosts")
