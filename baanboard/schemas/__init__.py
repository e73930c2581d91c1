from baanboard.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserPublic,
    Token,
    LoginRequest,
)
from baanboard.schemas.post import PostCreate, PostUpdate, PostResponse, PostFeedItem
from baanboard.schemas.comment import CommentCreate, CommentResponse
from baanboard.schemas.profile import ProfileResponse
