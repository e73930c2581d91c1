from baanboard.models.user import User
from baanboard.models.post import Post

__all__ = ["User", "Post"]
