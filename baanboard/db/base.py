"""SQLAlchemy declarative base and model imports for Alembic."""
from baanboard.db.session import Base  # noqa: F401
from baanboard.models.user import User  # noqa: F401
from baanboard.models.post import Post  # noqa: F401

__all__ = ["Base", "User", "Post"]
