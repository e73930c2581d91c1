"""Authorization policy: roles, token identity and the post/admin checks."""
import enum
from dataclasses import dataclass
from uuid import UUID

from baanboard.core.errors import ForbiddenError, NotFoundError


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """Who is making the request, as asserted by a verified token."""
    id: UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def can_mutate_post(identity: Identity, post) -> bool:
    return post.owner_id == identity.id or identity.is_admin


def can_create_admin(identity: Identity) -> bool:
    return identity.is_admin


def ensure_can_mutate_post(identity: Identity, post) -> None:
    # Existence first: a missing post is 404 even for admins.
    if post is None:
        raise NotFoundError()
    if not can_mutate_post(identity, post):
        raise ForbiddenError()
