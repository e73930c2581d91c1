"""API dependencies: auth, db session, form parsing."""
from typing import TypeVar

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from baanboard.core.errors import ForbiddenError, UnauthenticatedError, ValidationError, describe_validation_errors
from baanboard.core.permissions import Identity, can_create_admin
from baanboard.core.security import verify_token
from baanboard.db.session import get_db
from baanboard.models.user import User
from baanboard.services.auth_service import get_user

security = HTTPBearer(auto_error=False)

ModelT = TypeVar("ModelT", bound=BaseModel)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    if not credentials:
        raise UnauthenticatedError()
    return verify_token(credentials.credentials)


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    return await get_user(db, identity.id)


async def get_current_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    if not can_create_admin(identity):
        raise ForbiddenError()
    return identity


def parse_form(model: type[ModelT], **fields) -> ModelT:
    """Build a schema from multipart form fields; missing fields are simply left out."""
    try:
        return model(**{k: v for k, v in fields.items() if v is not None})
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_errors(e.errors())) from None
