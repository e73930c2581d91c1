"""Credential store: registration, login and profile updates."""
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from baanboard.core.errors import DuplicateEmailError, InvalidCredentialError, NotFoundError, UnknownAccountError
from baanboard.core.permissions import Role
from baanboard.core.security import get_password_hash, verify_password
from baanboard.models.user import User
from baanboard.schemas.user import UserCreate, UserResponse, UserUpdate
from baanboard.services.storage_service import save_image
from baanboard.workers.media import schedule_media_deletion


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def register_user(
    db: AsyncSession,
    data: UserCreate,
    profile_image_file: UploadFile | None = None,
    role: Role = Role.USER,
) -> User:
    if await get_user_by_email(db, data.email):
        raise DuplicateEmailError()
    user = User(
        fullname=data.fullname,
        email=data.email,
        tel=data.tel,
        password_hash=get_password_hash(data.password),
        role=role.value,
        my_posts=[],
        liked_posts=[],
        commented_posts=[],
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email.
        await db.rollback()
        raise DuplicateEmailError() from None
    user.profile_image = await save_image(profile_image_file, user.id, "avatars")
    await db.flush()
    await db.refresh(user)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if user is None:
        raise UnknownAccountError()
    if not verify_password(password, user.password_hash):
        raise InvalidCredentialError()
    return user


async def update_profile(
    db: AsyncSession,
    user_id: UUID,
    data: UserUpdate,
    profile_image_file: UploadFile | None = None,
) -> User:
    """Apply only the fields that carry a value; everything else is left as is."""
    user = await get_user(db, user_id)
    profile_image = await save_image(profile_image_file, user.id, "avatars")
    if data.fullname:
        user.fullname = data.fullname
    if data.tel:
        user.tel = data.tel
    if data.password:
        user.password_hash = get_password_hash(data.password)
    replaced = None
    if profile_image:
        replaced, user.profile_image = user.profile_image, profile_image
    await db.commit()
    schedule_media_deletion(replaced)
    await db.refresh(user)
    return user


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        fullname=user.fullname,
        email=user.email,
        tel=user.tel,
        role=user.role,
        profile_image=user.profile_image,
        created_at=user.created_at,
    )
