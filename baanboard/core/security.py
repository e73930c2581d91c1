"""Security utilities: password hashing and JWT token handling."""
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from baanboard.core.config import settings
from baanboard.core.errors import InvalidTokenError
from baanboard.core.permissions import Identity, Role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user) -> str:
    """Sign an access token carrying the user's id, role and public profile fields."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user.id),
        "role": user.role,
        "fullname": user.fullname,
        "email": user.email,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        return None


def verify_token(token: str) -> Identity:
    payload = decode_token(token)
    if not payload or payload.get("type") != "access":
        raise InvalidTokenError()
    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or role not in (Role.USER.value, Role.ADMIN.value):
        raise InvalidTokenError()
    try:
        user_id = UUID(sub)
    except ValueError:
        raise InvalidTokenError() from None
    return Identity(id=user_id, role=Role(role))
