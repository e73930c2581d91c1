"""Auth endpoints: register, login."""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from baanboard.api.deps import get_db, parse_form
from baanboard.core.security import create_access_token
from baanboard.schemas.user import LoginRequest, RegisterResponse, Token, UserCreate
from baanboard.services.auth_service import authenticate_user, register_user, user_to_response

router = APIRouter(tags=["auth"])


def _log(msg: str, *args):
    print(f"[Auth] {msg}", *args)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    fullname: str | None = Form(None),
    email: str | None = Form(None),
    tel: str | None = Form(None),
    password: str | None = Form(None),
    profile_image: UploadFile | None = File(None, alias="profileImage"),
    db: AsyncSession = Depends(get_db),
):
    data = parse_form(UserCreate, fullname=fullname, email=email, tel=tel, password=password)
    _log("Register attempt:", data.email)
    user = await register_user(db, data, profile_image)
    _log("Register success:", user.id)
    return RegisterResponse(user=user_to_response(user))


@router.post("/login", response_model=Token)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    _log("Login attempt:", data.email)
    user = await authenticate_user(db, data.email, data.password)
    _log("Login success:", user.id)
    return Token(token=create_access_token(user), user=user_to_response(user))
