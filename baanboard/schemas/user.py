"""Pydantic schemas for User."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from baanboard.core.permissions import Role


class UserCreate(BaseModel):
    fullname: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    tel: str = Field(..., min_length=1, max_length=30)
    password: str = Field(..., min_length=1)


class AdminUserCreate(UserCreate):
    role: Role = Role.ADMIN


class UserUpdate(BaseModel):
    # Empty values mean "leave unchanged", same as omitting the field.
    fullname: str | None = Field(None, max_length=100)
    tel: str | None = Field(None, max_length=30)
    password: str | None = None


class UserPublic(BaseModel):
    """Author block embedded in posts and comments."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    fullname: str
    role: str
    profile_image: str | None = Field(None, alias="profileImage")


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    fullname: str
    email: str
    tel: str
    role: str
    profile_image: str | None = Field(None, alias="profileImage")
    created_at: datetime | None = None


class RegisterResponse(BaseModel):
    message: str = "Registered successfully"
    user: UserResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    token: str
    user: UserResponse
