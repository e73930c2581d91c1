"""Self profile: view with expanded post lists, partial update."""
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from baanboard.api.deps import get_current_user, get_db, parse_form
from baanboard.models.user import User
from baanboard.schemas.profile import ProfileResponse
from baanboard.schemas.user import UserResponse, UserUpdate
from baanboard.services.auth_service import update_profile, user_to_response
from baanboard.services.post_service import get_posts_by_ids, posts_to_response

router = APIRouter(tags=["profile"])


@router.get("/my-profile", response_model=ProfileResponse)
async def my_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    lists = {
        "my_posts": current_user.my_posts or [],
        "liked_posts": current_user.liked_posts or [],
        "commented_posts": current_user.commented_posts or [],
    }
    posts = await get_posts_by_ids(db, [p for ids in lists.values() for p in ids])
    rendered = {str(r.id): r for r in await posts_to_response(db, list(posts.values()))}
    # Keep stored order and skip references to posts that no longer exist.
    expanded = {name: [rendered[p] for p in ids if p in rendered] for name, ids in lists.items()}
    return ProfileResponse(**user_to_response(current_user).model_dump(), **expanded)


@router.put("/profile", response_model=UserResponse)
async def edit_profile(
    fullname: str | None = Form(None),
    tel: str | None = Form(None),
    password: str | None = Form(None),
    profile_image: UploadFile | None = File(None, alias="profileImage"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    data = parse_form(UserUpdate, fullname=fullname, tel=tel, password=password)
    user = await update_profile(db, current_user.id, data, profile_image)
    return user_to_response(user)
