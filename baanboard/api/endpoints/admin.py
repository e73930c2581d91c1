"""Admin-only account management."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from baanboard.api.deps import get_current_admin, get_db
from baanboard.core.permissions import Identity
from baanboard.schemas.user import AdminUserCreate, UserResponse
from baanboard.services.auth_service import register_user, user_to_response

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    data: AdminUserCreate,
    admin: Identity = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create an account with an explicit role. The only path that can mint another admin."""
    user = await register_user(db, data, role=data.role)
    print(f"[Auth] Admin {admin.id} created {data.role.value} account {user.id}")
    return user_to_response(user)
