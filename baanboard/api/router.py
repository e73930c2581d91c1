"""API router aggregation."""
from fastapi import APIRouter

from baanboard.api.endpoints import admin, auth, posts, profile

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(profile.router)
api_router.include_router(posts.router)
api_router.include_router(admin.router)
