"""API v1 routes."""

from fastapi import APIRouter

from catalog.api.v1 import auth, entries, health, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(entries.router, prefix="/entries", tags=["entries"])
router.include_router(users.router, prefix="/users", tags=["users"])
