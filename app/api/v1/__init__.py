"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import analytics, auth, health, messages, products, users

admin_router = APIRouter()
admin_router.include_router(users.router, prefix="/users", tags=["admin: users"])
admin_router.include_router(products.router, prefix="/products", tags=["admin: listings"])
admin_router.include_router(messages.router, prefix="/messages", tags=["admin: messages"])
admin_router.include_router(analytics.router, prefix="/analytics", tags=["admin: analytics"])

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(admin_router, prefix="/admin")
