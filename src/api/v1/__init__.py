"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.admin import router as admin_router
from api.v1.routes.notifications import router as notifications_router
from api.v1.routes.realtime import router as realtime_router

router = APIRouter()
router.include_router(notifications_router)
router.include_router(admin_router)
router.include_router(realtime_router)
