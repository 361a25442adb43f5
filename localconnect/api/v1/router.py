from fastapi import APIRouter

from localconnect.api.v1.admin import router as admin_router
from localconnect.api.v1.auth import router as auth_router
from localconnect.api.v1.events import router as events_router
from localconnect.api.v1.me import router as me_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(me_router)
router.include_router(events_router)
router.include_router(admin_router)
