from __future__ import annotations

from fastapi import APIRouter

from timesheets.web.routes.admin import router as admin_router
from timesheets.web.routes.auth import router as auth_router
from timesheets.web.routes.pages import router as pages_router
from timesheets.web.routes.phases import router as phases_router
from timesheets.web.routes.timesheets import router as timesheets_router

router = APIRouter()
router.include_router(pages_router)
router.include_router(auth_router)
router.include_router(timesheets_router)
router.include_router(phases_router)
router.include_router(admin_router)
