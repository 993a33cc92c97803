from __future__ import annotations

from fastapi import APIRouter

from .handlers.record_handler import router as record_router
from .handlers.setting_handler import router as settings_router


api_router = APIRouter()
api_router.include_router(record_router, prefix="/api", tags=["record"])
api_router.include_router(settings_router, prefix="/api", tags=["settings"])
