from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from ringfit.lib.settings import load_settings


router = APIRouter()


@router.get("/settings", summary="Current server settings (secrets omitted)")
def get_settings(request: Request) -> Dict[str, Any]:
    pipeline = getattr(request.app.state, "pipeline", None)
    settings = pipeline.settings if pipeline is not None else load_settings()
    return settings.public()
