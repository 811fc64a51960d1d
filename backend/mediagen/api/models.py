"""Model API — which vendor model serves each media kind."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from mediagen.api.deps import get_app_settings
from mediagen.config import Settings
from mediagen.services.operations import MediaKind

router = APIRouter()


@router.get("")
async def list_models(settings: Settings = Depends(get_app_settings)) -> dict[str, Any]:
    """List the configured media-kind → model mapping."""
    return {
        "models": {kind.value: settings.model_for(kind) for kind in MediaKind},
        "location": settings.GOOGLE_CLOUD_LOCATION,
        "launch_method": settings.VERTEX_LAUNCH_METHOD,
    }
