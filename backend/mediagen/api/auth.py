"""Credential API — establish the service account used for vendor calls."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from mediagen.api.deps import get_app_settings, get_auth_holder
from mediagen.config import Settings
from mediagen.schemas.auth import AuthenticateRequest, AuthenticateResponse
from mediagen.services.credentials import AuthContextHolder, authenticate

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=AuthenticateResponse)
async def authenticate_service_account(
    req: AuthenticateRequest,
    holder: AuthContextHolder = Depends(get_auth_holder),
    settings: Settings = Depends(get_app_settings),
):
    """Validate a service-account key and make it the active credentials."""
    context = await authenticate(req.service_account, settings)
    holder.replace(context)
    return AuthenticateResponse(project_id=context.project_id)
