"""Operation API — launch a generation, then poll it by operation id."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from mediagen.api.deps import (
    get_app_settings,
    get_auth_context,
    get_auth_holder,
    get_vertex_client,
)
from mediagen.config import Settings
from mediagen.schemas.operation import (
    LaunchRequest,
    LaunchResponse,
    PollRequest,
    PollResponse,
)
from mediagen.services.credentials import AuthContext, AuthContextHolder
from mediagen.services.operations import (
    poll_operation,
    start_operation,
    validate_generation_request,
)
from mediagen.services.vertex_client import VertexClient

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=LaunchResponse)
async def launch_operation(
    req: LaunchRequest,
    holder: AuthContextHolder = Depends(get_auth_holder),
    client: VertexClient = Depends(get_vertex_client),
    settings: Settings = Depends(get_app_settings),
):
    """Start an image or video generation; returns immediately with its id."""
    request = req.to_domain()
    # a bad prompt is reported as such even before credentials exist
    validate_generation_request(request, settings)
    context = holder.current()
    handle = await start_operation(request, context, client=client, settings=settings)
    return LaunchResponse.from_handle(handle)


@router.post("/status", response_model=PollResponse, response_model_exclude_none=True)
async def get_operation_status_by_body(
    req: PollRequest,
    context: AuthContext = Depends(get_auth_context),
    client: VertexClient = Depends(get_vertex_client),
    settings: Settings = Depends(get_app_settings),
):
    """Poll an operation whose id is sent in the request body."""
    return await _poll(req.operation_id, context, client, settings)


@router.get("/{operation_id:path}", response_model=PollResponse, response_model_exclude_none=True)
async def get_operation_status(
    operation_id: str,
    context: AuthContext = Depends(get_auth_context),
    client: VertexClient = Depends(get_vertex_client),
    settings: Settings = Depends(get_app_settings),
):
    """Poll an operation; the id may contain slashes and is used verbatim."""
    return await _poll(operation_id, context, client, settings)


async def _poll(
    operation_id: str,
    context: AuthContext,
    client: VertexClient,
    settings: Settings,
) -> PollResponse:
    status = await poll_operation(operation_id, context, client=client)
    return PollResponse.from_status(status, settings.PUBLIC_STORAGE_BASE_URL)
