"""FastAPI dependencies — pull per-app collaborators off ``app.state``."""

from __future__ import annotations

from fastapi import Request

from mediagen.config import Settings
from mediagen.services.credentials import AuthContext, AuthContextHolder
from mediagen.services.vertex_client import VertexClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_holder(request: Request) -> AuthContextHolder:
    return request.app.state.auth


def get_auth_context(request: Request) -> AuthContext:
    """Snapshot of the active credentials for the duration of one request."""
    return request.app.state.auth.current()


def get_vertex_client(request: Request) -> VertexClient:
    return request.app.state.vertex
