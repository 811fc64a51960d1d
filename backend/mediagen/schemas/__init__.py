"""Pydantic v2 schemas package."""

from mediagen.schemas.auth import AuthenticateRequest, AuthenticateResponse
from mediagen.schemas.operation import (
    LaunchRequest,
    LaunchResponse,
    PollRequest,
    PollResponse,
)

__all__ = [
    "AuthenticateRequest",
    "AuthenticateResponse",
    "LaunchRequest",
    "LaunchResponse",
    "PollRequest",
    "PollResponse",
]
