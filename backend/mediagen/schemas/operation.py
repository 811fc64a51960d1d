"""Pydantic v2 schemas for launching and polling generation operations.

Wire fields are camelCase (``mediaKind``, ``operationId``, ...).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from mediagen.services.operations import (
    GenerationRequest,
    MediaKind,
    OperationHandle,
    OperationState,
    OperationStatus,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LaunchRequest(_CamelModel):
    # Emptiness is checked by the launcher so it maps to VALIDATION_ERROR.
    prompt: str = ""
    media_kind: MediaKind = MediaKind.VIDEO

    def to_domain(self) -> GenerationRequest:
        return GenerationRequest(prompt=self.prompt, media_kind=self.media_kind)


class LaunchResponse(_CamelModel):
    operation_id: str
    started_at: datetime

    @classmethod
    def from_handle(cls, handle: OperationHandle) -> LaunchResponse:
        return cls(operation_id=handle.id, started_at=handle.started_at)


class PollRequest(_CamelModel):
    operation_id: str


class PollResponse(_CamelModel):
    status: OperationState
    artifact_uri: Optional[str] = None
    public_uri: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def from_status(cls, status: OperationStatus, public_base: str) -> PollResponse:
        return cls(
            status=status.state,
            artifact_uri=status.artifact_uri,
            public_uri=status.public_uri(public_base),
            reason=status.reason,
        )
