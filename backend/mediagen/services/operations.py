"""Generation operation lifecycle: launch, poll, translate.

Nothing about an operation is stored here. The caller keeps the operation id
and presents it on every poll; each poll is one fresh vendor query, so any
process can answer it.

Translation of a vendor operation, in order:
  1. not done                          → PROCESSING
  2. done, error payload               → FAILED(vendor message)
  3. done, artifact in first candidate → COMPLETED(artifact uri)
  4. done, nothing usable              → FAILED(ARTIFACT_MISSING_REASON)
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from mediagen.config import Settings
from mediagen.errors import InvalidRequestError, LaunchError, PollError
from mediagen.services.artifacts import DEFAULT_PUBLIC_BASE, to_public_uri
from mediagen.services.credentials import AuthContext
from mediagen.services.vertex_client import VendorError, VertexClient

logger = logging.getLogger(__name__)

ARTIFACT_MISSING_REASON = "artifact location missing from terminal response"


class MediaKind(str, enum.Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class OperationState(str, enum.Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    media_kind: MediaKind


@dataclass(frozen=True)
class OperationHandle:
    """Vendor-assigned operation id plus the local launch time."""

    id: str
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class OperationStatus:
    """One observation of an operation. Exactly one state holds."""

    state: OperationState
    artifact_uri: str | None = None
    reason: str | None = None

    @classmethod
    def processing(cls) -> OperationStatus:
        return cls(OperationState.PROCESSING)

    @classmethod
    def completed(cls, artifact_uri: str) -> OperationStatus:
        return cls(OperationState.COMPLETED, artifact_uri=artifact_uri)

    @classmethod
    def failed(cls, reason: str) -> OperationStatus:
        return cls(OperationState.FAILED, reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.state is not OperationState.PROCESSING

    def public_uri(self, public_base: str = DEFAULT_PUBLIC_BASE) -> str | None:
        if self.artifact_uri is None:
            return None
        return to_public_uri(self.artifact_uri, public_base)


# ---------------------------------------------------------------------------
# Launch
# ---------------------------------------------------------------------------

def build_generation_body(request: GenerationRequest, settings: Settings) -> dict[str, Any]:
    """Vendor request body for a single text-to-media generation."""
    body: dict[str, Any] = {
        "contents": [
            {"role": "user", "parts": [{"text": request.prompt}]},
        ],
        "generationConfig": {
            "responseModalities": [request.media_kind.value],
        },
    }
    if settings.OUTPUT_STORAGE_URI:
        body["outputStorageUri"] = settings.OUTPUT_STORAGE_URI
    return body


def validate_generation_request(request: GenerationRequest, settings: Settings) -> str:
    """Check a request before any credential or vendor work; returns the model id."""
    if not request.prompt or not request.prompt.strip():
        raise InvalidRequestError("prompt must not be empty")
    try:
        return settings.model_for(request.media_kind)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e


async def start_operation(
    request: GenerationRequest,
    context: AuthContext,
    *,
    client: VertexClient,
    settings: Settings,
) -> OperationHandle:
    """Start a generation and return its handle without waiting for it.

    Raises:
        InvalidRequestError: empty prompt (no vendor call is made).
        LaunchError: the vendor rejected or failed the submission.
    """
    model = validate_generation_request(request, settings)

    body = build_generation_body(request, settings)
    logger.info(
        "Launching %s generation model=%s project=%s",
        request.media_kind.value, model, context.project_id,
    )

    try:
        result = await client.start(context, model, body)
    except VendorError as e:
        raise LaunchError(e.message, vendor_status=e.status_code) from e

    operation_name = result.get("name")
    if not isinstance(operation_name, str) or not operation_name:
        raise LaunchError(f"Vertex AI returned no operation name: {result}")

    handle = OperationHandle(id=operation_name)
    logger.info("Operation started: %s", handle.id)
    return handle


# ---------------------------------------------------------------------------
# Poll + translate
# ---------------------------------------------------------------------------

async def poll_operation(
    operation_id: str,
    context: AuthContext,
    *,
    client: VertexClient,
) -> OperationStatus:
    """Query the vendor once and translate the operation state.

    Raises:
        InvalidRequestError: empty operation id.
        PollError: the status query failed or timed out.
    """
    if not operation_id or not operation_id.strip():
        raise InvalidRequestError("operationId must not be empty")

    try:
        payload = await client.get_operation(context, operation_id)
    except VendorError as e:
        raise PollError(e.message, vendor_status=e.status_code) from e

    status = translate_operation(payload)
    if status.is_terminal:
        logger.info("Operation %s finished: %s", operation_id, status.state.value)
    else:
        logger.debug("Operation %s still processing", operation_id)
    return status


def translate_operation(payload: dict[str, Any]) -> OperationStatus:
    """Map a raw vendor operation onto PROCESSING / COMPLETED / FAILED."""
    if not payload.get("done"):
        return OperationStatus.processing()

    error = payload.get("error")
    if error:
        return OperationStatus.failed(_error_reason(error))

    artifact_uri = find_artifact_uri(payload.get("response"))
    if artifact_uri:
        return OperationStatus.completed(artifact_uri)

    logger.warning("Operation %s done without a locatable artifact", payload.get("name"))
    return OperationStatus.failed(ARTIFACT_MISSING_REASON)


def _error_reason(error: Any) -> str:
    if isinstance(error, dict):
        if error.get("message"):
            return str(error["message"])
        return f"operation failed with code {error.get('code', 'unknown')}"
    return str(error)


def find_artifact_uri(response: Any) -> str | None:
    """Artifact URI from the first candidate's content parts, or None."""
    if not isinstance(response, dict):
        return None
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    if not isinstance(first, dict):
        return None
    parts = (first.get("content") or {}).get("parts")
    if not isinstance(parts, list):
        return None

    for part in parts:
        if isinstance(part, dict):
            uri = _artifact_from_part(part)
            if uri:
                return uri
    return None


def _artifact_from_part(part: dict[str, Any]) -> str | None:
    # Descriptor shapes seen from the vendor, checked in this order.
    candidates = (
        _nested(part, "fileData", "fileUri"),
        _nested(part, "file_data", "file_uri"),
        _video_uri(part.get("video")),
        part.get("fileUrl"),
    )
    for value in candidates:
        if isinstance(value, str) and value:
            return value
    return None


def _nested(part: dict[str, Any], outer: str, inner: str) -> Any:
    value = part.get(outer)
    if isinstance(value, dict):
        return value.get(inner)
    return None


def _video_uri(video: Any) -> Any:
    if isinstance(video, dict):
        return video.get("uri") or video.get("gcsUri")
    return video
