"""Vertex AI REST transport for long-running generation operations.

Two calls, both single-shot (no retry, no polling loop):
  POST .../publishers/google/models/{model}:{launch_method}  → operation
  GET  {base}/{operation_name}                               → operation state

The operation name returned by the vendor is appended to the base URL as-is.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mediagen.config import Settings
from mediagen.services.credentials import AuthContext, access_token

logger = logging.getLogger(__name__)


class VendorError(Exception):
    """Failure talking to Vertex AI, with the vendor's own message."""

    def __init__(self, message: str, *, status_code: int | None = None, timed_out: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.timed_out = timed_out


def _vendor_message(response: httpx.Response) -> str:
    """Pull ``error.message`` out of a Google API error body, else raw text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return response.text or f"HTTP {response.status_code}"


class VertexClient:
    """Thin async client over one shared ``httpx.AsyncClient``."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._http = http_client or httpx.AsyncClient(timeout=settings.VENDOR_TIMEOUT)
        self._own_client = http_client is None

    async def aclose(self) -> None:
        if self._own_client:
            await self._http.aclose()

    def model_url(self, context: AuthContext, model: str) -> str:
        return (
            f"{self.settings.vertex_base_url}/projects/{context.project_id}"
            f"/locations/{context.location}/publishers/google/models/{model}"
            f":{self.settings.VERTEX_LAUNCH_METHOD}"
        )

    def operation_url(self, operation_id: str) -> str:
        return f"{self.settings.vertex_base_url}/{operation_id}"

    async def start(self, context: AuthContext, model: str, body: dict[str, Any]) -> dict[str, Any]:
        """Submit a generation request; returns the raw operation JSON."""
        url = self.model_url(context, model)
        return await self._request(context, "POST", url, json=body)

    async def get_operation(self, context: AuthContext, operation_id: str) -> dict[str, Any]:
        """Fetch the current state of an operation; returns the raw JSON."""
        return await self._request(context, "GET", self.operation_url(operation_id))

    async def _request(
        self,
        context: AuthContext,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        token = await access_token(context)
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._http.request(
                method, url, headers=headers, json=json,
                timeout=self.settings.VENDOR_TIMEOUT,
            )
        except httpx.TimeoutException as e:
            logger.warning("Vertex %s %s timed out after %ss", method, url, self.settings.VENDOR_TIMEOUT)
            raise VendorError(
                f"Vertex AI call timed out after {self.settings.VENDOR_TIMEOUT}s",
                timed_out=True,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Vertex %s %s transport error: %s", method, url, e)
            raise VendorError(f"Vertex AI transport error: {e}") from e

        if response.is_error:
            message = _vendor_message(response)
            logger.error("Vertex %s %s → HTTP %d: %s", method, url, response.status_code, message)
            raise VendorError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise VendorError(
                f"Vertex AI returned a non-JSON body (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise VendorError("Vertex AI returned an unexpected JSON body", status_code=response.status_code)
        return data
