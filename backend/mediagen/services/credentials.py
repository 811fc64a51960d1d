"""Credential provider — turns a service-account secret into an AuthContext.

Two entry points:
  authenticate(secret)     explicit secret (mapping, JSON text or base64 blob)
  authenticate_ambient()   application-default credentials of the host

The decoded key never touches the filesystem; google-auth receives it as an
in-memory mapping. An AuthContext is never mutated after creation, so a
request that read one keeps using it even if a newer one replaces it.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import google.auth
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from mediagen.config import Settings
from mediagen.errors import AuthInvalidError, AuthRejectedError, AuthRequiredError

logger = logging.getLogger(__name__)

SCOPES = ("https://www.googleapis.com/auth/cloud-platform",)

_REQUIRED_FIELDS = ("project_id", "client_email", "private_key")


@dataclass(frozen=True)
class AuthContext:
    """Authenticated handle bound to a resolved project and region."""

    project_id: str
    location: str
    credentials: Any = field(repr=False)
    _refresh_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, repr=False, compare=False,
    )


class AuthContextHolder:
    """Holds the currently active AuthContext.

    ``current()`` hands out the reference; ``replace()`` swaps it. Contexts
    are immutable, so a reader never observes a half-updated one.
    """

    def __init__(self, context: AuthContext | None = None) -> None:
        self._context = context
        self._lock = threading.Lock()

    def current(self) -> AuthContext:
        with self._lock:
            context = self._context
        if context is None:
            raise AuthRequiredError(
                "No credentials configured; call /api/auth with a service account first"
            )
        return context

    def replace(self, context: AuthContext) -> None:
        with self._lock:
            self._context = context
        logger.info("Active credentials switched to project=%s", context.project_id)

    @property
    def is_authenticated(self) -> bool:
        return self._context is not None


# ---------------------------------------------------------------------------
# Secret decoding
# ---------------------------------------------------------------------------

def decode_secret(secret: Any) -> dict[str, Any]:
    """Decode a service-account secret into its mapping form.

    Accepts a mapping, JSON text, or base64-encoded JSON (text or bytes).
    Raises AuthInvalidError when it does not look like a service-account key.
    """
    if isinstance(secret, Mapping):
        info = dict(secret)
    elif isinstance(secret, (str, bytes)):
        info = _parse_blob(secret)
    else:
        raise AuthInvalidError("Service account must be a JSON object or a base64 string")

    if info.get("type") != "service_account":
        raise AuthInvalidError("Credential is not a service account key")

    missing = [name for name in _REQUIRED_FIELDS if not info.get(name)]
    if missing:
        raise AuthInvalidError(
            f"Service account key is missing required fields: {', '.join(missing)}"
        )
    return info


def _parse_blob(blob: str | bytes) -> dict[str, Any]:
    raw = blob.decode("utf-8", errors="replace") if isinstance(blob, bytes) else blob
    raw = raw.strip()
    if not raw:
        raise AuthInvalidError("Service account secret is empty")

    if not raw.startswith("{"):
        # `base64 key.json` output is wrapped at 76 columns
        compact = "".join(raw.split())
        try:
            raw = base64.b64decode(compact, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise AuthInvalidError(f"Service account secret is not valid base64: {e}") from e

    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise AuthInvalidError(f"Service account secret is not valid JSON: {e}") from e
    if not isinstance(info, dict):
        raise AuthInvalidError("Service account secret must decode to a JSON object")
    return info


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

async def authenticate(secret: Any, settings: Settings) -> AuthContext:
    """Build an AuthContext from an explicit service-account secret.

    Raises:
        AuthInvalidError: the secret is malformed or incomplete.
        AuthRejectedError: Google refused to mint a token for it.
    """
    info = decode_secret(secret)
    try:
        credentials = service_account.Credentials.from_service_account_info(
            info, scopes=SCOPES,
        )
    except (ValueError, KeyError) as e:
        raise AuthInvalidError(f"Service account key could not be loaded: {e}") from e

    context = AuthContext(
        project_id=settings.GOOGLE_CLOUD_PROJECT or info["project_id"],
        location=settings.GOOGLE_CLOUD_LOCATION,
        credentials=credentials,
    )
    await access_token(context)
    logger.info(
        "Authenticated service account %s for project=%s",
        info["client_email"], context.project_id,
    )
    return context


async def authenticate_ambient(settings: Settings) -> AuthContext:
    """Build an AuthContext from application-default credentials."""
    try:
        credentials, default_project = google.auth.default(scopes=list(SCOPES))
    except google_auth_exceptions.DefaultCredentialsError as e:
        raise AuthInvalidError(f"No application default credentials: {e}") from e

    project_id = settings.GOOGLE_CLOUD_PROJECT or default_project
    if not project_id:
        raise AuthInvalidError(
            "Could not resolve a project id; set GOOGLE_CLOUD_PROJECT"
        )

    context = AuthContext(
        project_id=project_id,
        location=settings.GOOGLE_CLOUD_LOCATION,
        credentials=credentials,
    )
    await access_token(context)
    logger.info("Authenticated with ambient credentials for project=%s", project_id)
    return context


async def access_token(context: AuthContext) -> str:
    """Return a bearer token for one outbound call, refreshing if needed."""
    credentials = context.credentials
    async with context._refresh_lock:
        if not credentials.valid:
            try:
                await asyncio.to_thread(credentials.refresh, Request())
            except google_auth_exceptions.RefreshError as e:
                raise AuthRejectedError(f"Credentials rejected: {e}") from e
            except google_auth_exceptions.TransportError as e:
                raise AuthRejectedError(f"Could not reach the token endpoint: {e}") from e
        token = credentials.token
    if not token:
        raise AuthRejectedError("Identity provider returned no access token")
    return token
