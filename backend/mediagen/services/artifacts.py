"""Artifact locator — maps vendor storage URIs to web-serving URLs and back.

Only the string transform lives here. Whether the object is actually readable
at the public URL depends on the bucket's access control.
"""

from __future__ import annotations

INTERNAL_SCHEME = "gs://"
DEFAULT_PUBLIC_BASE = "https://storage.googleapis.com"


def _public_prefix(public_base: str) -> str:
    return public_base.rstrip("/") + "/"


def to_public_uri(internal_uri: str, public_base: str = DEFAULT_PUBLIC_BASE) -> str:
    """Rewrite ``gs://bucket/key`` to ``<public_base>/bucket/key``.

    Anything without the ``gs://`` prefix (including empty or non-string
    input) is returned unchanged. The mapping is therefore injective only on
    ``gs://`` input: ``gs://b/x`` and ``<public_base>/b/x`` map to the same
    string.
    """
    if not isinstance(internal_uri, str) or not internal_uri.startswith(INTERNAL_SCHEME):
        return internal_uri
    return _public_prefix(public_base) + internal_uri[len(INTERNAL_SCHEME):]


def to_internal_uri(public_uri: str, public_base: str = DEFAULT_PUBLIC_BASE) -> str:
    """Inverse of :func:`to_public_uri`."""
    prefix = _public_prefix(public_base)
    if not isinstance(public_uri, str) or not public_uri.startswith(prefix):
        return public_uri
    return INTERNAL_SCHEME + public_uri[len(prefix):]
