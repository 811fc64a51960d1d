"""Pydantic v2 schemas for the credential endpoint."""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AuthenticateRequest(BaseModel):
    """Service-account key as a JSON object or a base64 string."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    service_account: Union[dict[str, Any], str]


class AuthenticateResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str = "authenticated"
    project_id: str
