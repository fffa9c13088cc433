"""
Decoding of SharePoint context tokens.

SharePoint posts a signed context token (``SPAppToken``) to the app when a
user launches it. The token carries a refresh token and the address of the
security token service that exchanges it for an access token.

The signature is NOT verified here. Any well-formed token with the expected
claims is accepted, so callers that need to authenticate the launching user
must verify the token before handing it over.
"""

from __future__ import annotations

import json
from typing import Any

import jwt
from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from sharepoint_oauth.core.exceptions import DecodeError

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


class ApplicationContext(BaseModel):
    """The ``appctx`` claim, itself a JSON document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    cache_key: str | None = Field(None, alias="CacheKey")
    security_token_service_uri: str = Field(..., alias="SecurityTokenServiceUri")

    @field_validator("security_token_service_uri")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError as exc:
            raise ValueError(f"Invalid security token service URL: {value!r}") from exc
        return value


class ContextTokenClaims(BaseModel):
    """Claims of a SharePoint context token used by the user-delegated flow."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    audience: str = Field(..., alias="aud", min_length=1)
    refresh_token: str = Field(..., alias="refreshtoken", min_length=1)
    app_context_sender: str = Field(..., alias="appctxsender", min_length=1)
    app_context: ApplicationContext = Field(..., alias="appctx")

    @field_validator("app_context", mode="before")
    @classmethod
    def _parse_app_context(cls, value: Any) -> Any:
        if isinstance(value, str):
            return json.loads(value)
        return value

    def resource_for(self, host: str) -> str:
        """Splice ``host`` into the sender id: ``{id}@{realm}`` -> ``{id}/{host}@{realm}``."""
        return self.app_context_sender.replace("@", f"/{host}@")


def decode_context_token(context_token: str, secret: str) -> ContextTokenClaims:
    """Decode ``context_token`` without verifying its signature."""
    try:
        payload = jwt.decode(
            context_token,
            secret,
            algorithms=["HS256"],
            options={"verify_signature": False},
        )
    except jwt.PyJWTError as exc:
        raise DecodeError("Unable to decode the Context Token") from exc

    try:
        return ContextTokenClaims.model_validate(payload)
    except (ValidationError, ValueError) as exc:
        raise DecodeError("The Context Token is missing required claims") from exc


__all__ = ["ApplicationContext", "ContextTokenClaims", "decode_context_token"]
