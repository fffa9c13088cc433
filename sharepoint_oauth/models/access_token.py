"""
SharePoint access token entity.

The token endpoint answers with ``access_token`` and an ``expires_on`` unix
epoch. Only the bearer string and the expiry are kept; that pair is also the
whole persisted form.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from sharepoint_oauth.core.exceptions import DecodeError, ProtocolError
from sharepoint_oauth.models.hydration import HydratedEntity, PropertyMap
from sharepoint_oauth.utils.time import from_timestamp, to_timestamp, utcnow


class StoredAccessToken(BaseModel):
    """Persisted representation of an access token."""

    token: str = Field(..., min_length=1)
    expires: int = Field(..., description="Expiry as a unix epoch in seconds.")


class AccessToken(HydratedEntity):
    """Bearer credential with a server-issued expiry."""

    property_map = {
        "token": "access_token",
        "expires": "expires_on",
    }

    token: Optional[str]
    expires: Optional[datetime]

    def __init__(self, json_data: Mapping[str, Any], extra: Optional[PropertyMap] = None) -> None:
        super().__init__(extra)
        self.hydrate(json_data)

    def _after_hydrate(self) -> None:
        if not self.token:
            raise ProtocolError("The access token value is empty")
        if isinstance(self.expires, datetime):
            return
        try:
            expires = from_timestamp(int(self.expires))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError, OSError) as exc:
            raise ProtocolError(
                f"Invalid access token expiry value: {self.expires!r}"
            ) from exc
        self.expires = expires

    def has_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True once ``now`` reaches the expiry instant."""
        return (now or utcnow()) >= self.expire_date()

    def expire_date(self) -> datetime:
        if not isinstance(self.expires, datetime):
            raise ProtocolError("The access token has no expiry")
        return self.expires

    def to_stored(self) -> StoredAccessToken:
        if not self.token:
            raise ProtocolError("The access token value is empty")
        return StoredAccessToken(token=self.token, expires=to_timestamp(self.expire_date()))

    @classmethod
    def from_stored(cls, stored: StoredAccessToken) -> "AccessToken":
        return cls({"access_token": stored.token, "expires_on": stored.expires})

    def serialize(self) -> str:
        """Serialize to ``[token, epoch]``."""
        stored = self.to_stored()
        return json.dumps([stored.token, stored.expires])

    @classmethod
    def deserialize(cls, serialized: str) -> "AccessToken":
        try:
            token, expires = json.loads(serialized)
            stored = StoredAccessToken(token=token, expires=expires)
        except (TypeError, ValueError, ValidationError) as exc:
            raise DecodeError("Unable to restore the serialized access token") from exc
        try:
            return cls.from_stored(stored)
        except ProtocolError as exc:
            raise DecodeError("Unable to restore the serialized access token") from exc

    def __str__(self) -> str:
        return self.token or ""

    def __repr__(self) -> str:
        return f"AccessToken(expires={self.expires!r})"


__all__ = ["AccessToken", "StoredAccessToken"]
