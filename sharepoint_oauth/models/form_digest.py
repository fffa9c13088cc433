"""SharePoint form digest entity (``X-RequestDigest`` header value)."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

from sharepoint_oauth.core.exceptions import ProtocolError
from sharepoint_oauth.models.hydration import HydratedEntity, PropertyMap
from sharepoint_oauth.utils.time import utcnow


class FormDigest(HydratedEntity):
    """Short-lived anti-forgery token required by state-mutating calls.

    ``_api/contextinfo`` reports a lifetime in seconds; it is turned into an
    absolute expiry against ``acquired_at`` once, when the digest is built.
    """

    property_map = {
        "digest": "d.GetContextWebInformation.FormDigestValue",
        "expires": "d.GetContextWebInformation.FormDigestTimeoutSeconds",
    }

    digest: Optional[str]
    expires: Optional[datetime]

    def __init__(
        self,
        json_data: Mapping[str, Any],
        extra: Optional[PropertyMap] = None,
        *,
        acquired_at: Optional[datetime] = None,
    ) -> None:
        super().__init__(extra)
        self.acquired_at = acquired_at or utcnow()
        self.hydrate(json_data)

    def _after_hydrate(self) -> None:
        if not self.digest:
            raise ProtocolError("The form digest value is empty")
        if isinstance(self.expires, datetime):
            return
        try:
            expires = self.acquired_at + timedelta(seconds=int(self.expires))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError) as exc:
            raise ProtocolError(
                f"Invalid form digest timeout value: {self.expires!r}"
            ) from exc
        self.expires = expires

    def has_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expire_date()

    def expire_date(self) -> datetime:
        if not isinstance(self.expires, datetime):
            raise ProtocolError("The form digest has no expiry")
        return self.expires

    def __str__(self) -> str:
        return self.digest or ""

    def __repr__(self) -> str:
        return f"FormDigest(expires={self.expires!r})"


__all__ = ["FormDigest"]
