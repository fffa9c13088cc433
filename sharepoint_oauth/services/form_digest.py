"""Form digest acquisition through ``_api/contextinfo``."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sharepoint_oauth.clients.site import SharePointSite
from sharepoint_oauth.core.exceptions import MissingFieldError, ProtocolError
from sharepoint_oauth.models.access_token import AccessToken
from sharepoint_oauth.models.form_digest import FormDigest
from sharepoint_oauth.models.hydration import PropertyMap
from sharepoint_oauth.utils.time import utcnow

logger = logging.getLogger(__name__)

CONTEXT_INFO_PATH = "_api/contextinfo"


def create_form_digest(
    site: SharePointSite,
    access_token: AccessToken,
    extra: Optional[PropertyMap] = None,
    *,
    now: Optional[datetime] = None,
) -> FormDigest:
    """Request a new form digest authenticated with ``access_token``."""
    acquired_at = now or utcnow()
    json_data = site.request(
        CONTEXT_INFO_PATH,
        "POST",
        headers={
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json;odata=verbose",
        },
    )
    try:
        digest = FormDigest(json_data, extra, acquired_at=acquired_at)
    except MissingFieldError as exc:
        raise ProtocolError(
            f"Context info response has no '{exc.path}'", payload=json_data
        ) from exc

    logger.info(
        "Acquired SharePoint form digest",
        extra={"site": site.get_url(), "expires_at": digest.expire_date().isoformat()},
    )
    return digest


__all__ = ["CONTEXT_INFO_PATH", "create_form_digest"]
