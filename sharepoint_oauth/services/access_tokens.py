"""
Access token acquisition.

Two flows are supported and the caller picks one explicitly:

* ``create_from_user``: exchange the refresh token embedded in a context
  token (user-delegated, SharePoint add-in launch);
* ``create_from_app_only``: client-credentials grant against the Azure
  Access Control Service (app-only policy).

Every precondition is checked before the first network call.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from sharepoint_oauth.clients.context_token import decode_context_token
from sharepoint_oauth.clients.site import SharePointSite
from sharepoint_oauth.core.exceptions import (
    ConfigurationError,
    MissingFieldError,
    ProtocolError,
)
from sharepoint_oauth.models.access_token import AccessToken
from sharepoint_oauth.models.hydration import PropertyMap

logger = logging.getLogger(__name__)

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


def _require(value: Optional[str], field: str, label: str) -> str:
    if not value:
        raise ConfigurationError(field, f"The {label} is empty/not set")
    return value


def _validate_acs_url(value: Optional[str]) -> str:
    acs = _require(value, "acs", "Azure Access Control Service URL")
    try:
        _URL_ADAPTER.validate_python(acs)
    except ValidationError as exc:
        raise ConfigurationError(
            "acs", "The Azure Access Control Service URL is invalid"
        ) from exc
    return acs


def _exchange(
    site: SharePointSite,
    url: str,
    form: Dict[str, Any],
    extra: Optional[PropertyMap],
) -> AccessToken:
    json_data = site.request(url, "POST", data=form)
    try:
        token = AccessToken(json_data, extra)
    except MissingFieldError as exc:
        raise ProtocolError(
            f"Token response from {url} has no '{exc.path}'", payload=json_data
        ) from exc
    logger.info(
        "Acquired SharePoint access token",
        extra={
            "site": site.get_url(),
            "grant_type": form["grant_type"],
            "expires_at": token.expire_date().isoformat(),
        },
    )
    return token


def create_from_user(
    site: SharePointSite,
    context_token: Optional[str],
    extra: Optional[PropertyMap] = None,
) -> AccessToken:
    """Create an access token from a user context token."""
    context_token = _require(context_token, "context_token", "Context Token")
    secret = _require(site.settings.secret, "secret", "Secret")

    claims = decode_context_token(context_token, secret)

    form = {
        "grant_type": "refresh_token",
        "client_id": claims.audience,
        "client_secret": secret,
        "refresh_token": claims.refresh_token,
        "resource": claims.resource_for(site.host),
    }
    return _exchange(site, claims.app_context.security_token_service_uri, form, extra)


def _app_only_request(site: SharePointSite) -> Tuple[str, Dict[str, Any]]:
    settings = site.settings
    secret = _require(settings.secret, "secret", "Secret")
    acs = _validate_acs_url(settings.acs)
    client_id = _require(settings.client_id, "client_id", "Client ID")
    resource = _require(settings.resource, "resource", "Resource")
    return acs, {
        "grant_type": "client_credentials",
        "client_id": client_id,
        "client_secret": secret,
        "resource": resource,
    }


def create_from_app_only(
    site: SharePointSite,
    extra: Optional[PropertyMap] = None,
) -> AccessToken:
    """Create an access token through the app-only policy."""
    acs, form = _app_only_request(site)
    return _exchange(site, acs, form, extra)


def validate_app_only_settings(site: SharePointSite) -> None:
    """Run the app-only preconditions without contacting the network."""
    _app_only_request(site)


__all__ = [
    "create_from_app_only",
    "create_from_user",
    "validate_app_only_settings",
]
