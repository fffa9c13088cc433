"""
SharePoint site handle.

Owns the site URL components and the transport, and turns raw responses into
JSON documents or ``ProtocolError``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode, urlsplit

from sharepoint_oauth.core.config import HTTPSettings, SiteSettings
from sharepoint_oauth.core.exceptions import ConfigurationError, ProtocolError
from sharepoint_oauth.utils.http import Body, HttpxTransport, Transport

logger = logging.getLogger(__name__)


def _error_message(payload: Any) -> Optional[str]:
    """Extract an error message from a SharePoint or ACS error payload."""
    if not isinstance(payload, Mapping) or payload.get("error") is None:
        return None
    error = payload["error"]
    # OData: {"error": {"code": ..., "message": {"lang": ..., "value": ...}}}
    if isinstance(error, Mapping):
        message = error.get("message")
        if isinstance(message, Mapping) and "value" in message:
            return str(message["value"])
        if message:
            return str(message)
        return str(error.get("code") or error)
    # OAuth: {"error": "invalid_client", "error_description": "..."}
    description = payload.get("error_description")
    if description:
        return f"{error}: {description}"
    return str(error)


class SharePointSite:
    """A SharePoint site reachable through an injected transport."""

    def __init__(
        self,
        settings: SiteSettings,
        transport: Optional[Transport] = None,
        *,
        http_settings: Optional[HTTPSettings] = None,
    ) -> None:
        components = urlsplit(settings.url or "")
        if components.scheme not in ("http", "https") or not components.hostname:
            raise ConfigurationError("url", "The SharePoint Site URL is invalid")

        self._settings = settings
        self._transport = transport or HttpxTransport(
            timeout=(http_settings or HTTPSettings()).timeout
        )
        self._host = components.hostname
        self._hostname = f"{components.scheme}://{components.netloc}"
        self._path = components.path.rstrip("/")

    @classmethod
    def create(
        cls,
        url: str,
        settings: Optional[SiteSettings] = None,
        transport: Optional[Transport] = None,
    ) -> "SharePointSite":
        """Build a site for ``url``, overriding any URL present in ``settings``."""
        base = settings or SiteSettings()
        return cls(base.model_copy(update={"url": url.rstrip("/") + "/"}), transport)

    @property
    def settings(self) -> SiteSettings:
        return self._settings

    @property
    def host(self) -> str:
        """Bare host name, e.g. ``contoso.sharepoint.com``."""
        return self._host

    def get_hostname(self, path: Optional[str] = None) -> str:
        return self._hostname + _suffix(path)

    def get_path(self, path: Optional[str] = None) -> str:
        return self._path + _suffix(path)

    def get_url(self, path: Optional[str] = None) -> str:
        return self._hostname + self._path + _suffix(path)

    def request(
        self,
        url: str,
        method: str = "GET",
        *,
        headers: Optional[Mapping[str, str]] = None,
        content: Body = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Relative URLs are resolved against the site URL. ``data`` is sent as an
        ``application/x-www-form-urlencoded`` body.
        """
        target = url if urlsplit(url).scheme else self.get_url(url)
        request_headers = dict(headers or {})
        if data is not None:
            request_headers["Content-Type"] = "application/x-www-form-urlencoded"
            content = urlencode(data)

        response = self._transport.send(
            method, target, headers=request_headers, content=content
        )
        logger.debug("%s %s -> %s", method, target, response.status_code)

        payload: Any = {}
        if response.text.strip():
            try:
                payload = json.loads(response.text)
            except ValueError as exc:
                raise ProtocolError(
                    "The JSON data could not be parsed",
                    status_code=response.status_code,
                ) from exc

        message = _error_message(payload)
        if message is not None:
            raise ProtocolError(message, status_code=response.status_code, payload=payload)
        if response.status_code >= 400:
            raise ProtocolError(
                f"{method} {target} returned HTTP {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )
        if not isinstance(payload, dict):
            raise ProtocolError(
                "Expected a JSON object in the response",
                status_code=response.status_code,
                payload=payload,
            )
        return payload


def _suffix(path: Optional[str]) -> str:
    return "/" + path.lstrip("/") if path else "/"


__all__ = ["SharePointSite"]
