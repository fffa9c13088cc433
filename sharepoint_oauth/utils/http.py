"""HTTP transport abstraction and the default httpx implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, Union

import httpx

from sharepoint_oauth.core.exceptions import TransportError

logger = logging.getLogger(__name__)

Body = Union[str, bytes, None]


@dataclass(frozen=True)
class TransportResponse:
    """Raw status and body returned by a transport."""

    status_code: int
    text: str


class Transport(Protocol):
    """Anything able to send a single HTTP request and return its raw response."""

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        content: Body = None,
    ) -> TransportResponse:
        ...


class HttpxTransport:
    """Transport backed by a synchronous ``httpx.Client``."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._client = client or httpx.Client(timeout=timeout)

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        content: Body = None,
    ) -> TransportResponse:
        try:
            response = self._client.request(
                method,
                url,
                headers=dict(headers or {}),
                content=content,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("HTTP %s %s failed: %s", method, url, exc)
            raise TransportError(f"Unable to make an HTTP request to {url}") from exc
        return TransportResponse(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["Body", "HttpxTransport", "Transport", "TransportResponse"]
