"""Pytest configuration shared across the suite."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import os

import pytest
from fakes import SHARED_SECRET, SITE_URL, FakeTransport, FrozenClock

from sharepoint_oauth.clients.site import SharePointSite
from sharepoint_oauth.core.config import SiteSettings


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep ambient SHAREPOINT_* variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("SHAREPOINT_") or key == "APP_LOG_LEVEL":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def site_settings() -> SiteSettings:
    return SiteSettings(
        url=SITE_URL,
        secret=SHARED_SECRET,
        client_id="client-id@realm-id",
        resource="00000003-0000-0ff1-ce00-000000000000/contoso.sharepoint.com@realm-id",
    )


@pytest.fixture()
def site(site_settings: SiteSettings, transport: FakeTransport) -> SharePointSite:
    return SharePointSite(site_settings, transport)
