from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sharepoint_oauth.core.config import DEFAULT_ACS_URL, SiteSettings, load_settings


def test_defaults_to_well_known_acs_endpoint() -> None:
    settings = SiteSettings()

    assert settings.acs == DEFAULT_ACS_URL
    assert settings.secret is None
    assert settings.client_id is None


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHAREPOINT_URL", "https://contoso.sharepoint.com/sites/a")
    monkeypatch.setenv("SHAREPOINT_SECRET", "s3cret")
    monkeypatch.setenv("SHAREPOINT_CLIENT_ID", "cid")

    settings = SiteSettings()

    assert settings.url == "https://contoso.sharepoint.com/sites/a"
    assert settings.secret == "s3cret"
    assert settings.client_id == "cid"


def test_settings_are_immutable() -> None:
    settings = SiteSettings(secret="a")

    with pytest.raises(ValidationError):
        settings.secret = "b"  # type: ignore[misc]


def test_load_settings_from_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / "site.env"
    env_file.write_text(
        "SHAREPOINT_URL=https://contoso.sharepoint.com/sites/b\n"
        "SHAREPOINT_RESOURCE=res\n"
        "SHAREPOINT_HTTP_TIMEOUT=2.5\n"
        "APP_LOG_LEVEL=DEBUG\n",
        encoding="utf-8",
    )

    settings = load_settings(str(env_file))

    assert settings.site.url == "https://contoso.sharepoint.com/sites/b"
    assert settings.site.resource == "res"
    assert settings.http.timeout == 2.5
    assert settings.log_level == "DEBUG"
