"""
Settings models and helpers.

Centralizes the per-site configuration consumed by the token acquisition
protocols so scripts and library callers share one configuration surface.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ACS_URL = "https://accounts.accesscontrol.windows.net/tokens/OAuth/2"


class SiteSettings(BaseSettings):
    """Configuration for a single SharePoint site.

    Every field is optional at load time. The acquisition protocols check the
    fields they need when they run and raise ``ConfigurationError`` naming
    the missing or invalid one.
    """

    url: Optional[str] = Field(None, description="Absolute SharePoint site URL.")
    secret: Optional[str] = Field(
        None,
        description="Shared client secret registered for the SharePoint app.",
    )
    acs: Optional[str] = Field(
        DEFAULT_ACS_URL,
        description="Token issuance endpoint used by the app-only policy.",
    )
    client_id: Optional[str] = Field(None, description="App principal client id.")
    resource: Optional[str] = Field(
        None,
        description=(
            "Resource identifier requested by the app-only policy, usually "
            "'00000003-0000-0ff1-ce00-000000000000/<host>@<realm>'."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="SHAREPOINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


class HTTPSettings(BaseSettings):
    """Settings for the default httpx transport."""

    timeout: float = Field(10.0, description="Request timeout in seconds.")

    model_config = SettingsConfigDict(
        env_prefix="SHAREPOINT_HTTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class AppSettings(BaseSettings):
    """Root settings object."""

    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    site: SiteSettings = Field(default_factory=SiteSettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def load_settings(env_file: Optional[str] = None) -> AppSettings:
    """Build settings, reading ``env_file`` instead of the default ``.env`` when given."""
    if env_file is None:
        return AppSettings()
    return AppSettings(
        site=SiteSettings(_env_file=env_file),  # type: ignore[call-arg]
        http=HTTPSettings(_env_file=env_file),  # type: ignore[call-arg]
        _env_file=env_file,
    )


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return load_settings()


__all__ = [
    "AppSettings",
    "DEFAULT_ACS_URL",
    "HTTPSettings",
    "SiteSettings",
    "get_settings",
    "load_settings",
]
