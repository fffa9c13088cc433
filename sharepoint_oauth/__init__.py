"""SharePoint OAuth app client: credential lifecycle and JSON hydration."""

from .clients import SharePointSite, decode_context_token
from .core.config import AppSettings, SiteSettings, get_settings
from .core.exceptions import (
    ConfigurationError,
    DecodeError,
    ExpiredCredentialError,
    InvalidCredentialError,
    MissingFieldError,
    ProtocolError,
    SharePointError,
    TransportError,
)
from .models import AccessToken, FormDigest, HydratedEntity, ListItem, hydrate
from .services import (
    CredentialState,
    SessionManager,
    TokenCipherService,
    create_form_digest,
    create_from_app_only,
    create_from_user,
)
from .utils.http import HttpxTransport, Transport, TransportResponse

__version__ = "0.1.0"
__all__ = [
    "AccessToken",
    "AppSettings",
    "ConfigurationError",
    "CredentialState",
    "DecodeError",
    "ExpiredCredentialError",
    "FormDigest",
    "HttpxTransport",
    "HydratedEntity",
    "InvalidCredentialError",
    "ListItem",
    "MissingFieldError",
    "ProtocolError",
    "SessionManager",
    "SharePointError",
    "SharePointSite",
    "SiteSettings",
    "TokenCipherService",
    "Transport",
    "TransportError",
    "TransportResponse",
    "create_form_digest",
    "create_from_app_only",
    "create_from_user",
    "decode_context_token",
    "get_settings",
    "hydrate",
]
