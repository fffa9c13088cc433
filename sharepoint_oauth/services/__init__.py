"""Service layer exports."""

from .access_tokens import create_from_app_only, create_from_user, validate_app_only_settings
from .form_digest import create_form_digest
from .session import CredentialState, SessionManager
from .token_cipher import TokenCipherService

__all__ = [
    "CredentialState",
    "SessionManager",
    "TokenCipherService",
    "create_form_digest",
    "create_from_app_only",
    "create_from_user",
    "validate_app_only_settings",
]
