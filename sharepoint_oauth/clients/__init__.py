"""Expose the site handle and context-token decoding."""

from .context_token import ApplicationContext, ContextTokenClaims, decode_context_token
from .site import SharePointSite

__all__ = [
    "ApplicationContext",
    "ContextTokenClaims",
    "SharePointSite",
    "decode_context_token",
]
