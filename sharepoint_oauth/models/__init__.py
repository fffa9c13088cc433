"""Entities hydrated from SharePoint JSON documents."""

from .access_token import AccessToken, StoredAccessToken
from .form_digest import FormDigest
from .hydration import HydratedEntity, PropertyMap, hydrate, resolve_path
from .item import ListItem

__all__ = [
    "AccessToken",
    "FormDigest",
    "HydratedEntity",
    "ListItem",
    "PropertyMap",
    "StoredAccessToken",
    "hydrate",
    "resolve_path",
]
