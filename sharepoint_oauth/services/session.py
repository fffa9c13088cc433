"""
Per-site credential holder.

A ``SessionManager`` owns the access token and the form digest of one site.
Each credential moves through ``ABSENT -> VALID -> EXPIRED``; accessors fail
closed instead of returning a stale value, and nothing is renewed in the
background. Acquisitions on a track are serialized by that track's lock.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Dict, Optional, Union

from sharepoint_oauth.clients.site import SharePointSite
from sharepoint_oauth.core.exceptions import ExpiredCredentialError, InvalidCredentialError
from sharepoint_oauth.models.access_token import AccessToken
from sharepoint_oauth.models.form_digest import FormDigest
from sharepoint_oauth.models.hydration import PropertyMap
from sharepoint_oauth.services import access_tokens
from sharepoint_oauth.services.form_digest import create_form_digest
from sharepoint_oauth.utils.time import Clock, utcnow

logger = logging.getLogger(__name__)

Credential = Union[AccessToken, FormDigest]


class CredentialState(str, enum.Enum):
    ABSENT = "absent"
    VALID = "valid"
    EXPIRED = "expired"


class SessionManager:
    """Holds and guards the credentials used to call one SharePoint site."""

    def __init__(self, site: SharePointSite, *, clock: Clock = utcnow) -> None:
        self._site = site
        self._clock = clock
        self._token: Optional[AccessToken] = None
        self._digest: Optional[FormDigest] = None
        self._token_lock = threading.Lock()
        self._digest_lock = threading.Lock()

    @property
    def site(self) -> SharePointSite:
        return self._site

    def _state(self, credential: Optional[Credential]) -> CredentialState:
        if credential is None:
            return CredentialState.ABSENT
        if credential.has_expired(self._clock()):
            return CredentialState.EXPIRED
        return CredentialState.VALID

    @property
    def access_token_state(self) -> CredentialState:
        return self._state(self._token)

    @property
    def form_digest_state(self) -> CredentialState:
        return self._state(self._digest)

    # Access token

    def get_access_token(self) -> AccessToken:
        """Return the current access token or raise if absent/expired."""
        token = self._token
        if token is None:
            raise InvalidCredentialError("Invalid SharePoint Access Token")
        if token.has_expired(self._clock()):
            raise ExpiredCredentialError("Expired SharePoint Access Token")
        return token

    def set_access_token(self, token: AccessToken) -> None:
        """Inject an externally obtained or restored access token."""
        if token.has_expired(self._clock()):
            logger.warning("Rejected expired access token", extra={"site": self._site.get_url()})
            raise ExpiredCredentialError("Expired SharePoint Access Token")
        with self._token_lock:
            self._token = token

    def create_user_access_token(
        self, context_token: str, extra: Optional[PropertyMap] = None
    ) -> AccessToken:
        with self._token_lock:
            self._token = access_tokens.create_from_user(self._site, context_token, extra)
            return self._token

    def create_app_only_access_token(self, extra: Optional[PropertyMap] = None) -> AccessToken:
        with self._token_lock:
            self._token = access_tokens.create_from_app_only(self._site, extra)
            return self._token

    def create_access_token(self, context_token: Optional[str] = None) -> AccessToken:
        """Acquire a token: user-delegated with a context token, app-only without."""
        if context_token:
            return self.create_user_access_token(context_token)
        return self.create_app_only_access_token()

    def ensure_access_token(self, context_token: Optional[str] = None) -> AccessToken:
        """Return the valid token, acquiring one if absent or expired.

        Callers racing on an expired token trigger a single acquisition; the
        others receive the token it produced.
        """
        with self._token_lock:
            current = self._token
            if current is not None and not current.has_expired(self._clock()):
                return current
            if context_token:
                token = access_tokens.create_from_user(self._site, context_token)
            else:
                token = access_tokens.create_from_app_only(self._site)
            self._token = token
            return token

    # Form digest

    def get_form_digest(self) -> FormDigest:
        """Return the current form digest or raise if absent/expired."""
        digest = self._digest
        if digest is None:
            raise InvalidCredentialError("Invalid SharePoint Form Digest")
        if digest.has_expired(self._clock()):
            raise ExpiredCredentialError("Expired SharePoint Form Digest")
        return digest

    def set_form_digest(self, digest: FormDigest) -> None:
        if digest.has_expired(self._clock()):
            logger.warning("Rejected expired form digest", extra={"site": self._site.get_url()})
            raise ExpiredCredentialError("Expired SharePoint Form Digest")
        with self._digest_lock:
            self._digest = digest

    def create_form_digest(self, extra: Optional[PropertyMap] = None) -> FormDigest:
        """Acquire a new form digest using the current access token."""
        token = self.get_access_token()
        with self._digest_lock:
            self._digest = create_form_digest(self._site, token, extra, now=self._clock())
            return self._digest

    def ensure_form_digest(self) -> FormDigest:
        with self._digest_lock:
            current = self._digest
            if current is not None and not current.has_expired(self._clock()):
                return current
            digest = create_form_digest(self._site, self.get_access_token(), now=self._clock())
            self._digest = digest
            return digest

    def auth_headers(self, with_digest: bool = False) -> Dict[str, str]:
        """Headers for an authenticated call; mutating calls need the digest."""
        headers = {"Authorization": f"Bearer {self.get_access_token()}"}
        if with_digest:
            headers["X-RequestDigest"] = str(self.get_form_digest())
        return headers


__all__ = ["CredentialState", "SessionManager"]
