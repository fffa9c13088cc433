from __future__ import annotations

import threading
import time

import pytest
from fakes import (
    FakeTransport,
    FrozenClock,
    context_info_response,
    make_context_token,
    token_response,
)

from sharepoint_oauth.clients.site import SharePointSite
from sharepoint_oauth.core.exceptions import (
    ConfigurationError,
    ExpiredCredentialError,
    InvalidCredentialError,
)
from sharepoint_oauth.models.access_token import AccessToken
from sharepoint_oauth.models.form_digest import FormDigest
from sharepoint_oauth.services.session import CredentialState, SessionManager
from sharepoint_oauth.utils.http import TransportResponse


@pytest.fixture()
def session(site: SharePointSite, clock: FrozenClock) -> SessionManager:
    return SessionManager(site, clock=clock)


def test_absent_token_is_invalid(session: SessionManager) -> None:
    assert session.access_token_state is CredentialState.ABSENT
    with pytest.raises(InvalidCredentialError):
        session.get_access_token()


def test_created_token_is_returned_until_it_expires(
    session: SessionManager, transport: FakeTransport, clock: FrozenClock
) -> None:
    transport.add_json(token_response("T", clock.epoch(10)))

    created = session.create_app_only_access_token()

    assert session.get_access_token() is created
    assert session.access_token_state is CredentialState.VALID
    clock.advance(10)
    assert session.access_token_state is CredentialState.EXPIRED
    with pytest.raises(ExpiredCredentialError):
        session.get_access_token()


def test_injecting_expired_token_keeps_previous_state(
    session: SessionManager, transport: FakeTransport, clock: FrozenClock
) -> None:
    stale = AccessToken({"access_token": "old", "expires_on": clock.epoch(-5)})

    with pytest.raises(ExpiredCredentialError):
        session.set_access_token(stale)
    with pytest.raises(InvalidCredentialError):
        session.get_access_token()

    transport.add_json(token_response("T", clock.epoch(60)))
    current = session.create_access_token()
    with pytest.raises(ExpiredCredentialError):
        session.set_access_token(stale)

    assert session.get_access_token() is current


def test_injecting_restored_token(session: SessionManager, clock: FrozenClock) -> None:
    restored = AccessToken.deserialize(f'["persisted", {clock.epoch(30)}]')

    session.set_access_token(restored)

    assert str(session.get_access_token()) == "persisted"


def test_create_access_token_picks_flow_from_context_token(
    session: SessionManager, transport: FakeTransport, clock: FrozenClock
) -> None:
    sts = "https://sts.example.com/tokens/OAuth/2"
    transport.add_json(token_response("user-token", clock.epoch(60)))

    token = session.create_access_token(make_context_token(sts_url=sts))

    assert token.token == "user-token"
    assert transport.calls[0].url == sts
    assert "grant_type=refresh_token" in transport.calls[0].content


def test_failed_acquisition_keeps_existing_token(
    session: SessionManager, transport: FakeTransport, clock: FrozenClock
) -> None:
    transport.add_json(token_response("T", clock.epoch(60)))
    current = session.create_app_only_access_token()

    with pytest.raises(ConfigurationError):
        session.create_user_access_token("")

    assert session.get_access_token() is current


def test_form_digest_requires_a_valid_token(session: SessionManager, transport: FakeTransport) -> None:
    with pytest.raises(InvalidCredentialError):
        session.create_form_digest()
    assert transport.calls == []


def test_form_digest_track_is_independent(
    session: SessionManager, transport: FakeTransport, clock: FrozenClock
) -> None:
    transport.add_json(token_response("T", clock.epoch(3600)))
    transport.add_json(context_info_response("digest-1", 60))
    session.create_app_only_access_token()
    session.create_form_digest()

    assert session.auth_headers(with_digest=True) == {
        "Authorization": "Bearer T",
        "X-RequestDigest": "digest-1",
    }

    clock.advance(60)
    assert session.form_digest_state is CredentialState.EXPIRED
    assert session.access_token_state is CredentialState.VALID
    with pytest.raises(ExpiredCredentialError):
        session.get_form_digest()
    assert session.auth_headers() == {"Authorization": "Bearer T"}

    transport.add_json(context_info_response("digest-2", 60))
    assert str(session.ensure_form_digest()) == "digest-2"
    assert str(session.ensure_form_digest()) == "digest-2"
    assert len(transport.calls) == 3


def test_set_form_digest_rejects_expired(session: SessionManager, clock: FrozenClock) -> None:
    digest = FormDigest(context_info_response("d", 10), acquired_at=clock())
    clock.advance(11)

    with pytest.raises(ExpiredCredentialError):
        session.set_form_digest(digest)
    assert session.form_digest_state is CredentialState.ABSENT


def test_ensure_access_token_reuses_valid_token(
    session: SessionManager, transport: FakeTransport, clock: FrozenClock
) -> None:
    transport.add_json(token_response("first", clock.epoch(10)))
    transport.add_json(token_response("second", clock.epoch(100)))

    assert session.ensure_access_token().token == "first"
    assert session.ensure_access_token().token == "first"
    clock.advance(10)
    assert session.ensure_access_token().token == "second"
    assert len(transport.calls) == 2


class SlowTransport(FakeTransport):
    def send(self, method, url, *, headers=None, content=None) -> TransportResponse:
        time.sleep(0.05)
        return super().send(method, url, headers=headers, content=content)


def test_concurrent_ensure_performs_a_single_acquisition(
    site_settings, clock: FrozenClock
) -> None:
    transport = SlowTransport()
    transport.add_json(token_response("shared", clock.epoch(600)))
    session = SessionManager(SharePointSite(site_settings, transport), clock=clock)
    results: list[str] = []

    def worker() -> None:
        results.append(session.ensure_access_token().token)

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == ["shared"] * 5
    assert len(transport.calls) == 1
