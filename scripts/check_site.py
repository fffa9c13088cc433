"""Utility for verifying SharePoint site configuration and credentials.

The tool offers three commands:

1. ``check`` validates that the configuration required by the selected
   authentication flow is present and well formed, without network access.
2. ``token`` acquires an app-only access token and prints its serialized form,
   optionally sealed with ``--seal-secret`` for storage.
3. ``digest`` acquires an app-only access token and a form digest, printing
   the digest expiry.

Example usages::

    python -m scripts.check_site check --env-file /opt/intranet/.env
    python -m scripts.check_site token --env-file /opt/intranet/.env \
        --seal-secret "$TOKEN_ENCRYPTION_SECRET"
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from sharepoint_oauth.clients.site import SharePointSite
from sharepoint_oauth.core.config import AppSettings, load_settings
from sharepoint_oauth.core.exceptions import (
    ConfigurationError,
    ProtocolError,
    SharePointError,
    TransportError,
)
from sharepoint_oauth.core.logging import configure_logging
from sharepoint_oauth.services.access_tokens import validate_app_only_settings
from sharepoint_oauth.services.session import SessionManager
from sharepoint_oauth.services.token_cipher import TokenCipherService
from sharepoint_oauth.utils.http import HttpxTransport, Transport

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 2
EXIT_REMOTE_ERROR = 4
EXIT_RUNTIME_ERROR = 5


def _build_site(settings: AppSettings, transport: Optional[Transport]) -> SharePointSite:
    return SharePointSite(
        settings.site,
        transport or HttpxTransport(timeout=settings.http.timeout),
    )


def _check(site: SharePointSite, flow: str) -> int:
    if flow == "app-only":
        validate_app_only_settings(site)
    elif not site.settings.secret:
        raise ConfigurationError("secret", "The Secret is empty/not set")
    print(f"Configuration OK for {flow} flow on {site.get_url()}")
    return EXIT_OK


def _token(site: SharePointSite, seal_secret: Optional[str]) -> int:
    token = SessionManager(site).create_app_only_access_token()
    if seal_secret:
        print(TokenCipherService(secret=seal_secret).seal(token))
    else:
        print(token.serialize())
    return EXIT_OK


def _digest(site: SharePointSite) -> int:
    session = SessionManager(site)
    session.create_app_only_access_token()
    digest = session.create_form_digest()
    print(f"Form digest valid until {digest.expire_date().isoformat()}")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate SharePoint site settings and acquire credentials."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: .env in the working directory).",
        )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate settings for an authentication flow without network access.",
    )
    add_common_arguments(check_parser)
    check_parser.add_argument(
        "--flow",
        choices=("app-only", "user"),
        default="app-only",
        help="Authentication flow to validate settings for.",
    )

    token_parser = subparsers.add_parser(
        "token",
        help="Acquire an app-only access token and print its serialized form.",
    )
    add_common_arguments(token_parser)
    token_parser.add_argument(
        "--seal-secret",
        default=None,
        help="Encrypt the serialized token with a key derived from this secret.",
    )

    digest_parser = subparsers.add_parser(
        "digest",
        help="Acquire an access token and a form digest.",
    )
    add_common_arguments(digest_parser)

    return parser


def main(argv: list[str] | None = None, transport: Optional[Transport] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path = args.env_file
    if not env_file.exists():
        print(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        settings = load_settings(str(env_file))
        configure_logging(settings.log_level)
        site = _build_site(settings, transport)

        command: str = args.command
        handlers: dict[str, Callable[[], int]] = {
            "check": lambda: _check(site, args.flow),
            "token": lambda: _token(site, args.seal_secret),
            "digest": lambda: _digest(site),
        }
        return handlers[command]()
    except ValidationError as exc:
        print(
            "Settings validation failed. Invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_CONFIGURATION_ERROR
    except ConfigurationError as exc:
        print(f"Configuration error ({exc.field}): {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR
    except (ProtocolError, TransportError) as exc:
        print(f"SharePoint request failed: {exc}", file=sys.stderr)
        return EXIT_REMOTE_ERROR
    except SharePointError as exc:
        print(f"Unexpected SharePoint error: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
