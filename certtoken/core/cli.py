"""Command-line entry point: issue one token and print the provider's JSON."""

import argparse
import json
import sys

import structlog

from certtoken import __version__
from certtoken.core.errors import CertTokenError, ProviderError
from certtoken.core.logging import configure_logging
from certtoken.core.settings import load_settings
from certtoken.oidc.assertion import token_endpoint
from certtoken.oidc.clock import SystemClock
from certtoken.oidc.exchange import ClientAssertionExchanger
from certtoken.oidc.issuer import build_assertion_for, issue_token, request_from_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="certtoken",
        description="Issue an OAuth2 access token with a certificate credential.",
    )
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--tenant-id", dest="tenant_id")
    parser.add_argument("--client-id", dest="client_id")
    parser.add_argument("--scope", help="e.g. https://graph.microsoft.com/.default")
    parser.add_argument(
        "--certificate", dest="certificate_path", help="PEM or DER certificate"
    )
    parser.add_argument(
        "--thumbprint", help="hex SHA-1 fingerprint, used when no certificate is given"
    )
    parser.add_argument(
        "--private-key", dest="private_key_path", help="PEM RSA private key"
    )
    parser.add_argument("--authority", help="identity provider base URL")
    parser.add_argument("--timeout", dest="timeout_seconds", type=float)
    parser.add_argument("--log-level", dest="log_level")
    parser.add_argument(
        "--assertion-only",
        action="store_true",
        help="print the signed client assertion without calling the token endpoint",
    )
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse arguments, issue the token, and return the process exit code."""
    args = vars(build_parser().parse_args(argv))
    config_file = args.pop("config")
    assertion_only = args.pop("assertion_only")
    configure_logging(args["log_level"] or "INFO")
    log = structlog.get_logger()

    try:
        settings = load_settings(config_file, **args)
        configure_logging(settings.log_level)
        request = request_from_settings(settings)
        if assertion_only:
            print(build_assertion_for(request, SystemClock()))  # noqa: T201
            return 0
        exchanger = ClientAssertionExchanger(
            token_endpoint(settings.tenant_id, settings.authority),
            timeout=settings.timeout_seconds,
            ca_bundle=settings.ca_bundle,
        )
        token = issue_token(request, exchanger=exchanger)
    except ProviderError as exc:
        log.error("token.failed", status=exc.status, error=exc.error_code)
        body = exc.body if isinstance(exc.body, str) else json.dumps(exc.body)
        print(body)  # noqa: T201
        return exc.exit_code
    except CertTokenError as exc:
        log.error("token.failed", kind=type(exc).__name__, error=str(exc))
        return exc.exit_code

    print(token.to_json())  # noqa: T201
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
