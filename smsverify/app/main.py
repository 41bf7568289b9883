"""Composition root and command-line entry point.

``python -m smsverify.app.main send +4915112345678 --code 123456`` sends a code
using ``SMSVERIFY_*`` configuration; ``approve VE...`` reports a verification
as approved. ``--mock`` swaps in the offline adapter.
"""

from __future__ import annotations

import argparse
import logging
import secrets
import sys
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional, Sequence

from smsverify.adapters.metrics_memory import InMemoryMetrics
from smsverify.adapters.verify_mock import VerifyMock
from smsverify.adapters.verify_rest import VerifyRestAdapter
from smsverify.config import VerifyConfig
from smsverify.domain.locales import parse_language_ranges
from smsverify.domain.ports import MetricsPort, UseCaseError, VerificationPort
from smsverify.domain.verification_models import CHANNELS, VerificationRequest
from smsverify.usecases.error_mapping import map_api_error
from smsverify.usecases.report_verification_approved import ReportVerificationApproved
from smsverify.usecases.send_verification_code import SendVerificationCode
from smsverify.utils.logging import configure_root

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_adapter(
    config: Optional[VerifyConfig] = None,
    *,
    metrics: Optional[MetricsPort] = None,
) -> VerifyRestAdapter:
    """Wire a REST adapter from explicit config or the environment."""
    cfg = config or VerifyConfig.from_env()
    return VerifyRestAdapter(cfg, metrics=metrics or InMemoryMetrics())


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI args for one-off verification calls."""
    parser = argparse.ArgumentParser(description="Send or approve provider verifications.")
    parser.add_argument("--mock", action="store_true", help="use the offline adapter")
    parser.add_argument("--timeout", type=float, default=30.0, help="seconds to wait for a result")
    sub = parser.add_subparsers(dest="command", required=True)

    send = sub.add_parser("send", help="send a verification code")
    send.add_argument("destination")
    send.add_argument("--code", default=None, help="defaults to a random 6-digit code")
    send.add_argument("--channel", choices=CHANNELS, default="sms")
    send.add_argument("--client-type", default=None)
    send.add_argument("--accept-language", default="", help='e.g. "de-DE,en;q=0.8"')

    approve = sub.add_parser("approve", help="report a verification as approved")
    approve.add_argument("verification_id")
    approve.add_argument("--user-agent", default=None)
    approve.add_argument("--context", default="registration")
    return parser.parse_args(argv)


def _run(args: argparse.Namespace, port: VerificationPort) -> int:
    if args.command == "send":
        request = VerificationRequest(
            destination=args.destination,
            code=args.code or f"{secrets.randbelow(10**6):06d}",
            channel=args.channel,
            client_type=args.client_type,
            language_ranges=tuple(parse_language_ranges(args.accept_language)),
        )
        sid = SendVerificationCode(port)(request).result(timeout=args.timeout)
        if sid is None:
            log.error("Verification was not accepted by the provider")
            return EXIT_FAILED
        print(sid)
        return EXIT_OK

    approved = ReportVerificationApproved(port)(
        args.verification_id, args.user_agent, args.context
    ).result(timeout=args.timeout)
    print("approved" if approved else "not-approved")
    return EXIT_OK if approved else EXIT_FAILED


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint."""
    configure_root()
    args = _parse_args(argv)
    port: Optional[VerificationPort] = None
    try:
        port = VerifyMock() if args.mock else build_adapter()
        return _run(args, port)
    except (UseCaseError, ValueError) as exc:
        err = map_api_error(exc, default_code="INVALID_REQUEST")
        log.error("%s: %s", err.code, err.message)
        return EXIT_USAGE
    except FutureTimeoutError as exc:
        err = map_api_error(exc, default_code="REQUEST_TIMEOUT")
        log.error("%s: %s (after %ss)", err.code, err.message, args.timeout)
        return EXIT_FAILED
    finally:
        if isinstance(port, VerifyRestAdapter):
            port.close()


if __name__ == "__main__":
    sys.exit(main())
