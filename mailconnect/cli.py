"""Command line interface for sending mail through the discovered mail service."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
from pathlib import Path

from . import config
from .dispatch import MailDispatchService
from .errors import ConfigurationMissing
from .message import build_message
from .providers.auth import StaticTokenProvider
from .providers.outlook import OutlookClient, build_send_payload
from .report import DispatchOutcome, collect_outcome, summarize_results
from .templating import (
    DEFAULT_BODY_TEMPLATE,
    DEFAULT_SUBJECT_TEMPLATE,
    TemplateRenderingError,
    render,
)


def _read_template(template: str | None, template_file: Path | None, default: str) -> str:
    if template_file is not None:
        return template_file.read_text(encoding="utf-8")
    if template is None:
        return default
    return template


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Send a mail from the signed-in user's mailbox."
    )
    parser.add_argument(
        "--to",
        dest="recipients",
        action="append",
        required=True,
        help="Recipient address. Repeat to send to several recipients.",
    )
    parser.add_argument(
        "--resource-id",
        help=f"Service resource id. Defaults to ${config.RESOURCE_ID_ENV}.",
    )
    parser.add_argument(
        "--endpoint-uri",
        help=f"Service endpoint uri. Defaults to ${config.ENDPOINT_URI_ENV}.",
    )
    parser.add_argument(
        "--access-token",
        help=f"Bearer token for the resource. Defaults to ${config.ACCESS_TOKEN_ENV} or a prompt.",
    )
    parser.add_argument("--name", default="", help="Display name used by the templates.")
    parser.add_argument("--subject-template", help="Template for the subject. Jinja2 placeholders are allowed.")
    parser.add_argument(
        "--subject-template-file",
        type=Path,
        help="Path to a file containing the subject template. Overrides --subject-template when provided.",
    )
    parser.add_argument("--body-template", help="Template for the HTML body. Jinja2 placeholders are allowed.")
    parser.add_argument(
        "--body-template-file",
        type=Path,
        help="Path to a file containing the body template. Overrides --body-template when provided.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help=f"Seconds to wait for the mail service. Defaults to ${config.HTTP_TIMEOUT_ENV} or "
        f"{config.DEFAULT_HTTP_TIMEOUT}.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Render the request without sending it.")
    parser.add_argument(
        "--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)."
    )
    return parser


def _load_config(args: argparse.Namespace) -> config.MailServiceConfig:
    service_config = config.MailServiceConfig.from_env()
    if args.resource_id:
        service_config.set_resource_id(args.resource_id)
    if args.endpoint_uri:
        service_config.set_endpoint_uri(args.endpoint_uri)
    return service_config


def _build_service(
    service_config: config.MailServiceConfig, args: argparse.Namespace, timeout: float
) -> MailDispatchService:
    if args.access_token:
        logging.warning(
            "Avoid passing --access-token on the command line. "
            "Prefer the %s environment variable or the interactive prompt.",
            config.ACCESS_TOKEN_ENV,
        )
    token = (
        args.access_token
        or os.getenv(config.ACCESS_TOKEN_ENV)
        or getpass.getpass(prompt="Access token: ")
    )
    provider = StaticTokenProvider(default_token=token)

    def transport_factory(endpoint_uri, resolver):
        return OutlookClient(endpoint_uri, resolver, timeout=timeout)

    return MailDispatchService(service_config, provider, transport_factory)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s: %(message)s")

    subject_template = _read_template(
        args.subject_template, args.subject_template_file, DEFAULT_SUBJECT_TEMPLATE
    )
    body_template = _read_template(args.body_template, args.body_template_file, DEFAULT_BODY_TEMPLATE)

    try:
        subject, body = render(subject_template, body_template, {"name": args.name})
    except TemplateRenderingError as exc:
        logging.error(str(exc))
        raise SystemExit(1) from exc

    if args.dry_run:
        for recipient in args.recipients:
            payload = build_send_payload(build_message(recipient, subject, body), True)
            logging.info("Dry run, request for %s:\n%s", recipient, json.dumps(payload, indent=2))
        return

    service_config = _load_config(args)
    missing = service_config.missing_fields()
    if missing:
        logging.error(str(ConfigurationMissing(missing)))
        raise SystemExit(1)

    timeout = args.timeout or config.http_timeout_from_env()
    service = _build_service(service_config, args, timeout)

    pending = [(recipient, service.send_mail(recipient, subject, body)) for recipient in args.recipients]
    outcomes: list[DispatchOutcome] = []
    for recipient, result in pending:
        # Leave the transport its own timeout before giving up on the result.
        outcome = collect_outcome(recipient, result, timeout=timeout * 2)
        if outcome.success:
            logging.info("Sent message to %s", recipient)
        else:
            logging.error("Failed to send message to %s: %s", recipient, outcome.error)
        outcomes.append(outcome)

    summary = summarize_results(outcomes)
    logging.info(
        "Summary: success=%s failure=%s", summary.get("success", 0), summary.get("failure", 0)
    )
    if summary.get("failure"):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
