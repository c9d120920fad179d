#!/usr/bin/env python3
"""
Send one WeCom robot notification from a JSON file of alerts.

    python main.py alerts.json [--receiver NAME] [--group-label k=v ...] [--dry-run]

Settings come from the environment (WECOM_ROBOT_WEBHOOK_URL, ...).
Exit codes: 0 delivered, 75 retryable failure, 1 permanent failure.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from config import AppSettings
from errors import NotifyError, TemplatingError
from infrastructure.templating.jinja import JinjaTemplateRenderer
from infrastructure.webhook.wecom_robot import WeComRobotNotifier
from schemas.models.alert import Alert
from schemas.models.notify_context import NotifyContext
from schemas.models.template_data import build_template_data
from shared.logging import get_logger, setup_logging
from shared.truncate import truncate_in_bytes

EX_TEMPFAIL = 75

log = get_logger(__name__)

_alerts_adapter = TypeAdapter(list[Alert])


def _parse_label(value: str) -> tuple[str, str]:
    name, sep, label_value = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=value, got {value!r}")
    return name, label_value


def _positive_float(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}")
    if not seconds > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value!r}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Send alerts to a WeCom group robot webhook."
    )
    parser.add_argument("alerts", help="path to a JSON list of alerts ('-' for stdin)")
    parser.add_argument("--receiver", help="receiver name exposed to the template")
    parser.add_argument(
        "--group-label",
        action="append",
        type=_parse_label,
        default=[],
        metavar="NAME=VALUE",
        help="group label exposed to the template (repeatable)",
    )
    parser.add_argument(
        "--timeout", type=_positive_float, default=None, help="deadline in seconds"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="print the rendered, truncated message instead of sending it",
    )
    return parser


def load_alerts(path: str) -> list[Alert]:
    if path == "-":
        raw = sys.stdin.read()
    else:
        with open(path, encoding="utf-8") as f:
            raw = f.read()
    return _alerts_adapter.validate_json(raw)


async def run(args: argparse.Namespace, settings: AppSettings) -> int:
    alerts = load_alerts(args.alerts)
    context = NotifyContext(
        receiver=args.receiver or settings.receiver,
        group_labels=dict(args.group_label),
        external_url=settings.external_url,
        timeout=args.timeout,
    )

    if args.dry_run:
        data = build_template_data(
            alerts,
            receiver=context.receiver,
            group_labels=context.group_labels,
            external_url=context.external_url,
        )
        try:
            message = JinjaTemplateRenderer().render(settings.wecom_robot.message, data)
        except TemplatingError as e:
            log.error("message_render_failed", **e.to_dict())
            return 1
        content, _ = truncate_in_bytes(message, settings.wecom_robot.max_message_size)
        print(content)
        return 0

    async with WeComRobotNotifier(settings.wecom_robot) as notifier:
        result = await notifier.notify(alerts, context)

    if result.ok:
        log.info("notification_sent", alerts=len(alerts))
        return 0
    log.error("notification_failed", **result.error.to_dict())
    return EX_TEMPFAIL if result.retryable else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = AppSettings()
    except ValidationError as e:
        print(f"invalid configuration:\n{e}", file=sys.stderr)
        return 1

    setup_logging(settings.logging)

    try:
        return asyncio.run(run(args, settings))
    except (OSError, ValidationError) as e:
        log.error("alerts_unreadable", path=args.alerts, error=str(e))
        return 1
    except NotifyError as e:
        log.error("notifier_setup_failed", **e.to_dict())
        return 1


if __name__ == "__main__":
    sys.exit(main())
