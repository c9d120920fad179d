"""WeCom group robot implementation of Notifier.

One notify() call is one delivery attempt:
render template → truncate to max_message_size bytes → POST JSON → decode
{"errcode", "errmsg"}.

Failures come back inside the NotifyResult with their retryability:
- templating / serialization errors and non-zero errcode are permanent
- transport errors, deadline expiry and undecodable replies are retryable

Only the constructor raises (ConfigurationError). Logging stays at debug
level; the dispatcher owns user-facing failure reporting.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

import httpx
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError
from structlog.stdlib import BoundLogger

from config import WeComRobotSettings
from errors import (
    ApplicationRejection,
    ResponseDecodeError,
    SerializationError,
    TemplatingError,
    TransportError,
)
from infrastructure.http_client import HttpClient
from infrastructure.templating.jinja import JinjaTemplateRenderer
from infrastructure.templating.protocol import TemplateRenderer
from schemas.dto.wecom_robot import WeComRobotMessage, WeComRobotResponse
from schemas.models.alert import Alert
from schemas.models.notify_context import NotifyContext
from schemas.models.template_data import build_template_data
from shared.logging import get_logger
from shared.result import NotifyResult
from shared.truncate import truncate_in_bytes

log = get_logger(__name__)


def _describe(e: BaseException) -> str:
    # httpx timeouts and asyncio.TimeoutError often carry an empty message
    return str(e) or type(e).__name__


class WeComRobotNotifier:
    def __init__(
        self,
        settings: WeComRobotSettings,
        renderer: Optional[TemplateRenderer] = None,
        logger: Optional[BoundLogger] = None,
        http_client: Optional[HttpClient] = None,
    ) -> None:
        self._settings = settings
        self._renderer = renderer or JinjaTemplateRenderer()
        self._log = logger or log.bind(integration="wecomrobot")
        self._owns_http = http_client is None
        self._http = http_client or HttpClient.from_settings(settings.http)

    async def notify(
        self, alerts: Sequence[Alert], context: Optional[NotifyContext] = None
    ) -> NotifyResult:
        context = context or NotifyContext()
        logger = self._log
        if context.group_key:
            logger = logger.bind(group_key=context.group_key)

        data = build_template_data(
            alerts,
            receiver=context.receiver,
            group_labels=context.group_labels,
            external_url=context.external_url,
        )
        try:
            message = self._renderer.render(self._settings.message, data)
        except TemplatingError as e:
            return NotifyResult.failure(e)

        try:
            content, truncated = truncate_in_bytes(
                message, self._settings.max_message_size
            )
            if truncated:
                logger.debug(
                    "message_truncated",
                    reason="exceeds maximum allowed length by wecom robot",
                    truncated_message=content,
                )
            body = WeComRobotMessage.text_message(content).to_json_bytes()
        except (PydanticSerializationError, UnicodeEncodeError) as e:
            # e.g. lone surrogates coming out of alert data
            return NotifyResult.failure(
                SerializationError(f"could not encode message: {e}")
            )

        try:
            response = await asyncio.wait_for(
                self._http.post_json(
                    self._settings.webhook_url.get_secret_value(), body
                ),
                timeout=context.timeout,
            )
        except (httpx.HTTPError, asyncio.TimeoutError) as e:
            return NotifyResult.failure(
                TransportError(
                    f"wecom robot request failed: {_describe(e)}",
                    details={"error_type": type(e).__name__},
                )
            )

        raw = response.content.decode("utf-8", errors="replace")
        logger.debug(
            "wecomrobot_response", status_code=response.status_code, response=raw
        )

        try:
            reply = WeComRobotResponse.model_validate_json(response.content)
        except ValidationError as e:
            return NotifyResult.failure(
                ResponseDecodeError(
                    f"invalid wecom robot response: {e.errors()[0]['msg']}",
                    details={"status_code": response.status_code},
                )
            )

        # https://developer.work.weixin.qq.com/document/path/90313
        if reply.ok:
            return NotifyResult.success()
        return NotifyResult.failure(ApplicationRejection(reply.error, code=reply.code))

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "WeComRobotNotifier":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
