"""Notifier protocol: dispatchers depend on this, not the concrete implementation."""

from typing import Optional, Protocol, Sequence

from schemas.models.alert import Alert
from schemas.models.notify_context import NotifyContext
from shared.result import NotifyResult


class Notifier(Protocol):
    async def notify(
        self, alerts: Sequence[Alert], context: Optional[NotifyContext] = None
    ) -> NotifyResult: ...
