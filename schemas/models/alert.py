"""
Alert model.

An Alert is one firing or resolved condition as handed over by the
dispatcher. Instances are frozen: the notifier only reads them.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AlertStatus(str, Enum):
    FIRING = "firing"
    RESOLVED = "resolved"


def _as_utc(dt: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


def labels_fingerprint(labels: dict[str, str]) -> str:
    """Stable identity of a label set, independent of key order."""
    payload = json.dumps(labels, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


class Alert(BaseModel):
    """
    A single alert.

    Accepts both snake_case and the camelCase keys used on the wire
    (``startsAt``, ``endsAt``, ``generatorURL``).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    starts_at: Optional[datetime] = Field(default=None, alias="startsAt")
    ends_at: Optional[datetime] = Field(default=None, alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: str = ""

    @model_validator(mode="after")
    def _derive_fingerprint(self) -> "Alert":
        if not self.fingerprint:
            # frozen model: bypass __setattr__ once, during validation
            object.__setattr__(self, "fingerprint", labels_fingerprint(self.labels))
        return self

    def status(self, at: Optional[datetime] = None) -> AlertStatus:
        """Resolved once ``ends_at`` is set and not in the future."""
        if self.ends_at is None:
            return AlertStatus.FIRING
        at = _as_utc(at or datetime.now(timezone.utc))
        if _as_utc(self.ends_at) <= at:
            return AlertStatus.RESOLVED
        return AlertStatus.FIRING

    def resolved(self, at: Optional[datetime] = None) -> bool:
        return self.status(at) is AlertStatus.RESOLVED
