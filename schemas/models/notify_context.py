"""
Per-attempt context passed by the dispatcher alongside an alert batch.

receiver / group_labels / group_key / external_url feed the message template.
timeout is the deadline for the whole network exchange, in seconds; None
leaves only the HTTP client's own timeouts in force.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NotifyContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    receiver: str = ""
    group_key: str = ""
    group_labels: dict[str, str] = Field(default_factory=dict)
    external_url: str = ""
    timeout: Optional[float] = Field(default=None, gt=0)
