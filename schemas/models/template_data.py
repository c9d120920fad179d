"""
Data handed to message templates.

build_template_data() flattens an alert batch plus its dispatch context into
the shape templates see:

  receiver, status, alerts, group_labels, common_labels,
  common_annotations, external_url, firing_alerts, resolved_alerts
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from schemas.models.alert import Alert, AlertStatus


class TemplateAlert(BaseModel):
    """One alert as seen by a template, with its status resolved."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    status: AlertStatus
    labels: dict[str, str]
    annotations: dict[str, str]
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    generator_url: str = ""
    fingerprint: str = ""


class TemplateData(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True, validate_default=True)

    receiver: str = ""
    status: AlertStatus = AlertStatus.RESOLVED
    alerts: list[TemplateAlert] = Field(default_factory=list)
    group_labels: dict[str, str] = Field(default_factory=dict)
    common_labels: dict[str, str] = Field(default_factory=dict)
    common_annotations: dict[str, str] = Field(default_factory=dict)
    external_url: str = ""

    @property
    def firing_alerts(self) -> list[TemplateAlert]:
        return [a for a in self.alerts if a.status == AlertStatus.FIRING]

    @property
    def resolved_alerts(self) -> list[TemplateAlert]:
        return [a for a in self.alerts if a.status == AlertStatus.RESOLVED]

    def as_context(self) -> dict[str, Any]:
        """Template context: plain dicts/lists plus the firing/resolved splits."""
        context = self.model_dump()
        context["firing_alerts"] = [a.model_dump() for a in self.firing_alerts]
        context["resolved_alerts"] = [a.model_dump() for a in self.resolved_alerts]
        return context


def _common_pairs(mappings: Sequence[dict[str, str]]) -> dict[str, str]:
    """Key/value pairs present with the same value in every mapping."""
    if not mappings:
        return {}
    common = dict(mappings[0])
    for mapping in mappings[1:]:
        for key in list(common):
            if mapping.get(key) != common[key]:
                del common[key]
    return common


def build_template_data(
    alerts: Sequence[Alert],
    *,
    receiver: str = "",
    group_labels: Optional[dict[str, str]] = None,
    external_url: str = "",
    now: Optional[datetime] = None,
) -> TemplateData:
    now = now or datetime.now(timezone.utc)

    template_alerts = [
        TemplateAlert(
            status=alert.status(now),
            labels=dict(alert.labels),
            annotations=dict(alert.annotations),
            starts_at=alert.starts_at,
            ends_at=alert.ends_at,
            generator_url=alert.generator_url,
            fingerprint=alert.fingerprint,
        )
        for alert in alerts
    ]

    # The group fires while any one of its alerts does
    status = (
        AlertStatus.FIRING
        if any(a.status == AlertStatus.FIRING for a in template_alerts)
        else AlertStatus.RESOLVED
    )

    return TemplateData(
        receiver=receiver,
        status=status,
        alerts=template_alerts,
        group_labels=dict(group_labels or {}),
        common_labels=_common_pairs([a.labels for a in alerts]),
        common_annotations=_common_pairs([a.annotations for a in alerts]),
        external_url=external_url,
    )
