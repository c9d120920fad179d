"""TemplateRenderer protocol: notifiers depend on this, not the concrete implementation."""

from typing import Protocol

from schemas.models.template_data import TemplateData


class TemplateRenderer(Protocol):
    def render(self, source: str, data: TemplateData) -> str: ...
