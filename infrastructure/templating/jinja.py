"""Jinja2 implementation of TemplateRenderer.

- StrictUndefined: a typo in a template is an error, not an empty string
- no autoescaping: output is a plain-text chat message
- named templates come from templates/ next to this module, plus any passed
  in as ``extra_templates`` (which win on name clashes)
"""

import os
from typing import Mapping, Optional

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
)

from errors import TemplatingError
from schemas.models.template_data import TemplateData

_DEFAULT_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


class JinjaTemplateRenderer:
    def __init__(
        self,
        extra_templates: Optional[Mapping[str, str]] = None,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._jinja = Environment(
            loader=ChoiceLoader(
                [
                    DictLoader(dict(extra_templates or {})),
                    FileSystemLoader(template_dir),
                ]
            ),
            undefined=StrictUndefined,
            autoescape=False,
        )

    def render(self, source: str, data: TemplateData) -> str:
        try:
            return self._jinja.from_string(source).render(data.as_context())
        except TemplateError as e:
            raise TemplatingError(
                f"templating error: {e}", details={"error_type": type(e).__name__}
            ) from e
        except (TypeError, ValueError, ArithmeticError, LookupError) as e:
            # raised by filters/expressions evaluated against alert data
            raise TemplatingError(
                f"templating error: {e}", details={"error_type": type(e).__name__}
            ) from e
