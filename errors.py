"""
Notifier error hierarchy.

NotifyError is the base for all typed errors. Each subclass declares whether
the failure it describes is worth retrying; the dispatcher reads that flag to
drive its own retry/backoff policy.

ConfigurationError is raised at construction time. Every other error is
returned to the caller inside a NotifyResult rather than raised.
"""

from __future__ import annotations

from typing import Any, Optional


class NotifyError(Exception):
    """Base notifier error. All typed errors inherit from this."""

    retryable: bool = False
    error_code: str = "internal_error"

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {
            "error": self.message,
            "code": self.error_code,
            "retryable": self.retryable,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(NotifyError):
    error_code = "configuration_error"


class TemplatingError(NotifyError):
    error_code = "templating_error"


class SerializationError(NotifyError):
    error_code = "serialization_error"


class TransportError(NotifyError):
    retryable = True
    error_code = "transport_error"


class ResponseDecodeError(NotifyError):
    retryable = True
    error_code = "response_decode_error"


class ApplicationRejection(NotifyError):
    """The endpoint answered with a non-zero errcode.

    ``message`` is the endpoint's errmsg verbatim so str(err) matches it.
    """

    error_code = "application_rejection"

    def __init__(
        self, message: str, *, code: int, details: Optional[Any] = None
    ) -> None:
        super().__init__(message, details=details)
        self.code = code

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["errcode"] = self.code
        return payload
