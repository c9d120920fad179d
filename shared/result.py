"""
NotifyResult: the outcome of one delivery attempt.

Outcome is one of SUCCESS, RETRYABLE, PERMANENT. Failures carry the
NotifyError that caused them; the outcome is derived from the error class so
the two can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from errors import NotifyError


class Outcome(str, Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    PERMANENT = "permanent"


@dataclass(frozen=True, slots=True)
class NotifyResult:
    outcome: Outcome
    error: Optional[NotifyError] = None

    @classmethod
    def success(cls) -> "NotifyResult":
        return cls(Outcome.SUCCESS)

    @classmethod
    def failure(cls, error: NotifyError) -> "NotifyResult":
        outcome = Outcome.RETRYABLE if error.retryable else Outcome.PERMANENT
        return cls(outcome, error)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def retryable(self) -> bool:
        return self.outcome is Outcome.RETRYABLE

    def as_tuple(self) -> tuple[bool, Optional[NotifyError]]:
        """Return the ``(retryable, error)`` pair dispatchers switch on."""
        return self.retryable, self.error
