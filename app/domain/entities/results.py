"""Result values returned across use-case boundaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class ActionResult(Generic[T]):
    """Discriminated success/failure value carrying optional ``data``."""

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "ActionResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ActionResult[T]":
        return cls(success=False, error=error)


@dataclass
class EmitResult:
    """Outcome of persisting a batch of notifications.

    ``inserted_count`` counts rows committed before any failing batch.
    """

    success: bool
    inserted_count: int = 0
    error: str | None = None


@dataclass
class FanOutReport:
    """Per-channel counters collected while dispatching notifications."""

    users: int = 0
    sms_sent: int = 0
    sms_errors: int = 0
    sms_skipped: int = 0
    email_sent: int = 0
    email_errors: int = 0
    email_skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def as_payload(self) -> dict[str, int]:
        return {
            "users": self.users,
            "sms_sent": self.sms_sent,
            "sms_errors": self.sms_errors,
            "sms_skipped": self.sms_skipped,
            "email_sent": self.email_sent,
            "email_errors": self.email_errors,
            "email_skipped": self.email_skipped,
        }


__all__ = ["ActionResult", "EmitResult", "FanOutReport"]
