"""Outcome of handing a message to an outbound channel provider."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    id: str | None = None
    status: str | None = None
    error: str | None = None


__all__ = ["DeliveryResult"]
