"""Domain entity describing who a notification can be delivered to."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Recipient:
    """Tenant contact details and per-channel opt-in flags."""

    user_id: str
    building_id: str | None = None
    email: str | None = None
    phone_number: str | None = None
    email_opt_in: bool = False
    sms_opt_in: bool = False
    whatsapp_opt_in: bool = False
    viber_opt_in: bool = False


__all__ = ["Recipient"]
