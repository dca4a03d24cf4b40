"""Phone number normalization for outbound SMS/WhatsApp delivery."""

from __future__ import annotations

import re
from typing import Final

_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")


class InvalidPhoneNumberError(ValueError):
    """Raised when a phone number cannot be converted to ``+<digits>`` form."""


def normalize_phone_number(value: str | None) -> str:
    """Return ``value`` as ``+<digits>`` or raise :class:`InvalidPhoneNumberError`.

    Whitespace is removed and a single optional leading ``+`` is accepted;
    anything other than digits after it is rejected.
    """

    cleaned = _WHITESPACE.sub("", value or "")
    digits = cleaned[1:] if cleaned.startswith("+") else cleaned
    if not digits or not digits.isdigit() or not digits.isascii():
        raise InvalidPhoneNumberError(
            f"Invalid phone number {value!r}: must contain only digits after '+'"
        )
    return f"+{digits}"


__all__ = ["InvalidPhoneNumberError", "normalize_phone_number"]
