"""Conversion of rich-text notification bodies into plain text."""

from __future__ import annotations

import html
import re
from typing import Final

_BLOCK_TAGS: Final[re.Pattern[str]] = re.compile(
    r"<\s*(br|/p|/div|/li|/h[1-6])\s*/?\s*>", re.IGNORECASE
)
_ANY_TAG: Final[re.Pattern[str]] = re.compile(r"<[^>]+>")
_SCRIPT_OR_STYLE: Final[re.Pattern[str]] = re.compile(
    r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_SPACES: Final[re.Pattern[str]] = re.compile(r"[ \t\r\f\v]+")
_BLANK_LINES: Final[re.Pattern[str]] = re.compile(r"\n\s*\n+")


def html_to_plain_text(value: str | None) -> str:
    """Strip markup from ``value`` keeping line breaks of block elements."""

    if not value:
        return ""

    text = _SCRIPT_OR_STYLE.sub("", value)
    text = _BLOCK_TAGS.sub("\n", text)
    text = _ANY_TAG.sub("", text)
    text = html.unescape(text).replace("\xa0", " ")
    text = _SPACES.sub(" ", text)
    lines = [line.strip() for line in text.split("\n")]
    text = "\n".join(lines)
    return _BLANK_LINES.sub("\n", text).strip()


__all__ = ["html_to_plain_text"]
