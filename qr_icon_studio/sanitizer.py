"""Normalize user text into something safe to encode as a byte payload."""

import logging
import re

logger = logging.getLogger(__name__)

BOM = "\ufeff"
REVERSED_BOM = "\ufffe"

# C0 controls and DEL, except tab (0x09), line feed (0x0A) and carriage return (0x0D)
_CONTROL_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# Zero-width space, zero-width non-joiner and a stray BOM.
# Zero-width joiner (U+200D) is kept: emoji sequences and several scripts need it.
_ZERO_WIDTH_CHARS = re.compile("[\u200b\u200c\ufeff]")


def _clean_once(text: str) -> str:
    if text.startswith(BOM):
        text = text[1:]
    if text.startswith(REVERSED_BOM):
        text = text[1:]
    text = _CONTROL_CHARS.sub("", text)
    return _ZERO_WIDTH_CHARS.sub("", text)


def sanitize(raw: str) -> str:
    """Strip leading BOMs, control characters and zero-width characters.

    Line feeds, carriage returns and tabs are preserved. Never raises; text
    that is entirely stripped comes back as an empty string.

    The rules are reapplied until nothing changes, because removing a control
    character can expose a new leading reversed BOM. This keeps
    ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    text = raw
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            break
        text = cleaned

    if len(text) != len(raw):
        logger.debug("Sanitized text: %d -> %d characters", len(raw), len(text))
    return text


def to_payload(text: str) -> bytes:
    """Encode sanitized text as UTF-8 without a byte-order mark."""
    return text.encode("utf-8")
