"""Base64 helpers shared by the envelope check and the document decoder.

Whitespace inside the content (line-wrapped base64) is ignored when decoding;
the length check still applies to the content as received.
"""

import base64
import binascii

from docbatch.validation.exceptions import DocumentDecodeError

_INVALID_BASE64 = "Invalid base64 encoded content"


def _b64decode_strict(content: str) -> bytes:
    return base64.b64decode("".join(content.split()), validate=True)


def is_base64(content: str) -> bool:
    """Return True if content is strict base64 with a length divisible by 4."""
    if len(content) % 4 != 0:
        return False
    try:
        _b64decode_strict(content)
    except (binascii.Error, ValueError):
        return False
    return True


def decode_document_content(encoded: str) -> str:
    """Decode a base64 document body into text.

    The length check runs before any decoding is attempted.

    Raises:
        DocumentDecodeError: if the content is not base64 or not UTF-8 text.
    """
    content = encoded.strip()
    if len(content) % 4 != 0:
        raise DocumentDecodeError(_INVALID_BASE64)
    try:
        raw = _b64decode_strict(content)
    except (binascii.Error, ValueError) as exc:
        raise DocumentDecodeError(_INVALID_BASE64) from exc
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DocumentDecodeError(f"Decoded content is not valid UTF-8: {exc}") from exc
