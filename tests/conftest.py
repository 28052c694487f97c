import base64
from collections.abc import Callable

import pytest

VALID_DOCUMENT_XML = "<document><name>Quarterly report</name></document>"
INVALID_DOCUMENT_XML = "<document><title>No name here</title></document>"


def _encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _envelope(*docs: tuple[str, str]) -> str:
    body = "".join(f'<Doc id="{doc_id}">{content}</Doc>' for doc_id, content in docs)
    return f"<Docs>{body}</Docs>"


@pytest.fixture()
def encode() -> Callable[[str], str]:
    """Base64-encode a UTF-8 string."""
    return _encode


@pytest.fixture()
def envelope() -> Callable[..., str]:
    """Build a <Docs> payload from (id, base64 content) pairs."""
    return _envelope


@pytest.fixture()
def valid_document_xml() -> str:
    return VALID_DOCUMENT_XML


@pytest.fixture()
def invalid_document_xml() -> str:
    return INVALID_DOCUMENT_XML


@pytest.fixture()
def mixed_payload() -> str:
    """One valid document (doc-1) and one that fails content validation (doc-2)."""
    return _envelope(
        ("doc-1", _encode(VALID_DOCUMENT_XML)),
        ("doc-2", _encode(INVALID_DOCUMENT_XML)),
    )
