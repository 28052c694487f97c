from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from urllib.parse import urlparse


class BatchStatus(str, Enum):
    RECEIVED = "received"
    DOWNLOADED = "downloaded"
    STORED = "stored"
    XML_VALID = "xml_valid"
    XML_INVALID = "xml_invalid"
    PROCESSED = "processed"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    DECODED = "decoded"
    VALID = "valid"
    INVALID = "invalid"
    SENT_TO_PRINT = "sent_to_print"
    PROCESSED = "processed"


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of a validation primitive: validity, ordered errors, detected schema."""

    valid: bool
    errors: tuple[str, ...] = ()
    schema: str | None = None

    @classmethod
    def success(cls, schema: str | None = None) -> "ValidationOutcome":
        return cls(valid=True, errors=(), schema=schema)

    @classmethod
    def failure(
        cls,
        errors: str | Iterable[str],
        schema: str | None = None,
    ) -> "ValidationOutcome":
        if isinstance(errors, str):
            errors = (errors,)
        return cls(valid=False, errors=tuple(errors), schema=schema)


def _require_text(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value


@dataclass(frozen=True)
class BlobReference:
    """Storage URL split into its container name and blob name."""

    url: str
    container_name: str
    blob_name: str

    def __post_init__(self) -> None:
        _require_text(self.url, "URL")
        _require_text(self.container_name, "Container name")
        _require_text(self.blob_name, "Blob name")

    @classmethod
    def from_url(cls, url: str) -> "BlobReference":
        """First path segment is the container, the rest is the blob name.

        Raises:
            ValueError: if url is empty, not absolute, or has fewer than two segments.
        """
        _require_text(url, "URL")
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid blob URL format: {url}")
        segments = parsed.path.lstrip("/").split("/")
        if len(segments) < 2:
            raise ValueError(f"Invalid blob URL format: {url}")
        return cls(url, segments[0], "/".join(segments[1:]))


class Document:
    """One encoded document extracted from a batch envelope."""

    def __init__(self, document_id: str, encoded_content: str) -> None:
        self._document_id = _require_text(document_id, "Document ID")
        self._encoded_content = _require_text(encoded_content, "Encoded content")
        self.decoded_content: str | None = None
        self.schema: str | None = None
        self.is_valid = False
        self.validation_errors: list[str] = []
        self.status = DocumentStatus.PENDING

    @property
    def document_id(self) -> str:
        return self._document_id

    @property
    def encoded_content(self) -> str:
        return self._encoded_content

    def set_decoded_content(self, decoded_content: str) -> None:
        self.decoded_content = _require_text(decoded_content, "Decoded content")
        self.status = DocumentStatus.DECODED

    def apply_validation(self, outcome: ValidationOutcome) -> None:
        self.is_valid = outcome.valid
        self.validation_errors = list(outcome.errors)
        self.schema = outcome.schema
        self.status = DocumentStatus.VALID if outcome.valid else DocumentStatus.INVALID

    def mark_sent_to_print(self) -> None:
        if not self.is_valid:
            raise ValueError(
                f"Cannot send invalid document {self._document_id} to print service"
            )
        self.status = DocumentStatus.SENT_TO_PRINT

    def mark_processed(self) -> None:
        self.status = DocumentStatus.PROCESSED

    def __repr__(self) -> str:
        return f"Document(id={self._document_id!r}, status={self.status.value})"


class DocumentBatch:
    """Aggregate for one processing run over a single source payload.

    Owned by exactly one orchestrator run; stage handlers mutate it in place as
    they complete. The XML validity flag and its error list live in one
    ValidationOutcome so they can never be updated separately.
    """

    def __init__(self, batch_id: str, source_reference: str) -> None:
        self._batch_id = _require_text(batch_id, "Batch ID")
        self._source_reference = _require_text(source_reference, "Source reference")
        self.internal_reference: str | None = None
        self.raw_payload: str | None = None
        self._documents: list[Document] = []
        self._xml_validation: ValidationOutcome | None = None
        self.status = BatchStatus.RECEIVED
        self.created_at = datetime.now(timezone.utc)
        self.processed_at: datetime | None = None

    @property
    def batch_id(self) -> str:
        return self._batch_id

    @property
    def source_reference(self) -> str:
        return self._source_reference

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(self._documents)

    @property
    def is_xml_valid(self) -> bool:
        return self._xml_validation is not None and self._xml_validation.valid

    @property
    def xml_validation_errors(self) -> list[str]:
        if self._xml_validation is None:
            return []
        return list(self._xml_validation.errors)

    @property
    def xml_rejected(self) -> bool:
        """True once the envelope check has run and failed."""
        return self._xml_validation is not None and not self._xml_validation.valid

    def set_raw_payload(self, payload: str) -> None:
        self.raw_payload = _require_text(payload, "XML content")
        self.status = BatchStatus.DOWNLOADED

    def set_internal_reference(self, reference: str) -> None:
        self.internal_reference = _require_text(reference, "Internal reference")
        self.status = BatchStatus.STORED

    def apply_xml_validation(self, outcome: ValidationOutcome) -> None:
        self._xml_validation = outcome
        self.status = BatchStatus.XML_VALID if outcome.valid else BatchStatus.XML_INVALID

    def add_document(self, document: Document) -> None:
        self._documents.append(document)

    def valid_documents(self) -> list[Document]:
        return [d for d in self._documents if d.is_valid]

    def invalid_documents(self) -> list[Document]:
        return [d for d in self._documents if not d.is_valid]

    def mark_processed(self) -> None:
        for document in self._documents:
            document.mark_processed()
        self.status = BatchStatus.PROCESSED
        self.processed_at = datetime.now(timezone.utc)
