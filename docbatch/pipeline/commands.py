"""Commands for the batch pipeline and the results their handlers return."""

from dataclasses import dataclass, field

from docbatch.dispatch.messages import Command
from docbatch.domain.models import Document, DocumentBatch


@dataclass(frozen=True)
class DownloadAndValidateXmlResult:
    success: bool
    batch: DocumentBatch | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class DownloadAndValidateXml(Command[DownloadAndValidateXmlResult]):
    source_reference: str
    batch_id: str


@dataclass(frozen=True)
class ProcessDocumentsResult:
    success: bool
    valid_documents: int = 0
    invalid_documents: int = 0
    error_message: str | None = None


@dataclass(frozen=True)
class ProcessDocuments(Command[ProcessDocumentsResult]):
    batch: DocumentBatch


@dataclass(frozen=True)
class ReportInvalidResultsResult:
    success: bool
    reports_sent: int = 0
    error_message: str | None = None


@dataclass(frozen=True)
class ReportInvalidResults(Command[ReportInvalidResultsResult]):
    batch: DocumentBatch
    invalid_documents: list[Document] = field(default_factory=list)


@dataclass(frozen=True)
class SubmitValidDocumentsResult:
    success: bool
    documents_sent: int = 0
    error_message: str | None = None


@dataclass(frozen=True)
class SubmitValidDocuments(Command[SubmitValidDocumentsResult]):
    valid_documents: list[Document]
    batch_id: str


@dataclass(frozen=True)
class BatchOutcome:
    """Terminal result of one batch run."""

    batch_id: str
    success: bool
    error_message: str | None = None
    processed_document_count: int = 0
    valid_document_count: int = 0
    invalid_document_count: int = 0

    @classmethod
    def failed(cls, batch_id: str, error_message: str | None) -> "BatchOutcome":
        return cls(batch_id=batch_id, success=False, error_message=error_message)


@dataclass(frozen=True)
class ProcessDocumentBatch(Command[BatchOutcome]):
    source_reference: str
    batch_id: str
