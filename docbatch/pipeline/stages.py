"""The four pipeline stages, each dispatched as a command."""

import xml.etree.ElementTree as ET
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from docbatch.collaborators.base import BaseContentStore, BaseErrorReporter, BasePrintClient
from docbatch.dispatch.base import BaseCommandHandler
from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.exceptions import OperationCancelledError
from docbatch.domain.models import Document, DocumentBatch, ValidationOutcome
from docbatch.logging.logger import Log
from docbatch.pipeline.commands import (
    DownloadAndValidateXml,
    DownloadAndValidateXmlResult,
    ProcessDocuments,
    ProcessDocumentsResult,
    ReportInvalidResults,
    ReportInvalidResultsResult,
    SubmitValidDocuments,
    SubmitValidDocumentsResult,
)
from docbatch.validation.content import validate_document
from docbatch.validation.encoding import decode_document_content
from docbatch.validation.envelope import DOC_ELEMENT, ID_ATTRIBUTE, validate_xml_structure
from docbatch.validation.xml_utils import element_text

XML_VALIDATION_ERROR = "XML_VALIDATION_ERROR"
DOCUMENT_VALIDATION_ERROR_PREFIX = "DOCUMENT_VALIDATION_ERROR_"


class DownloadAndValidateXmlHandler(
    BaseCommandHandler[DownloadAndValidateXml, DownloadAndValidateXmlResult]
):
    """Fetch, archive and check the envelope, then extract its documents."""

    def __init__(self, content_store: BaseContentStore) -> None:
        self._content_store = content_store

    def handle(
        self,
        command: DownloadAndValidateXml,
        cancellation: CancellationToken,
    ) -> DownloadAndValidateXmlResult:
        Log.info(
            f"Downloading payload from {command.source_reference} "
            f"for batch {command.batch_id}"
        )
        try:
            batch = DocumentBatch(command.batch_id, command.source_reference)
        except ValueError as exc:
            Log.error(f"Cannot start batch {command.batch_id!r}: {exc}")
            return DownloadAndValidateXmlResult(
                success=False,
                error_message=f"Error downloading and validating XML: {exc}",
            )

        try:
            self._load_payload(batch, cancellation)
        except OperationCancelledError:
            raise
        except Exception as exc:
            Log.error(f"Error downloading and validating XML for batch {batch.batch_id}: {exc}")
            return DownloadAndValidateXmlResult(
                success=False,
                batch=batch,
                error_message=f"Error downloading and validating XML: {exc}",
            )

        outcome = validate_xml_structure(batch.raw_payload or "")
        batch.apply_xml_validation(outcome)
        if not outcome.valid:
            message = f"XML validation failed: {', '.join(outcome.errors)}"
            Log.warning(f"Batch {batch.batch_id}: {message}")
            return DownloadAndValidateXmlResult(
                success=False, batch=batch, error_message=message
            )

        try:
            self._extract_documents(batch)
        except Exception as exc:
            Log.error(f"Failed to parse documents from XML for batch {batch.batch_id}: {exc}")
            batch.apply_xml_validation(
                ValidationOutcome.failure(f"Failed to parse documents: {exc}")
            )
            return DownloadAndValidateXmlResult(
                success=False,
                batch=batch,
                error_message=f"Failed to parse documents from XML: {exc}",
            )

        Log.info(
            f"Parsed {len(batch.documents)} documents from batch {batch.batch_id}"
        )
        return DownloadAndValidateXmlResult(success=True, batch=batch)

    def _load_payload(self, batch: DocumentBatch, cancellation: CancellationToken) -> None:
        cancellation.raise_if_cancelled()
        batch.set_raw_payload(self._content_store.fetch(batch.source_reference))
        cancellation.raise_if_cancelled()
        batch.set_internal_reference(
            self._content_store.archive(batch.raw_payload or "", batch.batch_id)
        )

    @staticmethod
    def _extract_documents(batch: DocumentBatch) -> None:
        root = ET.fromstring(batch.raw_payload or "")
        for element in root.iter(DOC_ELEMENT):
            document_id = element.get(ID_ATTRIBUTE) or ""
            content = element_text(element).strip()
            if not document_id.strip() or not content:
                Log.debug(f"Skipping incomplete Doc element in batch {batch.batch_id}")
                continue
            batch.add_document(Document(document_id, content))


class ProcessDocumentsHandler(BaseCommandHandler[ProcessDocuments, ProcessDocumentsResult]):
    """Decode and validate every document; one bad document never stops the rest.

    With max_workers > 1 documents are processed on a thread pool. Each task
    touches only its own Document and counts are taken after the pool joins.
    """

    def __init__(self, max_workers: int = 1) -> None:
        self._max_workers = max(1, max_workers)

    def handle(
        self,
        command: ProcessDocuments,
        cancellation: CancellationToken,
    ) -> ProcessDocumentsResult:
        batch = command.batch
        try:
            documents = batch.documents
            Log.info(f"Processing {len(documents)} documents for batch {batch.batch_id}")
            if self._max_workers > 1 and len(documents) > 1:
                self._process_concurrently(documents, cancellation)
            else:
                for document in documents:
                    cancellation.raise_if_cancelled()
                    self._process_document(document)
        except OperationCancelledError:
            raise
        except Exception as exc:
            Log.error(f"Error processing documents for batch {batch.batch_id}: {exc}")
            return ProcessDocumentsResult(
                success=False,
                error_message=f"Error processing documents: {exc}",
            )

        valid_count = sum(1 for d in documents if d.is_valid)
        invalid_count = len(documents) - valid_count
        Log.info(
            f"Completed processing documents for batch {batch.batch_id}. "
            f"Valid: {valid_count}, Invalid: {invalid_count}"
        )
        return ProcessDocumentsResult(
            success=True,
            valid_documents=valid_count,
            invalid_documents=invalid_count,
        )

    def _process_concurrently(
        self,
        documents: Sequence[Document],
        cancellation: CancellationToken,
    ) -> None:
        workers = min(self._max_workers, len(documents))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._process_unless_cancelled, document, cancellation)
                for document in documents
            ]
            for future in futures:
                future.result()
        cancellation.raise_if_cancelled()

    def _process_unless_cancelled(
        self,
        document: Document,
        cancellation: CancellationToken,
    ) -> None:
        if not cancellation.is_cancelled:
            self._process_document(document)

    @staticmethod
    def _process_document(document: Document) -> None:
        try:
            decoded = decode_document_content(document.encoded_content)
            document.set_decoded_content(decoded)
            outcome = validate_document(decoded)
            document.apply_validation(outcome)
        except Exception as exc:
            Log.error(f"Error processing document {document.document_id}: {exc}")
            document.apply_validation(ValidationOutcome.failure(f"Processing error: {exc}"))
            return

        if outcome.valid:
            Log.debug(f"Document {document.document_id} validated successfully")
        else:
            Log.warning(
                f"Document {document.document_id} validation failed: "
                f"{', '.join(outcome.errors)}"
            )


class ReportInvalidResultsHandler(
    BaseCommandHandler[ReportInvalidResults, ReportInvalidResultsResult]
):
    """Send the batch-level XML error and one entry per invalid document."""

    def __init__(self, error_reporter: BaseErrorReporter) -> None:
        self._error_reporter = error_reporter

    def handle(
        self,
        command: ReportInvalidResults,
        cancellation: CancellationToken,
    ) -> ReportInvalidResultsResult:
        batch = command.batch
        entries: list[tuple[str, list[str]]] = []
        if batch.xml_rejected:
            entries.append((XML_VALIDATION_ERROR, batch.xml_validation_errors))
        entries.extend(
            (f"{DOCUMENT_VALIDATION_ERROR_PREFIX}{d.document_id}", list(d.validation_errors))
            for d in command.invalid_documents
        )
        Log.info(
            f"Sending validation results for batch {batch.batch_id} "
            f"with {len(command.invalid_documents)} invalid documents"
        )

        sent = 0
        failures: list[str] = []
        for error_type, errors in entries:
            cancellation.raise_if_cancelled()
            try:
                self._error_reporter.report_validation_error(batch.batch_id, error_type, errors)
                sent += 1
            except Exception as exc:
                Log.error(f"Error reporting {error_type} for batch {batch.batch_id}: {exc}")
                failures.append(f"Failed to report {error_type}: {exc}")

        Log.info(
            f"Sent {sent} of {len(entries)} validation results for batch {batch.batch_id}"
        )
        return ReportInvalidResultsResult(
            success=not failures,
            reports_sent=sent,
            error_message="; ".join(failures) if failures else None,
        )


class SubmitValidDocumentsHandler(
    BaseCommandHandler[SubmitValidDocuments, SubmitValidDocumentsResult]
):
    """Submit decoded valid documents to the print service, best-effort."""

    def __init__(self, print_client: BasePrintClient) -> None:
        self._print_client = print_client

    def handle(
        self,
        command: SubmitValidDocuments,
        cancellation: CancellationToken,
    ) -> SubmitValidDocumentsResult:
        Log.info(
            f"Sending {len(command.valid_documents)} valid documents to print service "
            f"for batch {command.batch_id}"
        )
        sent = 0
        failures: list[str] = []
        for document in command.valid_documents:
            cancellation.raise_if_cancelled()
            if not document.decoded_content or not document.decoded_content.strip():
                Log.warning(f"Document {document.document_id} has no decoded content, skipping")
                continue
            try:
                if not document.is_valid:
                    raise ValueError("document did not pass validation")
                self._print_client.submit(
                    document.document_id,
                    document.decoded_content,
                    command.batch_id,
                )
                document.mark_sent_to_print()
                sent += 1
            except Exception as exc:
                Log.error(f"Error sending document {document.document_id} to print service: {exc}")
                failures.append(
                    f"Failed to send document {document.document_id} to print service: {exc}"
                )

        Log.info(
            f"Completed sending documents to print service for batch {command.batch_id}. "
            f"Sent: {sent}, Errors: {len(failures)}"
        )
        return SubmitValidDocumentsResult(
            success=not failures,
            documents_sent=sent,
            error_message="; ".join(failures) if failures else None,
        )
