from docbatch.dispatch.base import BaseCommandHandler
from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.dispatcher import Dispatcher
from docbatch.dispatch.exceptions import HandlerFaultError, OperationCancelledError
from docbatch.logging.logger import Log
from docbatch.pipeline.commands import (
    BatchOutcome,
    DownloadAndValidateXml,
    ProcessDocumentBatch,
    ProcessDocuments,
    ReportInvalidResults,
    SubmitValidDocuments,
)

CANCELLED_MESSAGE = "Batch processing cancelled"


def _is_cancellation(exc: BaseException) -> bool:
    if isinstance(exc, HandlerFaultError):
        return isinstance(exc.original, OperationCancelledError)
    return isinstance(exc, OperationCancelledError)


class BatchOrchestrator(BaseCommandHandler[ProcessDocumentBatch, BatchOutcome]):
    """Runs one batch through the pipeline stages via the dispatcher.

    Pipeline: download+validate XML -> process documents -> report invalid
    -> submit valid. Stages run strictly in order and cancellation is checked
    between them. Every fault is turned into a failed BatchOutcome here; the
    caller decides whether to retry the run.

    The dispatcher is bound after the registry is built, since the
    orchestrator is itself registered in it.
    """

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        self._dispatcher = dispatcher

    def bind(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def handle(
        self,
        command: ProcessDocumentBatch,
        cancellation: CancellationToken,
    ) -> BatchOutcome:
        Log.info(
            f"Starting processing of batch {command.batch_id} "
            f"from {command.source_reference}"
        )
        try:
            return self._run(command, cancellation)
        except Exception as exc:
            if _is_cancellation(exc):
                Log.warning(f"Processing of batch {command.batch_id} was cancelled")
                return BatchOutcome.failed(command.batch_id, CANCELLED_MESSAGE)
            Log.exception(f"Unexpected error processing batch {command.batch_id}: {exc}")
            return BatchOutcome.failed(command.batch_id, f"Unexpected error: {exc}")

    def _run(self, command: ProcessDocumentBatch, cancellation: CancellationToken) -> BatchOutcome:
        dispatcher = self._require_dispatcher()
        batch_id = command.batch_id

        # Step 1: download, archive, validate envelope
        cancellation.raise_if_cancelled()
        download = dispatcher.dispatch_command(
            DownloadAndValidateXml(command.source_reference, batch_id), cancellation
        )
        if not download.success or download.batch is None:
            Log.error(
                f"Failed to download or validate XML for batch {batch_id}: "
                f"{download.error_message}"
            )
            if download.batch is not None:
                cancellation.raise_if_cancelled()
                report = dispatcher.dispatch_command(
                    ReportInvalidResults(download.batch, []), cancellation
                )
                if not report.success:
                    Log.warning(
                        f"Failed to report XML errors for batch {batch_id}: "
                        f"{report.error_message}"
                    )
            return BatchOutcome.failed(
                batch_id, download.error_message or "XML download produced no batch"
            )
        batch = download.batch

        # Step 2: decode and validate each document
        cancellation.raise_if_cancelled()
        processed = dispatcher.dispatch_command(ProcessDocuments(batch), cancellation)
        if not processed.success:
            Log.error(
                f"Failed to process documents for batch {batch_id}: {processed.error_message}"
            )
            return BatchOutcome.failed(batch_id, processed.error_message)

        # Step 3: route invalid documents to reporting, valid ones to print
        invalid_documents = batch.invalid_documents()
        valid_documents = batch.valid_documents()

        if invalid_documents:
            cancellation.raise_if_cancelled()
            report = dispatcher.dispatch_command(
                ReportInvalidResults(batch, invalid_documents), cancellation
            )
            if not report.success:
                Log.warning(
                    f"Failed to report some validation results for batch {batch_id}: "
                    f"{report.error_message}"
                )

        if valid_documents:
            cancellation.raise_if_cancelled()
            printed = dispatcher.dispatch_command(
                SubmitValidDocuments(valid_documents, batch_id), cancellation
            )
            if not printed.success:
                Log.warning(
                    f"Failed to send some documents to print service for batch {batch_id}: "
                    f"{printed.error_message}"
                )

        # Step 4: terminal state
        batch.mark_processed()
        Log.info(
            f"Completed processing of batch {batch_id}. "
            f"Valid: {len(valid_documents)}, Invalid: {len(invalid_documents)}"
        )
        return BatchOutcome(
            batch_id=batch_id,
            success=True,
            processed_document_count=len(batch.documents),
            valid_document_count=len(valid_documents),
            invalid_document_count=len(invalid_documents),
        )

    def _require_dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            raise RuntimeError("BatchOrchestrator is not bound to a dispatcher")
        return self._dispatcher
