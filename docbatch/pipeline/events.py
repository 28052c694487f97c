from dataclasses import dataclass

from docbatch.dispatch.base import BaseEventHandler
from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.messages import Event
from docbatch.logging.logger import Log
from docbatch.pipeline.commands import BatchOutcome


@dataclass(frozen=True)
class BatchCompleted(Event):
    """Published once a batch run has produced its terminal outcome."""

    outcome: BatchOutcome


class LogBatchOutcome(BaseEventHandler[BatchCompleted]):
    def handle(self, event: BatchCompleted, cancellation: CancellationToken) -> None:
        outcome = event.outcome
        if outcome.success:
            Log.info(
                f"Successfully processed batch {outcome.batch_id}. "
                f"Processed: {outcome.processed_document_count}, "
                f"Valid: {outcome.valid_document_count}, "
                f"Invalid: {outcome.invalid_document_count}"
            )
        else:
            Log.error(f"Failed to process batch {outcome.batch_id}: {outcome.error_message}")
