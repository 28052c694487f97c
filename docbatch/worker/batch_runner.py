from collections.abc import Mapping
from typing import Any

from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.dispatcher import Dispatcher
from docbatch.dispatch.exceptions import EventHandlerFaultError
from docbatch.logging.logger import Log
from docbatch.pipeline.commands import BatchOutcome, ProcessDocumentBatch
from docbatch.pipeline.events import BatchCompleted
from docbatch.trigger.adapter import TriggerAdapter
from docbatch.trigger.models import TriggerEvent


class BatchRunner:
    """Run one trigger event through the orchestrator and publish the outcome."""

    def __init__(self, dispatcher: Dispatcher, trigger_adapter: TriggerAdapter) -> None:
        self._dispatcher = dispatcher
        self._trigger_adapter = trigger_adapter

    def run(
        self,
        event: Mapping[str, Any] | TriggerEvent,
        cancellation: CancellationToken | None = None,
    ) -> BatchOutcome | None:
        """Process the batch an event points at.

        Returns None when the event does not name a source. Unexpected errors
        are logged and re-raised so the transport can redeliver the event.
        """
        request = self._trigger_adapter.parse(event)
        if request is None:
            Log.warning("Trigger event ignored: no source reference found")
            return None

        token = cancellation or CancellationToken()
        Log.info(f"Processing batch {request.batch_id} from {request.source_reference}")
        try:
            outcome = self._dispatcher.dispatch_command(
                ProcessDocumentBatch(request.source_reference, request.batch_id), token
            )
        except Exception as exc:
            Log.error(f"Unexpected error processing trigger event: {exc}")
            raise

        self._publish(outcome, token)
        return outcome

    def _publish(self, outcome: BatchOutcome, cancellation: CancellationToken) -> None:
        try:
            self._dispatcher.dispatch_event(BatchCompleted(outcome), cancellation)
        except EventHandlerFaultError as exc:
            Log.warning(f"Batch {outcome.batch_id} outcome subscribers failed: {exc}")
