from unittest.mock import MagicMock

import pytest

from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.exceptions import EventHandlerFaultError
from docbatch.pipeline.commands import BatchOutcome, ProcessDocumentBatch
from docbatch.pipeline.events import BatchCompleted
from docbatch.trigger.adapter import TriggerAdapter
from docbatch.worker.batch_runner import BatchRunner

EVENT = {"eventType": "Custom", "data": {"blobUrl": "in/b1.xml", "batchId": "b1"}}


def _make_runner() -> tuple[BatchRunner, MagicMock]:
    dispatcher = MagicMock()
    dispatcher.dispatch_command.return_value = BatchOutcome(batch_id="b1", success=True)
    return BatchRunner(dispatcher, TriggerAdapter()), dispatcher


class TestBatchRunner:
    def test_dispatches_batch_command(self) -> None:
        runner, dispatcher = _make_runner()
        token = CancellationToken()

        outcome = runner.run(EVENT, token)

        assert outcome == BatchOutcome(batch_id="b1", success=True)
        dispatcher.dispatch_command.assert_called_once_with(
            ProcessDocumentBatch("in/b1.xml", "b1"), token
        )

    def test_publishes_completion_event(self) -> None:
        runner, dispatcher = _make_runner()

        outcome = runner.run(EVENT)

        event, _token = dispatcher.dispatch_event.call_args.args
        assert event == BatchCompleted(outcome)

    def test_event_without_source_is_skipped(self) -> None:
        runner, dispatcher = _make_runner()

        assert runner.run({"data": {}}) is None
        dispatcher.dispatch_command.assert_not_called()
        dispatcher.dispatch_event.assert_not_called()

    def test_unexpected_error_is_reraised(self) -> None:
        runner, dispatcher = _make_runner()
        dispatcher.dispatch_command.side_effect = RuntimeError("registry broken")

        with pytest.raises(RuntimeError, match="registry broken"):
            runner.run(EVENT)

        dispatcher.dispatch_event.assert_not_called()

    def test_subscriber_failure_does_not_change_outcome(self) -> None:
        runner, dispatcher = _make_runner()
        dispatcher.dispatch_event.side_effect = EventHandlerFaultError(
            BatchCompleted, [("LogBatchOutcome", RuntimeError("x"))]
        )

        outcome = runner.run(EVENT)

        assert outcome is not None
        assert outcome.success
