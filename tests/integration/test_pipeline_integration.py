"""End-to-end runs through the composed dispatcher with file sources and example sinks."""

from collections.abc import Callable
from pathlib import Path

import pytest

from docbatch.bootstrap import build_dispatcher
from docbatch.collaborators.example_adapters import (
    ExampleErrorReporter,
    ExamplePrintClient,
    ReportedError,
)
from docbatch.collaborators.exceptions import PrintSubmissionError
from docbatch.config.settings import Settings
from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.dispatcher import Dispatcher
from docbatch.pipeline.commands import ProcessDocumentBatch
from docbatch.pipeline.queries import DetectDocumentSchema
from docbatch.trigger.adapter import TriggerAdapter
from docbatch.worker.batch_runner import BatchRunner


class FlakyPrintClient(ExamplePrintClient):
    """Rejects one document id, accepts the rest."""

    def __init__(self, failing_id: str) -> None:
        super().__init__()
        self.failing_id = failing_id

    def submit(self, document_id: str, content: str, batch_id: str) -> None:
        if document_id == self.failing_id:
            raise PrintSubmissionError("printer jammed")
        super().submit(document_id, content, batch_id)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(collaborator_mode="example", archive_root=str(tmp_path / "archive"))


@pytest.fixture
def reporter() -> ExampleErrorReporter:
    return ExampleErrorReporter()


@pytest.fixture
def printer() -> ExamplePrintClient:
    return ExamplePrintClient()


@pytest.fixture
def dispatcher(
    settings: Settings, reporter: ExampleErrorReporter, printer: ExamplePrintClient
) -> Dispatcher:
    return build_dispatcher(settings, error_reporter=reporter, print_client=printer)


def _source(tmp_path: Path, payload: str) -> str:
    path = tmp_path / "incoming.xml"
    path.write_text(payload, encoding="utf-8")
    return str(path)


class TestMixedBatch:
    def test_valid_printed_invalid_reported(
        self,
        tmp_path: Path,
        mixed_payload: str,
        dispatcher: Dispatcher,
        reporter: ExampleErrorReporter,
        printer: ExamplePrintClient,
        valid_document_xml: str,
    ) -> None:
        outcome = dispatcher.dispatch_command(
            ProcessDocumentBatch(_source(tmp_path, mixed_payload), "b1")
        )

        assert outcome.success
        assert (outcome.valid_document_count, outcome.invalid_document_count) == (1, 1)
        assert [(s.document_id, s.content) for s in printer.submissions] == [
            ("doc-1", valid_document_xml)
        ]
        assert reporter.reports == [
            ReportedError(
                "b1",
                "DOCUMENT_VALIDATION_ERROR_doc-2",
                ("Document must contain a non-empty 'name' element",),
            )
        ]

    def test_payload_is_archived(
        self, tmp_path: Path, mixed_payload: str, dispatcher: Dispatcher
    ) -> None:
        dispatcher.dispatch_command(ProcessDocumentBatch(_source(tmp_path, mixed_payload), "b1"))

        archived = list((tmp_path / "archive" / "xml" / "b1").rglob("*.xml"))
        assert len(archived) == 1
        assert archived[0].read_text(encoding="utf-8") == mixed_payload

    def test_concurrent_document_workers_match(
        self,
        tmp_path: Path,
        mixed_payload: str,
        reporter: ExampleErrorReporter,
        printer: ExamplePrintClient,
    ) -> None:
        settings = Settings(
            collaborator_mode="example",
            archive_root=str(tmp_path / "archive"),
            document_workers=4,
        )
        dispatcher = build_dispatcher(settings, error_reporter=reporter, print_client=printer)

        outcome = dispatcher.dispatch_command(
            ProcessDocumentBatch(_source(tmp_path, mixed_payload), "b1")
        )

        assert (outcome.valid_document_count, outcome.invalid_document_count) == (1, 1)


class TestRejectedBatches:
    def test_invalid_envelope_reports_xml_error(
        self,
        tmp_path: Path,
        dispatcher: Dispatcher,
        reporter: ExampleErrorReporter,
        printer: ExamplePrintClient,
    ) -> None:
        outcome = dispatcher.dispatch_command(
            ProcessDocumentBatch(_source(tmp_path, "<Root><Doc>x</Doc></Root>"), "b2")
        )

        assert not outcome.success
        assert outcome.error_message is not None
        assert outcome.error_message.startswith("XML validation failed: ")
        assert [r.error_type for r in reporter.reports] == ["XML_VALIDATION_ERROR"]
        assert printer.submissions == []

    def test_missing_source_reports_nothing(
        self,
        tmp_path: Path,
        dispatcher: Dispatcher,
        reporter: ExampleErrorReporter,
    ) -> None:
        outcome = dispatcher.dispatch_command(
            ProcessDocumentBatch(str(tmp_path / "absent.xml"), "b3")
        )

        assert not outcome.success
        assert outcome.error_message is not None
        assert outcome.error_message.startswith("Error downloading and validating XML: ")
        assert reporter.reports == []

    def test_cancelled_run(
        self, tmp_path: Path, mixed_payload: str, dispatcher: Dispatcher
    ) -> None:
        token = CancellationToken()
        token.cancel()

        outcome = dispatcher.dispatch_command(
            ProcessDocumentBatch(_source(tmp_path, mixed_payload), "b4"), token
        )

        assert outcome.error_message == "Batch processing cancelled"


class TestPrintFaults:
    def test_one_print_failure_keeps_batch_successful(
        self,
        tmp_path: Path,
        settings: Settings,
        encode: Callable[[str], str],
        envelope: Callable[..., str],
        valid_document_xml: str,
    ) -> None:
        printer = FlakyPrintClient(failing_id="a")
        dispatcher = build_dispatcher(
            settings, error_reporter=ExampleErrorReporter(), print_client=printer
        )
        payload = envelope(
            ("a", encode(valid_document_xml)),
            ("b", encode(valid_document_xml)),
            ("c", encode(valid_document_xml)),
        )

        outcome = dispatcher.dispatch_command(ProcessDocumentBatch(_source(tmp_path, payload), "b5"))

        assert outcome.success
        assert [s.document_id for s in printer.submissions] == ["b", "c"]


class TestComposition:
    def test_schema_query_is_registered(self, dispatcher: Dispatcher) -> None:
        assert dispatcher.dispatch_query(DetectDocumentSchema("<data><a/></data>")) == "DataSchema"

    def test_runner_end_to_end(
        self,
        tmp_path: Path,
        mixed_payload: str,
        dispatcher: Dispatcher,
        printer: ExamplePrintClient,
    ) -> None:
        runner = BatchRunner(dispatcher, TriggerAdapter())
        event = {
            "eventType": "DocumentProcessing.BatchReceived",
            "data": {"blobUrl": _source(tmp_path, mixed_payload), "batchId": "b6"},
        }

        outcome = runner.run(event)

        assert outcome is not None
        assert outcome.success
        assert [s.batch_id for s in printer.submissions] == ["b6"]
