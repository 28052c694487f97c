"""Example sink adapters.

No network calls: each adapter logs and records what it was asked to send.
Useful for local development, tests, and as a template for real adapters.
"""

from dataclasses import dataclass, field

from docbatch.collaborators.base import BaseErrorReporter, BasePrintClient
from docbatch.logging.logger import Log


@dataclass(frozen=True)
class ReportedError:
    batch_id: str
    error_type: str
    errors: tuple[str, ...]


@dataclass(frozen=True)
class SubmittedDocument:
    document_id: str
    batch_id: str
    content: str


@dataclass
class ExampleErrorReporter(BaseErrorReporter):
    reports: list[ReportedError] = field(default_factory=list)

    def report_validation_error(
        self,
        batch_id: str,
        error_type: str,
        errors: list[str],
    ) -> None:
        Log.info(f"[example] validation error for batch {batch_id}: {error_type} {errors}")
        self.reports.append(ReportedError(batch_id, error_type, tuple(errors)))


@dataclass
class ExamplePrintClient(BasePrintClient):
    submissions: list[SubmittedDocument] = field(default_factory=list)

    def submit(self, document_id: str, content: str, batch_id: str) -> None:
        Log.info(f"[example] print submission of document {document_id} for batch {batch_id}")
        self.submissions.append(SubmittedDocument(document_id, batch_id, content))
