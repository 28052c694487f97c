from abc import ABC, abstractmethod


class BaseContentStore(ABC):
    """Contract for retrieving source payloads and keeping an internal copy."""

    @abstractmethod
    def fetch(self, reference: str) -> str:
        """Return the text behind a source reference.

        Raises:
            ContentStoreError: if the payload cannot be retrieved.
        """

    @abstractmethod
    def archive(self, content: str, batch_id: str) -> str:
        """Store a copy of the payload and return its internal reference.

        Raises:
            ContentStoreError: if the payload cannot be stored.
        """

    @abstractmethod
    def archive_document(self, content: str, document_id: str, batch_id: str) -> str:
        """Store a copy of one decoded document and return its internal reference.

        Raises:
            ContentStoreError: if the document cannot be stored.
        """


class BaseErrorReporter(ABC):
    """Contract for the endpoint that receives validation errors."""

    @abstractmethod
    def report_validation_error(
        self,
        batch_id: str,
        error_type: str,
        errors: list[str],
    ) -> None:
        """Send one validation error entry.

        Raises:
            ErrorReportingError: on any delivery failure.
        """


class BasePrintClient(ABC):
    """Contract for the print submission endpoint."""

    @abstractmethod
    def submit(self, document_id: str, content: str, batch_id: str) -> None:
        """Submit one decoded document for printing.

        Raises:
            PrintSubmissionError: on any delivery failure.
        """
