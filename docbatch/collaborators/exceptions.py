class CollaboratorError(Exception):
    """Base exception for failures of external collaborators."""


class ContentStoreError(CollaboratorError):
    """Raised when a payload cannot be fetched or archived."""


class ContentStoreNetworkError(ContentStoreError):
    """Raised when fetching a payload fails due to network issues."""


class ErrorReportingError(CollaboratorError):
    """Raised when the error reporting endpoint rejects a report."""


class ErrorReportingNetworkError(ErrorReportingError):
    """Raised when the error reporting endpoint cannot be reached."""


class PrintSubmissionError(CollaboratorError):
    """Raised when the print service rejects a document."""


class PrintSubmissionNetworkError(PrintSubmissionError):
    """Raised when the print service cannot be reached."""
