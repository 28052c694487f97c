"""JSON-over-HTTP adapters for the error reporting and print endpoints."""

from datetime import datetime, timezone

import httpx

from docbatch.collaborators.base import BaseErrorReporter, BasePrintClient
from docbatch.collaborators.exceptions import (
    ErrorReportingError,
    ErrorReportingNetworkError,
    PrintSubmissionError,
    PrintSubmissionNetworkError,
)
from docbatch.logging.logger import Log

SOURCE_NAME = "DocumentProcessingService"


def _build_client(
    client: httpx.Client | None,
    *,
    base_url: str,
    api_key: str,
    timeout_seconds: int,
    user_agent: str,
) -> httpx.Client:
    if client is not None:
        return client
    return httpx.Client(
        base_url=base_url.rstrip("/"),
        timeout=timeout_seconds,
        headers={
            "Authorization": f"Bearer {api_key}",
            "User-Agent": user_agent,
        },
    )


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class HttpErrorReporter(BaseErrorReporter):
    """Posts validation errors to {base_url}/api/validation-results."""

    ENDPOINT = "/api/validation-results"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout_seconds: int = 30,
        user_agent: str = "DocumentProcessingService/1.0",
        client: httpx.Client | None = None,
    ) -> None:
        self._client = _build_client(
            client,
            base_url=base_url,
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            user_agent=user_agent,
        )

    def report_validation_error(
        self,
        batch_id: str,
        error_type: str,
        errors: list[str],
    ) -> None:
        payload = {
            "batchId": batch_id,
            "errorType": error_type,
            "errors": list(errors),
            "timestamp": _utc_timestamp(),
            "source": SOURCE_NAME,
        }
        Log.info(f"Sending validation result for batch {batch_id}, error type: {error_type}")
        try:
            response = self._client.post(self.ENDPOINT, json=payload)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ErrorReportingNetworkError(
                f"Error reporting network error: {exc}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ErrorReportingError(f"Error reporting request failed: {exc}") from exc
        if response.is_error:
            raise ErrorReportingError(
                f"Failed to send validation result. "
                f"Status: {response.status_code}, Response: {response.text}"
            )


class HttpPrintClient(BasePrintClient):
    """Posts decoded documents to {base_url}/api/documents/print."""

    ENDPOINT = "/api/documents/print"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout_seconds: int = 30,
        user_agent: str = "DocumentProcessingService/1.0",
        client: httpx.Client | None = None,
    ) -> None:
        self._client = _build_client(
            client,
            base_url=base_url,
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            user_agent=user_agent,
        )

    def submit(self, document_id: str, content: str, batch_id: str) -> None:
        payload = {
            "documentId": document_id,
            "batchId": batch_id,
            "content": content,
            "contentType": "application/xml",
            "timestamp": _utc_timestamp(),
            "source": SOURCE_NAME,
            "priority": "Normal",
        }
        Log.info(f"Sending document {document_id} from batch {batch_id} to print service")
        try:
            response = self._client.post(self.ENDPOINT, json=payload)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise PrintSubmissionNetworkError(f"Print service network error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise PrintSubmissionError(f"Print service request failed: {exc}") from exc
        if response.is_error:
            raise PrintSubmissionError(
                f"Failed to send document to print service. "
                f"Status: {response.status_code}, Response: {response.text}"
            )
        Log.debug(f"Print service accepted document {document_id}: {response.text}")
