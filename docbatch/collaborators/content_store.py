import uuid
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath, PureWindowsPath
from urllib.parse import unquote, urlparse

import httpx

from docbatch.collaborators.base import BaseContentStore
from docbatch.collaborators.exceptions import ContentStoreError, ContentStoreNetworkError
from docbatch.logging.logger import Log


def safe_path_segment(value: str, label: str) -> str:
    """Return value if it is usable as a single directory name.

    Raises:
        ContentStoreError: for empty values, separators, '.'/'..' or absolute paths.
    """
    candidate = (value or "").strip()
    if (
        not candidate
        or candidate in (".", "..")
        or "/" in candidate
        or "\\" in candidate
        or "\x00" in candidate
        or PurePosixPath(candidate).is_absolute()
        or PureWindowsPath(candidate).drive
    ):
        raise ContentStoreError(f"{label} {value!r} is not a valid path segment")
    return candidate


def archive_file_path(archive_root: Path, batch_id: str, stored_at: datetime) -> Path:
    """Build archive path: {archive_root}/xml/{batch_id}/{YYYY}/{MM}/{DD}/{uuid}.xml"""
    return (
        archive_root
        / "xml"
        / safe_path_segment(batch_id, "Batch ID")
        / stored_at.strftime("%Y/%m/%d")
        / f"{uuid.uuid4()}.xml"
    )


def document_file_path(
    archive_root: Path, batch_id: str, document_id: str, stored_at: datetime
) -> Path:
    """Build path: {archive_root}/documents/{batch_id}/{document_id}/{YYYY}/{MM}/{DD}/{uuid}.xml"""
    return (
        archive_root
        / "documents"
        / safe_path_segment(batch_id, "Batch ID")
        / safe_path_segment(document_id, "Document ID")
        / stored_at.strftime("%Y/%m/%d")
        / f"{uuid.uuid4()}.xml"
    )


class HttpContentStore(BaseContentStore):
    """Fetches payloads over HTTP(S) or from local paths and archives them to disk."""

    ARCHIVE_ROOT = Path("/app/archive")

    def __init__(
        self,
        *,
        archive_root: Path | None = None,
        timeout_seconds: int = 30,
        user_agent: str = "DocumentProcessingService/1.0",
        client: httpx.Client | None = None,
    ) -> None:
        self._archive_root = archive_root if archive_root is not None else self.ARCHIVE_ROOT
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
        )

    def fetch(self, reference: str) -> str:
        parsed = urlparse(reference)
        if parsed.scheme in ("http", "https"):
            return self._fetch_remote(reference)
        if parsed.scheme == "file":
            return self._read_local(Path(unquote(parsed.path)))
        return self._read_local(Path(reference))

    def archive(self, content: str, batch_id: str) -> str:
        path = archive_file_path(self._archive_root, batch_id, datetime.now(timezone.utc))
        self._write(path, content, f"payload for batch {batch_id}")
        Log.info(f"Archived payload for batch {batch_id} at {path}")
        return str(path)

    def archive_document(self, content: str, document_id: str, batch_id: str) -> str:
        path = document_file_path(
            self._archive_root, batch_id, document_id, datetime.now(timezone.utc)
        )
        self._write(path, content, f"document {document_id} for batch {batch_id}")
        Log.info(f"Archived document {document_id} for batch {batch_id} at {path}")
        return str(path)

    def _write(self, path: Path, content: str, description: str) -> None:
        root = self._archive_root.resolve()
        if not path.resolve().is_relative_to(root):
            raise ContentStoreError(f"Refusing to archive {description} outside {root}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ContentStoreError(f"Failed to archive {description}: {exc}") from exc

    def _fetch_remote(self, url: str) -> str:
        Log.info(f"Downloading payload from {url}")
        try:
            response = self._client.get(url)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ContentStoreNetworkError(f"Network error downloading {url}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ContentStoreError(f"Failed to download {url}: {exc}") from exc
        if response.is_error:
            raise ContentStoreError(
                f"Failed to download {url}. Status: {response.status_code}"
            )
        Log.info(f"Downloaded payload from {url}: {len(response.text)} chars")
        return response.text

    @staticmethod
    def _read_local(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ContentStoreError(f"Failed to read payload from {path}: {exc}") from exc
