"""Turns an inbound notification into a (source reference, batch id) pair.

Each event type has an ordered list of field names to try; the first
non-empty value wins.
"""

import json
import uuid
from collections.abc import Callable, Mapping
from pathlib import PurePosixPath
from typing import Any, ClassVar
from urllib.parse import urlparse

from pydantic import ValidationError

from docbatch.domain.models import BlobReference
from docbatch.logging.logger import Log
from docbatch.trigger.models import TriggerEvent, TriggerRequest

BLOB_CREATED = "Microsoft.Storage.BlobCreated"
BATCH_RECEIVED = "DocumentProcessing.BatchReceived"


def first_present(data: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def batch_id_from_url(url: str) -> str | None:
    """First UUID-looking path segment, else the file name without extension."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    for segment in segments:
        try:
            uuid.UUID(segment)
        except ValueError:
            continue
        return segment
    if not segments:
        return None
    return PurePosixPath(segments[-1]).stem or None


class TriggerAdapter:
    """Parses trigger events into TriggerRequest objects."""

    SOURCE_KEYS: ClassVar[tuple[str, ...]] = ("blobUrl", "url")
    BATCH_ID_KEYS: ClassVar[tuple[str, ...]] = ("batchId", "id")

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))
        self._parsers: dict[str, Callable[[Mapping[str, Any]], TriggerRequest | None]] = {
            BLOB_CREATED: self._parse_blob_created,
            BATCH_RECEIVED: self._parse_batch_received,
        }

    def parse(self, raw: Mapping[str, Any] | TriggerEvent) -> TriggerRequest | None:
        """Return the request described by the event, or None if it lacks a source."""
        try:
            event = raw if isinstance(raw, TriggerEvent) else TriggerEvent.model_validate(raw)
        except ValidationError as exc:
            Log.warning(f"Could not parse trigger event: {exc}")
            return None

        Log.info(f"Received event {event.event_type or '(untyped)'} from {event.subject or '-'}")
        data = self._event_data(event)
        if data is None:
            Log.warning(f"Trigger event {event.id or '-'} carries no usable data")
            return None
        parser = self._parsers.get(event.event_type, self._parse_generic)
        return parser(data)

    def _parse_blob_created(self, data: Mapping[str, Any]) -> TriggerRequest | None:
        url = first_present(data, ("url",))
        if url is None:
            Log.warning("Blob created event missing URL")
            return None
        try:
            blob = BlobReference.from_url(url)
        except ValueError:
            Log.debug(f"Blob URL {url} does not name a container and blob")
        else:
            Log.info(f"Blob {blob.blob_name} created in container {blob.container_name}")
        return TriggerRequest(url, batch_id_from_url(url) or self._new_id())

    def _parse_batch_received(self, data: Mapping[str, Any]) -> TriggerRequest | None:
        source = first_present(data, ("blobUrl",))
        batch_id = first_present(data, ("batchId",))
        if source is None or batch_id is None:
            Log.warning("Batch received event missing blobUrl or batchId")
            return None
        return TriggerRequest(source, batch_id)

    def _parse_generic(self, data: Mapping[str, Any]) -> TriggerRequest | None:
        source = first_present(data, self.SOURCE_KEYS)
        if source is None:
            Log.warning("Could not extract source reference from event")
            return None
        return TriggerRequest(source, first_present(data, self.BATCH_ID_KEYS) or self._new_id())

    @staticmethod
    def _event_data(event: TriggerEvent) -> Mapping[str, Any] | None:
        if isinstance(event.data, str):
            try:
                decoded = json.loads(event.data)
            except json.JSONDecodeError:
                return None
            return decoded if isinstance(decoded, dict) else None
        return event.data
