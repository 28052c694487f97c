from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TriggerEvent(BaseModel):
    """Envelope of an inbound notification; only the fields routing needs."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    subject: str = ""
    event_type: str = Field(default="", alias="eventType")
    data: dict[str, Any] | str | None = None


@dataclass(frozen=True)
class TriggerRequest:
    source_reference: str
    batch_id: str
