from dataclasses import dataclass

from docbatch.dispatch.base import BaseQueryHandler
from docbatch.dispatch.cancellation import CancellationToken
from docbatch.dispatch.messages import Query
from docbatch.domain.models import ValidationOutcome
from docbatch.validation.content import detect_schema
from docbatch.validation.schema import validate_against_schema


@dataclass(frozen=True)
class DetectDocumentSchema(Query[str | None]):
    content: str


class DetectDocumentSchemaHandler(BaseQueryHandler[DetectDocumentSchema, str | None]):
    def handle(
        self,
        query: DetectDocumentSchema,
        cancellation: CancellationToken,
    ) -> str | None:
        return detect_schema(query.content)


@dataclass(frozen=True)
class ValidateAgainstSchema(Query[ValidationOutcome]):
    content: str
    schema_text: str


class ValidateAgainstSchemaHandler(BaseQueryHandler[ValidateAgainstSchema, ValidationOutcome]):
    def handle(
        self,
        query: ValidateAgainstSchema,
        cancellation: CancellationToken,
    ) -> ValidationOutcome:
        return validate_against_schema(query.content, query.schema_text)
