"""XSD validation of a document against caller-supplied schema text."""

import xml.etree.ElementTree as ET

import xmlschema

from docbatch.domain.models import ValidationOutcome
from docbatch.logging.logger import Log


def validate_against_schema(content: str, schema_text: str) -> ValidationOutcome:
    """Validate content against an XSD, collecting every schema violation.

    A schema that cannot be loaded, or content that is not well-formed XML,
    yields a single "Schema validation error" entry.
    """
    Log.debug("Validating XML against provided schema")
    try:
        schema = _load_schema(schema_text)
        root = ET.fromstring(content)
        errors = [_describe(error) for error in schema.iter_errors(root)]
    except (SyntaxError, OSError, ValueError, xmlschema.XMLSchemaException) as exc:
        Log.error(f"Error during XML schema validation: {exc}")
        return ValidationOutcome.failure(f"Schema validation error: {exc}")

    if errors:
        Log.warning(f"XML schema validation failed: {', '.join(errors)}")
        return ValidationOutcome.failure(errors)
    Log.debug("XML schema validation successful")
    return ValidationOutcome.success()


def _load_schema(schema_text: str) -> xmlschema.XMLSchema:
    # Only inline schema text; never treat the argument as a path or URL.
    if not schema_text or not schema_text.lstrip().startswith("<"):
        raise ValueError("schema content is not an XML document")
    return xmlschema.XMLSchema(schema_text)


def _describe(error: xmlschema.XMLSchemaValidationError) -> str:
    return error.reason or error.message
