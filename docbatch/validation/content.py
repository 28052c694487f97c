"""Validation and schema detection for a single decoded document."""

import xml.etree.ElementTree as ET

from docbatch.domain.models import ValidationOutcome
from docbatch.logging.logger import Log
from docbatch.validation.xml_utils import element_text, local_name, namespace_uri

XSI_SCHEMA_LOCATION = "{http://www.w3.org/2001/XMLSchema-instance}schemaLocation"

KNOWN_SCHEMAS: dict[str, str] = {
    "data": "DataSchema",
    "document": "DocumentSchema",
    "invoice": "InvoiceSchema",
    "order": "OrderSchema",
}


def detect_schema(content: str) -> str | None:
    """Best-effort schema label: namespace, then xsi:schemaLocation, then root name."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        Log.debug(f"Cannot detect schema of unparseable document: {exc}")
        return None
    return _detect_from_root(root)


def validate_document(content: str) -> ValidationOutcome:
    """Check a decoded document; every rule runs except after a parse failure."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        Log.warning(f"Document contains invalid XML: {exc}")
        return ValidationOutcome.failure(f"Invalid XML format: {exc}")

    schema = _detect_from_root(root)
    if schema:
        Log.debug(f"Detected schema: {schema}")

    errors = _check_structure(root)
    if errors:
        Log.warning(f"Document validation failed: {', '.join(errors)}")
        return ValidationOutcome.failure(errors, schema=schema)
    return ValidationOutcome.success(schema=schema)


def _detect_from_root(root: ET.Element) -> str | None:
    namespace = namespace_uri(root)
    if namespace:
        return namespace
    schema_location = root.get(XSI_SCHEMA_LOCATION)
    if schema_location is not None:
        return schema_location
    return KNOWN_SCHEMAS.get(local_name(root))


def _check_structure(root: ET.Element) -> list[str]:
    errors: list[str] = []
    children = list(root)
    root_name = local_name(root).lower()

    if root_name == "data":
        if not children:
            errors.append("Data element must contain child elements")
    elif root_name == "document":
        name = next((c for c in children if local_name(c) == "name"), None)
        if name is None or not element_text(name).strip():
            errors.append("Document must contain a non-empty 'name' element")
    elif not element_text(root).strip() and not children:
        errors.append("Document appears to be empty")
    return errors
