"""Structural check of the <Docs><Doc id="...">base64</Doc></Docs> envelope."""

import xml.etree.ElementTree as ET

from docbatch.domain.models import ValidationOutcome
from docbatch.logging.logger import Log
from docbatch.validation.encoding import is_base64
from docbatch.validation.xml_utils import element_text, local_name

ROOT_ELEMENT = "Docs"
DOC_ELEMENT = "Doc"
ID_ATTRIBUTE = "id"
_UNKNOWN_ID = "(unknown)"


def validate_xml_structure(payload: str) -> ValidationOutcome:
    """Validate the batch envelope, collecting every violation.

    Only a parse failure short-circuits; all other rules run and accumulate.
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as exc:
        Log.warning(f"Batch payload is not well-formed XML: {exc}")
        return ValidationOutcome.failure(f"Invalid XML format: {exc}")

    errors: list[str] = []

    root_name = local_name(root)
    if root_name != ROOT_ELEMENT:
        errors.append(f"Expected root element '{ROOT_ELEMENT}', found '{root_name}'")

    doc_elements = root.findall(DOC_ELEMENT)
    if not doc_elements:
        errors.append(f"No '{DOC_ELEMENT}' elements found in the XML")

    for doc in doc_elements:
        errors.extend(_check_doc_element(doc))

    if errors:
        Log.warning(f"XML structure validation failed: {', '.join(errors)}")
        return ValidationOutcome.failure(errors)

    Log.debug("XML structure validation successful")
    return ValidationOutcome.success()


def _check_doc_element(doc: ET.Element) -> list[str]:
    errors: list[str] = []
    doc_id = doc.get(ID_ATTRIBUTE) or ""
    if not doc_id.strip():
        errors.append(f"Doc element missing required '{ID_ATTRIBUTE}' attribute")
        doc_id = _UNKNOWN_ID

    content = element_text(doc).strip()
    if not content:
        errors.append(f"Doc element with id '{doc_id}' has no content")
    elif not is_base64(content):
        errors.append(
            f"Doc element with id '{doc_id}' does not contain valid base64 content"
        )
    return errors
