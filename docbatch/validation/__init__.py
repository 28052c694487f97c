from docbatch.validation.content import detect_schema, validate_document
from docbatch.validation.encoding import decode_document_content, is_base64
from docbatch.validation.envelope import validate_xml_structure
from docbatch.validation.exceptions import DocumentDecodeError
from docbatch.validation.schema import validate_against_schema

__all__ = [
    "DocumentDecodeError",
    "decode_document_content",
    "detect_schema",
    "is_base64",
    "validate_against_schema",
    "validate_document",
    "validate_xml_structure",
]
