class DocumentDecodeError(Exception):
    """Raised when an embedded document cannot be decoded from base64."""
