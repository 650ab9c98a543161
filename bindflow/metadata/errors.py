"""Metadata-related exceptions."""


class MetadataError(Exception):
    """Raised when an attribute payload is invalid for its kind."""

    def __init__(self, message: str, kind: str | None = None):
        self.kind = kind
        super().__init__(message)
