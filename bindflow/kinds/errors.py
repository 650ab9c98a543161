"""Task kind exceptions."""


class ConfigurationError(Exception):
    """Raised when an unknown task kind is requested."""

    def __init__(self, message: str, kind: str | None = None):
        self.kind = kind
        super().__init__(message)
