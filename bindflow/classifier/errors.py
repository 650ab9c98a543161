"""Connection classification exceptions."""


class ResolutionFailure(Exception):
    """Raised when a connection's endpoint pool cannot be resolved.

    Internal and non-fatal: reconciliation aborts for that connection and is
    retried on the next relevant notification.
    """

    def __init__(self, message: str, connection_id: str, element_id: str | None = None):
        self.connection_id = connection_id
        self.element_id = element_id
        super().__init__(message)
