"""Error kinds shared by the HTTP gateway and the batch importer."""


class GatewayError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """A required input field is missing or malformed."""

    status_code = 400


class NotFoundError(GatewayError):
    """A point lookup matched zero rows."""

    status_code = 404


class ConflictError(GatewayError):
    """A write violated a unique constraint."""

    status_code = 409


class StoreError(GatewayError):
    """Any other failure reported by the store or its transport."""

    status_code = 500
