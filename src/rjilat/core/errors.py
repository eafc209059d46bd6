"""Domain errors raised by the service layer.

Services raise these; the HTTP layer translates them into responses in
``rjilat.main``.
"""


class RjilatError(Exception):
    """Base error for rjilat domain operations."""

    status_code = 500

    def __init__(self, message: str, code: str = "rjilat_error") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(RjilatError):
    """Malformed caller input: empty or oversized content, unknown status."""

    status_code = 400

    def __init__(self, message: str, code: str = "validation_error") -> None:
        super().__init__(message, code)


class NotFoundError(RjilatError):
    """A referenced post, comment or user does not exist."""

    status_code = 404

    def __init__(self, message: str = "Not found", code: str = "not_found") -> None:
        super().__init__(message, code)


class ForbiddenError(RjilatError):
    """The caller may not perform the operation."""

    status_code = 403

    def __init__(self, message: str = "Forbidden", code: str = "forbidden") -> None:
        super().__init__(message, code)


class StorageError(RjilatError):
    """The entity store or blob store failed; the step did not complete."""

    status_code = 503

    def __init__(self, message: str = "Storage failure", code: str = "storage_error") -> None:
        super().__init__(message, code)
