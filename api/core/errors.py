"""
Service error taxonomy.

Feature code raises these; `api/main.py` maps them to HTTP responses.
"""

from __future__ import annotations


class ServiceError(RuntimeError):
    status_code = 500
    public_message = "Internal server error."


class ValidationError(ServiceError):
    """
    Client-supplied data failed one or more field rules.

    `errors` lists every failing field, not just the first.
    """

    status_code = 400
    public_message = "Validation failed."

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class NotFoundError(ServiceError):
    status_code = 404
    public_message = "Not found."

    def __init__(self, message: str = "Not found.") -> None:
        super().__init__(message)
        self.public_message = message


# Storage failures are logged in full server-side; clients get a generic message.
class StorageError(ServiceError):
    status_code = 500
    public_message = "Internal storage error."
