from __future__ import annotations


class PortsideError(Exception):
    """
    Base exception for failures surfaced to HTTP callers.

    Carries the status code and human-readable message the API layer renders.
    """

    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthorized(PortsideError):
    """
    Raised when a caller lacks the capability a gated resource requires.
    """

    status_code = 401
    message = "Unauthorized"


class MissingFormField(PortsideError):
    """
    Raised when a form action is submitted without a required field.
    """

    status_code = 422

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"missing form field: {field_name}")
