"""Request errors raised by responders and converted by the dispatcher."""

from __future__ import annotations


class RequestError(Exception):
    """Base class for failures contained within one request/response cycle."""

    status: int = 400

    def __init__(self, payload: dict[str, str]) -> None:
        self.payload = payload
        super().__init__(payload.get("error", "request error"))


class MalformedInputError(RequestError):
    """Raised when the request body is not valid JSON."""

    def __init__(self, error: str = "Invalid JSON") -> None:
        super().__init__({"error": error})


class MissingFieldError(RequestError):
    """Raised when a required field is absent or empty."""

    def __init__(self, error: str) -> None:
        super().__init__({"error": error})


class MethodNotAllowedError(RequestError):
    """Raised for API paths that only accept POST."""

    status = 405

    def __init__(self) -> None:
        super().__init__({
            "error": "GET method not supported. Use POST instead.",
            "message": "Please use POST method to send chat messages",
        })
