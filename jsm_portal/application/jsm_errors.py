from __future__ import annotations
from typing import Any


class JSMAPIError(RuntimeError):
    """Raised when a JSM endpoint cannot be called or rejects the request.

        ``status_code`` is None when no HTTP response was received (timeouts,
        connection failures). ``body`` holds the parsed upstream error body, if any.
        """

    def __init__(self, message: str, status_code: int | None = None, body: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

class AttachmentUploadError(JSMAPIError):
    """Raised when a temporary attachment cannot be decoded or uploaded."""

class TicketCreationError(JSMAPIError):
    """Raised when the create-request call returns a non-2xx status."""

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401

class FormsAPIError(JSMAPIError):
    """Raised when the Atlassian Forms (ProForma) API cannot be called or rejects the request."""
