"""Exceptions for Template Store."""

from typing import Optional


class TemplateStoreError(Exception):
    """Base exception for all template store errors."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize TemplateStoreError.

        Args:
            message: Error message
            status_code: HTTP status code if applicable
        """
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class RemoteBackendError(TemplateStoreError):
    """Raised when the remote template service fails or cannot be reached."""


class TemplateSaveError(RemoteBackendError):
    """Raised when the remote service rejects a save."""

    def __init__(self, message: str = "Save failed", status_code: Optional[int] = None) -> None:
        super().__init__(message, status_code=status_code)


class TemplateUpdateError(RemoteBackendError):
    """Raised when the remote service rejects a metadata update."""

    def __init__(self, message: str = "Update failed", status_code: Optional[int] = None) -> None:
        super().__init__(message, status_code=status_code)
