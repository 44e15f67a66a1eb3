"""
Upload Errors — Two-way classification of upload failures.

ApiError means the remote service answered and rejected the upload; it
carries the provider's human-readable message. Anything else raised by
an uploader is treated as a transport or unknown failure.
"""

from __future__ import annotations

from typing import Optional


class UploadError(Exception):
    """Base class for uploader failures."""


class ApiError(UploadError):
    """The image host rejected the upload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UploaderNotConfigured(UploadError):
    """The selected strategy is missing its credential."""


class UnknownUploadStrategy(UploadError):
    """No strategy is registered under the requested id."""
