"""
Uploader Base Class — Interface for all image hosts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.events import FileBlob


class ImageUploader(ABC):
    """
    Abstract base class for image uploaders.

    Uploaders perform the remote side effect and return the public URL
    of the uploaded image.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The strategy identifier (e.g., 'ANONYMOUS_IMGUR')."""
        pass

    @abstractmethod
    async def upload(self, blob: FileBlob) -> str:
        """
        Upload a file and return its remote URL.

        Raises ApiError when the remote service rejects the upload.
        Any other exception is a transport or unknown failure.
        """
        pass
