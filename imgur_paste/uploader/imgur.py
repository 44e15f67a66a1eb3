"""
Imgur Uploader — Anonymous uploads through the Imgur API v3.

## Request

    POST https://api.imgur.com/3/image
    Authorization: Client-ID <client id>
    multipart/form-data: image=<file bytes>

## Response

    {"data": {"link": "https://i.imgur.com/abc123.png", ...},
     "success": true, "status": 200}

On failure `success` is false and `data.error` holds either a string or
an object with a `message` field.

## Environment Variables

- IMGUR_UPLOAD_TIMEOUT_SECONDS: Request timeout (default: 30)
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

from ..models.events import FileBlob
from .base import ImageUploader
from .errors import ApiError, UploadError

logger = logging.getLogger(__name__)

IMGUR_UPLOAD_URL = "https://api.imgur.com/3/image"


class ImgurAnonymousUploader(ImageUploader):
    """
    Uploads images to Imgur as an anonymous application.

    Only a registered application's client id is required; uploaded
    images are not tied to any user account.
    """

    def __init__(
        self,
        client_id: str,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.timeout = float(os.environ.get("IMGUR_UPLOAD_TIMEOUT_SECONDS", timeout))
        self._transport = transport

    @property
    def name(self) -> str:
        return "ANONYMOUS_IMGUR"

    async def upload(self, blob: FileBlob) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(
                IMGUR_UPLOAD_URL,
                headers={
                    "Authorization": f"Client-ID {self.client_id}",
                    "User-Agent": "imgur-paste/1.0",
                },
                files={"image": (blob.name, blob.data, blob.mime_type)},
            )

        try:
            body = response.json()
        except ValueError:
            raise UploadError(
                f"Imgur returned a non-JSON response: HTTP {response.status_code}"
            )

        if not body.get("success") or response.status_code >= 400:
            message = _error_message(body.get("data"))
            logger.warning(f"Imgur rejected {blob.name}: {message}")
            raise ApiError(message, status_code=response.status_code)

        link = (body.get("data") or {}).get("link")
        if not link:
            raise UploadError("Imgur response did not contain an image link")

        logger.info(f"Uploaded {blob.name} ({blob.size} bytes) → {link}")
        return link


def _error_message(data: Any) -> str:
    """Extract the provider message from the `data` field of a response."""
    if not isinstance(data, dict):
        return "Unknown error"
    error = data.get("error")
    if isinstance(error, dict):
        return str(error.get("message") or error.get("code") or "Unknown error")
    if error:
        return str(error)
    return "Unknown error"
