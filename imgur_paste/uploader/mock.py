"""
Mock Uploader — Non-networking uploader for dry runs and testing.

Logs what would be uploaded and hands back a fake image URL.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional
from uuid import uuid4

from ..models.events import FileBlob
from .base import ImageUploader
from .errors import ApiError

logger = logging.getLogger(__name__)


class MockUploader(ImageUploader):
    """
    Uploader that never leaves the process.

    `failures` maps file names to provider messages; those files are
    rejected with ApiError so dry runs can exercise the fallback path.
    """

    def __init__(
        self,
        failures: Optional[Dict[str, str]] = None,
        delay: float = 0.0,
    ):
        self.failures = dict(failures or {})
        self.delay = delay
        self.uploaded: list = []

    @property
    def name(self) -> str:
        return "MOCK"

    async def upload(self, blob: FileBlob) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)

        if blob.name in self.failures:
            logger.info(f"[MOCK:upload] Rejecting {blob.name}")
            raise ApiError(self.failures[blob.name])

        url = f"https://i.imgur.com/mock_{uuid4().hex[:8]}.png"
        self.uploaded.append(blob.name)
        logger.info(f"[MOCK:upload] Would upload {blob.name} ({blob.size} bytes) → {url}")
        return url
