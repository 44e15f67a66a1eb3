"""
Uploader Module — Image hosts behind a single async upload interface.
"""

from .base import ImageUploader
from .errors import ApiError, UnknownUploadStrategy, UploaderNotConfigured, UploadError
from .imgur import ImgurAnonymousUploader
from .mock import MockUploader
from .registry import STRATEGIES, UploadStrategy, build_uploader_from, get_strategy

__all__ = [
    "ImageUploader",
    "ImgurAnonymousUploader",
    "MockUploader",
    "UploadError",
    "ApiError",
    "UploaderNotConfigured",
    "UnknownUploadStrategy",
    "UploadStrategy",
    "STRATEGIES",
    "get_strategy",
    "build_uploader_from",
]
