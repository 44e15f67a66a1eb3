"""
Models — Event records, upload lifecycle, and user decisions.
"""

from .events import FileBlob, InputEvent, PassthroughCodec, TransferData
from .upload import InvalidTransition, PendingUpload, UploadState, UserUploadDecision

__all__ = [
    "FileBlob",
    "InputEvent",
    "TransferData",
    "PassthroughCodec",
    "PendingUpload",
    "UploadState",
    "InvalidTransition",
    "UserUploadDecision",
]
