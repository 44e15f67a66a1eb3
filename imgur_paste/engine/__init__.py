"""
Engine Module — Interception, classification, confirmation, and uploads.
"""

from .classifier import Verdict, classify
from .confirmation import ConfirmationGate, ConfirmationPrompt, GateOutcome
from .interception import HandlerProxy, InterceptedInstance, InterceptionRegistry
from .notice import LoggingNotifier, Notifier
from .orchestrator import UploadOrchestrator, upload_and_resolve
from .placeholder import PlaceholderReconciler, progress_text_for

__all__ = [
    "Verdict",
    "classify",
    "ConfirmationGate",
    "ConfirmationPrompt",
    "GateOutcome",
    "HandlerProxy",
    "InterceptedInstance",
    "InterceptionRegistry",
    "LoggingNotifier",
    "Notifier",
    "UploadOrchestrator",
    "upload_and_resolve",
    "PlaceholderReconciler",
    "progress_text_for",
]
