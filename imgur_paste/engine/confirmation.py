"""
Confirmation Gate — Ask once per event before uploading remotely.

The gate is bypassed while `show_remote_upload_confirmation` is off.
Otherwise it awaits exactly one UserUploadDecision:

- cancelled → ABANDON  (nothing more happens)
- declined  → REPLAY   (the editor gets the files back)
- approved  → PROCEED  (and "always upload" turns the prompt off)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from ..config.settings import PluginSettings
from ..models.upload import UserUploadDecision

logger = logging.getLogger(__name__)


class GateOutcome(str, Enum):
    PROCEED = "proceed"
    REPLAY = "replay"
    ABANDON = "abandon"


class ConfirmationPrompt(Protocol):
    """Asks the user whether an upload may leave the machine."""

    async def ask(self) -> UserUploadDecision:
        ...


class ConfirmationGate:
    """
    Suspend point between classification and upload.

    `persist` saves the settings after an "always upload" answer. It is
    best-effort: a failure is logged and the upload goes ahead.
    """

    def __init__(
        self,
        prompt: Optional[ConfirmationPrompt],
        persist: Callable[[PluginSettings], None],
    ):
        self.prompt = prompt
        self.persist = persist

    async def check(self, settings: PluginSettings) -> GateOutcome:
        if not settings.show_remote_upload_confirmation:
            return GateOutcome.PROCEED

        if self.prompt is None:
            logger.warning("Upload confirmation required but no prompt available; declining")
            return GateOutcome.REPLAY

        decision = await self.prompt.ask()

        if decision.should_upload is None:
            logger.debug("Upload prompt dismissed")
            return GateOutcome.ABANDON
        if decision.should_upload is False:
            logger.debug("Upload declined by user")
            return GateOutcome.REPLAY

        if decision.always_upload:
            self._remember(settings)
        return GateOutcome.PROCEED

    def _remember(self, settings: PluginSettings) -> None:
        settings.show_remote_upload_confirmation = False
        try:
            self.persist(settings)
        except Exception as e:
            logger.warning(f"Failed to save 'always upload' choice: {e}")
