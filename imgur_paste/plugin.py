"""
Imgur Paste Plugin — Lifecycle façade the host talks to.

## Host notifications

    plugin = ImgurPastePlugin(SettingsStore(), prompt=MyPrompt())
    plugin.load()                 # once, at startup
    plugin.on_editor(instance)    # once per live editor instance
    ...
    plugin.unload()               # once, restores every editor

`setup_uploader()` must be called after the settings change so the next
event uses the newly selected strategy.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from .config.settings import PluginSettings, SettingsStore
from .engine.confirmation import ConfirmationGate, ConfirmationPrompt
from .engine.interception import InterceptedInstance, InterceptionRegistry
from .engine.local_image import upload_local_image
from .engine.notice import UNCONFIGURED_NOTICE, LoggingNotifier, Notifier
from .engine.orchestrator import UploadOrchestrator
from .models.events import NativeEventCodec
from .models.upload import PendingUpload
from .uploader.base import ImageUploader
from .uploader.errors import UnknownUploadStrategy, UploaderNotConfigured
from .uploader.registry import build_uploader_from

logger = logging.getLogger(__name__)

UploaderFactory = Callable[[PluginSettings], Optional[ImageUploader]]


class ImgurPastePlugin:
    """Owns the settings, the uploader, and the interception registry."""

    def __init__(
        self,
        store: SettingsStore,
        prompt: Optional[ConfirmationPrompt] = None,
        notifier: Optional[Notifier] = None,
        codec: Optional[NativeEventCodec] = None,
        uploader_factory: UploaderFactory = build_uploader_from,
    ):
        self.store = store
        self.settings = PluginSettings()
        self.notifier = notifier or LoggingNotifier()
        self._uploader_factory = uploader_factory
        self._uploader: Optional[ImageUploader] = None

        self.gate = ConfirmationGate(prompt, persist=self.store.save)
        self.orchestrator = UploadOrchestrator(
            get_settings=lambda: self.settings,
            get_uploader=lambda: self._uploader,
            gate=self.gate,
            notifier=self.notifier,
            codec=codec,
        )
        self.registry = InterceptionRegistry(on_event=self.orchestrator.handle_event)

    @property
    def uploader(self) -> Optional[ImageUploader]:
        return self._uploader

    # ── lifecycle ────────────────────────────────────────────────

    def load(self) -> None:
        self.settings = self.store.load()
        self.setup_uploader()
        logger.info(
            f"Plugin loaded: strategy={self.settings.upload_strategy}, "
            f"uploader={'ready' if self._uploader else 'not configured'}"
        )

    def unload(self) -> None:
        restored = self.registry.unregister_all()
        logger.info(f"Plugin unloaded, restored {restored} editor(s)")

    def setup_uploader(self) -> None:
        try:
            self._uploader = self._uploader_factory(self.settings)
        except UnknownUploadStrategy as e:
            logger.error(str(e))
            self._uploader = None

    def save_settings(self) -> None:
        self.store.save(self.settings)

    def on_editor(self, instance: Any) -> InterceptedInstance:
        return self.registry.register(instance)

    # ── commands ─────────────────────────────────────────────────

    async def upload_local_image(
        self,
        instance: Any,
        vault_root: Path,
        document_dir: Optional[Path] = None,
    ) -> PendingUpload:
        """Upload the vault image linked under the cursor of `instance`."""
        if self._uploader is None:
            self.notifier.show(UNCONFIGURED_NOTICE)
            raise UploaderNotConfigured("No uploader configured")

        record = self.registry.register(instance)
        async with record.lock:
            return await upload_local_image(
                record.editor,
                record.reconciler,
                self._uploader,
                vault_root,
                document_dir,
            )
