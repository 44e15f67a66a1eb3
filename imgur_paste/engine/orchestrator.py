"""
Upload Orchestrator — Drive uploads for one intercepted event.

## Flow

    native event
      → classify              (not eligible: replay the original event)
      → confirmation gate     (declined: replay, dismissed: stop)
      → one placeholder + upload per file, all concurrent
      → replace each marker with an embed or a failure annotation
      → replay the files that failed through the original handler

Failures never escape a single file's upload. A drop replays one event
holding every failed file; a paste replays one single-file event per
failed file.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

from ..config.settings import PluginSettings
from ..models.events import FileBlob, InputEvent, NativeEventCodec, PassthroughCodec
from ..models.upload import PendingUpload, UploadState
from ..uploader.base import ImageUploader
from ..uploader.errors import ApiError
from .classifier import Verdict, classify
from .confirmation import ConfirmationGate, GateOutcome
from .interception import InterceptedInstance
from .notice import NOTICE_TIMEOUT_MS, UNCONFIGURED_NOTICE, Notifier
from .placeholder import PlaceholderReconciler

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "⚠️Imgur upload failed, check dev console"


def api_failure_message(error: ApiError) -> str:
    return f"Upload failed, remote server returned an error: {error.message}"


async def upload_and_resolve(
    uploader: ImageUploader,
    reconciler: PlaceholderReconciler,
    pending: PendingUpload,
) -> PendingUpload:
    """
    Upload one file and replace its marker with the outcome.

    Never raises for upload failures; the outcome is recorded on
    `pending` instead.
    """
    pending.start()
    try:
        url = await uploader.upload(pending.blob)
    except ApiError as e:
        message = api_failure_message(e)
        pending.fail(message)
        reconciler.resolve_failure(pending.token, message)
    except Exception:
        logger.exception(
            "Failed imgur request",
            extra={"file_name": pending.blob.name, "token": pending.token},
        )
        pending.fail(GENERIC_FAILURE_MESSAGE)
        reconciler.resolve_failure(pending.token, GENERIC_FAILURE_MESSAGE)
    else:
        pending.succeed(url)
        reconciler.resolve_success(pending.token, url)
    return pending


class UploadOrchestrator:
    """
    Event callback wired into every HandlerProxy.

    Settings and uploader are read through callables on each event so a
    settings change takes effect without re-registering editors.
    """

    def __init__(
        self,
        get_settings: Callable[[], PluginSettings],
        get_uploader: Callable[[], Optional[ImageUploader]],
        gate: ConfirmationGate,
        notifier: Notifier,
        codec: Optional[NativeEventCodec] = None,
    ):
        self.get_settings = get_settings
        self.get_uploader = get_uploader
        self.gate = gate
        self.notifier = notifier
        self.codec = codec or PassthroughCodec()

    async def handle_event(
        self,
        record: InterceptedInstance,
        kind: str,
        native_event: Any,
    ) -> List[PendingUpload]:
        """Handle one intercepted event; returns the uploads it started."""
        event = self.codec.to_domain(kind, native_event)
        uploader = self.get_uploader()

        verdict = classify(event, uploader is not None)
        if verdict is Verdict.NOT_ELIGIBLE:
            logger.debug(f"{kind} event not eligible, deferring to editor")
            await record.replay(kind, native_event)
            return []
        if verdict is Verdict.UNCONFIGURED:
            self.notifier.show(UNCONFIGURED_NOTICE, NOTICE_TIMEOUT_MS)
            await record.replay(kind, native_event)
            return []

        # Keep our own copy of the file list before suspending on the prompt
        files = list(event.files)

        async with record.lock:
            outcome = await self.gate.check(self.get_settings())
            if outcome is GateOutcome.ABANDON:
                return []
            if outcome is GateOutcome.REPLAY:
                await self._replay_declined(record, event, native_event, files)
                return []

            if kind == "drop":
                return await self._handle_drop(record, uploader, event, native_event, files)
            return await self._handle_paste(record, uploader, event, native_event, files)

    async def _handle_drop(
        self,
        record: InterceptedInstance,
        uploader: ImageUploader,
        event: InputEvent,
        native_event: Any,
        files: List[FileBlob],
    ) -> List[PendingUpload]:
        # Keep our lines apart from anything the editor's own handler inserts
        record.editor.replace_selection("\n")

        pending = await self._upload_all(record, uploader, files)

        failed = [p.blob for p in pending if p.state is UploadState.FAILED]
        if failed:
            logger.info(
                f"{len(failed)} of {len(pending)} dropped file(s) failed, replaying",
                extra={"instance_id": record.token},
            )
            await self._replay_files(record, event, native_event, failed)
        return pending

    async def _handle_paste(
        self,
        record: InterceptedInstance,
        uploader: ImageUploader,
        event: InputEvent,
        native_event: Any,
        files: List[FileBlob],
    ) -> List[PendingUpload]:
        pending = await self._upload_all(record, uploader, files)

        for p in pending:
            if p.state is UploadState.FAILED:
                logger.info(
                    "Pasted file failed, replaying",
                    extra={"instance_id": record.token, "file_name": p.blob.name},
                )
                await self._replay_files(record, event, native_event, [p.blob])
        return pending

    @staticmethod
    async def _upload_all(
        record: InterceptedInstance,
        uploader: ImageUploader,
        files: List[FileBlob],
    ) -> List[PendingUpload]:
        reconciler = record.reconciler
        # Markers go in first, in file order, before any upload can settle
        pending = [
            PendingUpload(token=reconciler.insert_placeholder(), blob=blob)
            for blob in files
        ]
        await asyncio.gather(
            *(upload_and_resolve(uploader, reconciler, p) for p in pending)
        )
        return pending

    async def _replay_declined(
        self,
        record: InterceptedInstance,
        event: InputEvent,
        native_event: Any,
        files: List[FileBlob],
    ) -> None:
        if event.kind == "paste":
            await record.replay(event.kind, native_event)
        else:
            await self._replay_files(record, event, native_event, files)

    async def _replay_files(
        self,
        record: InterceptedInstance,
        event: InputEvent,
        native_event: Any,
        files: List[FileBlob],
    ) -> None:
        replay_event = event.with_files(files)
        await record.replay(event.kind, self.codec.to_native(replay_event, native_event))
