"""
Handler Interception — Wrap an editor's native paste/drop handlers.

An editor instance exposes a mutable `handlers` mapping with "drop" and
"paste" slots. Registering an instance backs up whatever sits in those
slots and installs a HandlerProxy in each. The proxy sees every event,
and the engine either consumes it or replays it through the backed-up
original. Unregistering puts the originals back verbatim.

## Identity

Instances are keyed by a stable token: their `instance_id` attribute if
they have one, otherwise a generated id attached to the instance. This
keeps the registry from holding onto instances by object identity.

## Usage

    registry = InterceptionRegistry(on_event=orchestrator.handle_event)
    registry.register(instance)      # idempotent
    ...
    registry.unregister_all()        # on teardown
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, MutableMapping, Optional, Protocol, Set
from uuid import uuid4

from ..editor import EditorHandle
from .placeholder import PlaceholderReconciler

logger = logging.getLogger(__name__)

HANDLED_KINDS = ("drop", "paste")

IDENTITY_ATTR = "_imgur_paste_id"

Handler = Callable[[Any, Any], Any]


class EditorInstance(Protocol):
    """A live editor whose input handlers can be swapped."""

    handlers: MutableMapping[str, Handler]
    editor: EditorHandle


@dataclass
class InterceptedInstance:
    """Bookkeeping for one editor instance we have wrapped."""

    token: str
    instance: Any
    originals: Dict[str, Handler]
    reconciler: PlaceholderReconciler
    proxies: Dict[str, "HandlerProxy"] = field(default_factory=dict)
    # Serializes handling of consumed events for this document
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    # Handling tasks still running; held so the loop cannot drop them
    tasks: Set[asyncio.Task] = field(default_factory=set)

    @property
    def editor(self) -> EditorHandle:
        return self.instance.editor

    async def replay(self, kind: str, native_event: Any) -> None:
        """Hand an event to the original handler, exactly as given."""
        logger.debug(f"Replaying {kind} event through original handler")
        result = self.originals[kind](self.instance, native_event)
        if inspect.isawaitable(result):
            await result


EventCallback = Callable[[InterceptedInstance, str, Any], Awaitable[None]]


class HandlerProxy:
    """
    Callable installed in an editor's handler slot.

    Called from inside a running event loop it schedules the handling
    and returns the task. The record holds the task until it finishes,
    so hosts may ignore the return value; a failure is logged. Called
    from synchronous code it runs the handling to completion.
    """

    def __init__(self, kind: str, record: InterceptedInstance, on_event: EventCallback):
        self.kind = kind
        self.record = record
        self._on_event = on_event

    @property
    def original(self) -> Handler:
        return self.record.originals[self.kind]

    def __call__(self, instance: Any, native_event: Any) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.handle(native_event))
            return None
        task = loop.create_task(self.handle(native_event))
        self.record.tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    async def handle(self, native_event: Any) -> None:
        await self._on_event(self.record, self.kind, native_event)

    def _finished(self, task: asyncio.Task) -> None:
        self.record.tasks.discard(task)
        if task.cancelled():
            logger.debug(f"{self.kind} handling cancelled on {self.record.token}")
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"Unhandled error while handling {self.kind} event",
                exc_info=error,
                extra={"instance_id": self.record.token},
            )

    def __repr__(self) -> str:
        return f"HandlerProxy({self.kind!r}, instance={self.record.token})"


class InterceptionRegistry:
    """Tracks wrapped editor instances and their original handlers."""

    def __init__(self, on_event: EventCallback):
        self._on_event = on_event
        self._records: Dict[str, InterceptedInstance] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, instance: Any) -> bool:
        token = self._existing_identity(instance)
        return token is not None and token in self._records

    def get(self, instance: Any) -> Optional[InterceptedInstance]:
        token = self._existing_identity(instance)
        return self._records.get(token) if token else None

    def register(self, instance: Any) -> InterceptedInstance:
        """
        Install proxies on an instance.

        The first call backs up the native handlers; later calls return
        the existing record and never overwrite the backup.
        """
        token = self._identity_of(instance)
        existing = self._records.get(token)
        if existing is not None:
            return existing

        originals: Dict[str, Handler] = {}
        for kind in HANDLED_KINDS:
            handler = instance.handlers[kind]
            # A proxy left behind by an earlier registry is not a native handler
            while isinstance(handler, HandlerProxy):
                handler = handler.original
            originals[kind] = handler

        record = InterceptedInstance(
            token=token,
            instance=instance,
            originals=originals,
            reconciler=PlaceholderReconciler(instance.editor),
        )
        for kind in HANDLED_KINDS:
            proxy = HandlerProxy(kind, record, self._on_event)
            record.proxies[kind] = proxy
            instance.handlers[kind] = proxy

        self._records[token] = record
        logger.debug(f"Intercepting editor instance {token}")
        return record

    def unregister(self, instance: Any) -> bool:
        """Restore an instance's original handlers. False if not tracked."""
        token = self._existing_identity(instance)
        record = self._records.pop(token, None) if token else None
        if record is None:
            return False
        self._restore(record)
        return True

    def unregister_all(self) -> int:
        """Restore every tracked instance; returns how many were restored."""
        records = list(self._records.values())
        self._records.clear()
        for record in records:
            self._restore(record)
        return len(records)

    @staticmethod
    def _restore(record: InterceptedInstance) -> None:
        for kind, original in record.originals.items():
            record.instance.handlers[kind] = original
        logger.debug(f"Restored original handlers on {record.token}")

    @staticmethod
    def _existing_identity(instance: Any) -> Optional[str]:
        return getattr(instance, "instance_id", None) or getattr(instance, IDENTITY_ATTR, None)

    def _identity_of(self, instance: Any) -> str:
        token = self._existing_identity(instance)
        if token is None:
            token = uuid4().hex
            setattr(instance, IDENTITY_ATTR, token)
        return token
