"""
Shared fixtures for engine tests.

Provides an in-memory editor instance with mock native handlers, a
scriptable uploader, and a plugin wired to both, so tests can dispatch
events through the installed proxies and inspect the document.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, Mock, patch

import pytest

from imgur_paste.config.settings import PluginSettings, SettingsStore
from imgur_paste.editor import TextDocument
from imgur_paste.engine.notice import LoggingNotifier
from imgur_paste.models.events import FileBlob
from imgur_paste.models.upload import UserUploadDecision
from imgur_paste.plugin import ImgurPastePlugin
from imgur_paste.uploader.base import ImageUploader


def small_png(size_bytes: int = 200) -> bytes:
    """Create a minimal valid-ish PNG of approximately the given size."""
    header = (
        b"\x89PNG\r\n\x1a\n"
        b"\x00\x00\x00\rIHDR\x00\x00\x00\x01"
        b"\x00\x00\x00\x01\x08\x02\x00\x00\x00\x90wS\xde"
        b"\x00\x00\x00\x0cIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05"
        b"\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
    )
    if size_bytes > len(header):
        header += b"\x00" * (size_bytes - len(header))
    return header


def image(name: str = "a.png", mime_type: str = "image/png") -> FileBlob:
    return FileBlob(name=name, mime_type=mime_type, data=small_png())


def text_file(name: str = "notes.txt") -> FileBlob:
    return FileBlob(name=name, mime_type="text/plain", data=b"hello")


class FakeEditorInstance:
    """Editor instance whose native handlers are mocks."""

    def __init__(self, text: str = ""):
        self.editor = TextDocument(text)
        self.native_drop = Mock(name="native_drop", return_value=None)
        self.native_paste = Mock(name="native_paste", return_value=None)
        self.handlers = {"drop": self.native_drop, "paste": self.native_paste}


class FakeUploader(ImageUploader):
    """
    Uploader with scripted outcomes.

    Files named in `errors` raise that exception; every other file gets
    `https://i.imgur.com/<stem>.png`. `started` records call order.
    """

    def __init__(self, errors: Optional[Dict[str, Exception]] = None):
        self.errors = dict(errors or {})
        self.started: List[str] = []

    @property
    def name(self) -> str:
        return "FAKE"

    async def upload(self, blob: FileBlob) -> str:
        self.started.append(blob.name)
        await asyncio.sleep(0)
        if blob.name in self.errors:
            raise self.errors[blob.name]
        return url_for(blob.name)


def url_for(name: str) -> str:
    return f"https://i.imgur.com/{Path(name).stem}.png"


@pytest.fixture(autouse=True)
def no_client_id_env():
    """Keep a developer's IMGUR_CLIENT_ID out of the tests."""
    with patch.dict(os.environ):
        os.environ.pop("IMGUR_CLIENT_ID", None)
        os.environ.pop("IMGUR_PASTE_SETTINGS", None)
        yield


@pytest.fixture
def store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def instance() -> FakeEditorInstance:
    return FakeEditorInstance()


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest.fixture
def prompt():
    """Confirmation prompt whose answer tests set via prompt.ask.return_value."""
    p = Mock()
    p.ask = AsyncMock(return_value=UserUploadDecision.approved())
    return p


def make_plugin(
    store: SettingsStore,
    uploader: Optional[ImageUploader],
    notifier: LoggingNotifier,
    confirm: bool = False,
    prompt=None,
) -> ImgurPastePlugin:
    store.save(PluginSettings(client_id="test-client", show_remote_upload_confirmation=confirm))
    plugin = ImgurPastePlugin(
        store,
        prompt=prompt,
        notifier=notifier,
        uploader_factory=lambda settings: uploader,
    )
    plugin.load()
    return plugin


@pytest.fixture
def plugin(store, uploader, notifier):
    """Loaded plugin with confirmation disabled and the fake uploader."""
    p = make_plugin(store, uploader, notifier)
    yield p
    p.unload()
