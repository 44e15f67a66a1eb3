"""
Tests for uploading an image that already lives in the vault.
"""

from pathlib import Path

import pytest

from imgur_paste.editor import Position, TextDocument
from imgur_paste.engine.local_image import (
    TRASH_DIR,
    LocalImageError,
    find_image_link_at,
    move_to_trash,
    read_blob,
    resolve_in_vault,
)
from imgur_paste.host import LocalEditorInstance
from imgur_paste.models.upload import UploadState
from imgur_paste.uploader.errors import ApiError, UploaderNotConfigured

from conftest import FakeUploader, make_plugin, small_png


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    (tmp_path / "cat.png").write_bytes(small_png())
    (tmp_path / "note.md").write_text("See ![[cat.png]] here\n", encoding="utf-8")
    return tmp_path


class TestFindImageLink:

    def test_wiki_embed_under_cursor(self):
        doc = TextDocument("See ![[cat.png]] here", cursor=Position(0, 8))
        link = find_image_link_at(doc)
        assert link.target == "cat.png"
        assert (link.start, link.end) == (4, 16)
        assert link.text == "![[cat.png]]"

    def test_wiki_embed_with_size(self):
        doc = TextDocument("![[cat.png|200]]", cursor=Position(0, 2))
        assert find_image_link_at(doc).target == "cat.png"

    def test_markdown_embed_is_unquoted(self):
        doc = TextDocument("x ![alt](img/a%20b.png)", cursor=Position(0, 5))
        assert find_image_link_at(doc).target == "img/a b.png"

    def test_cursor_outside_link(self):
        doc = TextDocument("See ![[cat.png]] here", cursor=Position(0, 19))
        assert find_image_link_at(doc) is None

    def test_plain_link_is_not_an_embed(self):
        doc = TextDocument("[cat](cat.png)", cursor=Position(0, 3))
        assert find_image_link_at(doc) is None


class TestVaultFiles:

    def test_resolve_relative_to_document(self, vault):
        sub = vault / "notes"
        sub.mkdir()
        (sub / "dog.png").write_bytes(small_png())
        assert resolve_in_vault(vault, "dog.png", sub) == (sub / "dog.png").resolve()

    def test_resolve_by_name_anywhere_in_vault(self, vault):
        deep = vault / "assets" / "2024"
        deep.mkdir(parents=True)
        (deep / "bird.png").write_bytes(small_png())
        assert resolve_in_vault(vault, "bird.png") == (deep / "bird.png").resolve()

    def test_trash_is_not_searched(self, vault):
        trash = vault / TRASH_DIR
        trash.mkdir()
        (trash / "old.png").write_bytes(small_png())
        with pytest.raises(LocalImageError):
            resolve_in_vault(vault, "old.png")

    def test_target_outside_vault_is_rejected(self, tmp_path):
        inner = tmp_path / "vault"
        inner.mkdir()
        (tmp_path / "secret.png").write_bytes(small_png())
        with pytest.raises(LocalImageError):
            resolve_in_vault(inner, "../secret.png")

    def test_url_target_never_resolves(self, vault):
        (vault / "x.png").write_bytes(small_png())
        with pytest.raises(LocalImageError):
            resolve_in_vault(vault, "https://i.imgur.com/x.png")

    def test_name_with_glob_characters_matches_literally(self, vault):
        (vault / "a").mkdir()
        (vault / "b").mkdir()
        (vault / "a" / "shot[1].png").write_bytes(small_png())
        (vault / "b" / "shot1.png").write_bytes(small_png())

        found = resolve_in_vault(vault, "elsewhere/shot[1].png")

        assert found == (vault / "a" / "shot[1].png").resolve()

    def test_by_name_search_can_be_disabled(self, vault):
        (vault / "other").mkdir()
        (vault / "other" / "dog.png").write_bytes(small_png())
        with pytest.raises(LocalImageError):
            resolve_in_vault(vault, "missing/dog.png", by_name=False)

    def test_read_blob_guesses_mime(self, vault):
        blob = read_blob(vault / "cat.png")
        assert blob.mime_type == "image/png"
        assert blob.is_image

    def test_move_to_trash_never_overwrites(self, vault):
        trash = vault / TRASH_DIR
        trash.mkdir()
        (trash / "cat.png").write_bytes(b"older")

        dest = move_to_trash(vault, vault / "cat.png")

        assert dest == trash / "cat 1.png"
        assert (trash / "cat.png").read_bytes() == b"older"
        assert not (vault / "cat.png").exists()


class TestUploadLocalImage:

    @pytest.mark.asyncio
    async def test_success_embeds_url_and_trashes_file(self, vault, store, notifier):
        plugin = make_plugin(store, FakeUploader(), notifier)
        instance = LocalEditorInstance.open(vault / "note.md", cursor=Position(0, 6))

        outcome = await plugin.upload_local_image(instance, vault, vault)

        assert outcome.state is UploadState.SUCCEEDED
        assert instance.editor.get_value() == "See ![](https://i.imgur.com/cat.png) here\n"
        assert not (vault / "cat.png").exists()
        assert (vault / TRASH_DIR / "cat.png").exists()

    @pytest.mark.asyncio
    async def test_failure_keeps_link_and_file(self, vault, store, notifier):
        uploader = FakeUploader(errors={"cat.png": ApiError("over capacity")})
        plugin = make_plugin(store, uploader, notifier)
        instance = LocalEditorInstance.open(vault / "note.md", cursor=Position(0, 6))

        outcome = await plugin.upload_local_image(instance, vault, vault)

        assert outcome.state is UploadState.FAILED
        assert instance.editor.get_value() == (
            "See <!--Upload failed, remote server returned an error: over capacity-->"
            "![[cat.png]] here\n"
        )
        assert (vault / "cat.png").exists()

    @pytest.mark.asyncio
    async def test_no_link_under_cursor(self, vault, store, notifier):
        plugin = make_plugin(store, FakeUploader(), notifier)
        instance = LocalEditorInstance.open(vault / "note.md", cursor=Position(0, 1))

        with pytest.raises(LocalImageError):
            await plugin.upload_local_image(instance, vault, vault)

        assert instance.editor.get_value() == "See ![[cat.png]] here\n"

    @pytest.mark.asyncio
    async def test_non_image_link(self, vault, store, notifier):
        (vault / "doc.pdf").write_bytes(b"%PDF-1.4")
        (vault / "note.md").write_text("![[doc.pdf]]", encoding="utf-8")
        plugin = make_plugin(store, FakeUploader(), notifier)
        instance = LocalEditorInstance.open(vault / "note.md", cursor=Position(0, 3))

        with pytest.raises(LocalImageError, match="Not an image"):
            await plugin.upload_local_image(instance, vault, vault)

    @pytest.mark.asyncio
    async def test_unconfigured_shows_notice(self, vault, store, notifier):
        plugin = make_plugin(store, None, notifier)
        instance = LocalEditorInstance.open(vault / "note.md", cursor=Position(0, 6))

        with pytest.raises(UploaderNotConfigured):
            await plugin.upload_local_image(instance, vault, vault)

        assert notifier.shown == ["⚠️ Please configure Imgur plugin or disable it"]
        assert (vault / "cat.png").exists()

    @pytest.mark.asyncio
    async def test_remote_embed_leaves_local_namesake_alone(self, vault, store, notifier):
        """An already-hosted image is never matched to a vault file by name."""
        (vault / "sub").mkdir()
        (vault / "sub" / "x.png").write_bytes(small_png())
        (vault / "note.md").write_text("![](https://i.imgur.com/x.png)\n", encoding="utf-8")
        uploader = FakeUploader()
        plugin = make_plugin(store, uploader, notifier)
        instance = LocalEditorInstance.open(vault / "note.md", cursor=Position(0, 3))

        with pytest.raises(LocalImageError, match="already remote"):
            await plugin.upload_local_image(instance, vault, vault)

        assert uploader.started == []
        assert (vault / "sub" / "x.png").exists()
        assert not (vault / TRASH_DIR).exists()
        assert instance.editor.get_value() == "![](https://i.imgur.com/x.png)\n"

    @pytest.mark.asyncio
    async def test_markdown_link_is_not_resolved_by_name(self, vault, store, notifier):
        """A relative markdown path must point at the file itself."""
        (vault / "other").mkdir()
        (vault / "other" / "dog.png").write_bytes(small_png())
        (vault / "note.md").write_text("![](missing/dog.png)", encoding="utf-8")
        plugin = make_plugin(store, FakeUploader(), notifier)
        instance = LocalEditorInstance.open(vault / "note.md", cursor=Position(0, 3))

        with pytest.raises(LocalImageError, match="not found"):
            await plugin.upload_local_image(instance, vault, vault)

        assert (vault / "other" / "dog.png").exists()
