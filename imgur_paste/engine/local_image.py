"""
Local Image Upload — Move an image already in the vault to the host.

Finds the image link under the cursor (`![[photo.png]]` or
`![](photo.png)`), uploads the file it points to, and swaps the link for
the remote embed. The local file goes to the vault's `.trash/` folder
once the upload succeeded; on failure the link is put back behind an
inline annotation and the file stays where it is.
"""

from __future__ import annotations

import logging
import mimetypes
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

from ..editor import EditorHandle, Position
from ..models.events import FileBlob
from ..models.upload import PendingUpload, UploadState
from ..uploader.base import ImageUploader
from .orchestrator import upload_and_resolve
from .placeholder import PlaceholderReconciler, annotation_for

logger = logging.getLogger(__name__)

TRASH_DIR = ".trash"

WIKI_EMBED = re.compile(r"!\[\[([^\]|#]+)(?:[|#][^\]]*)?\]\]")
MARKDOWN_EMBED = re.compile(r"!\[[^\]]*\]\(<?([^)>]+?)>?\)")


class LocalImageError(Exception):
    """The link under the cursor cannot be uploaded."""


@dataclass(frozen=True)
class ImageLink:
    """An image embed found on one line."""

    target: str
    line: int
    start: int
    end: int
    text: str
    wiki: bool = False


def find_image_link_at(editor: EditorHandle, cursor: Optional[Position] = None) -> Optional[ImageLink]:
    """Return the image embed that contains the cursor, if any."""
    cursor = cursor or editor.get_cursor()
    lines = editor.get_value().split("\n")
    if cursor.line >= len(lines):
        return None
    line = lines[cursor.line]

    for pattern in (WIKI_EMBED, MARKDOWN_EMBED):
        for match in pattern.finditer(line):
            if match.start() <= cursor.ch <= match.end():
                return ImageLink(
                    target=unquote(match.group(1).strip()),
                    line=cursor.line,
                    start=match.start(),
                    end=match.end(),
                    text=match.group(0),
                    wiki=pattern is WIKI_EMBED,
                )
    return None


def is_remote(target: str) -> bool:
    return bool(urlsplit(target).scheme)


def resolve_in_vault(
    vault_root: Path,
    target: str,
    document_dir: Optional[Path] = None,
    by_name: bool = True,
) -> Path:
    """
    Resolve a link target to a file inside the vault.

    Tries the document's folder, then the vault root, then (with
    `by_name`) any file in the vault with exactly the same name. URL
    targets never resolve.
    """
    if is_remote(target):
        raise LocalImageError(f"Not a vault file: {target}")

    vault_root = vault_root.resolve()
    candidates = []
    if document_dir is not None:
        candidates.append(document_dir / target)
    candidates.append(vault_root / target)

    for candidate in candidates:
        candidate = candidate.resolve()
        if candidate.is_file() and candidate.is_relative_to(vault_root):
            return candidate

    if by_name:
        name = Path(target).name
        # Compared literally; link names may contain glob characters
        for match in sorted(vault_root.rglob("*")):
            if (
                match.name == name
                and match.is_file()
                and TRASH_DIR not in match.relative_to(vault_root).parts
            ):
                return match

    raise LocalImageError(f"Linked file not found in vault: {target}")


def read_blob(path: Path) -> FileBlob:
    mime_type, _ = mimetypes.guess_type(path.name)
    return FileBlob(
        name=path.name,
        mime_type=mime_type or "application/octet-stream",
        data=path.read_bytes(),
    )


def move_to_trash(vault_root: Path, path: Path) -> Path:
    """Move a file into the vault's trash folder without overwriting."""
    trash = vault_root / TRASH_DIR
    trash.mkdir(parents=True, exist_ok=True)

    dest = trash / path.name
    counter = 1
    while dest.exists():
        dest = trash / f"{path.stem} {counter}{path.suffix}"
        counter += 1

    shutil.move(str(path), str(dest))
    logger.info(f"Moved {path.name} to trash")
    return dest


async def upload_local_image(
    editor: EditorHandle,
    reconciler: PlaceholderReconciler,
    uploader: ImageUploader,
    vault_root: Path,
    document_dir: Optional[Path] = None,
) -> PendingUpload:
    """Upload the image linked under the cursor and embed the result."""
    link = find_image_link_at(editor)
    if link is None:
        raise LocalImageError("No image link under the cursor")

    if is_remote(link.target):
        raise LocalImageError(f"Image is already remote: {link.target}")

    path = resolve_in_vault(vault_root, link.target, document_dir, by_name=link.wiki)
    blob = read_blob(path)
    if not blob.is_image:
        raise LocalImageError(f"Not an image: {path.name}")

    token = reconciler.replace_with_placeholder(
        Position(link.line, link.start),
        Position(link.line, link.end),
    )
    pending = PendingUpload(token=token, blob=blob)

    # A failure keeps the original link behind the annotation
    outcome = await upload_and_resolve(uploader, _KeepLinkOnFailure(reconciler, link.text), pending)

    if outcome.state is UploadState.SUCCEEDED:
        move_to_trash(vault_root.resolve(), path)
    else:
        logger.warning(f"Upload of {path.name} failed, keeping local file")
    return outcome


class _KeepLinkOnFailure:
    """Reconciler view that re-appends the original link after a failure note."""

    def __init__(self, reconciler: PlaceholderReconciler, link_text: str):
        self._reconciler = reconciler
        self._link_text = link_text

    def resolve_success(self, token: str, url: str) -> bool:
        return self._reconciler.resolve_success(token, url)

    def resolve_failure(self, token: str, message: str) -> bool:
        return self._reconciler.resolve(token, annotation_for(message) + self._link_text)
