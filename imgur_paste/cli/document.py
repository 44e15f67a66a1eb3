"""
CLI document commands — drop, paste, or re-upload images in a note.

Usage:
    imgur-paste drop NOTE.md IMAGE... [--line N --ch N]
    imgur-paste paste NOTE.md IMAGE... [--line N --ch N]
    imgur-paste upload-local NOTE.md --line N --ch N [--vault DIR]
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Tuple

import click

from ..editor import Position
from ..engine.local_image import LocalImageError, read_blob
from ..host import LocalEditorInstance
from ..models.events import InputEvent
from ..models.upload import UploadState
from ..plugin import ImgurPastePlugin
from ..uploader.errors import UploaderNotConfigured
from ..uploader.mock import MockUploader
from ..uploader.registry import build_uploader_from
from .prompt import ClickConfirmationPrompt, ClickNotifier


def build_plugin(ctx: click.Context) -> ImgurPastePlugin:
    """Create and load a plugin for this invocation."""
    if ctx.obj["dry_run"]:
        factory = lambda settings: MockUploader()  # noqa: E731
    else:
        factory = build_uploader_from

    plugin = ImgurPastePlugin(
        ctx.obj["store"],
        prompt=ClickConfirmationPrompt(),
        notifier=ClickNotifier(),
        uploader_factory=factory,
    )
    plugin.load()
    return plugin


def _cursor(line: Optional[int], ch: int) -> Optional[Position]:
    return Position(line, ch) if line is not None else None


async def _dispatch(plugin: ImgurPastePlugin, instance: LocalEditorInstance, event: InputEvent) -> None:
    plugin.on_editor(instance)
    try:
        await instance.dispatch(event)
    finally:
        plugin.unload()


def _run_event(
    ctx: click.Context,
    kind: str,
    document: Path,
    images: Tuple[Path, ...],
    line: Optional[int],
    ch: int,
    attachments: Optional[Path],
) -> None:
    plugin = build_plugin(ctx)
    instance = LocalEditorInstance.open(document, attachments, _cursor(line, ch))

    blobs = [read_blob(p) for p in images]
    event = InputEvent.drop(blobs) if kind == "drop" else InputEvent.paste(blobs)

    asyncio.run(_dispatch(plugin, instance, event))
    instance.save()

    click.secho(f"✓ Updated {document}", fg="green")
    for saved in instance.saved_attachments:
        click.echo(f"  Kept locally: {saved}")


_event_options = [
    click.argument("document", type=click.Path(dir_okay=False, path_type=Path)),
    click.argument(
        "images",
        nargs=-1,
        required=True,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    ),
    click.option("--line", type=int, default=None, help="Cursor line (default: end of note)"),
    click.option("--ch", type=int, default=0, help="Cursor column"),
    click.option(
        "--attachments",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Folder for files kept locally (default: next to the note)",
    ),
]


def event_options(func):
    for option in reversed(_event_options):
        func = option(func)
    return func


@click.command("drop")
@event_options
@click.pass_context
def drop(
    ctx: click.Context,
    document: Path,
    images: Tuple[Path, ...],
    line: Optional[int],
    ch: int,
    attachments: Optional[Path],
) -> None:
    """Drop image files into a note."""
    _run_event(ctx, "drop", document, images, line, ch, attachments)


@click.command("paste")
@event_options
@click.pass_context
def paste(
    ctx: click.Context,
    document: Path,
    images: Tuple[Path, ...],
    line: Optional[int],
    ch: int,
    attachments: Optional[Path],
) -> None:
    """Paste image files into a note."""
    _run_event(ctx, "paste", document, images, line, ch, attachments)


@click.command("upload-local")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--line", type=int, required=True, help="Line of the image link")
@click.option("--ch", type=int, required=True, help="Column inside the image link")
@click.option(
    "--vault",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Vault root (default: the note's folder)",
)
@click.pass_context
def upload_local(
    ctx: click.Context,
    document: Path,
    line: int,
    ch: int,
    vault: Optional[Path],
) -> None:
    """Upload the vault image linked at a position and embed it remotely."""
    plugin = build_plugin(ctx)
    instance = LocalEditorInstance.open(document, cursor=Position(line, ch))
    vault_root = vault or document.parent

    try:
        outcome = asyncio.run(
            plugin.upload_local_image(instance, vault_root, document.parent)
        )
    except (LocalImageError, UploaderNotConfigured) as e:
        raise click.ClickException(str(e))
    finally:
        plugin.unload()

    instance.save()

    if outcome.state is UploadState.SUCCEEDED:
        click.secho(f"✓ {outcome.blob.name} → {outcome.url}", fg="green")
    else:
        click.secho(f"✗ {outcome.blob.name}: {outcome.reason}", fg="red")
        ctx.exit(1)
