"""
Imgur Paste — CLI Entry Point

Usage:
    python -m imgur_paste.main drop NOTE.md a.png b.png
    python -m imgur_paste.main paste NOTE.md shot.png --line 3
    python -m imgur_paste.main upload-local NOTE.md --line 3 --ch 4
    python -m imgur_paste.main settings show
"""

from __future__ import annotations

# Load .env file FIRST, before any other imports that might read env vars
from pathlib import Path
from dotenv import load_dotenv

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from typing import Optional

import click

from .config.settings import SettingsStore
from .logging_config import setup_logging
from .cli.document import drop, paste, upload_local
from .cli.settings import settings_group


@click.group()
@click.option(
    "--settings-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="IMGUR_PASTE_SETTINGS",
    help="Settings JSON file (default: ~/.imgur-paste/settings.json)",
)
@click.option("--dry-run", is_flag=True, help="Use the offline mock uploader")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    settings_file: Optional[Path],
    dry_run: bool,
    verbose: bool,
) -> None:
    """Imgur Paste — Upload pasted and dropped images, embed the links."""
    setup_logging(level="DEBUG" if verbose else None)
    ctx.ensure_object(dict)
    ctx.obj["store"] = SettingsStore(settings_file)
    ctx.obj["dry_run"] = dry_run


cli.add_command(drop)
cli.add_command(paste)
cli.add_command(upload_local)
cli.add_command(settings_group)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
