"""
CLI settings commands — show and change the plugin settings.

Usage:
    imgur-paste settings show [--json]
    imgur-paste settings set [--strategy ID] [--client-id ID] [--confirm/--no-confirm]
"""

from __future__ import annotations

import json
from typing import Optional

import click

from ..uploader.registry import STRATEGIES


@click.group("settings")
def settings_group() -> None:
    """Show or change the uploader settings."""


@settings_group.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show(ctx: click.Context, as_json: bool) -> None:
    """Show the current settings."""
    from .document import build_plugin

    plugin = build_plugin(ctx)
    settings = plugin.settings

    if as_json:
        click.echo(json.dumps(settings.to_json_dict(), indent=2))
        return

    strategy = STRATEGIES.get(settings.upload_strategy)
    click.echo(f"Settings file:  {plugin.store.path}")
    click.echo(f"Strategy:       {settings.upload_strategy}"
               + (f" ({strategy.description})" if strategy else ""))
    click.echo(f"Client id:      {'set' if settings.client_id else 'not set'}")
    click.echo(f"Confirm upload: {'yes' if settings.show_remote_upload_confirmation else 'no'}")

    if plugin.uploader is None:
        click.secho("✗ Uploader not configured", fg="red")
    else:
        click.secho(f"✓ Uploader ready: {plugin.uploader.name}", fg="green")


@settings_group.command("set")
@click.option("--strategy", type=click.Choice(sorted(STRATEGIES)), default=None, help="Upload strategy")
@click.option("--client-id", default=None, help="Imgur application client id")
@click.option("--confirm/--no-confirm", default=None, help="Ask before every remote upload")
@click.pass_context
def set_settings(
    ctx: click.Context,
    strategy: Optional[str],
    client_id: Optional[str],
    confirm: Optional[bool],
) -> None:
    """Change and save settings."""
    from .document import build_plugin

    plugin = build_plugin(ctx)
    settings = plugin.settings

    if strategy is not None:
        settings.upload_strategy = strategy
    if client_id is not None:
        settings.client_id = client_id or None
    if confirm is not None:
        settings.show_remote_upload_confirmation = confirm

    plugin.save_settings()
    plugin.setup_uploader()

    click.secho(f"✓ Settings saved to {plugin.store.path}", fg="green")
    if plugin.uploader is None:
        click.secho("  Uploader still not configured (missing client id?)", fg="yellow")
