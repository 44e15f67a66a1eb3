"""
CLI prompt and notices — Terminal versions of the plugin's UI pieces.
"""

from __future__ import annotations

import asyncio

import click

from ..engine.notice import NOTICE_TIMEOUT_MS
from ..models.upload import UserUploadDecision

CHOICES = {
    "upload": UserUploadDecision.approved(),
    "always": UserUploadDecision.approved(remember=True),
    "decline": UserUploadDecision.declined(),
    "cancel": UserUploadDecision.cancelled(),
}


class ClickConfirmationPrompt:
    """Asks on the terminal whether images may be uploaded to Imgur."""

    async def ask(self) -> UserUploadDecision:
        try:
            answer = await asyncio.to_thread(
                click.prompt,
                "Upload to Imgur or keep the image local? "
                "(upload / always = upload and don't ask again / "
                "decline = keep local / cancel)",
                type=click.Choice(list(CHOICES)),
                default="cancel",
                show_choices=False,
            )
        except click.Abort:
            return UserUploadDecision.cancelled()
        return CHOICES[answer]


class ClickNotifier:
    """Prints notices to stderr; the timeout has no meaning on a terminal."""

    def show(self, message: str, timeout_ms: int = NOTICE_TIMEOUT_MS) -> None:
        click.secho(message, fg="yellow", err=True)
