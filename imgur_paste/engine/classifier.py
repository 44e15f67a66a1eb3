"""
Event Classifier — Decide whether an input event is ours to handle.

Pure functions: nothing here touches the document or the event. An
event that is not eligible must reach the editor's original handler
exactly as it arrived.

## Eligibility

- drop:  transfer types are exactly ["Files"], at least one file is
         attached, and every file is an image
- paste: at least one file is attached and the first one is an image

An event with an eligible shape but no configured uploader is
UNCONFIGURED: the user gets a notice and the editor handles the event.

Shape is checked before configuration on purpose, unlike the Obsidian
Imgur plugin, which checks the uploader first and so shows the "please
configure" notice on every paste and drop, text included. Here only
image-shaped events raise it.
"""

from __future__ import annotations

from enum import Enum

from ..models.events import FILES_TRANSFER_TYPE, InputEvent


class Verdict(str, Enum):
    """Classification outcome."""
    ELIGIBLE = "eligible"
    NOT_ELIGIBLE = "not_eligible"
    UNCONFIGURED = "unconfigured"


def is_eligible_drop(event: InputEvent) -> bool:
    transfer = event.transfer
    if transfer.types != [FILES_TRANSFER_TYPE]:
        return False
    if not transfer.files:
        return False
    return all(f.is_image for f in transfer.files)


def is_eligible_paste(event: InputEvent) -> bool:
    files = event.transfer.files
    return len(files) > 0 and files[0].is_image


def classify(event: InputEvent, uploader_configured: bool) -> Verdict:
    """Classify a drop or paste event."""
    if event.kind == "drop":
        shape_ok = is_eligible_drop(event)
    elif event.kind == "paste":
        shape_ok = is_eligible_paste(event)
    else:
        shape_ok = False

    if not shape_ok:
        return Verdict.NOT_ELIGIBLE
    if not uploader_configured:
        return Verdict.UNCONFIGURED
    return Verdict.ELIGIBLE
