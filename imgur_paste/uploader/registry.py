"""
Uploader Registry — Upload strategies and uploader construction.

A strategy is selected by id in the plugin settings. Strategies that
need a credential yield no uploader until it is configured; the engine
treats that as "unconfigured" and defers every event to the editor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

from .base import ImageUploader
from .errors import UnknownUploadStrategy
from .imgur import ImgurAnonymousUploader
from .mock import MockUploader

if TYPE_CHECKING:
    from ..config.settings import PluginSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadStrategy:
    """A selectable way of uploading images."""

    id: str
    description: str
    requires_client_id: bool = True


ANONYMOUS_IMGUR = UploadStrategy(
    id="ANONYMOUS_IMGUR",
    description="Anonymous Imgur upload",
)
MOCK = UploadStrategy(
    id="MOCK",
    description="Offline mock upload (no network)",
    requires_client_id=False,
)

STRATEGIES: Dict[str, UploadStrategy] = {
    s.id: s for s in (ANONYMOUS_IMGUR, MOCK)
}


def get_strategy(strategy_id: str) -> UploadStrategy:
    """Look up a strategy by id."""
    strategy = STRATEGIES.get(strategy_id)
    if strategy is None:
        raise UnknownUploadStrategy(
            f"Unknown upload strategy '{strategy_id}' "
            f"(available: {', '.join(sorted(STRATEGIES))})"
        )
    return strategy


def build_uploader_from(settings: "PluginSettings") -> Optional[ImageUploader]:
    """
    Build the uploader selected by the settings.

    Returns None when the strategy is missing its credential.
    """
    strategy = get_strategy(settings.upload_strategy)

    if strategy.requires_client_id and not settings.client_id:
        logger.debug(f"{strategy.id} selected but no client id configured")
        return None

    if strategy is ANONYMOUS_IMGUR:
        uploader: ImageUploader = ImgurAnonymousUploader(settings.client_id)
    else:
        uploader = MockUploader()

    logger.debug(f"Built uploader: {uploader.name}")
    return uploader
