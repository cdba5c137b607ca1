"""Thumbnail-based change detection for fresh screen captures.

Provides a cheap local check to avoid queueing (and paying an LLM call
for) a screenshot that looks exactly like the previous one.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable

from livesense.domain.models import DedupDecision
from livesense.utils.files import remove_file
from livesense.utils.imaging import downsample_to_thumbnail

logger = logging.getLogger(__name__)

Downsampler = Callable[[Path, int], bytes]


class ThumbnailDeduplicator:
    """Decides whether a capture differs from the last surviving one.

    Holds exactly one thumbnail: the raw pixel bytes of the most recent
    capture judged *changed*. Comparison is byte-for-byte, so any single
    pixel difference after downsampling counts as a change.

    Failures in the downsample step fail open: the capture is treated as
    changed and kept, since dropping real evidence is worse than queueing
    a redundant screenshot.
    """

    def __init__(self, width: int = 32, downsampler: Downsampler | None = None) -> None:
        self._width = width
        self._downsample = downsampler or downsample_to_thumbnail
        self._thumbnail: bytes | None = None

    @property
    def thumbnail(self) -> bytes | None:
        return self._thumbnail

    @property
    def width(self) -> int:
        return self._width

    def reset(self) -> None:
        """Forget the stored thumbnail; the next capture is a cold start."""
        self._thumbnail = None
        logger.debug("Thumbnail reset")

    async def check(self, path: Path) -> DedupDecision:
        """Compare the capture at ``path`` against the stored thumbnail.

        On UNCHANGED the capture file is deleted. On CHANGED the stored
        thumbnail is replaced and the file is left for the caller to queue.
        """
        loop = asyncio.get_running_loop()
        try:
            thumb = await loop.run_in_executor(None, self._downsample, path, self._width)
        except Exception as e:
            logger.warning("Thumbnail extraction failed for %s, keeping capture: %s", path.name, e)
            return DedupDecision.CHANGED

        if self._thumbnail is not None and thumb == self._thumbnail:
            result = remove_file(path)
            if not result.success:
                logger.warning("Could not delete unchanged capture %s: %s", path, result.error)
            logger.debug("No change detected, discarded %s", path.name)
            return DedupDecision.UNCHANGED

        if self._thumbnail is None:
            logger.debug("Cold start, keeping %s", path.name)
        self._thumbnail = thumb
        return DedupDecision.CHANGED
