"""Shared state handle for one live sensing run.

Holds the current capture mode, the capture directories, the thumbnail
deduplicator and both bounded queues. Built once per run and passed to
the scheduler and to any caller that deletes or lists screenshots.
"""

from __future__ import annotations

import logging
from pathlib import Path

from livesense.config.settings import CaptureConfig
from livesense.domain.models import CaptureMode, DeleteResult, QueueName
from livesense.pipeline.dedup import ThumbnailDeduplicator
from livesense.pipeline.queue import BoundedCaptureQueue
from livesense.utils.files import remove_file

logger = logging.getLogger(__name__)


class LiveContext:
    """Explicit owner of the pipeline's mutable state."""

    def __init__(
        self,
        primary_dir: Path,
        secondary_dir: Path,
        primary_capacity: int = 6,
        secondary_capacity: int = 2,
        deduplicator: ThumbnailDeduplicator | None = None,
    ) -> None:
        self._dirs = {
            CaptureMode.PRIMARY: Path(primary_dir),
            CaptureMode.SECONDARY: Path(secondary_dir),
        }
        for directory in self._dirs.values():
            directory.mkdir(parents=True, exist_ok=True)

        self.deduplicator = deduplicator or ThumbnailDeduplicator()
        self.primary = BoundedCaptureQueue(
            QueueName.PRIMARY, primary_capacity, deduplicator=self.deduplicator
        )
        self.secondary = BoundedCaptureQueue(
            QueueName.SECONDARY, secondary_capacity, deduplicator=self.deduplicator
        )
        self._queues = {queue.name: queue for queue in (self.primary, self.secondary)}
        self._mode = CaptureMode.PRIMARY

    @classmethod
    def from_config(cls, config: CaptureConfig) -> LiveContext:
        return cls(
            primary_dir=config.primary_dir,
            secondary_dir=config.secondary_dir,
            primary_capacity=config.primary_capacity,
            secondary_capacity=config.secondary_capacity,
            deduplicator=ThumbnailDeduplicator(width=config.thumbnail_width),
        )

    @property
    def mode(self) -> CaptureMode:
        return self._mode

    def set_mode(self, mode: CaptureMode) -> None:
        if mode is not self._mode:
            logger.info("Capture mode: %s -> %s", self._mode.value, mode.value)
        self._mode = mode

    def directory_for(self, mode: CaptureMode) -> Path:
        return self._dirs[mode]

    def queue_named(self, name: QueueName) -> BoundedCaptureQueue:
        return self._queues[name]

    def queue_for(self, mode: CaptureMode) -> BoundedCaptureQueue:
        return self.queue_named(QueueName.for_mode(mode))

    def current_queue(self) -> BoundedCaptureQueue:
        return self.queue_for(self._mode)

    def delete_screenshot(self, path: Path | str) -> DeleteResult:
        """Delete a screenshot by identity, whichever queue holds it."""
        path = Path(path)
        results = [r for r in (self.primary.remove(path), self.secondary.remove(path)) if r]
        if not results:
            # Not queued (already evicted, or never kept); still remove the file
            results = [remove_file(path)]
        result = results[0]
        if result.success:
            logger.info("Deleted screenshot: %s", path.name)
        return result

    def reset(self) -> None:
        """Clear both queues, forget the thumbnail and return to primary mode."""
        self.primary.clear()
        self.secondary.clear()
        self.deduplicator.reset()
        self.set_mode(CaptureMode.PRIMARY)
