"""Fixed-capacity FIFO of screenshot files with oldest-first eviction."""

from __future__ import annotations

import logging
from collections import deque
from pathlib import Path
from typing import Iterator

from livesense.domain.models import CaptureArtifact, DeleteResult, QueueName
from livesense.pipeline.dedup import ThumbnailDeduplicator
from livesense.utils.files import log_failed_deletions, remove_file

logger = logging.getLogger(__name__)


class BoundedCaptureQueue:
    """Ordered, capacity-bounded sequence of capture artifacts.

    The queue owns the files it holds: evicted, removed and cleared
    artifacts have their backing file deleted. Deletion is best-effort;
    failures come back as DeleteResult values and are logged, never raised.

    Mutation is expected from a single event loop. A multi-threaded
    caller must serialize push/remove/clear itself.
    """

    def __init__(
        self,
        name: QueueName,
        capacity: int,
        deduplicator: ThumbnailDeduplicator | None = None,
    ) -> None:
        if capacity <= 0:
            raise ValueError(f"Queue capacity must be positive, got {capacity}")
        self._name = name
        self._capacity = capacity
        self._deduplicator = deduplicator
        self._items: deque[CaptureArtifact] = deque()

    @property
    def name(self) -> QueueName:
        return self._name

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def paths(self) -> list[Path]:
        return [item.path for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CaptureArtifact]:
        return iter(list(self._items))

    def __contains__(self, path: object) -> bool:
        return any(item.path == path for item in self._items)

    def push(self, artifact: CaptureArtifact) -> list[DeleteResult]:
        """Append ``artifact``, evicting the oldest entries beyond capacity.

        Returns:
            One DeleteResult per evicted artifact (empty when nothing
            was evicted).
        """
        self._items.append(artifact)
        evicted: list[DeleteResult] = []
        while len(self._items) > self._capacity:
            oldest = self._items.popleft()
            evicted.append(remove_file(oldest.path))
            logger.debug("Evicted %s from %s queue", oldest.path.name, self._name.value)
        log_failed_deletions(evicted, f"{self._name.value} queue eviction")
        logger.info(
            "Added %s to %s queue. Count: %d/%d",
            artifact.path.name, self._name.value, len(self._items), self._capacity,
        )
        return evicted

    def snapshot(self) -> list[CaptureArtifact]:
        """Return the held artifacts in insertion order without mutating."""
        return list(self._items)

    def pop_all(self) -> list[CaptureArtifact]:
        """Empty the queue and hand its artifacts (and their files) to the caller."""
        items = list(self._items)
        self._items.clear()
        return items

    def remove(self, path: Path | str) -> DeleteResult | None:
        """Drop every entry whose path equals ``path`` and delete the file.

        Returns None when the queue did not hold ``path``.
        """
        path = Path(path)
        if path not in self:
            return None
        self._items = deque(item for item in self._items if item.path != path)
        result = remove_file(path)
        log_failed_deletions([result], f"{self._name.value} queue removal")
        return result

    def clear(self) -> list[DeleteResult]:
        """Delete every held file, empty the queue and reset the thumbnail."""
        results = [remove_file(item.path) for item in self._items]
        self._items.clear()
        if self._deduplicator is not None:
            self._deduplicator.reset()
        log_failed_deletions(results, f"{self._name.value} queue clear")
        logger.info("Cleared %s queue (%d files)", self._name.value, len(results))
        return results
