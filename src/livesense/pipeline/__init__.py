"""Live screen ingestion pipeline.

Public API:
    ThumbnailDeduplicator -- change detection on downsampled thumbnails
    BoundedCaptureQueue -- capacity-bounded FIFO of screenshot files
    LiveContext -- per-run state handle (mode, queues, deduplicator)
    LiveCycleScheduler -- fixed-interval capture loop
"""

from livesense.pipeline.context import LiveContext
from livesense.pipeline.dedup import ThumbnailDeduplicator
from livesense.pipeline.queue import BoundedCaptureQueue
from livesense.pipeline.scheduler import LiveCycleScheduler, SchedulerState

__all__ = [
    "BoundedCaptureQueue",
    "LiveContext",
    "LiveCycleScheduler",
    "SchedulerState",
    "ThumbnailDeduplicator",
]
