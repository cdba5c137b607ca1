"""Core domain models for the livesense pipeline.

These models represent the data flowing through the two halves of the
pipeline: on-disk screen captures owned by the bounded queues, and
audio transcription jobs handed to the serialized recognition worker.
"""

from __future__ import annotations

import asyncio
import enum
import uuid
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CaptureMode(str, enum.Enum):
    """Operating mode that decides where a surviving capture is routed."""

    PRIMARY = "primary"  # Normal context gathering
    SECONDARY = "secondary"  # Post-extraction / debugging follow-up shots


class QueueName(str, enum.Enum):
    """Identity of a bounded capture queue."""

    PRIMARY = "primary"
    SECONDARY = "secondary"

    @classmethod
    def for_mode(cls, mode: CaptureMode) -> QueueName:
        return cls.SECONDARY if mode is CaptureMode.SECONDARY else cls.PRIMARY


class DedupDecision(str, enum.Enum):
    """Result of comparing a fresh capture against the stored thumbnail."""

    CHANGED = "changed"
    UNCHANGED = "unchanged"


class CycleOutcome(str, enum.Enum):
    """How a single live cycle ended."""

    QUEUED = "queued"  # Capture changed and was pushed to a queue
    UNCHANGED = "unchanged"  # Capture discarded by the deduplicator
    SKIPPED = "skipped"  # Previous cycle still running
    FAILED = "failed"  # Exception caught at the cycle boundary


# ---------------------------------------------------------------------------
# Capture Models
# ---------------------------------------------------------------------------


class CaptureArtifact(BaseModel):
    """A screenshot file on durable storage owned by one capture queue."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(description="Location of the captured image file")
    created_at: datetime = Field(default_factory=datetime.now)
    queue: QueueName = Field(description="Queue that owns this artifact")


class DeleteResult(BaseModel):
    """Outcome of deleting a file. Callers decide whether to log or ignore."""

    model_config = ConfigDict(frozen=True)

    path: Path
    success: bool
    error: str | None = None


# ---------------------------------------------------------------------------
# Transcription Models
# ---------------------------------------------------------------------------


class TranscriptionResult(BaseModel):
    """Text produced for one transcription job."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Recognized text, whitespace-trimmed")


class TranscriptionJob(BaseModel):
    """A unit of work for the audio transcription worker.

    Carries the raw audio payload and the future its caller awaits.
    The temp file names derive from ``job_id`` so concurrent jobs never
    collide on disk.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    job_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    data: bytes = Field(description="Compressed audio bytes as received")
    mime_type: str = Field(default="application/octet-stream")
    created_at: datetime = Field(default_factory=datetime.now)
    future: asyncio.Future = Field(description="Resolved with the job's TranscriptionResult")

    def input_path(self, temp_dir: Path) -> Path:
        return temp_dir / f"temp_input_{self.job_id}"

    def output_path(self, temp_dir: Path) -> Path:
        return temp_dir / f"temp_output_{self.job_id}.wav"
