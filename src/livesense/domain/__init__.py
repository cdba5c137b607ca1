"""Domain models for livesense.

This package contains the core data structures and enumerations used
throughout the pipeline. All models use Pydantic v2 for validation.
"""

from livesense.domain.models import (
    CaptureArtifact,
    CaptureMode,
    CycleOutcome,
    DedupDecision,
    DeleteResult,
    QueueName,
    TranscriptionJob,
    TranscriptionResult,
)

__all__ = [
    "CaptureArtifact",
    "CaptureMode",
    "CycleOutcome",
    "DedupDecision",
    "DeleteResult",
    "QueueName",
    "TranscriptionJob",
    "TranscriptionResult",
]
