"""livesense -- Live sensing ingestion pipeline for a desktop LLM overlay.

This package implements the continuously running loop that captures the
screen on a fixed cadence, drops captures that did not change, routes the
survivors into bounded on-disk queues, and serializes audio chunks through
a single transcription worker. Window control, prompt construction and
model invocation are collaborators plugged in at the edges.
"""

__version__ = "0.1.0"
