"""Standalone HTTP transcription worker.

Serves the serialized transcription queue at ``/v1/audio/transcriptions``.
"""
