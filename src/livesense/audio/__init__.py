"""Audio transcription module for livesense.

Provides the audio normalizer, the recognizer interface and the
serialized transcription queue.

Public API:
    AudioNormalizer -- ffmpeg transcode + mono mix to 16 kHz float32
    Recognizer -- Abstract speech recognizer
    TranscriptionQueue -- single-consumer transcription worker
    WhisperRecognizer -- local faster-whisper model
    OpenAIRecognizer -- OpenAI / Groq transcription API
    TranscriptionClient -- HTTP client for the standalone worker
"""

from livesense.audio.normalizer import AudioNormalizer, NormalizationError, mix_to_mono
from livesense.audio.queue import TranscriptionError, TranscriptionQueue, TranscriptionQueueClosed
from livesense.audio.recognizer import Recognizer, RecognizerError, build_recognizer

__all__ = [
    "AudioNormalizer",
    "NormalizationError",
    "OpenAIRecognizer",
    "Recognizer",
    "RecognizerError",
    "TranscriptionClient",
    "TranscriptionError",
    "TranscriptionQueue",
    "TranscriptionQueueClosed",
    "WhisperRecognizer",
    "build_recognizer",
    "mix_to_mono",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "WhisperRecognizer":
        from livesense.audio.whisper import WhisperRecognizer
        return WhisperRecognizer
    if name == "OpenAIRecognizer":
        from livesense.audio.openai import OpenAIRecognizer
        return OpenAIRecognizer
    if name == "TranscriptionClient":
        from livesense.audio.client import TranscriptionClient
        return TranscriptionClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
