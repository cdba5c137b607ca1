"""Abstract base class for speech recognition backends.

All recognizers take normalized mono float32 PCM and return text,
enabling the transcription queue and the HTTP worker to swap between a
local model and a cloud API without changing anything else.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

logger = logging.getLogger(__name__)


class Recognizer(ABC):
    """Abstract interface for automatic speech recognition.

    Recognizers that need a warm-up (downloading or loading weights)
    override ``load()`` and report readiness through ``is_ready``.
    """

    def __init__(self, sample_rate: int = 16000) -> None:
        self._sample_rate = sample_rate

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def is_ready(self) -> bool:
        return True

    async def load(self) -> None:
        """Prepare the model. A no-op for recognizers without warm-up."""

    @abstractmethod
    async def recognize(self, samples: np.ndarray) -> str:
        """Transcribe mono float32 samples at ``sample_rate`` Hz.

        Raises:
            RecognizerError: If the model is unavailable or fails.
        """
        ...


class RecognizerError(Exception):
    """Raised when speech recognition fails."""

    def __init__(self, message: str, backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend


def build_recognizer(settings) -> Recognizer:
    """Construct the recognizer selected by ``settings.recognizer.backend``."""
    cfg = settings.recognizer
    sample_rate = settings.audio.sample_rate
    if cfg.backend == "openai":
        from livesense.audio.openai import OpenAIRecognizer
        api_key, base_url = settings.cloud_credentials()
        return OpenAIRecognizer(
            api_key=api_key,
            model=cfg.cloud_model,
            base_url=base_url,
            language=cfg.language,
            sample_rate=sample_rate,
        )
    from livesense.audio.whisper import WhisperRecognizer
    return WhisperRecognizer(
        model=cfg.model,
        device=cfg.device,
        compute_type=cfg.compute_type,
        language=cfg.language,
        sample_rate=sample_rate,
    )
