"""Local Whisper recognizer backed by faster-whisper.

The model is loaded lazily in a worker thread so the HTTP worker can
start serving (with 503 responses) while the weights download.
"""

from __future__ import annotations

import asyncio
import logging

import numpy as np

from livesense.audio.recognizer import Recognizer, RecognizerError

logger = logging.getLogger(__name__)


class WhisperRecognizer(Recognizer):
    """Speech recognizer running a faster-whisper model on this machine."""

    def __init__(
        self,
        model: str = "tiny.en",
        device: str = "cpu",
        compute_type: str = "int8",
        language: str | None = "en",
        sample_rate: int = 16000,
    ) -> None:
        super().__init__(sample_rate=sample_rate)
        self._model_name = model
        self._device = device
        self._compute_type = compute_type
        self._language = language
        self._model = None
        self._load_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    async def load(self) -> None:
        """Load the model weights (downloads on first use)."""
        async with self._load_lock:
            if self._model is not None:
                return
            logger.info("Loading local Whisper model %s (this may take a moment)...", self._model_name)
            loop = asyncio.get_running_loop()
            try:
                self._model = await loop.run_in_executor(None, self._load_sync)
            except Exception as e:
                raise RecognizerError(
                    f"Failed to load Whisper model {self._model_name}: {e}", backend="whisper"
                ) from e
            logger.info("Local Whisper model ready")

    def _load_sync(self):
        from faster_whisper import WhisperModel
        return WhisperModel(self._model_name, device=self._device, compute_type=self._compute_type)

    async def recognize(self, samples: np.ndarray) -> str:
        if self._model is None:
            raise RecognizerError("Whisper model is not loaded", backend="whisper")
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._recognize_sync, samples)
        except Exception as e:
            raise RecognizerError(f"Whisper transcription failed: {e}", backend="whisper") from e

    def _recognize_sync(self, samples: np.ndarray) -> str:
        segments, _info = self._model.transcribe(samples, language=self._language)
        # segments is a lazy generator; decoding happens while joining
        return "".join(segment.text for segment in segments).strip()
