"""OpenAI-compatible cloud recognizer.

Works with OpenAI and Groq (or any OpenAI-compatible transcription API)
by setting a custom base_url. The normalized samples are re-encoded as
a WAV upload, so the cloud model sees the same 16 kHz mono signal the
local model would.
"""

from __future__ import annotations

import io
import logging

import numpy as np
import soundfile as sf

from livesense.audio.recognizer import Recognizer, RecognizerError

logger = logging.getLogger(__name__)


class OpenAIRecognizer(Recognizer):
    """Recognizer using the ``audio.transcriptions`` endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-large-v3-turbo",
        base_url: str | None = None,
        language: str | None = "en",
        sample_rate: int = 16000,
    ) -> None:
        super().__init__(sample_rate=sample_rate)
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._language = language
        self._client = None

    @property
    def is_ready(self) -> bool:
        return bool(self._api_key)

    async def _ensure_client(self) -> None:
        """Lazily initialize the OpenAI async client."""
        if self._client is not None:
            return
        from openai import AsyncOpenAI
        kwargs = {"api_key": self._api_key}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        self._client = AsyncOpenAI(**kwargs)
        logger.info("Initialized transcription client (model=%s, base_url=%s)", self._model, self._base_url)

    async def load(self) -> None:
        await self._ensure_client()

    async def recognize(self, samples: np.ndarray) -> str:
        if not self._api_key:
            raise RecognizerError("No API key configured for cloud transcription", backend="openai")
        await self._ensure_client()

        buffer = io.BytesIO()
        sf.write(buffer, samples, self._sample_rate, format="WAV", subtype="PCM_16")

        kwargs = {
            "file": ("audio.wav", buffer.getvalue(), "audio/wav"),
            "model": self._model,
            "response_format": "json",
            "temperature": 0.0,
        }
        if self._language:
            kwargs["language"] = self._language
        try:
            transcription = await self._client.audio.transcriptions.create(**kwargs)
        except Exception as e:
            raise RecognizerError(f"Cloud transcription failed: {e}", backend="openai") from e
        return transcription.text.strip()
