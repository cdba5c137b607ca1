"""HTTP client for the standalone transcription worker.

Posts audio as a multipart ``file`` upload to
``/v1/audio/transcriptions`` and returns the recognized text.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

import httpx

from livesense.domain.models import TranscriptionResult

logger = logging.getLogger(__name__)

TRANSCRIPTIONS_PATH = "/v1/audio/transcriptions"


class TranscriptionClientError(Exception):
    """Raised when the transcription worker cannot be reached or refuses a chunk."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TranscriptionClient:
    """Sends audio chunks to a running transcription worker.

    Example usage::

        async with TranscriptionClient("http://localhost:3000") as client:
            result = await client.transcribe_file(Path("chunk.webm"))
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def health(self) -> dict:
        """Return the worker's /health payload."""
        await self.connect()
        try:
            resp = await self._client.get("/health")
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise TranscriptionClientError(f"Health check failed: {e}") from e
        return resp.json()

    async def transcribe_file(self, path: Path) -> TranscriptionResult:
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return await self.transcribe_bytes(path.read_bytes(), filename=path.name, mime_type=mime_type)

    async def transcribe_bytes(
        self,
        data: bytes,
        filename: str = "audio.webm",
        mime_type: str = "audio/webm",
    ) -> TranscriptionResult:
        """Upload one audio chunk and return its transcription."""
        await self.connect()
        try:
            resp = await self._client.post(
                TRANSCRIPTIONS_PATH,
                files={"file": (filename, data, mime_type)},
            )
        except httpx.HTTPError as e:
            raise TranscriptionClientError(f"Request to {TRANSCRIPTIONS_PATH} failed: {e}") from e

        if resp.status_code != 200:
            try:
                detail = resp.json().get("error", resp.text)
            except ValueError:
                detail = resp.text
            raise TranscriptionClientError(
                f"Transcription worker returned {resp.status_code}: {detail}",
                status_code=resp.status_code,
            )
        text = resp.json().get("text", "")
        logger.debug("Transcribed %d bytes: %r", len(data), text[:80])
        return TranscriptionResult(text=text.strip())

    async def __aenter__(self) -> TranscriptionClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.disconnect()
