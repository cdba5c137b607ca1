"""FastAPI HTTP server for the standalone transcription worker.

Exposes the serialized transcription queue over HTTP so a recording
front end (or any other process) can submit audio chunks:

    GET  /health                    -> {"status": "ok", "model_ready": ...}
    POST /v1/audio/transcriptions   <- multipart field "file"
                                    -> 200 {"text": "..."}
                                       503 {"error": ...} model loading or failed to load
                                       400 {"error": ...} no file supplied
                                       500 {"error": ...} processing failed
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, File, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from livesense.audio.normalizer import AudioNormalizer
from livesense.audio.queue import TranscriptionError, TranscriptionQueue
from livesense.audio.recognizer import Recognizer, RecognizerError, build_recognizer
from livesense.config.settings import Settings

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str = "ok"
    model_ready: bool = False
    queue_busy: bool = False
    pending_jobs: int = 0
    model_error: str | None = None


def create_app(
    queue: TranscriptionQueue | None = None,
    recognizer: Recognizer | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create the transcription worker application.

    Args:
        queue: Optional pre-built TranscriptionQueue (for testing).
        recognizer: Optional recognizer; defaults to the queue's recognizer
                    or the backend selected in ``settings``.
        settings: Configuration used to build missing components.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        s = settings or Settings()
        r = app.state.recognizer
        q = app.state.queue
        if r is None:
            r = q.recognizer if q is not None else build_recognizer(s)
            app.state.recognizer = r
        if q is None:
            normalizer = AudioNormalizer(
                sample_rate=s.audio.sample_rate, ffmpeg_path=s.audio.ffmpeg_path
            )
            q = TranscriptionQueue(normalizer, r, temp_dir=s.audio.temp_dir)
            app.state.queue = q

        # Load the model in the background so the server answers 503 meanwhile
        load_task = None
        if not r.is_ready:
            load_task = asyncio.create_task(_load_model(app, r))
        logger.info("Transcription worker started")
        yield
        if load_task is not None:
            load_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await load_task
        await q.close()
        logger.info("Transcription worker stopped")

    app = FastAPI(
        title="livesense Transcription Worker",
        description="Serialized speech-to-text worker for live audio chunks",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.queue = queue
    app.state.recognizer = recognizer
    app.state.model_error = None

    @app.get("/health")
    async def health_check() -> HealthResponse:
        r: Recognizer | None = app.state.recognizer
        q: TranscriptionQueue | None = app.state.queue
        return HealthResponse(
            status="ok",
            model_ready=r.is_ready if r is not None else False,
            queue_busy=q.is_busy if q is not None else False,
            pending_jobs=q.pending if q is not None else 0,
            model_error=app.state.model_error,
        )

    @app.post("/v1/audio/transcriptions")
    async def transcribe(file: UploadFile | None = File(default=None)) -> JSONResponse:
        r: Recognizer | None = app.state.recognizer
        if app.state.model_error is not None:
            return JSONResponse(
                status_code=503,
                content={"error": f"Model failed to load: {app.state.model_error}"},
            )
        if r is None or not r.is_ready:
            return JSONResponse(
                status_code=503,
                content={"error": "Model is still loading. Please try again in a few seconds."},
            )
        if file is None:
            return JSONResponse(status_code=400, content={"error": "No audio file provided."})

        data = await file.read()
        if not data:
            return JSONResponse(status_code=400, content={"error": "Uploaded audio file is empty."})
        logger.info("Processing audio chunk: %d bytes", len(data))

        try:
            result = await app.state.queue.transcribe(
                data, file.content_type or "application/octet-stream"
            )
        except TranscriptionError as e:
            return JSONResponse(status_code=500, content={"error": str(e)})
        return JSONResponse(content={"text": result.text})

    return app


async def _load_model(app: FastAPI, recognizer: Recognizer) -> None:
    try:
        await recognizer.load()
    except RecognizerError as e:
        logger.error("Recognition model failed to load: %s", e)
        app.state.model_error = str(e)


def main() -> None:
    """Entry point for running the transcription worker standalone."""
    settings = Settings()
    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
