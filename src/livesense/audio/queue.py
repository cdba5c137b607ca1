"""Strictly serialized audio transcription worker.

Audio chunks arrive in bursts from a real-time recording stream, but
normalization and recognition are heavy. Every chunk becomes a job on a
FIFO consumed by a single worker task, so at most one job is ever being
normalized or recognized and results come back in submission order.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import tempfile
from pathlib import Path

from livesense.audio.normalizer import AudioNormalizer
from livesense.audio.recognizer import Recognizer
from livesense.domain.models import TranscriptionJob, TranscriptionResult
from livesense.utils.files import log_failed_deletions, remove_file

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
    """Raised to the caller of a job that failed to transcribe."""

    def __init__(self, message: str, job_id: str = "") -> None:
        super().__init__(message)
        self.job_id = job_id


class TranscriptionQueueClosed(TranscriptionError):
    """Raised for jobs that were still pending when the queue closed."""


class TranscriptionQueue:
    """Single-consumer job queue in front of the normalizer and recognizer.

    ``enqueue()`` never blocks: it appends a job and returns a future.
    One worker task drains the queue in FIFO order. Each job writes its
    audio to ``temp_input_<id>``, normalizes into ``temp_output_<id>.wav``,
    recognizes, removes both temp files, and only then resolves its
    future. A failing job resolves with TranscriptionError and the worker
    moves straight on to the next one.

    There is no retry and no priority lane. Once dequeued, a job runs to
    completion; a caller that cancels its future before the job starts
    causes the job to be skipped.
    """

    def __init__(
        self,
        normalizer: AudioNormalizer,
        recognizer: Recognizer,
        temp_dir: Path | str | None = None,
    ) -> None:
        self._normalizer = normalizer
        self._recognizer = recognizer
        self._temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self._jobs: asyncio.Queue[TranscriptionJob] = asyncio.Queue()
        self._worker: asyncio.Task | None = None
        self._current: TranscriptionJob | None = None
        self._closed = False
        self.completed = 0
        self.failed = 0

    @property
    def is_busy(self) -> bool:
        return self._current is not None

    @property
    def pending(self) -> int:
        return self._jobs.qsize()

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def recognizer(self) -> Recognizer:
        return self._recognizer

    def enqueue(self, data: bytes, mime_type: str = "application/octet-stream") -> asyncio.Future:
        """Queue an audio chunk and return a future for its TranscriptionResult."""
        if self._closed:
            raise TranscriptionQueueClosed("Transcription queue is closed")
        loop = asyncio.get_running_loop()
        job = TranscriptionJob(data=data, mime_type=mime_type, future=loop.create_future())
        self._jobs.put_nowait(job)
        self._ensure_worker()
        logger.debug(
            "Queued job %s (%d bytes, %s), %d waiting",
            job.job_id, len(data), mime_type, self._jobs.qsize(),
        )
        return job.future

    async def transcribe(
        self, data: bytes, mime_type: str = "application/octet-stream"
    ) -> TranscriptionResult:
        """Queue an audio chunk and wait for its turn and its text."""
        return await self.enqueue(data, mime_type)

    async def close(self) -> None:
        """Stop the worker and fail every job that has not finished."""
        self._closed = True
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None
        while not self._jobs.empty():
            job = self._jobs.get_nowait()
            _fail(job, TranscriptionQueueClosed("Transcription queue closed", job_id=job.job_id))
        logger.info("Transcription queue closed (%d completed, %d failed)", self.completed, self.failed)

    async def __aenter__(self) -> TranscriptionQueue:
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.close()

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while True:
            job = await self._jobs.get()
            if job.future.done():
                logger.debug("Job %s cancelled before it started, skipping", job.job_id)
                continue
            self._current = job
            try:
                await self._process(job)
            finally:
                self._current = None

    async def _process(self, job: TranscriptionJob) -> None:
        input_path = job.input_path(self._temp_dir)
        output_path = job.output_path(self._temp_dir)
        loop = asyncio.get_running_loop()
        logger.info("Processing %d bytes (job %s)", len(job.data), job.job_id)

        result: TranscriptionResult | None = None
        error: TranscriptionError | None = None
        try:
            await _finish_before_cancel(loop.run_in_executor(None, input_path.write_bytes, job.data))
            samples = await self._normalizer.normalize(input_path, output_path)
            text = await self._recognizer.recognize(samples)
            result = TranscriptionResult(text=text.strip())
        except asyncio.CancelledError:
            error = TranscriptionQueueClosed("Transcription queue closed", job_id=job.job_id)
            raise
        except Exception as e:
            logger.error("Transcription job %s failed: %s", job.job_id, e)
            error = TranscriptionError(f"Transcription failed: {e}", job_id=job.job_id)
            error.__cause__ = e
        finally:
            deleted = [remove_file(p, missing_ok=True) for p in (input_path, output_path)]
            log_failed_deletions(deleted, f"job {job.job_id} cleanup")
            if error is not None:
                self.failed += 1
                _fail(job, error)
            elif result is not None:
                self.completed += 1
                if not job.future.done():
                    job.future.set_result(result)
                logger.info("Text: %r (job %s)", result.text, job.job_id)


async def _finish_before_cancel(fut: asyncio.Future) -> None:
    """Await an executor future; on cancellation, let the thread finish first.

    The executor thread cannot be interrupted, so cleanup must not run
    until it has stopped touching the filesystem.
    """
    try:
        await asyncio.shield(fut)
    except asyncio.CancelledError:
        await asyncio.wait({fut})
        raise


def _fail(job: TranscriptionJob, error: TranscriptionError) -> None:
    if not job.future.done():
        job.future.set_exception(error)
