"""Audio normalization for speech recognition.

Transcodes an arbitrary compressed audio chunk (webm/opus, mp3, ogg,
wav, ...) into 16 kHz linear PCM with ffmpeg, then decodes it to mono
float32 samples with soundfile.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path

import numpy as np
import soundfile as sf

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 16000


class NormalizationError(Exception):
    """Raised when an audio chunk cannot be transcoded or decoded."""


def mix_to_mono(samples: np.ndarray) -> np.ndarray:
    """Collapse a ``(frames, channels)`` array to a 1-D float32 signal.

    Multi-channel input is averaged across the first two channels only;
    any channel beyond the second is ignored.
    """
    if samples.ndim == 1:
        return samples.astype(np.float32, copy=False)
    if samples.shape[1] == 1:
        return samples[:, 0].astype(np.float32, copy=False)
    mono = (samples[:, 0] + samples[:, 1]) / 2
    return mono.astype(np.float32, copy=False)


class AudioNormalizer:
    """Converts compressed audio into mono PCM at a fixed sample rate.

    Usage::

        normalizer = AudioNormalizer()
        samples = await normalizer.normalize(Path("chunk.webm"), Path("chunk.wav"))
    """

    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        ffmpeg_path: str = "ffmpeg",
    ) -> None:
        self._sample_rate = sample_rate
        self._ffmpeg_path = ffmpeg_path

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    async def normalize(self, input_path: Path, output_path: Path) -> np.ndarray:
        """Transcode ``input_path`` into ``output_path`` and return its samples.

        Returns:
            1-D float32 array at ``sample_rate`` Hz.

        Raises:
            NormalizationError: If ffmpeg fails or the output cannot be decoded.
        """
        await self.transcode(input_path, output_path)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.read_samples, output_path)

    async def transcode(self, input_path: Path, output_path: Path) -> None:
        """Run ffmpeg to produce a linear PCM WAV file at the target rate."""
        cmd = [
            self._ffmpeg_path,
            "-hide_banner",
            "-loglevel", "error",
            "-y",
            "-i", str(input_path),
            "-vn",
            "-ar", str(self._sample_rate),
            "-c:a", "pcm_f32le",
            "-f", "wav",
            str(output_path),
        ]
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise NormalizationError(f"Could not start ffmpeg ({self._ffmpeg_path}): {e}") from e

        try:
            _, stderr = await proc.communicate()
        except asyncio.CancelledError:
            # Reap ffmpeg before unwinding so it cannot write the output later
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            logger.debug("Killed ffmpeg for %s on cancellation", input_path.name)
            raise
        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()[-500:]
            raise NormalizationError(
                f"ffmpeg exited with code {proc.returncode}: {detail or 'no output'}"
            )
        logger.debug("Transcoded %s -> %s", input_path.name, output_path.name)

    def read_samples(self, wav_path: Path) -> np.ndarray:
        """Decode a WAV file into mono float32 samples."""
        try:
            data, rate = sf.read(str(wav_path), dtype="float32", always_2d=True)
        except (RuntimeError, OSError) as e:
            raise NormalizationError(f"Failed to decode {wav_path.name}: {e}") from e
        if rate != self._sample_rate:
            raise NormalizationError(
                f"Expected {self._sample_rate} Hz audio, got {rate} Hz"
            )
        return mix_to_mono(data)
