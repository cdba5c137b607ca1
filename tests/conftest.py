"""Shared test fixtures for the livesense test suite.

Provides common fixtures used across unit tests: screenshot files on
disk, a scripted screen capture source, and stub normalizer/recognizer
pairs for the transcription queue.
"""

from __future__ import annotations

import asyncio
import itertools
from pathlib import Path
from unittest.mock import MagicMock

import cv2
import numpy as np
import pytest

from livesense.audio.recognizer import Recognizer
from livesense.capture.base import ScreenCaptureSource, WindowController
from livesense.pipeline.context import LiveContext
from livesense.pipeline.dedup import ThumbnailDeduplicator


# ---------------------------------------------------------------------------
# Image Fixtures
# ---------------------------------------------------------------------------


def write_png(path: Path, image: np.ndarray) -> Path:
    """Write a BGR array to ``path`` as PNG."""
    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def black_image() -> np.ndarray:
    """A 64x64 black BGR image."""
    return np.zeros((64, 64, 3), dtype=np.uint8)


@pytest.fixture
def white_image() -> np.ndarray:
    """A 64x64 white BGR image."""
    return np.full((64, 64, 3), 255, dtype=np.uint8)


# ---------------------------------------------------------------------------
# Pipeline Fixtures
# ---------------------------------------------------------------------------


class ScriptedCapture(ScreenCaptureSource):
    """Capture source that writes a pre-set sequence of images.

    Each call writes the next frame from ``frames`` (cycling) into the
    target directory as ``capture_<n>.png``. A frame of None raises.
    """

    def __init__(self, frames: list[np.ndarray | None]) -> None:
        self._frames = itertools.cycle(frames)
        self._counter = itertools.count(1)
        self.calls: list[Path] = []
        self.delay = 0.0

    async def capture_screen(self, target_dir: Path) -> Path:
        if self.delay:
            await asyncio.sleep(self.delay)
        frame = next(self._frames)
        self.calls.append(target_dir)
        if frame is None:
            raise RuntimeError("capture device unavailable")
        return write_png(target_dir / f"capture_{next(self._counter)}.png", frame)


class RecordingWindow(WindowController):
    """Window controller that records hide/show calls in order."""

    def __init__(self) -> None:
        self.events: list[str] = []

    def hide_window(self) -> None:
        self.events.append("hide")

    def show_window(self) -> None:
        self.events.append("show")


@pytest.fixture
def context(tmp_path: Path) -> LiveContext:
    """A LiveContext rooted in a temporary directory."""
    return LiveContext(
        primary_dir=tmp_path / "screenshots",
        secondary_dir=tmp_path / "extra_screenshots",
        deduplicator=ThumbnailDeduplicator(width=8),
    )


@pytest.fixture
def window() -> RecordingWindow:
    return RecordingWindow()


@pytest.fixture
def make_capture():
    """Factory for ScriptedCapture sources."""
    return ScriptedCapture


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


class StubNormalizer:
    """Normalizer that writes a placeholder WAV and returns fixed samples.

    Records the input bytes seen for each call so tests can check order.
    """

    def __init__(self) -> None:
        self.seen: list[bytes] = []
        self.fail_on: set[bytes] = set()
        self.gate: asyncio.Event | None = None

    async def normalize(self, input_path: Path, output_path: Path) -> np.ndarray:
        data = input_path.read_bytes()
        self.seen.append(data)
        output_path.write_bytes(b"RIFF")
        if self.gate is not None:
            await self.gate.wait()
        if data in self.fail_on:
            raise RuntimeError(f"cannot decode {data!r}")
        return np.frombuffer(data.ljust(4, b"\0")[:4], dtype=np.uint8).astype(np.float32)


class EchoRecognizer(Recognizer):
    """Recognizer that returns a counter-tagged transcript."""

    def __init__(self, ready: bool = True) -> None:
        super().__init__()
        self._ready = ready
        self.calls = 0

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def load(self) -> None:
        self._ready = True

    async def recognize(self, samples: np.ndarray) -> str:
        self.calls += 1
        return f"  chunk {self.calls} ({samples.size} samples)  "


@pytest.fixture
def normalizer() -> StubNormalizer:
    return StubNormalizer()


@pytest.fixture
def recognizer() -> EchoRecognizer:
    return EchoRecognizer()


@pytest.fixture
def png_factory(tmp_path: Path):
    """Write a BGR array to ``tmp_path / name`` and return the path."""

    def _make(name: str, image: np.ndarray) -> Path:
        return write_png(tmp_path / name, image)

    return _make


@pytest.fixture
def mock_recognizer() -> MagicMock:
    """A MagicMock shaped like a Recognizer that is not ready yet."""
    mock = MagicMock(spec=Recognizer)
    mock.is_ready = False
    return mock
