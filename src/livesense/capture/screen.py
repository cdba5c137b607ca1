"""Screen capture implementation using mss.

Grabs one monitor and writes it as a PNG named by a fresh UUID, so
concurrent or rapid captures never overwrite each other.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path

import mss
from PIL import Image

from livesense.capture.base import CaptureError, ScreenCaptureSource

logger = logging.getLogger(__name__)


class MssScreenCapture(ScreenCaptureSource):
    """Captures a monitor with mss and saves it with Pillow.

    Runs the blocking grab in a thread pool executor to avoid blocking
    the async event loop. A fresh ``mss`` context is opened per capture
    because its handles are thread-bound.
    """

    def __init__(self, monitor: int = 1) -> None:
        self._monitor = monitor

    async def capture_screen(self, target_dir: Path) -> Path:
        """Capture the configured monitor into ``target_dir``."""
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"{uuid.uuid4()}.png"
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._capture_sync, path)
        except CaptureError:
            raise
        except Exception as e:
            raise CaptureError(f"Failed to take screenshot: {e}") from e
        logger.info("Captured: %s", path.name)
        return path

    def _capture_sync(self, path: Path) -> None:
        """Synchronous grab + PNG write (runs in thread pool)."""
        with mss.mss() as sct:
            monitors = sct.monitors
            if self._monitor >= len(monitors):
                raise CaptureError(
                    f"Monitor {self._monitor} not available ({len(monitors) - 1} connected)"
                )
            shot = sct.grab(monitors[self._monitor])
        Image.frombytes("RGB", shot.size, shot.rgb).save(path, format="PNG")
