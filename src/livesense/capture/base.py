"""Abstract interfaces for the screen capture and window collaborators.

All capture implementations must conform to this interface, enabling
the scheduler to swap between a real screen grabber and file-based
test sources without changing the rest of the pipeline.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class ScreenCaptureSource(ABC):
    """Abstract interface for writing a screenshot to disk.

    Example usage::

        capture = MssScreenCapture(monitor=1)
        path = await capture.capture_screen(Path("~/.livesense/screenshots"))
    """

    @abstractmethod
    async def capture_screen(self, target_dir: Path) -> Path:
        """Capture the screen into a new file inside ``target_dir``.

        Returns:
            Path of the newly written image file.

        Raises:
            CaptureError: If the screen cannot be captured or written.
        """
        ...


class WindowController(ABC):
    """Hides and shows the overlay window around a capture.

    Both methods are synchronous: the window toolkit owns the event
    loop they run on and they must return quickly.
    """

    @abstractmethod
    def hide_window(self) -> None:
        ...

    @abstractmethod
    def show_window(self) -> None:
        ...


class NullWindowController(WindowController):
    """Window controller for headless runs where there is nothing to hide."""

    def hide_window(self) -> None:
        pass

    def show_window(self) -> None:
        pass


class CaptureError(Exception):
    """Raised when screen capture fails."""
