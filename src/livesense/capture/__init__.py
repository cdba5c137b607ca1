"""Screen capture module for livesense.

Provides the capture and window-control collaborator interfaces used by
the live cycle scheduler. The abstract base classes allow alternative
implementations (e.g., file-based testing sources).

Public API:
    ScreenCaptureSource -- Abstract base class
    WindowController -- Abstract hide/show window hooks
    NullWindowController -- No-op window controller
    MssScreenCapture -- mss-based screen grabber
"""

from livesense.capture.base import (
    CaptureError,
    NullWindowController,
    ScreenCaptureSource,
    WindowController,
)

__all__ = [
    "CaptureError",
    "MssScreenCapture",
    "NullWindowController",
    "ScreenCaptureSource",
    "WindowController",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "MssScreenCapture":
        from livesense.capture.screen import MssScreenCapture
        return MssScreenCapture
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
