"""Command-line interface for livesense.

Provides the main entry point for running the live capture loop, the
standalone transcription worker, or individual components for testing.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="livesense",
        description="Live screen and audio sensing pipeline",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/livesense.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    live_parser = subparsers.add_parser("live", help="Run the live capture loop until interrupted")
    live_parser.add_argument(
        "--mode", choices=["primary", "secondary"], default="primary",
        help="Queue that surviving captures are routed to",
    )
    live_parser.add_argument(
        "--duration", type=float, default=None,
        help="Stop after this many seconds (default: run until Ctrl+C)",
    )

    subparsers.add_parser("serve", help="Start the HTTP transcription worker")

    transcribe_parser = subparsers.add_parser("transcribe", help="Transcribe an audio file")
    transcribe_parser.add_argument("file", type=Path, help="Audio file to transcribe")
    transcribe_parser.add_argument(
        "--server", type=str, default=None,
        help="Send the file to a running worker at this URL instead of transcribing locally",
    )

    subparsers.add_parser("capture-test", help="Capture one screenshot and print its path")
    status_parser = subparsers.add_parser("status", help="List screenshots currently on disk")
    status_parser.add_argument(
        "--preview", type=str, default=None, metavar="NAME",
        help="Print the named screenshot as a data:image/png;base64 URL",
    )

    return parser.parse_args(argv)


def _build_context(settings):
    from livesense.pipeline.context import LiveContext
    return LiveContext.from_config(settings.capture)


async def _run_live(settings, args) -> None:
    """Run the scheduler, logging each queue update."""
    from livesense.capture.base import NullWindowController
    from livesense.capture.screen import MssScreenCapture
    from livesense.domain.models import CaptureMode, QueueName
    from livesense.pipeline.scheduler import LiveCycleScheduler

    context = _build_context(settings)
    context.set_mode(CaptureMode(args.mode))

    async def report(queue_name: QueueName) -> None:
        queue = context.queue_named(queue_name)
        latest = queue.snapshot()[-1]
        print(f"[{latest.created_at.strftime('%H:%M:%S')}] {queue_name.value}: "
              f"{latest.path.name} ({len(queue)}/{queue.capacity})")

    scheduler = LiveCycleScheduler(
        context=context,
        capture=MssScreenCapture(monitor=settings.capture.monitor),
        window=NullWindowController(),
        process=report,
        interval=settings.capture.interval,
        settle_delay=settings.capture.settle_delay,
    )

    async with scheduler:
        try:
            if args.duration is not None:
                await asyncio.sleep(args.duration)
            else:
                await asyncio.Event().wait()
        finally:
            logger.info("Stopping live mode")
    await scheduler.wait_idle()
    print(f"Live mode finished: {scheduler.cycles_run} cycles, "
          f"{len(context.primary)} primary / {len(context.secondary)} secondary screenshots kept")


async def _transcribe(settings, args) -> None:
    """Transcribe one file locally or through a running worker."""
    if args.server:
        from livesense.audio.client import TranscriptionClient
        async with TranscriptionClient(args.server, timeout=settings.server.client_timeout) as client:
            result = await client.transcribe_file(args.file)
        print(result.text)
        return

    import mimetypes

    from livesense.audio.normalizer import AudioNormalizer
    from livesense.audio.queue import TranscriptionQueue
    from livesense.audio.recognizer import build_recognizer

    recognizer = build_recognizer(settings)
    await recognizer.load()
    normalizer = AudioNormalizer(
        sample_rate=settings.audio.sample_rate, ffmpeg_path=settings.audio.ffmpeg_path
    )
    mime_type = mimetypes.guess_type(args.file.name)[0] or "application/octet-stream"
    async with TranscriptionQueue(normalizer, recognizer, temp_dir=settings.audio.temp_dir) as queue:
        result = await queue.transcribe(args.file.read_bytes(), mime_type)
    print(result.text)


async def _capture_test(settings) -> None:
    """Capture a single screenshot into the primary directory."""
    from livesense.capture.screen import MssScreenCapture

    capture = MssScreenCapture(monitor=settings.capture.monitor)
    path = await capture.capture_screen(settings.capture.primary_dir)
    print(f"Saved screenshot to {path}")


def _status(settings, preview: str | None = None) -> int:
    """List screenshot files in both capture directories, or print one preview."""
    from datetime import datetime

    from livesense.utils.imaging import image_preview

    directories = (
        ("primary", settings.capture.primary_dir),
        ("secondary", settings.capture.secondary_dir),
    )

    if preview is not None:
        for _, directory in directories:
            path = directory / preview
            if path.is_file():
                print(image_preview(path))
                return 0
        print(f"No screenshot named {preview}")
        return 1

    for label, directory in directories:
        files = sorted(directory.glob("*.png"), key=lambda p: p.stat().st_mtime) if directory.exists() else []
        print(f"{label} ({directory}): {len(files)} file(s)")
        for path in files:
            info = path.stat()
            taken = datetime.fromtimestamp(info.st_mtime).strftime("%H:%M:%S")
            print(f"  {path.name}  {info.st_size} bytes  {taken}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the livesense CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from livesense.config.settings import load_settings
    from livesense.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "live":
        logger.info("Starting live mode (%s)", args.mode)
        try:
            asyncio.run(_run_live(settings, args))
        except KeyboardInterrupt:
            print("\nInterrupted")

    elif args.command == "serve":
        logger.info("Starting transcription worker")
        from livesense.endpoint.server import create_app
        import uvicorn
        app = create_app(settings=settings)
        uvicorn.run(app, host=settings.server.host, port=settings.server.port)

    elif args.command == "transcribe":
        logger.info("Transcribing %s", args.file)
        asyncio.run(_transcribe(settings, args))

    elif args.command == "capture-test":
        logger.info("Running capture test")
        asyncio.run(_capture_test(settings))

    elif args.command == "status":
        if _status(settings, args.preview):
            raise SystemExit(1)


if __name__ == "__main__":
    main()
