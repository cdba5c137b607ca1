"""Tests for the live context state handle."""

from __future__ import annotations

from pathlib import Path

from livesense.config.settings import CaptureConfig
from livesense.domain.models import CaptureArtifact, CaptureMode, QueueName
from livesense.pipeline.context import LiveContext


def _push(context: LiveContext, mode: CaptureMode, name: str) -> Path:
    path = context.directory_for(mode) / name
    path.write_bytes(b"png")
    queue = context.queue_for(mode)
    queue.push(CaptureArtifact(path=path, queue=queue.name))
    return path


class TestLiveContext:
    """Test mode routing, deletion by identity and reset."""

    def test_creates_directories(self, tmp_path: Path) -> None:
        LiveContext(tmp_path / "p", tmp_path / "s")
        assert (tmp_path / "p").is_dir()
        assert (tmp_path / "s").is_dir()

    def test_default_capacities(self, context: LiveContext) -> None:
        assert context.primary.capacity == 6
        assert context.secondary.capacity == 2
        assert context.mode is CaptureMode.PRIMARY

    def test_from_config(self, tmp_path: Path) -> None:
        config = CaptureConfig(
            storage_dir=str(tmp_path), primary_capacity=3, thumbnail_width=16
        )
        context = LiveContext.from_config(config)
        assert context.directory_for(CaptureMode.PRIMARY) == tmp_path / "screenshots"
        assert context.directory_for(CaptureMode.SECONDARY) == tmp_path / "extra_screenshots"
        assert context.primary.capacity == 3
        assert context.deduplicator.width == 16

    def test_mode_routing(self, context: LiveContext) -> None:
        assert context.current_queue() is context.primary
        context.set_mode(CaptureMode.SECONDARY)
        assert context.current_queue() is context.secondary
        assert context.current_queue().name is QueueName.SECONDARY

    def test_queue_name_for_mode(self, context: LiveContext) -> None:
        assert QueueName.for_mode(CaptureMode.PRIMARY) is QueueName.PRIMARY
        assert QueueName.for_mode(CaptureMode.SECONDARY) is QueueName.SECONDARY
        assert context.queue_named(QueueName.SECONDARY) is context.secondary
        assert context.queue_for(CaptureMode.PRIMARY) is context.queue_named(QueueName.PRIMARY)

    def test_delete_screenshot_from_primary(self, context: LiveContext) -> None:
        path = _push(context, CaptureMode.PRIMARY, "a.png")
        result = context.delete_screenshot(path)
        assert result.success
        assert not path.exists()
        assert len(context.primary) == 0

    def test_delete_screenshot_from_secondary(self, context: LiveContext) -> None:
        path = _push(context, CaptureMode.SECONDARY, "a.png")
        keep = _push(context, CaptureMode.PRIMARY, "b.png")
        assert context.delete_screenshot(str(path)).success
        assert len(context.secondary) == 0
        assert context.primary.paths == [keep]

    def test_delete_unqueued_file(self, context: LiveContext, tmp_path: Path) -> None:
        stray = tmp_path / "stray.png"
        stray.write_bytes(b"png")
        assert context.delete_screenshot(stray).success
        assert not stray.exists()

    def test_delete_missing_file_reports_failure(self, context: LiveContext, tmp_path: Path) -> None:
        result = context.delete_screenshot(tmp_path / "missing.png")
        assert result.success is False
        assert result.error

    def test_reset(self, context: LiveContext) -> None:
        a = _push(context, CaptureMode.PRIMARY, "a.png")
        b = _push(context, CaptureMode.SECONDARY, "b.png")
        context.deduplicator._thumbnail = b"thumb"
        context.set_mode(CaptureMode.SECONDARY)

        context.reset()
        assert len(context.primary) == 0
        assert len(context.secondary) == 0
        assert not a.exists() and not b.exists()
        assert context.deduplicator.thumbnail is None
        assert context.mode is CaptureMode.PRIMARY
