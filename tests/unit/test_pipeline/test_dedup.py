"""Tests for the thumbnail deduplicator."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from livesense.domain.models import DedupDecision
from livesense.pipeline.dedup import ThumbnailDeduplicator


class TestThumbnailDeduplicator:
    """Test change detection against the stored thumbnail."""

    @pytest.mark.asyncio
    async def test_cold_start_is_changed(self, png_factory, black_image: np.ndarray) -> None:
        """The first capture is always kept."""
        dedup = ThumbnailDeduplicator(width=32)
        path = png_factory("a.png", black_image)
        assert await dedup.check(path) is DedupDecision.CHANGED
        assert dedup.thumbnail is not None
        assert path.exists()

    @pytest.mark.asyncio
    async def test_identical_capture_is_unchanged_and_deleted(
        self, png_factory, black_image: np.ndarray
    ) -> None:
        dedup = ThumbnailDeduplicator(width=32)
        first = png_factory("a.png", black_image)
        second = png_factory("b.png", black_image.copy())

        await dedup.check(first)
        stored = dedup.thumbnail
        assert await dedup.check(second) is DedupDecision.UNCHANGED
        assert not second.exists()
        assert first.exists()
        assert dedup.thumbnail == stored

    @pytest.mark.asyncio
    async def test_single_pixel_difference_is_changed(
        self, png_factory, black_image: np.ndarray
    ) -> None:
        dedup = ThumbnailDeduplicator(width=32)
        altered = black_image.copy()
        altered[10, 10] = (255, 255, 255)

        await dedup.check(png_factory("a.png", black_image))
        stored = dedup.thumbnail
        path = png_factory("b.png", altered)
        assert await dedup.check(path) is DedupDecision.CHANGED
        assert path.exists()
        assert dedup.thumbnail != stored

    @pytest.mark.asyncio
    async def test_thumbnail_tracks_last_changed_capture(self, tmp_path: Path) -> None:
        """A-B-A counts as three changes; only the previous thumbnail matters."""
        thumbs = iter([b"A", b"B", b"A"])
        dedup = ThumbnailDeduplicator(downsampler=lambda path, width: next(thumbs))
        results = [await dedup.check(tmp_path / f"{i}.png") for i in range(3)]
        assert results == [DedupDecision.CHANGED] * 3
        assert dedup.thumbnail == b"A"

    @pytest.mark.asyncio
    async def test_downsample_failure_fails_open(self, png_factory, black_image: np.ndarray) -> None:
        """An unreadable capture is kept and the stored thumbnail untouched."""

        def broken(path: Path, width: int) -> bytes:
            raise ValueError("corrupt image")

        dedup = ThumbnailDeduplicator(downsampler=broken)
        path = png_factory("a.png", black_image)
        assert await dedup.check(path) is DedupDecision.CHANGED
        assert dedup.thumbnail is None
        assert path.exists()

    @pytest.mark.asyncio
    async def test_undecodable_file_fails_open(self, tmp_path: Path) -> None:
        path = tmp_path / "garbage.png"
        path.write_bytes(b"not an image")
        dedup = ThumbnailDeduplicator()
        assert await dedup.check(path) is DedupDecision.CHANGED
        assert path.exists()

    @pytest.mark.asyncio
    async def test_reset_forces_cold_start(self, png_factory, black_image: np.ndarray) -> None:
        dedup = ThumbnailDeduplicator(width=32)
        await dedup.check(png_factory("a.png", black_image))
        dedup.reset()
        assert dedup.thumbnail is None
        path = png_factory("b.png", black_image)
        assert await dedup.check(path) is DedupDecision.CHANGED
        assert path.exists()

    def test_defaults(self) -> None:
        dedup = ThumbnailDeduplicator()
        assert dedup.width == 32
        assert dedup.thumbnail is None
