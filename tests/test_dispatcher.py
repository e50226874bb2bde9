"""
Unit tests for CompressionDispatcher — the per-file skip / compress decision.
"""
import os
from pathlib import Path
from unittest import mock
import pytest
from pixelpress.core.dispatcher import CompressionDispatcher
from pixelpress.core.errors import CompressorError, HashingError
from pixelpress.core.hasher import HasherImpl, XXHash128AlgorithmImpl
from pixelpress.core.ledger import MemoryLedger
from pixelpress.core.models import (
    CompressionOutcome, ImageFile, ImageFormat, Skipped, SkipReason)


def make_image(path: Path, image_format: ImageFormat) -> ImageFile:
    return ImageFile(path=str(path), format=image_format, size=os.path.getsize(path))


@pytest.fixture
def hasher():
    return HasherImpl(XXHash128AlgorithmImpl())


@pytest.fixture
def jpeg(temp_dir):
    path = temp_dir / "a.jpg"
    path.write_bytes(b"\xff\xd8" + b"J" * 10000)
    return make_image(path, ImageFormat.JPEG)


class TestAlreadyCompressed:
    def test_known_digest_is_skipped_without_calling_tool(self, jpeg, hasher, fake_compressors):
        ledger = MemoryLedger([hasher.compute_digest(jpeg.path)])
        dispatcher = CompressionDispatcher(ledger, hasher, fake_compressors)

        result = dispatcher.process(jpeg)

        assert isinstance(result, Skipped)
        assert result.reason is SkipReason.ALREADY_COMPRESSED
        assert fake_compressors[ImageFormat.JPEG].calls == []
        assert len(ledger) == 1

    def test_ledger_check_precedes_dry_run(self, jpeg, hasher, fake_compressors):
        ledger = MemoryLedger([hasher.compute_digest(jpeg.path)])
        dispatcher = CompressionDispatcher(ledger, hasher, fake_compressors, dry_run=True)

        assert dispatcher.process(jpeg).reason is SkipReason.ALREADY_COMPRESSED


class TestDryRun:
    def test_file_and_ledger_untouched(self, jpeg, hasher, fake_compressors):
        before = Path(jpeg.path).read_bytes()
        ledger = MemoryLedger()
        dispatcher = CompressionDispatcher(ledger, hasher, fake_compressors, dry_run=True)

        result = dispatcher.process(jpeg)

        assert isinstance(result, Skipped)
        assert result.reason is SkipReason.DRY_RUN
        assert result.digest == hasher.compute_digest(jpeg.path)
        assert Path(jpeg.path).read_bytes() == before
        assert len(ledger) == 0
        assert fake_compressors[ImageFormat.JPEG].calls == []


class TestCompression:
    def test_outcome_and_new_digest_recorded(self, jpeg, hasher, fake_compressors):
        ledger = MemoryLedger()
        dispatcher = CompressionDispatcher(ledger, hasher, fake_compressors)

        result = dispatcher.process(jpeg)

        assert isinstance(result, CompressionOutcome)
        assert fake_compressors[ImageFormat.JPEG].calls == [jpeg.path]
        assert result.prior_size == 10002
        assert result.new_size == os.path.getsize(jpeg.path)
        assert result.new_size < result.prior_size
        assert result.new_digest == hasher.compute_digest(jpeg.path)
        assert ledger.contains(result.new_digest)
        assert result.tool_output == "fake jpeg done\n"

    def test_original_digest_not_recorded(self, jpeg, hasher, fake_compressors):
        original = hasher.compute_digest(jpeg.path)
        ledger = MemoryLedger()

        CompressionDispatcher(ledger, hasher, fake_compressors).process(jpeg)

        assert not ledger.contains(original)
        assert len(ledger) == 1

    def test_second_pass_is_a_no_op(self, jpeg, hasher, fake_compressors):
        ledger = MemoryLedger()
        dispatcher = CompressionDispatcher(ledger, hasher, fake_compressors)

        first = dispatcher.process(jpeg)
        second = dispatcher.process(make_image(Path(jpeg.path), ImageFormat.JPEG))

        assert isinstance(first, CompressionOutcome)
        assert second.reason is SkipReason.ALREADY_COMPRESSED
        assert len(fake_compressors[ImageFormat.JPEG].calls) == 1

    def test_larger_output_is_still_accepted(self, jpeg, hasher, make_compressors):
        compressors = make_compressors(grow=True)
        ledger = MemoryLedger()

        result = CompressionDispatcher(ledger, hasher, compressors).process(jpeg)

        assert result.new_size > result.prior_size
        assert result.saved_bytes < 0
        assert ledger.contains(result.new_digest)

    def test_png_routed_to_png_compressor(self, temp_dir, hasher, fake_compressors):
        path = temp_dir / "b.png"
        path.write_bytes(b"\x89PNG" + b"P" * 100)

        CompressionDispatcher(MemoryLedger(), hasher, fake_compressors).process(
            make_image(path, ImageFormat.PNG))

        assert fake_compressors[ImageFormat.PNG].calls == [str(path)]
        assert fake_compressors[ImageFormat.JPEG].calls == []

    def test_missing_compressor_for_format(self, jpeg, hasher, fake_compressors):
        del fake_compressors[ImageFormat.JPEG]
        with pytest.raises(ValueError, match="No compressor registered for JPEG"):
            CompressionDispatcher(MemoryLedger(), hasher, fake_compressors).process(jpeg)


class TestFailures:
    def test_compressor_failure_propagates_and_ledger_unchanged(self, jpeg, hasher, make_compressors):
        compressors = make_compressors(fail_on="a.jpg")
        ledger = MemoryLedger()

        with pytest.raises(CompressorError) as exc_info:
            CompressionDispatcher(ledger, hasher, compressors).process(jpeg)

        assert exc_info.value.output == "Invalid input file\n"
        assert len(ledger) == 0

    def test_unreadable_file_raises_hashing_error(self, temp_dir, hasher, fake_compressors):
        image = ImageFile(path=str(temp_dir / "gone.jpg"), format=ImageFormat.JPEG, size=1)
        with pytest.raises(HashingError):
            CompressionDispatcher(MemoryLedger(), hasher, fake_compressors).process(image)

    def test_stat_failure_after_compression(self, jpeg, hasher, fake_compressors):
        ledger = MemoryLedger()
        dispatcher = CompressionDispatcher(ledger, hasher, fake_compressors)

        with mock.patch("pixelpress.core.dispatcher.os.stat", side_effect=OSError("gone")):
            with pytest.raises(HashingError, match="Failed to get size"):
                dispatcher.process(jpeg)

        assert len(ledger) == 0
