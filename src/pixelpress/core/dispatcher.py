"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/dispatcher.py
Per-file decision and compression step of the pipeline.

For each candidate image:
  1. digest current bytes
  2. skip if the digest is in the ledger
  3. skip (and report) in dry-run mode
  4. run the compressor registered for the image format
  5. re-digest and re-stat, record the new digest
  6. hand the outcome back to the caller

A file that grows is still recorded: size only affects reporting.
"""

import os
import logging
from typing import Dict, Optional, Union

from pixelpress.core.errors import HashingError
from pixelpress.core.interfaces import Compressor, Hasher, Ledger
from pixelpress.core.models import (
    CompressionOutcome, ImageFile, ImageFormat, Skipped, SkipReason)

logger = logging.getLogger(__name__)

DispatchResult = Union[CompressionOutcome, Skipped]


class CompressionDispatcher:
    """
    Decides whether an image needs work and, if so, compresses it in place.
    The only component that writes to image files.
    """

    def __init__(
        self,
        ledger: Ledger,
        hasher: Hasher,
        compressors: Dict[ImageFormat, Compressor],
        dry_run: bool = False
    ):
        self.ledger = ledger
        self.hasher = hasher
        self.compressors = compressors
        self.dry_run = dry_run

    def process(self, image: ImageFile) -> DispatchResult:
        """
        Process one candidate image.

        Returns:
            CompressionOutcome if the file was recompressed, Skipped otherwise

        Raises:
            HashingError: If the file cannot be read or stat'ed
            CompressorError: If the external tool fails
            LedgerError: If the ledger is strict and the new digest cannot be written
        """
        digest = self.hasher.compute_digest(image.path)

        if self.ledger.contains(digest):
            logger.debug(f"Already compressed, skipping: {image.path}")
            return Skipped(image=image, reason=SkipReason.ALREADY_COMPRESSED, digest=digest)

        if self.dry_run:
            return Skipped(image=image, reason=SkipReason.DRY_RUN, digest=digest)

        compressor = self._get_compressor(image.format)
        output = compressor.compress(image.path)

        new_digest = self.hasher.compute_digest(image.path)
        outcome = CompressionOutcome(
            image=image,
            prior_size=image.size,
            new_size=self._stat_size(image.path),
            new_digest=new_digest,
            tool_output=output,
        )
        if outcome.saved_bytes < 0:
            logger.debug(f"{image.path} grew by {-outcome.saved_bytes} bytes, keeping it")

        self.ledger.record(new_digest)
        return outcome

    def _get_compressor(self, image_format: ImageFormat) -> Compressor:
        compressor: Optional[Compressor] = self.compressors.get(image_format)
        if compressor is None:
            raise ValueError(f"No compressor registered for {image_format.display_name}")
        return compressor

    @staticmethod
    def _stat_size(path: str) -> int:
        try:
            return os.stat(path).st_size
        except OSError as e:
            raise HashingError(f"Failed to get size of compressed image {path}: {e}") from e
