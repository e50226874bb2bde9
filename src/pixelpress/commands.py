"""
Unified command orchestrator for a compression run.
This is the SINGLE place where walker, dispatcher, ledger and reporter are wired together.
No argparse or sys.exit here — errors propagate to the caller.
"""
import time
import logging
from typing import Dict, Optional

from pixelpress.core.models import (
    CompressionOutcome, CompressionParams, CompressionStats, ImageFormat, Skipped, SkipReason)
from pixelpress.core.interfaces import Compressor, Ledger
from pixelpress.core.ledger import FileLedger
from pixelpress.core.matcher import GlobMatcher
from pixelpress.core.hasher import HasherImpl, get_algorithm
from pixelpress.core.scanner import ImageScannerImpl
from pixelpress.core.compressors import get_compressor_registry
from pixelpress.core.dispatcher import CompressionDispatcher
from pixelpress.services.report_service import ReportService

logger = logging.getLogger(__name__)


class CompressionCommand:
    """
    Orchestrates the whole run:
    1. Compile the exclusion rule and load the ledger (once)
    2. Walk the input directory lazily
    3. Dispatch each image and report the result as soon as it completes

    Usage:
        params = CompressionParams(input_dir="images", jpeg_quality=90)
        stats = CompressionCommand(params).execute()

        # Tests inject a ledger and fake compressors:
        command = CompressionCommand(params, ledger=MemoryLedger(), compressors=fakes)
    """

    def __init__(
        self,
        params: CompressionParams,
        ledger: Optional[Ledger] = None,
        compressors: Optional[Dict[ImageFormat, Compressor]] = None,
        reporter: Optional[ReportService] = None
    ):
        self.params = params
        self.matcher = GlobMatcher(params.exclude)
        self.ledger = ledger if ledger is not None else FileLedger.load(
            params.ledger_path, strict=params.strict_ledger)
        self.reporter = reporter if reporter is not None else ReportService(
            verbose=params.verbose,
            dry_run=params.dry_run,
            exclude_pattern=params.exclude,
        )
        self.scanner = ImageScannerImpl(params.input_dir, self.matcher)
        self.dispatcher = CompressionDispatcher(
            ledger=self.ledger,
            hasher=HasherImpl(get_algorithm(params.digest)),
            compressors=compressors if compressors is not None else get_compressor_registry(params.jpeg_quality),
            dry_run=params.dry_run,
        )

    def execute(self) -> CompressionStats:
        """
        Run the pipeline over the whole tree.

        Returns:
            Statistics for the finished run

        Raises:
            PixelPressError: On the first fatal error; nothing after it is processed
        """
        stats = CompressionStats()
        start_time = time.time()

        def on_excluded(path: str, is_dir: bool) -> None:
            stats.excluded += 1
            self.reporter.excluded(path, is_dir)

        logger.debug(f"Ledger holds {len(self.ledger)} digests before run")

        for image in self.scanner.walk(on_excluded=on_excluded):
            stats.scanned += 1
            result = self.dispatcher.process(image)

            if isinstance(result, CompressionOutcome):
                stats.record_outcome(result)
                self.reporter.compressed(result)
            elif isinstance(result, Skipped):
                stats.record_skip(result)
                if result.reason is SkipReason.DRY_RUN:
                    self.reporter.would_compress(result)

        stats.total_time = time.time() - start_time
        return stats
