"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
Human-readable progress lines for a compression run.
"""
import sys
from typing import Optional, TextIO, Tuple

from pixelpress.core.models import CompressionOutcome, Skipped
from pixelpress.utils.convert_utils import ConvertUtils


class ReportService:
    """
    Writes one line per event to the given stream (stdout by default).

    Attributes:
        verbose: Also print exclusions and compressor output
        dry_run: Prefix exclusion lines with "(dryrun) "
        exclude_pattern: Pattern quoted in exclusion lines
    """

    def __init__(
        self,
        verbose: bool = False,
        dry_run: bool = False,
        exclude_pattern: str = "",
        stream: Optional[TextIO] = None
    ):
        self.verbose = verbose
        self.dry_run = dry_run
        self.exclude_pattern = exclude_pattern
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        print(text, file=self.stream)

    @staticmethod
    def format_sizes(prior_size: int, new_size: int) -> Tuple[str, str]:
        return ConvertUtils.bytes_to_iec(prior_size), ConvertUtils.bytes_to_iec(new_size)

    def compressed(self, outcome: CompressionOutcome) -> None:
        if self.verbose and outcome.tool_output:
            self.stream.write(outcome.tool_output)
            if not outcome.tool_output.endswith("\n"):
                self.stream.write("\n")
        prior, new = self.format_sizes(outcome.prior_size, outcome.new_size)
        self._write(f"compressed: {outcome.image.name} from: {prior} to: {new}")

    def would_compress(self, skipped: Skipped) -> None:
        self._write(f"(dryrun) compressed: {skipped.image.path}")

    def excluded(self, path: str, is_dir: bool) -> None:
        if not self.verbose:
            return
        prefix = "(dryrun) " if self.dry_run else ""
        self._write(f'{prefix}excluded {path} because of Glob pattern passed to -exclude "{self.exclude_pattern}"')
