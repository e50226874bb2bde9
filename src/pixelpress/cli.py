#!/usr/bin/env python3
"""
PixelPress CLI — recompress JPEG and PNG images in place.
Walks the input directory, skips images whose digest is already in the ledger,
runs guetzli / zopflipng on the rest and records the new digests.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import platform
import time
import logging
from typing import List, Optional, NoReturn

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from pixelpress import __version__
from pixelpress.core.errors import PixelPressError, CompressorError
from pixelpress.core.matcher import GlobMatcher
from pixelpress.core.models import (
    CompressionParams, CompressionStats, MIN_JPEG_QUALITY, DEFAULT_JPEG_QUALITY, default_ledger_path)
from pixelpress.commands import CompressionCommand
from pixelpress.aliases import (
    DIGEST_ALIASES, DIGEST_CHOICES, DIGEST_HELP_TEXT,
    EXCLUDE_HELP_TEXT, QUALITY_HELP_TEXT, EPILOG_TEXT
)

USAGE_ERROR = 2
RUNTIME_ERROR = 1


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments. Single-dash long flags are accepted alongside '--' ones."""
        parser = argparse.ArgumentParser(
            description="PixelPress — recompress JPEG and PNG images in place, skipping ones already done",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT,
            add_help=False,
            allow_abbrev=False,
        )

        # Required arguments
        parser.add_argument(
            "-input-dir", "--input-dir", "-i",
            required=True,
            type=str,
            dest="input_dir",
            metavar="PATH",
            help="Path to a directory containing images to compress"
        )

        # Behaviour
        parser.add_argument(
            "-dryrun", "--dryrun", "--dry-run",
            action="store_true",
            dest="dryrun",
            help="Run command without making changes"
        )
        parser.add_argument(
            "-exclude", "--exclude", "-e",
            default="",
            type=str,
            dest="exclude",
            metavar="GLOB",
            help=EXCLUDE_HELP_TEXT
        )
        parser.add_argument(
            "-jpeg-quality", "--jpeg-quality",
            default=DEFAULT_JPEG_QUALITY,
            type=int,
            dest="jpeg_quality",
            metavar="N",
            help=QUALITY_HELP_TEXT
        )

        # Ledger options
        parser.add_argument(
            "-ledger", "--ledger",
            default=None,
            type=str,
            dest="ledger",
            metavar="FILE",
            help="Ledger file with digests of compressed images.\n"
                 "Default: <program name>.txt in the working directory"
        )
        parser.add_argument(
            "-strict-ledger", "--strict-ledger",
            action="store_true",
            dest="strict_ledger",
            help="Abort the run if a digest cannot be written to the ledger"
        )
        parser.add_argument(
            "-digest", "--digest",
            choices=DIGEST_CHOICES,
            default="xxh128",
            type=str,
            dest="digest",
            help=DIGEST_HELP_TEXT
        )

        # Output options
        parser.add_argument(
            "-verbose", "--verbose", "-v",
            action="store_true",
            dest="verbose",
            help="Print a verbose output"
        )
        parser.add_argument(
            "-version", "--version",
            action="version",
            version=f"%(prog)s {__version__} (runtime: Python {platform.python_version()})",
            help="Print version number"
        )
        parser.add_argument(
            "-help", "--help", "-h",
            action="help",
            help="Show help"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before any traversal starts."""
        if not args.input_dir:
            self.error_exit("-input-dir is required", code=USAGE_ERROR)

        if not os.path.exists(args.input_dir):
            self.error_exit(f"path does not exist: {args.input_dir}", code=USAGE_ERROR)
        if not os.path.isdir(args.input_dir):
            self.error_exit(f"specified path is not a directory: {args.input_dir}", code=USAGE_ERROR)

        if args.jpeg_quality < MIN_JPEG_QUALITY:
            self.error_exit(f"jpeg-quality must be {MIN_JPEG_QUALITY} or greater", code=USAGE_ERROR)

        try:
            GlobMatcher(args.exclude)
        except ValueError as e:
            self.error_exit(f"invalid -exclude pattern: {e}", code=USAGE_ERROR)

    def create_params(self, args: argparse.Namespace) -> CompressionParams:
        """Create CompressionParams from CLI arguments."""
        try:
            return CompressionParams(
                input_dir=args.input_dir,
                dry_run=args.dryrun,
                verbose=args.verbose,
                exclude=args.exclude,
                jpeg_quality=args.jpeg_quality,
                ledger_path=args.ledger or default_ledger_path(),
                strict_ledger=args.strict_ledger,
                digest=DIGEST_ALIASES[args.digest],
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}", code=USAGE_ERROR)

    def run_compression(self, params: CompressionParams) -> CompressionStats:
        """Execute the compression workflow. Any pipeline error ends the process."""
        try:
            command = CompressionCommand(params)
            return command.execute()
        except CompressorError as e:
            if e.output:
                print(f"error: compressing image: {e.output}", end="" if e.output.endswith("\n") else "\n")
            self.error_exit(str(e), code=RUNTIME_ERROR)
        except PixelPressError as e:
            self.error_exit(str(e), code=RUNTIME_ERROR)

    @staticmethod
    def error_exit(message: str, code: int = RUNTIME_ERROR) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        if os.environ.get("DEBUG"):
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)
        params = self.create_params(args)

        stats = self.run_compression(params)

        if self.verbose:
            print()
            print(stats.print_summary())
            elapsed = time.time() - self.start_time
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(RUNTIME_ERROR)


if __name__ == "__main__":
    main()
