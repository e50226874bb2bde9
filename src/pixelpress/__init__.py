"""
PixelPress — incremental in-place image recompression.

Core features:
- Recursive scan for .jpg/.jpeg/.png with glob-based exclusion (brace alternation supported)
- Lossy JPEG via guetzli, lossless PNG via zopflipng, both rewriting the file in place
- Content-addressed ledger (xxHash3-128 digests) so repeated runs only touch new images
- Dry-run mode that never modifies images or the ledger
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("pixelpress")
except Exception:
    try:
        import tomllib
        from pathlib import Path

        with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except Exception:
        __version__ = "dev"

# Public API — only what users should import directly
from pixelpress.commands import CompressionCommand
from pixelpress.core import (
    CompressionParams, CompressionStats, CompressionOutcome, ImageFile, ImageFormat,
    DigestAlgorithm, FileLedger, MemoryLedger, GlobMatcher, PixelPressError)
from pixelpress.utils.convert_utils import ConvertUtils
from pixelpress.services import ReportService

__all__ = [
    "CompressionCommand",
    "CompressionParams",
    "CompressionStats",
    "CompressionOutcome",
    "ImageFile",
    "ImageFormat",
    "DigestAlgorithm",
    "FileLedger",
    "MemoryLedger",
    "GlobMatcher",
    "PixelPressError",
    "ConvertUtils",
    "ReportService",
    "__version__",
]
