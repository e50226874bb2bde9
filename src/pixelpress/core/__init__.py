"""
Core compression pipeline — walker, matcher, ledger, hasher, compressors and dispatcher.

This package contains the foundation of pixelpress:
- ImageScannerImpl: lazy directory traversal with glob-based pruning
- GlobMatcher: exclusion rules with brace alternation
- FileLedger / MemoryLedger: append-only set of already optimized digests
- HasherImpl: streaming 128-bit content digests (xxHash3-128 or MD5)
- GuetzliCompressor / ZopflipngCompressor: external optimizer invocation
- CompressionDispatcher: skip / dry-run / compress / record per image
- Models: ImageFile, CompressionOutcome, CompressionParams and friends

No GUI or CLI dependencies.
"""

from .errors import (
    PixelPressError, LedgerError, HashingError, TraversalError, CompressorError)
from .models import (
    ImageFormat, ImageFile, CompressionOutcome, Skipped, SkipReason, DigestAlgorithm,
    CompressionParams, CompressionStats, MIN_JPEG_QUALITY, DEFAULT_JPEG_QUALITY)
from .matcher import GlobMatcher, normalize_path
from .ledger import FileLedger, MemoryLedger
from .hasher import HasherImpl, XXHash128AlgorithmImpl, MD5AlgorithmImpl, get_algorithm
from .scanner import ImageScannerImpl
from .compressors import GuetzliCompressor, ZopflipngCompressor, get_compressor_registry
from .dispatcher import CompressionDispatcher

__all__ = [
    "PixelPressError",
    "LedgerError",
    "HashingError",
    "TraversalError",
    "CompressorError",
    "ImageFormat",
    "ImageFile",
    "CompressionOutcome",
    "Skipped",
    "SkipReason",
    "DigestAlgorithm",
    "CompressionParams",
    "CompressionStats",
    "MIN_JPEG_QUALITY",
    "DEFAULT_JPEG_QUALITY",
    "GlobMatcher",
    "normalize_path",
    "FileLedger",
    "MemoryLedger",
    "HasherImpl",
    "XXHash128AlgorithmImpl",
    "MD5AlgorithmImpl",
    "get_algorithm",
    "ImageScannerImpl",
    "GuetzliCompressor",
    "ZopflipngCompressor",
    "get_compressor_registry",
    "CompressionDispatcher",
]
