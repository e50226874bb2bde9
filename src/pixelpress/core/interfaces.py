"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the compression pipeline.
Structural typing keeps the pieces swappable: tests inject in-memory ledgers
and fake compressors without touching the filesystem or spawning processes.

Key Components:
---------------
- HashAlgorithm: Incremental hash function producing a hex digest.
- Hasher: Computes the content digest of a file on disk.
- PathMatcher: Decides whether a normalized path is excluded.
- Ledger: Persisted set of digests of already optimized files.
- ImageScanner: Lazily yields candidate images from a directory tree.
- Compressor: Recompresses one image in place via an external tool.
"""

from typing import Protocol, Iterator, Optional, Callable
from pixelpress.core.models import ImageFile, ImageFormat


class HashAlgorithm(Protocol):
    """
    Interface for incremental hash algorithms.

    Allows plugging in xxHash128 or MD5 without affecting the rest of the pipeline.
    """
    name: str

    def new(self) -> "HashState":
        """Returns a fresh hashing state."""
        ...


class HashState(Protocol):
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class Hasher(Protocol):
    """Interface for computing the content digest of a file."""
    def compute_digest(self, path: str) -> str: ...


class PathMatcher(Protocol):
    """Interface for exclusion rules evaluated against '/'-separated paths."""
    def matches(self, normalized_path: str) -> bool: ...


class Ledger(Protocol):
    """
    Interface for the set of digests marking images already optimized.

    The set only grows during a run.
    """
    def contains(self, digest: str) -> bool: ...
    def record(self, digest: str) -> None: ...
    def __contains__(self, digest: object) -> bool: ...
    def __len__(self) -> int: ...


class ImageScanner(Protocol):
    """Interface for traversing a directory and yielding candidate images."""
    def walk(
        self,
        on_excluded: Optional[Callable[[str, bool], None]] = None
    ) -> Iterator[ImageFile]:
        """
        Walk the configured directory tree.

        Args:
            on_excluded: Called with (normalized_path, is_dir) for every excluded entry.

        Returns:
            Lazy iterator of ImageFile objects.
        """
        ...


class Compressor(Protocol):
    """
    Interface for an external in-place optimizer.

    Implementations raise CompressorError on failure and return the
    combined stdout/stderr of the tool on success.
    """
    image_format: ImageFormat

    def compress(self, path: str) -> str: ...
