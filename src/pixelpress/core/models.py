"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for image discovery, compression results and run configuration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional
import os
import sys

from pixelpress.utils.convert_utils import ConvertUtils


MIN_JPEG_QUALITY = 84
DEFAULT_JPEG_QUALITY = 84


def default_ledger_path() -> str:
    """Ledger file named after the running executable, in the working directory."""
    name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ""
    if not name or name == "-c" or name.endswith(".py"):
        name = "pixelpress"
    return f"{name}.txt"


# =============================
# Enums
# =============================

class ImageFormat(Enum):
    """Image formats the pipeline knows how to recompress."""
    JPEG = "jpeg"
    PNG = "png"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            ImageFormat.JPEG: "JPEG",
            ImageFormat.PNG: "PNG",
        }
        return mapping.get(self, self.value)

    @classmethod
    def from_extension(cls, extension: str) -> Optional["ImageFormat"]:
        """Map a file extension (with or without dot, any case) to a format."""
        ext = extension.strip().lower()
        if ext and not ext.startswith("."):
            ext = f".{ext}"
        return IMAGE_EXTENSIONS.get(ext)

    def __repr__(self) -> str:
        return self.value


IMAGE_EXTENSIONS: Dict[str, ImageFormat] = {
    ".jpg": ImageFormat.JPEG,
    ".jpeg": ImageFormat.JPEG,
    ".png": ImageFormat.PNG,
}


class SkipReason(Enum):
    ALREADY_COMPRESSED = "already-compressed"
    DRY_RUN = "dry-run"


class DigestAlgorithm(Enum):
    """
    Content digest used as the ledger key. Both produce 128-bit digests.
    MD5 keeps ledgers written by older releases readable.
    """
    XXH128 = "xxh128"
    MD5 = "md5"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class ImageFile:
    """
    A candidate image found during traversal.
    Built per traversal step and discarded after processing.
    """
    path: str
    format: ImageFormat
    size: int  # in bytes

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self):
        return f"<ImageFile path={self.path}, format={self.format.value}, size={self.size}>"


@dataclass(frozen=True)
class CompressionOutcome:
    """Result of one successful in-place compression."""
    image: ImageFile
    prior_size: int
    new_size: int
    new_digest: str
    tool_output: str = ""

    @property
    def saved_bytes(self) -> int:
        """Bytes saved; negative when the compressor produced a larger file."""
        return self.prior_size - self.new_size


@dataclass(frozen=True)
class Skipped:
    """A candidate that was left untouched."""
    image: ImageFile
    reason: SkipReason
    digest: str


@dataclass(frozen=True)
class CompressionParams:
    """
    Resolved run configuration, constructed once by the CLI.
    Interface-agnostic: the command and core components only see this object.
    """
    input_dir: str
    dry_run: bool = False
    verbose: bool = False
    exclude: str = ""
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    ledger_path: str = field(default_factory=default_ledger_path)
    strict_ledger: bool = False
    digest: DigestAlgorithm = DigestAlgorithm.XXH128

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.input_dir:
            raise ValueError("Input directory cannot be empty")

        if self.jpeg_quality < MIN_JPEG_QUALITY:
            raise ValueError(f"jpeg-quality must be {MIN_JPEG_QUALITY} or greater")


@dataclass
class CompressionStats:
    """Counters collected while a run is in progress."""
    scanned: int = 0
    compressed: int = 0
    already_compressed: int = 0
    dry_run: int = 0
    excluded: int = 0
    bytes_before: int = 0
    bytes_after: int = 0
    total_time: float = 0.0
    per_format: Dict[str, int] = field(default_factory=dict)

    def record_outcome(self, outcome: CompressionOutcome) -> None:
        self.compressed += 1
        self.bytes_before += outcome.prior_size
        self.bytes_after += outcome.new_size
        key = outcome.image.format.display_name
        self.per_format[key] = self.per_format.get(key, 0) + 1

    def record_skip(self, skipped: Skipped) -> None:
        if skipped.reason is SkipReason.ALREADY_COMPRESSED:
            self.already_compressed += 1
        else:
            self.dry_run += 1

    def print_summary(self) -> str:
        lines = [
            "Compression Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Images found: {self.scanned}",
            f"Compressed: {self.compressed}",
            f"Already compressed: {self.already_compressed}",
        ]
        if self.dry_run:
            lines.append(f"Would compress (dry run): {self.dry_run}")
        if self.excluded:
            lines.append(f"Excluded paths: {self.excluded}")
        for fmt, count in sorted(self.per_format.items()):
            lines.append(f"  {fmt}: {count}")
        if self.compressed:
            lines.append(
                f"Size: {ConvertUtils.bytes_to_iec(self.bytes_before)} -> "
                f"{ConvertUtils.bytes_to_iec(self.bytes_after)} "
                f"(saved {ConvertUtils.savings_ratio(self.bytes_before, self.bytes_after):.1%})"
            )
        return "\n".join(lines)
