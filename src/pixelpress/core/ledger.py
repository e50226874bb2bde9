"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/ledger.py
Persisted record of content digests for images that are already optimized.

The backing file is plain text, one lowercase hex digest per line, and is
only ever appended to. Loading is done once at startup; every successful
compression appends one line.
"""

import os
import logging
from pathlib import Path
from typing import Iterable, Optional, Set

from pixelpress.core.errors import LedgerError
from pixelpress.core.interfaces import Ledger

logger = logging.getLogger(__name__)


class MemoryLedger(Ledger):
    """Ledger held only in memory. Used for tests and as the base for FileLedger."""

    def __init__(self, digests: Optional[Iterable[str]] = None):
        self._digests: Set[str] = set()
        for digest in digests or []:
            self._add(digest)

    def _add(self, digest: str) -> None:
        digest = digest.strip().lower()
        if digest:
            self._digests.add(digest)

    def contains(self, digest: str) -> bool:
        return digest.strip().lower() in self._digests

    def record(self, digest: str) -> None:
        self._add(digest)

    def __contains__(self, digest: object) -> bool:
        return isinstance(digest, str) and self.contains(digest)

    def __len__(self) -> int:
        return len(self._digests)

    def __iter__(self):
        return iter(self._digests)

    def __repr__(self):
        return f"<{type(self).__name__} digests={len(self._digests)}>"


class FileLedger(MemoryLedger):
    """
    Ledger backed by a newline-delimited text file.

    Attributes:
        path: Location of the backing file
        strict: If True, a failed append raises LedgerError instead of being logged
    """

    def __init__(self, path: str, digests: Optional[Iterable[str]] = None, strict: bool = False):
        super().__init__(digests)
        self.path = path
        self.strict = strict

    @classmethod
    def load(cls, path: str, strict: bool = False) -> "FileLedger":
        """
        Read the ledger file at `path`.
        A missing file yields an empty ledger; any other read failure is fatal.

        Raises:
            LedgerError: If the file exists but cannot be read
        """
        ledger_path = Path(path)
        try:
            with ledger_path.open("r", encoding="ascii") as f:
                digests = [line for line in f]
        except FileNotFoundError:
            logger.debug(f"Ledger {path} does not exist yet, starting empty")
            return cls(path, strict=strict)
        except (OSError, UnicodeDecodeError) as e:
            raise LedgerError(f"Failed to read ledger {path}: {e}") from e

        ledger = cls(path, digests, strict=strict)
        logger.debug(f"Loaded {len(ledger)} digests from {path}")
        return ledger

    def record(self, digest: str) -> None:
        """
        Add `digest` and append it to the backing file.
        The in-memory set is updated even if the write fails.
        """
        super().record(digest)
        line = digest.strip().lower() + "\n"
        try:
            with open(self.path, "a", encoding="ascii") as f:
                f.write(line)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            if self.strict:
                raise LedgerError(f"Failed to write ledger {self.path}: {e}") from e
            logger.error(f"Failed to write digest to ledger {self.path}: {e}")
