"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception types raised by the compression pipeline.
Only the CLI turns these into process exit codes.
"""
from typing import Optional


class PixelPressError(RuntimeError):
    """Base class for every fatal pipeline error."""


class LedgerError(PixelPressError):
    """The ledger file could not be read (or written, in strict mode)."""


class HashingError(PixelPressError):
    """A file could not be read to compute its digest or size."""


class TraversalError(PixelPressError):
    """Directory traversal failed part-way through the tree."""


class CompressorError(PixelPressError):
    """
    External compressor failed or could not be started.

    Attributes:
        tool: Name of the executable that was invoked
        output: Combined stdout/stderr captured from the process
        returncode: Exit status, or None if the process never started
    """

    def __init__(self, message: str, tool: str, output: str = "", returncode: Optional[int] = None):
        super().__init__(message)
        self.tool = tool
        self.output = output
        self.returncode = returncode
