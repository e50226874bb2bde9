"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/compressors.py
Invocation contracts of the external optimizers.

  JPEG: guetzli --quality <N> <path> <path>
  PNG:  zopflipng -m -y <path> <path>

Both tools rewrite the file in place (same input and output path).
stdout and stderr are captured as one stream.
"""

from abc import ABC, abstractmethod
import shutil
import subprocess
import sys
import logging
from typing import Dict, List, Optional

from pixelpress.core.errors import CompressorError
from pixelpress.core.interfaces import Compressor
from pixelpress.core.models import ImageFormat, DEFAULT_JPEG_QUALITY

logger = logging.getLogger(__name__)

WINDOWS_CREATIONFLAGS = (
    getattr(subprocess, "CREATE_NO_WINDOW", 0) if sys.platform.startswith("win") else 0
)


def run_command(command: List[str]) -> subprocess.CompletedProcess:
    """Run a command to completion with stderr folded into stdout."""
    logger.debug(f"Running: {' '.join(command)}")
    return subprocess.run(
        command,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        creationflags=WINDOWS_CREATIONFLAGS,
    )


def get_tool_executable(name: str) -> Optional[str]:
    return shutil.which(name)


class ExternalCompressor(Compressor, ABC):
    """
    Base class for optimizers that run as a child process.
    Subclasses only describe their command line.
    """
    tool: str = ""
    image_format: ImageFormat

    @abstractmethod
    def build_command(self, executable: str, path: str) -> List[str]:
        ...

    def compress(self, path: str) -> str:
        """
        Recompress `path` in place and return the tool's combined output.

        Raises:
            CompressorError: If the tool is missing or exits with a non-zero status
        """
        executable = get_tool_executable(self.tool)
        if executable is None:
            raise CompressorError(f"{self.tool} not found in PATH", tool=self.tool)

        command = self.build_command(executable, path)
        try:
            result = run_command(command)
        except OSError as e:
            raise CompressorError(f"Failed to run {self.tool}: {e}", tool=self.tool) from e

        output = (result.stdout or b"").decode("utf-8", errors="replace")
        if result.returncode != 0:
            raise CompressorError(
                f"{self.tool} exited with status {result.returncode} for {path}",
                tool=self.tool,
                output=output,
                returncode=result.returncode,
            )
        return output


class GuetzliCompressor(ExternalCompressor):
    """Lossy JPEG optimizer with a single quality knob."""
    tool = "guetzli"
    image_format = ImageFormat.JPEG

    def __init__(self, quality: int = DEFAULT_JPEG_QUALITY):
        self.quality = quality

    def build_command(self, executable: str, path: str) -> List[str]:
        return [executable, "--quality", str(self.quality), path, path]


class ZopflipngCompressor(ExternalCompressor):
    """Lossless PNG optimizer, maximum effort, overwriting the input."""
    tool = "zopflipng"
    image_format = ImageFormat.PNG

    def build_command(self, executable: str, path: str) -> List[str]:
        return [executable, "-m", "-y", path, path]


def get_compressor_registry(jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> Dict[ImageFormat, Compressor]:
    return {
        ImageFormat.JPEG: GuetzliCompressor(quality=jpeg_quality),
        ImageFormat.PNG: ZopflipngCompressor(),
    }
