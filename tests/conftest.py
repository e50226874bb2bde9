"""
Shared fixtures for compression pipeline tests.
Creates isolated image trees and fake compressors so no external tool is ever run.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict, List
import sys

# Add src/ to sys.path so 'pixelpress' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from pixelpress.core.errors import CompressorError
from pixelpress.core.models import ImageFormat


class FakeCompressor:
    """
    Stands in for guetzli/zopflipng: rewrites the file in place with
    deterministic, smaller content and remembers every call.
    """

    def __init__(self, image_format: ImageFormat, grow: bool = False, fail_on: str = ""):
        self.image_format = image_format
        self.grow = grow
        self.fail_on = fail_on
        self.calls: List[str] = []

    def compress(self, path: str) -> str:
        self.calls.append(path)
        if self.fail_on and path.endswith(self.fail_on):
            raise CompressorError(
                f"fake exited with status 1 for {path}",
                tool="fake",
                output="Invalid input file\n",
                returncode=1,
            )
        data = Path(path).read_bytes()
        if self.grow:
            new_data = b"OPT" + data + data
        else:
            new_data = b"OPT" + data[: len(data) // 2]
        Path(path).write_bytes(new_data)
        return f"fake {self.image_format.value} done\n"


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_compressors():
    """Factory for a JPEG+PNG pair of fake compressors."""
    def factory(grow: bool = False, fail_on: str = "") -> Dict[ImageFormat, FakeCompressor]:
        return {
            ImageFormat.JPEG: FakeCompressor(ImageFormat.JPEG, grow=grow, fail_on=fail_on),
            ImageFormat.PNG: FakeCompressor(ImageFormat.PNG, grow=grow, fail_on=fail_on),
        }
    return factory


@pytest.fixture
def fake_compressors(make_compressors) -> Dict[ImageFormat, FakeCompressor]:
    return make_compressors()


@pytest.fixture
def image_tree(temp_dir) -> Dict[str, Path]:
    """
    Creates a small tree:
    - a.jpg (500000 bytes) and b.png (200000 bytes) at the root
    - notes.txt and fake.gif (never candidates)
    - photos/c.JPEG (upper-case extension)
    - .git/d.png (inside a directory typically excluded)
    """
    root = temp_dir / "images"
    root.mkdir()
    files = {"root": root}

    files["a.jpg"] = root / "a.jpg"
    files["a.jpg"].write_bytes(b"\xff\xd8" + b"J" * (500000 - 2))
    files["b.png"] = root / "b.png"
    files["b.png"].write_bytes(b"\x89PNG" + b"P" * (200000 - 4))

    files["notes.txt"] = root / "notes.txt"
    files["notes.txt"].write_bytes(b"not an image")
    files["fake.gif"] = root / "fake.gif"
    files["fake.gif"].write_bytes(b"GIF89a")

    photos = root / "photos"
    photos.mkdir()
    files["c.JPEG"] = photos / "c.JPEG"
    files["c.JPEG"].write_bytes(b"\xff\xd8" + b"C" * 3000)

    git_dir = root / ".git"
    git_dir.mkdir()
    files["d.png"] = git_dir / "d.png"
    files["d.png"].write_bytes(b"\x89PNG" + b"D" * 4000)

    return files
