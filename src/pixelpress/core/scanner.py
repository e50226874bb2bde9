"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Lazy, exclusion-aware traversal of the input directory.
Features:
- Pre-order depth-first walk in name order, a subdirectory is entered as soon as it is reached
- Excluded directories are pruned before they are read
- Exclusion rule tested against every entry, root included
- Only regular .jpg/.jpeg/.png files are yielded
- Any filesystem error, broken symlinks included, aborts the walk
"""

import os
import stat
import logging
from pathlib import Path
from typing import Callable, Iterator, Optional

from pixelpress.core.errors import TraversalError
from pixelpress.core.interfaces import ImageScanner, PathMatcher
from pixelpress.core.matcher import GlobMatcher, normalize_path
from pixelpress.core.models import ImageFile, ImageFormat

logger = logging.getLogger(__name__)

ExcludedCallback = Callable[[str, bool], None]


class ImageScannerImpl(ImageScanner):
    """
    Walks a directory tree and yields candidate images one at a time.

    Attributes:
        root_dir: Root directory to scan (paths are reported relative to it as given)
        matcher: Exclusion rule; matched directories are not descended into
    """

    def __init__(self, root_dir: str, matcher: Optional[PathMatcher] = None):
        self.root_dir = root_dir
        self.matcher = matcher if matcher is not None else GlobMatcher()

    def walk(self, on_excluded: Optional[ExcludedCallback] = None) -> Iterator[ImageFile]:
        """
        Generator over the images under root_dir.
        Nothing is buffered: each image is produced only when the caller asks for it.

        Raises:
            TraversalError: If the root is missing or any directory/file cannot be read
        """
        logger.debug(f"Starting walk of {self.root_dir}")

        root_path = Path(self.root_dir)
        if not root_path.exists():
            raise TraversalError(f"Directory does not exist: {self.root_dir}")
        if not root_path.is_dir():
            raise TraversalError(f"Not a directory: {self.root_dir}")

        if self._is_excluded(self.root_dir, True, on_excluded):
            return

        yield from self._walk_dir(self.root_dir, on_excluded)

        logger.debug(f"Walk of {self.root_dir} finished")

    def _walk_dir(self, directory: str, on_excluded: Optional[ExcludedCallback]) -> Iterator[ImageFile]:
        """
        Visit the entries of one directory in name order.
        Subdirectories are descended into at their position in that order.
        """
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise TraversalError(f"Failed to read {directory}: {e.strerror or e}") from e

        for entry in entries:
            path = os.path.join(directory, entry.name)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                raise TraversalError(f"Could not stat {path}: {e}") from e

            # Excluded directories are never read
            if self._is_excluded(path, is_dir, on_excluded):
                continue

            if is_dir:
                yield from self._walk_dir(path, on_excluded)
                continue

            image = self._process_file(path)
            if image is not None:
                yield image

    def _is_excluded(self, path: str, is_dir: bool, on_excluded: Optional[ExcludedCallback]) -> bool:
        normalized = normalize_path(os.path.normpath(path))
        if not self.matcher.matches(normalized):
            return False
        logger.debug(f"Excluded {'directory' if is_dir else 'file'}: {normalized}")
        if on_excluded is not None:
            on_excluded(normalized, is_dir)
        return True

    @staticmethod
    def _process_file(path: str) -> Optional[ImageFile]:
        """
        Turn a directory entry into an ImageFile if it is a regular image file.

        Raises:
            TraversalError: If the entry cannot be stat'ed or is a broken symbolic link
        """
        image_format = ImageFormat.from_extension(os.path.splitext(path)[1])
        if image_format is None:
            return None

        try:
            st = os.lstat(path)
        except OSError as e:
            raise TraversalError(f"Could not stat {path}: {e}") from e

        if stat.S_ISLNK(st.st_mode):
            try:
                os.stat(path)
            except OSError as e:
                raise TraversalError(f"Broken symbolic link {path}: {e}") from e
            logger.debug(f"Skipping symbolic link: {path}")
            return None
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        logger.debug(f"Accepted image: {path} ({st.st_size} bytes)")
        return ImageFile(path=os.path.normpath(path), format=image_format, size=st.st_size)
