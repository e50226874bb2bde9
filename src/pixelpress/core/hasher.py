"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Content digests used as ledger keys.

The file is streamed through a pluggable HashAlgorithm in fixed-size chunks,
so memory use does not depend on image size. Default algorithm is XXH3-128;
MD5 is available for ledgers written by older releases.
"""

import hashlib
import logging

import xxhash

from pixelpress.core.errors import HashingError
from pixelpress.core.interfaces import Hasher, HashAlgorithm
from pixelpress.core.models import DigestAlgorithm

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024


# Use the same way to implement and use any other hashing algorithm
class XXHash128AlgorithmImpl(HashAlgorithm):
    name = DigestAlgorithm.XXH128.value

    def new(self):
        return xxhash.xxh3_128()


class MD5AlgorithmImpl(HashAlgorithm):
    name = DigestAlgorithm.MD5.value

    def new(self):
        return hashlib.md5()


ALGORITHMS = {
    DigestAlgorithm.XXH128: XXHash128AlgorithmImpl,
    DigestAlgorithm.MD5: MD5AlgorithmImpl,
}


def get_algorithm(digest: DigestAlgorithm) -> HashAlgorithm:
    return ALGORITHMS[digest]()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Returns lowercase hex digests over the full file contents.
    """

    def __init__(self, algorithm: HashAlgorithm, chunk_size: int = READ_CHUNK_SIZE):
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def compute_digest(self, path: str) -> str:
        """
        Raises:
            HashingError: If the file cannot be opened or read
        """
        state = self.algorithm.new()
        try:
            with open(path, "rb") as f:
                while True:
                    chunk = f.read(self.chunk_size)
                    if not chunk:
                        break
                    state.update(chunk)
        except OSError as e:
            raise HashingError(f"Failed to compute digest of {path}: {e}") from e
        digest = state.hexdigest()
        logger.debug(f"{self.algorithm.name} {digest} {path}")
        return digest
