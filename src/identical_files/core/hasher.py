"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing with pluggable hash algorithms.

- Partial digest: xxHash64 of the first PARTIAL_HASH_BYTES bytes (cheap pre-filter)
- Full digest: the whole file streamed in BUFFER_SIZE chunks through the selected algorithm

Each call opens exactly one read-only handle and closes it before returning.
I/O failures are raised as NotFoundError / PermissionDeniedError / FileIOError,
never replaced by a default digest.
"""

import hashlib
from typing import Dict, Optional

import blake3
import xxhash

from identical_files.core.models import Algorithm
from identical_files.core.interfaces import Hasher, HashAlgorithm, DigestState
from identical_files.errors import from_os_error

PARTIAL_HASH_BYTES = 1024  # 1 KB
BUFFER_SIZE = 64 * 1024    # 64 KB


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    _VARIANTS = {
        "xxh64": xxhash.xxh64,
        "xxh3": xxhash.xxh3_64,
        "xxh128": xxhash.xxh3_128,
    }

    def __init__(self, variant: str = "xxh64"):
        if variant not in self._VARIANTS:
            raise ValueError(f"Unknown xxHash variant: {variant}")
        self._factory = self._VARIANTS[variant]

    def new(self) -> DigestState:
        return self._factory()


class Blake3AlgorithmImpl(HashAlgorithm):
    def new(self) -> DigestState:
        return blake3.blake3()


class HashlibAlgorithmImpl(HashAlgorithm):
    def __init__(self, name: str):
        self.name = name

    def new(self) -> DigestState:
        return hashlib.new(self.name)


ALGORITHMS: Dict[Algorithm, HashAlgorithm] = {
    Algorithm.XXH64: XXHashAlgorithmImpl("xxh64"),
    Algorithm.XXH3: XXHashAlgorithmImpl("xxh3"),
    Algorithm.XXH128: XXHashAlgorithmImpl("xxh128"),
    Algorithm.BLAKE3: Blake3AlgorithmImpl(),
    Algorithm.BLAKE2B: HashlibAlgorithmImpl("blake2b"),
    Algorithm.SHA256: HashlibAlgorithmImpl("sha256"),
    Algorithm.SHA512: HashlibAlgorithmImpl("sha512"),
}


def get_algorithm(algorithm: Algorithm) -> HashAlgorithm:
    return ALGORITHMS[algorithm]


class HasherImpl(Hasher):
    """
    Computes partial and full digests for a path.
    Stateless apart from configuration, so one instance is shared by all worker threads.
    """

    def __init__(
            self,
            algorithm: Algorithm = Algorithm.BLAKE3,
            partial_bytes: int = PARTIAL_HASH_BYTES,
            buffer_size: int = BUFFER_SIZE
    ):
        self.algorithm = algorithm
        self.partial_bytes = partial_bytes
        self.buffer_size = buffer_size

    def compute_partial_digest(self, path: str) -> str:
        """xxHash64 of the first `partial_bytes` bytes, as a decimal string."""
        try:
            with open(path, 'rb') as f:
                data = f.read(self.partial_bytes)
        except OSError as e:
            raise from_os_error(path, e) from e
        return str(xxhash.xxh64(data).intdigest())

    def compute_full_digest(self, path: str, algorithm: Optional[Algorithm] = None) -> str:
        """Digest of the entire file content, as lowercase hex."""
        hasher = get_algorithm(algorithm or self.algorithm).new()
        try:
            with open(path, 'rb') as f:
                while True:
                    chunk = f.read(self.buffer_size)
                    if not chunk:
                        break
                    hasher.update(chunk)
        except OSError as e:
            raise from_os_error(path, e) from e
        return hasher.hexdigest()
