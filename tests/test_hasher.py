"""
Unit tests for HasherImpl and the pluggable hash algorithms.
Verifies partial digests (xxHash64 of the first 1KB) and streamed full digests.
"""
import hashlib

import blake3
import pytest
import xxhash

from identical_files.core.hasher import (
    HasherImpl, XXHashAlgorithmImpl, HashlibAlgorithmImpl, ALGORITHMS, get_algorithm,
    PARTIAL_HASH_BYTES)
from identical_files.core.models import Algorithm
from identical_files.errors import NotFoundError, FileIOError


class TestPartialDigest:
    """Partial digest only looks at the leading bytes of a file."""

    def test_matches_xxh64_of_first_bytes(self, temp_dir):
        """Digest must be the decimal xxHash64 of the first PARTIAL_HASH_BYTES bytes."""
        content = b"0123456789" * 500
        path = temp_dir / "data.bin"
        path.write_bytes(content)

        digest = HasherImpl().compute_partial_digest(str(path))

        assert digest == str(xxhash.xxh64(content[:PARTIAL_HASH_BYTES]).intdigest())

    def test_same_prefix_gives_same_digest(self, test_files):
        """Files differing only after the first 1KB are indistinguishable here."""
        hasher = HasherImpl()
        assert (hasher.compute_partial_digest(str(test_files["late_diff_a"]))
                == hasher.compute_partial_digest(str(test_files["late_diff_b"])))

    def test_short_file_hashes_whole_content(self, temp_dir):
        """Files shorter than the prefix hash exactly their bytes."""
        path = temp_dir / "short.bin"
        path.write_bytes(b"abc")
        assert HasherImpl().compute_partial_digest(str(path)) == str(xxhash.xxh64(b"abc").intdigest())

    def test_empty_file(self, test_files):
        """Zero-byte files hash to the digest of empty input."""
        assert HasherImpl().compute_partial_digest(str(test_files["empty"])) == str(xxhash.xxh64(b"").intdigest())

    def test_missing_file_raises_not_found(self, temp_dir):
        """Unreadable files must raise, never return a default digest."""
        with pytest.raises(NotFoundError) as exc_info:
            HasherImpl().compute_partial_digest(str(temp_dir / "missing.bin"))
        assert "missing.bin" in str(exc_info.value)

    def test_directory_raises_io_error(self, temp_dir):
        """Opening a directory is an I/O error (not-found and permission are the other kinds)."""
        with pytest.raises((FileIOError, NotFoundError)) as exc_info:
            HasherImpl().compute_partial_digest(str(temp_dir))
        assert exc_info.value.path == str(temp_dir)


class TestFullDigest:
    """Full digest streams the whole file through the selected algorithm."""

    def test_default_algorithm_is_blake3(self, test_files):
        content = test_files["dup2_a"].read_bytes()
        digest = HasherImpl().compute_full_digest(str(test_files["dup2_a"]))
        assert digest == blake3.blake3(content).hexdigest()

    @pytest.mark.parametrize("algorithm, reference", [
        (Algorithm.SHA256, lambda data: hashlib.sha256(data).hexdigest()),
        (Algorithm.SHA512, lambda data: hashlib.sha512(data).hexdigest()),
        (Algorithm.BLAKE2B, lambda data: hashlib.blake2b(data).hexdigest()),
        (Algorithm.XXH64, lambda data: xxhash.xxh64(data).hexdigest()),
        (Algorithm.XXH3, lambda data: xxhash.xxh3_64(data).hexdigest()),
        (Algorithm.XXH128, lambda data: xxhash.xxh3_128(data).hexdigest()),
        (Algorithm.BLAKE3, lambda data: blake3.blake3(data).hexdigest()),
    ])
    def test_each_algorithm_matches_reference(self, temp_dir, algorithm, reference):
        """Chunked streaming must equal hashing the whole content at once."""
        content = bytes(range(256)) * 1000  # spans several read buffers
        path = temp_dir / "data.bin"
        path.write_bytes(content)

        hasher = HasherImpl(buffer_size=4096)
        assert hasher.compute_full_digest(str(path), algorithm) == reference(content)

    def test_identical_content_identical_digest(self, test_files):
        hasher = HasherImpl()
        assert (hasher.compute_full_digest(str(test_files["dup1_a"]))
                == hasher.compute_full_digest(str(test_files["sub_dup"])))

    def test_late_difference_is_detected(self, test_files):
        """Unlike the partial digest, the full digest sees the whole file."""
        hasher = HasherImpl()
        assert (hasher.compute_full_digest(str(test_files["late_diff_a"]))
                != hasher.compute_full_digest(str(test_files["late_diff_b"])))

    def test_digest_is_lowercase_hex(self, test_files):
        digest = HasherImpl(Algorithm.SHA256).compute_full_digest(str(test_files["unique1"]))
        assert digest == digest.lower()
        int(digest, 16)

    def test_missing_file_raises_not_found(self, temp_dir):
        with pytest.raises(NotFoundError):
            HasherImpl().compute_full_digest(str(temp_dir / "gone.bin"))


class TestAlgorithmRegistry:
    """Every Algorithm enum member has an implementation."""

    def test_registry_covers_all_algorithms(self):
        assert set(ALGORITHMS) == set(Algorithm)

    def test_get_algorithm_returns_working_impl(self):
        impl = get_algorithm(Algorithm.SHA256)
        state = impl.new()
        state.update(b"abc")
        assert state.hexdigest() == hashlib.sha256(b"abc").hexdigest()

    def test_each_call_to_new_starts_fresh(self):
        for algorithm in Algorithm:
            impl = get_algorithm(algorithm)
            first = impl.new()
            first.update(b"hello")
            assert impl.new().hexdigest() != first.hexdigest()

    def test_unknown_xxhash_variant_rejected(self):
        with pytest.raises(ValueError):
            XXHashAlgorithmImpl("xxh999")

    def test_hashlib_impl_uses_named_algorithm(self):
        assert HashlibAlgorithmImpl("sha512").new().hexdigest() == hashlib.sha512(b"").hexdigest()
