"""Hash calculation for ROM, media and generated files."""

import zlib
import hashlib
from pathlib import Path


SUPPORTED_ALGORITHMS = ('crc32', 'md5', 'sha1')


def calculate_hash(file_path: Path, algorithm: str = 'sha1') -> str:
    """
    Calculate hash for a file using specified algorithm.

    Args:
        file_path: Path to file to hash
        algorithm: Hash algorithm ('crc32', 'md5', 'sha1')

    Returns:
        Lowercase hex hash string

    Raises:
        OSError: If file cannot be read
        ValueError: If algorithm is not supported
    """
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    chunk_size = 8 * 1024 * 1024  # 8MB chunks

    if algorithm == 'crc32':
        crc = 0
        with open(file_path, 'rb') as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                crc = zlib.crc32(chunk, crc)

        return f"{crc & 0xFFFFFFFF:08x}"

    hasher = hashlib.md5() if algorithm == 'md5' else hashlib.sha1()
    with open(file_path, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)

    return hasher.hexdigest()


def hash_bytes(data: bytes) -> str:
    """Return the lowercase sha1 of an in-memory payload."""
    return hashlib.sha1(data).hexdigest()
