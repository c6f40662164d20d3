"""
Content comparison of a source file and its candidate destination.
"""
import asyncio
import hashlib
import logging
from pathlib import Path
from typing import Optional

from .config import config


logger = logging.getLogger(__name__)


class FileComparisonError(Exception):
    """A file needed for a comparison could not be read."""

    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        super().__init__(f"{path}: {message}")


def compute_file_hash(file_path: Path, algorithm: Optional[str] = None,
                      chunk_size: Optional[int] = None) -> str:
    """
    Compute the content hash of a file.

    Args:
        file_path: Path to file
        algorithm: hashlib algorithm name (default: config.hash_algorithm)
        chunk_size: Read buffer size (default: config.hash_chunk_size)

    Returns:
        Hex digest

    Raises:
        OSError: If the file cannot be read
    """
    hasher = hashlib.new(algorithm or config.hash_algorithm)
    chunk_size = chunk_size or config.hash_chunk_size
    with open(file_path, 'rb') as f:
        for chunk in iter(lambda: f.read(chunk_size), b''):
            hasher.update(chunk)
    return hasher.hexdigest()


class FileComparer:
    """
    Pairs a source file (left) with a candidate destination (right).
    """

    def __init__(self, left_file: Path, right_file: Path,
                 algorithm: Optional[str] = None, chunk_size: Optional[int] = None):
        self.left_file = Path(left_file)
        self.right_file = Path(right_file)
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def _hash(self, path: Path) -> str:
        try:
            return compute_file_hash(path, self.algorithm, self.chunk_size)
        except OSError as e:
            raise FileComparisonError(path, f"cannot be read ({e})") from e

    def _compare(self) -> bool:
        if not self.left_file.is_file():
            raise FileComparisonError(self.left_file, "source file does not exist")

        if not self.right_file.is_file():
            return False

        left_hash = self._hash(self.left_file)
        right_hash = self._hash(self.right_file)
        return left_hash == right_hash

    async def both_exist_and_identical(self) -> bool:
        """
        Check whether the destination already holds this exact content.

        Returns:
            True if both files exist and their contents hash equal; False if
            the destination is missing or differs

        Raises:
            FileComparisonError: If the source is missing or either file
                cannot be read
        """
        return await asyncio.to_thread(self._compare)

    def __repr__(self) -> str:
        return f"FileComparer({str(self.left_file)!r}, {str(self.right_file)!r})"
