"""
File system utilities for the photo mover.
Handles directory traversal, unwanted-file filtering and file transfers.
"""
import os
import re
import shutil
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from send2trash import send2trash

from .config import config


logger = logging.getLogger(__name__)


class DirectoryWalker:
    """Lists the contents of a directory tree."""

    def list_files(self, root: Path, recursive: bool = True,
                   skip_dirs: Iterable[Path] = ()) -> Tuple[List[Path], List[Path]]:
        """
        List files and subdirectories under root.

        Args:
            root: Directory to list
            recursive: Descend into subdirectories
            skip_dirs: Directories (and their contents) to leave out

        Returns:
            Tuple of (files, subdirectories). Order follows the OS listing.

        Raises:
            NotADirectoryError: If root is not a directory
        """
        root = Path(root)
        if not root.is_dir():
            raise NotADirectoryError(f"'{root}' is not a valid directory")

        skipped = {Path(d).absolute() for d in skip_dirs}
        files: List[Path] = []
        dirs: List[Path] = []

        def on_error(error: OSError):
            logger.warning(f"Cannot list {error.filename}: {error}")

        for dir_path, dir_names, file_names in os.walk(root, onerror=on_error):
            current = Path(dir_path)
            kept = []
            for name in dir_names:
                sub = current / name
                if sub.absolute() in skipped:
                    continue
                kept.append(name)
                dirs.append(sub)
            dir_names[:] = kept if recursive else []
            files.extend(current / name for name in file_names)
            if not recursive:
                break

        return files, dirs


def compile_patterns(patterns: Sequence[str]) -> List[Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


def matches_any(text: str, patterns: Sequence[Pattern]) -> bool:
    return any(p.search(text) for p in patterns)


def partition_unwanted(files: Sequence[Path],
                       patterns: Optional[Sequence[str]] = None) -> Tuple[List[Path], List[Path]]:
    """
    Split files into (unwanted, wanted) using the junk-file patterns.

    Args:
        files: Candidate files
        patterns: Regexes matched against the full path (default: config)

    Returns:
        Tuple of (unwanted, wanted), each in input order
    """
    compiled = compile_patterns(patterns if patterns is not None else config.unwanted_patterns)
    unwanted, wanted = [], []
    for f in files:
        (unwanted if matches_any(str(f), compiled) else wanted).append(f)
    return unwanted, wanted


class FileOperations:
    """File transfers and deletions. Failures raise OSError."""

    @staticmethod
    def move_file(source: Path, dest: Path, create_dirs: bool = True) -> Path:
        """
        Move a file, never replacing an existing destination.

        Raises:
            FileExistsError: If dest already exists
            OSError: On any other file system failure
        """
        if create_dirs:
            dest.parent.mkdir(parents=True, exist_ok=True)
        if dest.exists():
            raise FileExistsError(f"Destination already exists: {dest}")
        shutil.move(str(source), str(dest))
        return dest

    @staticmethod
    def copy_file(source: Path, dest: Path, create_dirs: bool = True) -> Path:
        """
        Copy a file with its metadata, never replacing an existing destination.

        Raises:
            FileExistsError: If dest already exists
            OSError: On any other file system failure
        """
        if create_dirs:
            dest.parent.mkdir(parents=True, exist_ok=True)
        if dest.exists():
            raise FileExistsError(f"Destination already exists: {dest}")
        shutil.copy2(str(source), str(dest))
        return dest

    @staticmethod
    def delete_file(path: Path, use_trash: bool = True) -> None:
        """
        Delete a file, sending it to the recycle bin when use_trash is set.

        Raises:
            OSError: If the file cannot be removed
        """
        if use_trash:
            send2trash(str(path))
        else:
            Path(path).unlink()

