"""
File discovery module for the upgrader package.

Finds local images that the reverse image search can accept: a supported
extension and a size within the upload limit.
"""

from __future__ import annotations

from pathlib import Path

from ..config import MAX_FILESIZE, SUPPORTED_EXTENSIONS
from .dependencies import _logger


def is_supported(filepath: Path) -> bool:
    """Returns whether the file type is supported by the Vision API."""
    return filepath.suffix.lower() in SUPPORTED_EXTENSIONS


def is_within_filesize_limit(filepath: Path, max_file_size: int = MAX_FILESIZE) -> bool:
    """Returns whether a file is within the upload size limit."""
    try:
        return filepath.stat().st_size <= max_file_size
    except OSError:
        return False


def find_image_files(
    root_path: str | Path,
    recursive: bool = True,
    max_file_size: int = MAX_FILESIZE,
) -> list[str]:
    """
    Find all uploadable image files in the given directory.

    Args:
        root_path: Directory path to search for images
        recursive: If True, search subdirectories recursively
        max_file_size: Largest file size in bytes to include

    Returns:
        List of absolute file paths as strings, each appearing once

    Raises:
        FileNotFoundError: If root_path does not exist
        NotADirectoryError: If root_path is not a directory
    """
    root = Path(root_path)
    if not root.exists():
        raise FileNotFoundError(f"Directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    images = []
    seen = set()  # Track resolved paths to avoid duplicates

    iterator = root.rglob('*') if recursive else root.glob('*')

    for filepath in iterator:
        if not filepath.is_file() or not is_supported(filepath):
            continue
        if not is_within_filesize_limit(filepath, max_file_size):
            _logger.debug(f"Skipping {filepath}: larger than {max_file_size:,} bytes")
            continue

        resolved = str(filepath.resolve())
        if resolved not in seen:
            seen.add(resolved)
            images.append(resolved)

    return images


__all__ = ['is_supported', 'is_within_filesize_limit', 'find_image_files']
