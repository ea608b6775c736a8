"""
File system utilities for TorKit.

This module provides the disk-side primitives of the download pipeline:
- Archive extraction (tar.gz) with directory traversal protection
- Exclusive-create writes that fail if the target already exists
- Removal of stale cached files

Callers wrap the errors raised here into the download error taxonomy.
"""

import tarfile
from pathlib import Path
from typing import Union

from torkit.core.exceptions import TorKitError


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(TorKitError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    An already-existing directory is not an error.

    Raises:
        OSError: If the directory cannot be created
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
) -> None:
    """
    Extract a gzip-compressed tar archive into a destination directory.

    Existing files at the same paths are overwritten. All member paths are
    validated before anything is written.

    Args:
        archive_path: Path to the .tar.gz archive
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive is not a .tar.gz / .tgz
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('tor-expert-bundle-linux-x86_64-14.0.4.tar.gz', '/tmp/tor')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    if not archive_path.name.lower().endswith((".tar.gz", ".tgz")):
        raise UnsupportedArchiveFormat(
            f"Unsupported archive format: {archive_path.name}. Supported: .tar.gz, .tgz"
        )

    destination.mkdir(parents=True, exist_ok=True)

    try:
        _extract_tar(archive_path, destination, "r:gz")
    except InsecureArchiveError:
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        members = tar.getmembers()

        # Validate all paths first
        for member in members:
            _validate_archive_path(member.name, destination)

        # The "data" filter keeps the executable bit but strips setuid and
        # absolute links. For older Python, paths were validated above.
        if hasattr(tarfile, "data_filter"):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def write_new_file(file_path: Union[str, Path], content: bytes) -> Path:
    """
    Write bytes to a file that must not exist yet.

    The existence check and creation are a single atomic operation, so a
    concurrent writer that created the file first causes this call to fail
    instead of silently interleaving.

    Raises:
        FileExistsError: If the file already exists at creation time
        OSError: If writing fails
    """
    file_path = Path(file_path)

    with open(file_path, "xb") as f:
        f.write(content)

    return file_path


def remove_file_if_exists(file_path: Union[str, Path]) -> bool:
    """
    Delete a file if it is present.

    Returns:
        True if a file was removed, False if there was nothing to remove

    Raises:
        OSError: If the file exists but cannot be deleted
    """
    file_path = Path(file_path)

    if not file_path.exists() and not file_path.is_symlink():
        return False

    file_path.unlink()
    return True


__all__ = [
    # Exceptions
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    # Path utilities
    "is_relative_to",
    "ensure_directory",
    # Archive extraction
    "extract_archive",
    # Safe file operations
    "write_new_file",
    "remove_file_if_exists",
]
