"""
Tests for filesystem utilities.
"""

import io
import os
import sys
import tarfile

import pytest

from torkit.core.filesystem import (
    ArchiveExtractionError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
    ensure_directory,
    extract_archive,
    is_relative_to,
    remove_file_if_exists,
    write_new_file,
)
from tests.fixtures.bundles import make_bundle_archive


def _write_archive(path, files, **kwargs):
    path.write_bytes(make_bundle_archive(files, **kwargs))
    return path


class TestPathUtilities:
    """Test path helpers."""

    def test_is_relative_to(self, tmp_path):
        assert is_relative_to(tmp_path / "a" / "b", tmp_path)
        assert not is_relative_to(tmp_path.parent, tmp_path)

    def test_ensure_directory_creates_parents(self, tmp_path):
        """Test nested directories are created."""
        target = tmp_path / "a" / "b" / "c"

        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_ensure_directory_idempotent(self, tmp_path):
        """Test an existing directory is not an error."""
        ensure_directory(tmp_path / "cache")
        ensure_directory(tmp_path / "cache")

        assert (tmp_path / "cache").is_dir()

    def test_ensure_directory_under_file(self, tmp_path):
        """Test a regular file in the way raises OSError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(OSError):
            ensure_directory(blocker / "cache")


class TestWriteNewFile:
    """Test exclusive-create writes."""

    def test_write(self, tmp_path):
        """Test bytes are written to a new file."""
        target = write_new_file(tmp_path / "bundle.tar.gz", b"data")

        assert target.read_bytes() == b"data"

    def test_existing_file(self, tmp_path):
        """Test an existing file is never overwritten."""
        target = tmp_path / "bundle.tar.gz"
        target.write_bytes(b"old")

        with pytest.raises(FileExistsError):
            write_new_file(target, b"new")

        assert target.read_bytes() == b"old"

    def test_missing_parent(self, tmp_path):
        """Test writing into a missing directory raises OSError."""
        with pytest.raises(OSError):
            write_new_file(tmp_path / "missing" / "bundle.tar.gz", b"data")


class TestRemoveFileIfExists:
    """Test stale file removal."""

    def test_removes_file(self, tmp_path):
        target = tmp_path / "stale.tar.gz"
        target.write_bytes(b"stale")

        assert remove_file_if_exists(target) is True
        assert not target.exists()

    def test_missing_file(self, tmp_path):
        assert remove_file_if_exists(tmp_path / "absent.tar.gz") is False

    def test_directory_raises(self, tmp_path):
        """Test a directory in place of the file cannot be removed."""
        target = tmp_path / "bundle.tar.gz"
        target.mkdir()

        with pytest.raises(OSError):
            remove_file_if_exists(target)


class TestExtractArchive:
    """Test tar.gz extraction."""

    def test_extract(self, tmp_path):
        """Test members land under the destination."""
        archive = _write_archive(
            tmp_path / "bundle.tar.gz",
            {"tor/tor": "#!/bin/sh\n", "data/geoip": "# geoip\n"},
        )
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert (dest / "tor" / "tor").read_text() == "#!/bin/sh\n"
        assert (dest / "data" / "geoip").exists()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_preserves_executable_bit(self, tmp_path):
        """Test the binary stays executable after extraction."""
        archive = _write_archive(tmp_path / "bundle.tar.gz", {"tor/tor": "#!/bin/sh\n"})
        dest = tmp_path / "out"

        extract_archive(archive, dest)

        assert os.access(dest / "tor" / "tor", os.X_OK)

    def test_overwrites_existing_files(self, tmp_path):
        """Test existing files are replaced by archive contents."""
        archive = _write_archive(tmp_path / "bundle.tar.gz", {"data/geoip": "new\n"})
        dest = tmp_path / "out"
        (dest / "data").mkdir(parents=True)
        (dest / "data" / "geoip").write_text("old\n")

        extract_archive(archive, dest)

        assert (dest / "data" / "geoip").read_text() == "new\n"

    def test_takes_only_archive_and_destination(self, tmp_path):
        """Test extraction has no progress reporting hook."""
        archive = _write_archive(tmp_path / "bundle.tgz", {"a": "1"})

        with pytest.raises(TypeError):
            extract_archive(archive, tmp_path / "out", lambda current, total: None)

        assert not (tmp_path / "out").exists()

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="not found"):
            extract_archive(tmp_path / "absent.tar.gz", tmp_path / "out")

    def test_unsupported_format(self, tmp_path):
        archive = tmp_path / "bundle.zip"
        archive.write_bytes(b"PK")

        with pytest.raises(UnsupportedArchiveFormat):
            extract_archive(archive, tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        """Test a truncated archive raises ArchiveExtractionError."""
        archive = tmp_path / "bundle.tar.gz"
        archive.write_bytes(b"this is not gzip data")

        with pytest.raises(ArchiveExtractionError):
            extract_archive(archive, tmp_path / "out")

    def test_directory_traversal_blocked(self, tmp_path):
        """Test members escaping the destination are rejected."""
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
            info = tarfile.TarInfo("../../escape.txt")
            info.size = 4
            tar.addfile(info, io.BytesIO(b"evil"))
        archive = tmp_path / "bundle.tar.gz"
        archive.write_bytes(buffer.getvalue())
        dest = tmp_path / "deep" / "out"

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, dest)

        assert not (tmp_path / "escape.txt").exists()
