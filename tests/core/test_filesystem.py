"""
Unit tests for archive extraction and safe removal.
"""

import io
import os
import tarfile
import zipfile

import pytest

from flutterinstall.core.exceptions import (
    ArchiveExtractionError,
    InsecureArchiveError,
    ToolCacheError,
    UnsupportedArchiveFormat,
)
from flutterinstall.core.filesystem import extract_archive, is_relative_to, safe_rmtree


class TestIsRelativeTo:
    def test_child(self, tmp_path):
        assert is_relative_to(tmp_path / "a" / "b", tmp_path)

    def test_sibling(self, tmp_path):
        assert not is_relative_to(tmp_path.parent / "other", tmp_path)


class TestExtractArchive:
    """Tests for extract_archive()."""

    def test_extract_tar_xz(self, sdk_tar_xz, tmp_path):
        destination = tmp_path / "out"

        extract_archive(sdk_tar_xz, destination)

        assert (destination / "flutter" / "bin" / "flutter").is_file()
        assert (destination / "flutter" / "version").read_text() == "2.10.0\n"

    def test_extract_zip(self, sdk_zip, tmp_path):
        destination = tmp_path / "out"

        extract_archive(sdk_zip, destination)

        assert (destination / "flutter" / "bin" / "flutter").is_file()
        assert (destination / "flutter" / "version").is_file()

    @pytest.mark.skipif(os.name == "nt", reason="Unix permissions")
    def test_zip_restores_executable_bit(self, sdk_zip, tmp_path):
        destination = tmp_path / "out"

        extract_archive(sdk_zip, destination)

        launcher = destination / "flutter" / "bin" / "flutter"
        assert os.access(launcher, os.X_OK)

    def test_extract_tar_gz(self, tmp_path):
        archive = tmp_path / "sdk.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            data = b"hello"
            info = tarfile.TarInfo("flutter/README")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "flutter" / "README").read_bytes() == b"hello"

    @pytest.mark.skipif(os.name == "nt", reason="Unix symlinks")
    def test_zip_symlink_is_recreated(self, tmp_path):
        archive = tmp_path / "framework.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            library = zipfile.ZipInfo("flutter/Versions/A/FlutterMacOS")
            library.external_attr = 0o100755 << 16
            zf.writestr(library, "binary")
            current = zipfile.ZipInfo("flutter/Versions/Current")
            current.external_attr = 0o120777 << 16
            zf.writestr(current, "A")

        extract_archive(archive, tmp_path / "out")

        link = tmp_path / "out" / "flutter" / "Versions" / "Current"
        assert link.is_symlink()
        assert os.readlink(link) == "A"
        assert (link / "FlutterMacOS").read_text() == "binary"

    @pytest.mark.skipif(os.name == "nt", reason="Unix symlinks")
    def test_zip_symlink_outside_destination_is_blocked(self, tmp_path):
        archive = tmp_path / "evil_link.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            link = zipfile.ZipInfo("flutter/escape")
            link.external_attr = 0o120777 << 16
            zf.writestr(link, "../../..")

        with pytest.raises(InsecureArchiveError, match="links outside"):
            extract_archive(archive, tmp_path / "out")
        assert not (tmp_path / "out" / "flutter" / "escape").is_symlink()

    def test_zip_traversal_is_blocked(self, tmp_path):
        archive = tmp_path / "evil.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("../escaped.txt", "nope")

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")
        assert not (tmp_path / "escaped.txt").exists()

    def test_tar_traversal_is_blocked(self, tmp_path):
        archive = tmp_path / "evil.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            info = tarfile.TarInfo("../../escaped.txt")
            info.size = 0
            tar.addfile(info, io.BytesIO(b""))

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")

    def test_unsupported_format(self, tmp_path):
        archive = tmp_path / "flutter.7z"
        archive.write_bytes(b"7z")

        with pytest.raises(UnsupportedArchiveFormat, match="flutter.7z"):
            extract_archive(archive, tmp_path / "out")

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="not found"):
            extract_archive(tmp_path / "missing.zip", tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "corrupt.zip"
        archive.write_bytes(b"not a zip file")

        with pytest.raises(ArchiveExtractionError, match="Failed to extract"):
            extract_archive(archive, tmp_path / "out")


class TestSafeRmtree:
    """Tests for safe_rmtree()."""

    def test_removes_tree(self, tmp_path):
        target = tmp_path / "tools" / "Flutter"
        (target / "bin").mkdir(parents=True)
        (target / "bin" / "flutter").write_text("x")

        safe_rmtree(target, require_prefix=tmp_path / "tools")

        assert not target.exists()

    def test_missing_path_is_ignored(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_refuses_outside_prefix(self, tmp_path):
        target = tmp_path / "elsewhere"
        target.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(target, require_prefix=tmp_path / "tools")
        assert target.exists()

    def test_file_is_rejected(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(ToolCacheError, match="not a directory"):
            safe_rmtree(target)
