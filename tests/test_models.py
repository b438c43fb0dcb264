"""Tests for treeupload models."""
from pathlib import Path

import pytest

from treeupload.models import (
    DEFAULT_PORTAL,
    DirectoryNode,
    FileEntry,
    UploadResult,
    UploadStatus,
    UploaderConfig,
    normalize_portal,
)


class TestUploadResult:
    def test_ok_result(self):
        result = UploadResult.ok(filename="a.txt", identifier="abc123")
        assert result.success is True
        assert result.status == UploadStatus.SUCCESS
        assert result.identifier == "abc123"
        assert result.error is None

    def test_fail_result(self):
        result = UploadResult.fail(filename="a.txt", error="Upload failed")
        assert result.success is False
        assert result.status == UploadStatus.FAILED
        assert result.error == "Upload failed"
        assert result.identifier is None

    def test_immutable(self):
        result = UploadResult.ok("a.txt", "abc")
        with pytest.raises(Exception):
            result.identifier = "xyz"


class TestNormalizePortal:
    @pytest.mark.parametrize(
        "portal",
        ["https://siasky.net", "https://siasky.net/", "https://siasky.net//", " https://siasky.net "],
    )
    def test_exactly_one_trailing_slash(self, portal):
        assert normalize_portal(portal) == "https://siasky.net/"

    def test_config_normalizes_portal(self):
        assert UploaderConfig(portal="http://localhost:9980").portal == "http://localhost:9980/"


class TestUploaderConfig:
    def test_defaults(self):
        config = UploaderConfig()
        assert config.portal == DEFAULT_PORTAL
        assert config.mock_uploads is False
        assert config.max_concurrency == 8
        assert config.fail_fast is False
        assert config.timeout is None

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError, match="max_concurrency"):
            UploaderConfig(max_concurrency=0)

    def test_from_env_reads_flags(self):
        config = UploaderConfig.from_env(
            {
                "MOCK_UPLOADS": "1",
                "DEBUG": "true",
                "TREEUPLOAD_PORTAL": "https://portal.example",
                "TREEUPLOAD_MAX_CONCURRENCY": "3",
            }
        )
        assert config.mock_uploads is True
        assert config.verbose is True
        assert config.portal == "https://portal.example/"
        assert config.max_concurrency == 3

    def test_from_env_overrides_win(self):
        config = UploaderConfig.from_env(
            {"TREEUPLOAD_PORTAL": "https://env.example", "TREEUPLOAD_MAX_CONCURRENCY": "3"},
            portal="https://cli.example",
            max_concurrency=None,
            mock_uploads=True,
        )
        assert config.portal == "https://cli.example/"
        assert config.max_concurrency == 3
        assert config.mock_uploads is True

    def test_from_env_false_flag_does_not_disable_env(self):
        config = UploaderConfig.from_env({"MOCK_UPLOADS": "yes"}, mock_uploads=False)
        assert config.mock_uploads is True

    def test_from_env_invalid_concurrency(self):
        with pytest.raises(ValueError, match="TREEUPLOAD_MAX_CONCURRENCY"):
            UploaderConfig.from_env({"TREEUPLOAD_MAX_CONCURRENCY": "many"})


class TestDirectoryNode:
    def test_iter_files_depth_and_count(self):
        root = DirectoryNode(entry=FileEntry(Path("r"), is_dir=True))
        sub = DirectoryNode(entry=FileEntry(Path("r/sub"), is_dir=True))
        sub.children.append(FileEntry(Path("r/sub/b"), is_dir=False))
        root.children.extend([FileEntry(Path("r/a"), is_dir=False), sub, FileEntry(Path("r/c"), is_dir=False)])

        assert list(root.iter_files()) == [Path("r/a"), Path("r/sub/b"), Path("r/c")]
        assert root.file_count == 3
        assert root.depth == 1
        assert sub.depth == 0
        assert root.name == "r"
