"""Shared fixtures for treeupload tests."""
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest

from treeupload.models import UploadResult


class FakePortalClient:
    """In-memory upload client recording every call."""

    def __init__(self, fail_names: Optional[Set[str]] = None):
        self.fail_names = fail_names or set()
        self.uploaded: List[Path] = []
        self.contents: Dict[str, str] = {}
        self.reachable_checks = 0

    async def upload(self, file_path: Path) -> UploadResult:
        file_path = Path(file_path)
        self.uploaded.append(file_path)
        if file_path.name in self.fail_names:
            return UploadResult.fail(file_path.name, f"portal rejected {file_path.name}")
        self.contents[file_path.name] = file_path.read_text(encoding="utf-8")
        return UploadResult.ok(file_path.name, f"id-{file_path.name}")

    async def check_reachable(self) -> None:
        self.reachable_checks += 1


@pytest.fixture
def fake_client():
    return FakePortalClient()


@pytest.fixture
def sample_tree(tmp_path):
    """
    root/
      a.txt
      .hidden
      docs/
        guide.md
        deep/
          notes.txt
      .git/
        config
      z.txt
    """
    root = tmp_path / "site"
    root.mkdir()
    (root / "a.txt").write_text("a", encoding="utf-8")
    (root / ".hidden").write_text("h", encoding="utf-8")
    (root / "docs").mkdir()
    (root / "docs" / "guide.md").write_text("guide", encoding="utf-8")
    (root / "docs" / "deep").mkdir()
    (root / "docs" / "deep" / "notes.txt").write_text("notes", encoding="utf-8")
    (root / ".git").mkdir()
    (root / ".git" / "config").write_text("cfg", encoding="utf-8")
    (root / "z.txt").write_text("z", encoding="utf-8")
    return root
