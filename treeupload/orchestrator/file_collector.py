"""File collection utilities for directory uploads."""
import logging
import os
from pathlib import Path
from typing import Callable, List, Union

from ..errors import DirectoryReadError
from ..models import DirectoryNode, FileEntry

logger = logging.getLogger(__name__)

IncludePredicate = Callable[[FileEntry], bool]


def skip_hidden_and_symlinks(entry: FileEntry) -> bool:
    """Default filter: skip symbolic links and dot-files for now."""
    return not entry.is_symlink and not entry.name.startswith(".")


def include_all(entry: FileEntry) -> bool:
    return True


def _list_directory(directory: Path) -> List[FileEntry]:
    try:
        with os.scandir(directory) as it:
            entries = [
                FileEntry(
                    path=directory / item.name,
                    is_dir=item.is_dir(follow_symlinks=False),
                    is_symlink=item.is_symlink(),
                )
                for item in it
            ]
    except OSError as exc:
        raise DirectoryReadError(directory, exc) from exc
    return sorted(entries, key=lambda e: e.name)


def scan_tree(root: Union[str, Path], include: IncludePredicate = skip_hidden_and_symlinks) -> DirectoryNode:
    """
    Scan a directory tree once.

    The include predicate is applied to every entry, files and directories
    alike. A rejected directory drops its whole subtree.

    Args:
        root: Root directory to scan
        include: Predicate deciding which entries are kept

    Returns:
        DirectoryNode for root with children ordered by name

    Raises:
        DirectoryReadError: if any directory cannot be listed
    """
    root = Path(root)
    node = DirectoryNode(entry=FileEntry(path=root, is_dir=True))
    for entry in _list_directory(root):
        if not include(entry):
            logger.debug(f"Skipping {entry.path}")
            continue
        if entry.is_dir:
            node.children.append(scan_tree(entry.path, include))
        else:
            node.children.append(entry)
    return node


def list_files(root: Union[str, Path], include: IncludePredicate = skip_hidden_and_symlinks) -> List[Path]:
    """Collect all accepted files recursively, in render order."""
    return list(scan_tree(root, include).iter_files())
