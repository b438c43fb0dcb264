"""Orchestrator package - coordinates directory upload workflows."""
from .core import DirectoryUploadOrchestrator
from .file_collector import include_all, list_files, scan_tree, skip_hidden_and_symlinks
from .index_page import build_index_page, render, render_tree
from .parallel import BatchUploader

__all__ = [
    "DirectoryUploadOrchestrator",
    "BatchUploader",
    "scan_tree",
    "list_files",
    "include_all",
    "skip_hidden_and_symlinks",
    "render",
    "render_tree",
    "build_index_page",
]
