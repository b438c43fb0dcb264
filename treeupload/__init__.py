"""
treeupload - publish a local directory to a content-addressed portal.

Every file is uploaded concurrently, then an HTML index mirroring the
directory tree is generated, uploaded, and its address returned.

Usage:
    from treeupload import DirectoryUploadOrchestrator, UploaderConfig

    config = UploaderConfig(portal="https://siasky.net")
    async with DirectoryUploadOrchestrator(config) as orchestrator:
        result = await orchestrator.run(Path("public"))
    print(result.address)

    # Offline run with random identifiers
    config = UploaderConfig(mock_uploads=True)
"""
from .errors import (
    BatchUploadError,
    DirectoryReadError,
    MissingIdentifierError,
    PortalUnreachableError,
    TreeUploadError,
    UploadError,
)
from .models import (
    DirectoryNode,
    FileEntry,
    IndexUploadResult,
    UploadResult,
    UploadStatus,
    UploaderConfig,
)
from .orchestrator import (
    BatchUploader,
    DirectoryUploadOrchestrator,
    list_files,
    render,
    scan_tree,
    skip_hidden_and_symlinks,
)
from .services import PortalClient

__version__ = "0.1.0"
__all__ = [
    # Main
    "DirectoryUploadOrchestrator",
    "BatchUploader",
    "PortalClient",
    # Tree
    "scan_tree",
    "list_files",
    "render",
    "skip_hidden_and_symlinks",
    # Models
    "DirectoryNode",
    "FileEntry",
    "IndexUploadResult",
    "UploadResult",
    "UploadStatus",
    "UploaderConfig",
    # Errors
    "TreeUploadError",
    "DirectoryReadError",
    "UploadError",
    "BatchUploadError",
    "PortalUnreachableError",
    "MissingIdentifierError",
]
