"""
Protocols (Interfaces) for Dependency Inversion.

The batch uploader and orchestrator only depend on these, so tests and
alternative portals can be injected.
"""
from pathlib import Path
from typing import Protocol, runtime_checkable

from .models import UploadResult


@runtime_checkable
class IUploadClient(Protocol):
    """Interface for single-file uploads to a portal."""

    async def upload(self, file_path: Path) -> UploadResult:
        """Upload one file and report the outcome as a value."""
        ...

    async def check_reachable(self) -> None:
        """Raise PortalUnreachableError if the portal does not answer."""
        ...
