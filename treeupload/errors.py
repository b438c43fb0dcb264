"""Error hierarchy for directory uploads."""
from pathlib import Path
from typing import List, Tuple, Union


class TreeUploadError(RuntimeError):
    """Base class for all treeupload failures."""


class DirectoryReadError(TreeUploadError):
    """Raised when a directory cannot be listed."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"cannot read directory {self.path}: {cause}")


class UploadError(TreeUploadError):
    """Raised when a single upload that the run depends on fails."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"upload of {self.path} failed: {reason}")


class BatchUploadError(TreeUploadError):
    """Raised when one or more files of a batch failed to upload."""

    def __init__(self, failures: List[Tuple[str, str]], total: int):
        self.failures = failures
        self.total = total
        first_path, first_reason = failures[0]
        super().__init__(
            f"{len(failures)} of {total} uploads failed, first: {first_path}: {first_reason}"
        )


class PortalUnreachableError(TreeUploadError):
    """Raised when the portal does not answer the pre-flight check."""

    def __init__(self, portal: str, reason: str):
        self.portal = portal
        self.reason = reason
        super().__init__(f"failed to reach portal at {portal}: {reason}")


class MissingIdentifierError(TreeUploadError, KeyError):
    """Raised when the index references a file that was never uploaded."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        RuntimeError.__init__(self, f"no identifier for {self.path}")

    def __str__(self) -> str:
        return f"no identifier for {self.path}"
