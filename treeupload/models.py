"""
Models for treeupload.

Immutable dataclasses for configuration and per-file results, plus the
in-memory directory tree shared by the upload and rendering stages.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Union


DEFAULT_PORTAL = "https://siasky.net/"
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_LINK_PREFIX = "sia://"

# str(file path) -> content identifier
IdentifierMap = Dict[str, str]

_TRUTHY = {"1", "true", "yes", "on"}


def normalize_portal(portal: str) -> str:
    """Return the portal URL with exactly one trailing slash."""
    return portal.strip().rstrip("/") + "/"


def _env_flag(environ: Mapping[str, str], key: str) -> bool:
    return environ.get(key, "").strip().lower() in _TRUTHY


class UploadStatus(Enum):
    """Upload operation status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadResult:
    """Immutable result of a single file upload."""
    filename: str
    status: UploadStatus = UploadStatus.SUCCESS
    identifier: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @classmethod
    def ok(cls, filename: str, identifier: str):
        return cls(
            filename=filename,
            status=UploadStatus.SUCCESS,
            identifier=identifier,
        )

    @classmethod
    def fail(cls, filename: str, error: str):
        return cls(
            filename=filename,
            status=UploadStatus.FAILED,
            error=error,
        )


@dataclass(frozen=True)
class FileEntry:
    """A single directory listing entry."""
    path: Path
    is_dir: bool
    is_symlink: bool = False

    @property
    def name(self) -> str:
        return self.path.name


@dataclass
class DirectoryNode:
    """A scanned directory and its accepted children, in listing order."""
    entry: FileEntry
    children: List[Union["DirectoryNode", FileEntry]] = field(default_factory=list)

    @property
    def path(self) -> Path:
        return self.entry.path

    @property
    def name(self) -> str:
        return self.entry.name

    def iter_files(self) -> Iterator[Path]:
        """Yield file paths depth-first, in the same order they are rendered."""
        for child in self.children:
            if isinstance(child, DirectoryNode):
                yield from child.iter_files()
            else:
                yield child.path

    @property
    def file_count(self) -> int:
        return sum(1 for _ in self.iter_files())

    @property
    def depth(self) -> int:
        """Nesting depth of subdirectories below this node (0 for a flat directory)."""
        subdirs = [c for c in self.children if isinstance(c, DirectoryNode)]
        if not subdirs:
            return 0
        return 1 + max(d.depth for d in subdirs)


@dataclass(frozen=True)
class UploaderConfig:
    """Immutable configuration passed explicitly to clients and uploaders."""
    portal: str = DEFAULT_PORTAL
    mock_uploads: bool = False
    verbose: bool = False
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    fail_fast: bool = False
    timeout: Optional[float] = None
    link_prefix: str = DEFAULT_LINK_PREFIX
    strict_preflight: bool = False

    def __post_init__(self):
        object.__setattr__(self, "portal", normalize_portal(self.portal))
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str], **overrides) -> "UploaderConfig":
        """
        Build a config from environment variables.

        Explicit keyword overrides win over the environment; ``None`` values
        are ignored so CLI options that were not given fall through.
        """
        values = {
            "mock_uploads": _env_flag(environ, "MOCK_UPLOADS"),
            "verbose": _env_flag(environ, "DEBUG"),
        }
        portal = environ.get("TREEUPLOAD_PORTAL")
        if portal:
            values["portal"] = portal
        concurrency = environ.get("TREEUPLOAD_MAX_CONCURRENCY")
        if concurrency:
            try:
                values["max_concurrency"] = int(concurrency)
            except ValueError as exc:
                raise ValueError(
                    f"TREEUPLOAD_MAX_CONCURRENCY must be an integer, got {concurrency!r}"
                ) from exc

        for key, value in overrides.items():
            if value is None:
                continue
            if isinstance(value, bool) and not value and key in values:
                # store_true flags only turn features on
                continue
            values[key] = value
        return cls(**values)


@dataclass
class IndexUploadResult:
    """Result of a full directory upload."""
    identifier: str
    address: str
    file_count: int
    identifiers: IdentifierMap = field(default_factory=dict)
