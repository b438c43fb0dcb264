"""Core orchestrator - scan, upload, render and publish a directory index."""
import logging
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..errors import PortalUnreachableError, UploadError
from ..models import IndexUploadResult, UploaderConfig
from ..protocols import IUploadClient
from ..services.api_client import PortalClient
from ..utils.events import BATCH_COMPLETE, SCAN_COMPLETE, EventEmitter

from .file_collector import IncludePredicate, scan_tree, skip_hidden_and_symlinks
from .index_page import INDEX_FILENAME, build_index_page
from .parallel import BatchUploader

logger = logging.getLogger(__name__)


class DirectoryUploadOrchestrator:
    """
    Orchestrates a directory upload using an injected upload client.

    Usage:
        config = UploaderConfig(portal="https://siasky.net")
        async with DirectoryUploadOrchestrator(config) as orchestrator:
            orchestrator.events.on("file_complete", lambda path, result: print(path))
            result = await orchestrator.run(Path("site"))
            print(result.address)
    """

    def __init__(
        self,
        config: Optional[UploaderConfig] = None,
        client: Optional[IUploadClient] = None,
        events: Optional[EventEmitter] = None,
    ):
        """
        Args:
            config: Upload configuration
            client: Pre-built upload client; a PortalClient is opened when omitted
            events: Event emitter receiving per-file progress
        """
        self._config = config or UploaderConfig()
        self._external_client = client
        self._client: Optional[IUploadClient] = client
        self._owned_client: Optional[PortalClient] = None
        self._events = events or EventEmitter()

    @property
    def events(self) -> EventEmitter:
        return self._events

    @property
    def config(self) -> UploaderConfig:
        return self._config

    async def __aenter__(self):
        if self._external_client is None:
            self._owned_client = PortalClient(self._config)
            await self._owned_client.__aenter__()
            self._client = self._owned_client
        return self

    async def __aexit__(self, *args):
        if self._owned_client:
            await self._owned_client.__aexit__(*args)
            self._owned_client = None
            self._client = None

    async def preflight(self) -> None:
        """Check the portal answers; only fatal with strict_preflight."""
        assert self._client is not None
        try:
            await self._client.check_reachable()
        except PortalUnreachableError as exc:
            if self._config.strict_preflight:
                raise
            logger.warning(f"{exc} (continuing anyway)")

    async def run(
        self,
        directory: Union[str, Path],
        include: IncludePredicate = skip_hidden_and_symlinks,
    ) -> IndexUploadResult:
        """
        Upload every accepted file under directory, then the index page.

        Raises:
            DirectoryReadError: if the tree cannot be scanned
            BatchUploadError: if any file failed to upload
            UploadError: if the index page failed to upload
            PortalUnreachableError: with strict_preflight and a dead portal
        """
        assert self._client is not None, "Use 'async with' context."
        directory = Path(directory)

        await self.preflight()

        tree = scan_tree(directory, include)
        files = list(tree.iter_files())
        logger.info(f"Found {len(files)} files to upload in {directory}")
        await self._events.emit(SCAN_COMPLETE, directory, len(files))

        batch = BatchUploader(self._client, self._config, self._events)
        identifiers = await batch.upload_all(files)
        await self._events.emit(BATCH_COMPLETE, len(identifiers))

        logger.info("Building html")
        page = build_index_page(tree, identifiers, str(directory), self._config.link_prefix)

        with tempfile.TemporaryDirectory(prefix="treeupload") as tmpdir:
            index_path = Path(tmpdir) / INDEX_FILENAME
            index_path.write_text(page, encoding="utf-8")
            result = await self._client.upload(index_path)

        if not result.success:
            raise UploadError(INDEX_FILENAME, result.error or "unknown error")

        address = f"{self._config.portal}{result.identifier}"
        logger.info(f"Index uploaded: {address}")
        return IndexUploadResult(
            identifier=result.identifier,
            address=address,
            file_count=len(files),
            identifiers=identifiers,
        )
