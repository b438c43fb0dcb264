from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import asyncio
import logging

from ..errors import BatchUploadError
from ..models import IdentifierMap, UploadResult, UploaderConfig
from ..protocols import IUploadClient
from ..utils.events import FILE_COMPLETE, FILE_FAIL, EventEmitter
logger = logging.getLogger(__name__)


class BatchUploader:
    """
    Uploads a set of files concurrently and collects their identifiers.

    - At most ``config.max_concurrency`` uploads are in flight
    - Every file gets an attempt; the batch waits for all of them to settle
    - The identifier map is only written by the collecting loop
    - Any failure voids the whole batch (BatchUploadError)
    """

    def __init__(
        self,
        client: IUploadClient,
        config: UploaderConfig,
        events: Optional[EventEmitter] = None,
    ):
        self._client = client
        self._config = config
        self._events = events or EventEmitter()
        self._semaphore = asyncio.Semaphore(config.max_concurrency)

    @property
    def events(self) -> EventEmitter:
        return self._events

    async def upload_all(self, files: Sequence[Path]) -> IdentifierMap:
        """
        Upload all files and return the path -> identifier map.

        Raises:
            BatchUploadError: if at least one file failed to upload
        """
        if not files:
            return {}

        logger.info(
            f"Starting upload: {len(files)} files "
            f"(max {self._config.max_concurrency} parallel)"
        )

        tasks = [
            asyncio.create_task(self._upload_single_file(Path(file_path), idx, len(files)))
            for idx, file_path in enumerate(files, 1)
        ]

        identifiers: IdentifierMap = {}
        failures: List[Tuple[str, str]] = []

        try:
            for next_done in asyncio.as_completed(tasks):
                file_path, result = await next_done

                if result.success:
                    identifiers[str(file_path)] = result.identifier
                    await self._events.emit(FILE_COMPLETE, file_path, result)
                else:
                    failures.append((str(file_path), result.error or "unknown error"))
                    await self._events.emit(FILE_FAIL, file_path, result)
                    if self._config.fail_fast:
                        logger.info("Cancelling remaining uploads after first failure")
                        break
        finally:
            await self._cancel_remaining_tasks(tasks)

        logger.info(f"File uploads complete: {len(identifiers)} successful, {len(failures)} failed")

        if failures:
            raise BatchUploadError(failures, total=len(files))
        return identifiers

    async def _upload_single_file(
        self,
        file_path: Path,
        index: int,
        total_files: int,
    ) -> Tuple[Path, UploadResult]:
        """Upload one file under the semaphore, turning exceptions into failures."""
        async with self._semaphore:
            logger.debug(f"[{index}/{total_files}] Uploading: {file_path}")
            try:
                result = await self._client.upload(file_path)
            except Exception as e:
                error_msg = str(e) or f"{type(e).__name__}"
                logger.error(f"[{index}/{total_files}] Error uploading {file_path.name}: {error_msg}")
                result = UploadResult.fail(file_path.name, f"Could not upload file {file_path}: {error_msg}")

        status = "✓ Success" if result.success else "✗ Failed"
        logger.info(f"[{index}/{total_files}] {status}: {file_path.name}")
        return file_path, result

    async def _cancel_remaining_tasks(self, tasks: List[asyncio.Task]) -> None:
        """Cancel all remaining tasks gracefully."""
        for task in tasks:
            if not task.done():
                task.cancel()

        await asyncio.gather(*tasks, return_exceptions=True)
