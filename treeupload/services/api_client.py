"""HTTP adapter for portal uploads."""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

import httpx

from ..errors import PortalUnreachableError
from ..models import UploadResult, UploaderConfig

logger = logging.getLogger(__name__)

IDENTIFIER_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
IDENTIFIER_LENGTH = 64
UPLOAD_ENDPOINT = "api/upload"


def random_identifier(length: int = IDENTIFIER_LENGTH) -> str:
    """Generate a fake identifier for mock uploads."""
    return "".join(random.choice(IDENTIFIER_ALPHABET) for _ in range(length))


class PortalClient:
    """
    HTTP client adapter for a content-addressed portal.

    Implements IUploadClient protocol. In mock mode no HTTP client is
    opened and every upload returns a random identifier.
    """

    def __init__(
        self,
        config: UploaderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def portal(self) -> str:
        return self._config.portal

    async def __aenter__(self):
        if not self._config.mock_uploads:
            self._client = httpx.AsyncClient(
                base_url=self._config.portal,
                timeout=self._config.timeout,
                transport=self._transport,
            )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("PortalClient not initialized. Use 'async with' context.")
        return self._client

    async def check_reachable(self) -> None:
        if self._config.mock_uploads:
            return
        client = self._require_client()
        try:
            response = await client.get("")
        except httpx.HTTPError as exc:
            raise PortalUnreachableError(self.portal, str(exc) or type(exc).__name__) from exc
        if response.status_code != 200:
            raise PortalUnreachableError(self.portal, f"HTTP {response.status_code}")

    async def upload(self, file_path: Path) -> UploadResult:
        file_path = Path(file_path)
        filename = file_path.name

        if self._config.mock_uploads:
            return UploadResult.ok(filename, random_identifier())

        client = self._require_client()
        try:
            with file_path.open("rb") as fh:
                response = await client.post(
                    UPLOAD_ENDPOINT,
                    params={"filename": filename},
                    files={"file": (filename, fh)},
                )
        except (httpx.HTTPError, OSError) as exc:
            error_msg = str(exc) or type(exc).__name__
            logger.debug(f"Upload of {file_path} raised: {error_msg}")
            return UploadResult.fail(filename, f"Upload failed, {error_msg}")

        if not response.is_success:
            return UploadResult.fail(
                filename,
                f"API error {response.status_code} on POST {UPLOAD_ENDPOINT}: {response.text}",
            )

        try:
            identifier = response.json()["identifier"]
        except (ValueError, KeyError, TypeError):
            return UploadResult.fail(filename, f"Malformed response from portal: {response.text[:200]}")
        if not isinstance(identifier, str) or not identifier:
            return UploadResult.fail(filename, f"Malformed identifier from portal: {identifier!r}")

        return UploadResult.ok(filename, identifier)
