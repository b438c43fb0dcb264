"""Tests for the directory upload orchestrator."""

import pytest

from treeupload.errors import BatchUploadError, DirectoryReadError, PortalUnreachableError, UploadError
from treeupload.models import UploaderConfig
from treeupload.orchestrator import DirectoryUploadOrchestrator
from treeupload.orchestrator.index_page import INDEX_FILENAME
from treeupload.utils.events import BATCH_COMPLETE, SCAN_COMPLETE

from conftest import FakePortalClient


@pytest.mark.asyncio
async def test_run_uploads_files_then_index(sample_tree, fake_client):
    config = UploaderConfig(portal="https://portal.example")

    async with DirectoryUploadOrchestrator(config, client=fake_client) as orchestrator:
        result = await orchestrator.run(sample_tree)

    assert fake_client.reachable_checks == 1
    assert result.file_count == 4
    assert result.identifier == f"id-{INDEX_FILENAME}"
    assert result.address == f"https://portal.example/id-{INDEX_FILENAME}"

    # index is uploaded last, after every file
    assert fake_client.uploaded[-1].name == INDEX_FILENAME
    assert {p.name for p in fake_client.uploaded[:-1]} == {"a.txt", "guide.md", "notes.txt", "z.txt"}

    page = fake_client.contents[INDEX_FILENAME]
    for name in ("a.txt", "guide.md", "notes.txt", "z.txt"):
        assert f'<a href="sia://id-{name}">{name}</a>' in page
    assert f"Contents of {sample_tree}" in page


@pytest.mark.asyncio
async def test_temporary_index_is_removed(sample_tree, fake_client):
    async with DirectoryUploadOrchestrator(UploaderConfig(), client=fake_client) as orchestrator:
        await orchestrator.run(sample_tree)

    index_path = fake_client.uploaded[-1]
    assert not index_path.exists()
    assert not index_path.parent.exists()


@pytest.mark.asyncio
async def test_batch_failure_stops_before_index(sample_tree):
    client = FakePortalClient(fail_names={"guide.md"})

    async with DirectoryUploadOrchestrator(UploaderConfig(), client=client) as orchestrator:
        with pytest.raises(BatchUploadError):
            await orchestrator.run(sample_tree)

    assert INDEX_FILENAME not in {p.name for p in client.uploaded}
    assert len(client.uploaded) == 4


@pytest.mark.asyncio
async def test_index_upload_failure_raises_upload_error(sample_tree):
    client = FakePortalClient(fail_names={INDEX_FILENAME})

    async with DirectoryUploadOrchestrator(UploaderConfig(), client=client) as orchestrator:
        with pytest.raises(UploadError):
            await orchestrator.run(sample_tree)

    assert not client.uploaded[-1].parent.exists()


@pytest.mark.asyncio
async def test_missing_directory_raises(tmp_path, fake_client):
    async with DirectoryUploadOrchestrator(UploaderConfig(), client=fake_client) as orchestrator:
        with pytest.raises(DirectoryReadError):
            await orchestrator.run(tmp_path / "missing")

    assert fake_client.uploaded == []


@pytest.mark.asyncio
async def test_empty_directory_uploads_only_index(tmp_path, fake_client):
    async with DirectoryUploadOrchestrator(UploaderConfig(), client=fake_client) as orchestrator:
        result = await orchestrator.run(tmp_path)

    assert result.file_count == 0
    assert [p.name for p in fake_client.uploaded] == [INDEX_FILENAME]
    assert '<ul role="tree" aria-labelledby="tree_label"></ul>' in fake_client.contents[INDEX_FILENAME]


class UnreachableClient(FakePortalClient):
    async def check_reachable(self):
        raise PortalUnreachableError("https://down.example/", "HTTP 502")


@pytest.mark.asyncio
async def test_unreachable_portal_is_advisory(sample_tree):
    client = UnreachableClient()

    async with DirectoryUploadOrchestrator(UploaderConfig(), client=client) as orchestrator:
        result = await orchestrator.run(sample_tree)

    assert result.file_count == 4


@pytest.mark.asyncio
async def test_unreachable_portal_strict(sample_tree):
    client = UnreachableClient()

    async with DirectoryUploadOrchestrator(UploaderConfig(strict_preflight=True), client=client) as orchestrator:
        with pytest.raises(PortalUnreachableError):
            await orchestrator.run(sample_tree)

    assert client.uploaded == []


@pytest.mark.asyncio
async def test_stage_events(sample_tree, fake_client):
    seen = []

    async with DirectoryUploadOrchestrator(UploaderConfig(), client=fake_client) as orchestrator:
        orchestrator.events.on(SCAN_COMPLETE, lambda directory, total: seen.append(("scan", total)))
        orchestrator.events.on(BATCH_COMPLETE, lambda uploaded: seen.append(("batch", uploaded)))
        await orchestrator.run(sample_tree)

    assert seen == [("scan", 4), ("batch", 4)]


@pytest.mark.asyncio
async def test_mock_mode_without_injected_client(sample_tree):
    config = UploaderConfig(portal="https://portal.example", mock_uploads=True)

    async with DirectoryUploadOrchestrator(config) as orchestrator:
        result = await orchestrator.run(sample_tree)

    assert result.address.startswith("https://portal.example/")
    assert len(result.identifier) == 64
    assert len(result.identifiers) == 4
