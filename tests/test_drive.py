from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from dialogue_api.core.errors import ConfigurationError, StorageError
from dialogue_api.services import drive as drive_module
from dialogue_api.services.drive import DEFAULT_MIME_TYPE, DriveClient


def make_client(service, **kwargs):
    client = DriveClient(
        credentials_json=None,
        folder_id="folder-1",
        service_factory=lambda credentials: service,
        **kwargs,
    )
    # учётные данные не нужны: service подменён
    client._credentials = object()
    return client


def http_error(status: int) -> HttpError:
    return HttpError(httplib2.Response({"status": status}), b'{"error": {"message": "denied"}}')


@pytest.mark.asyncio
async def test_list_files_queries_folder():
    service = MagicMock()
    service.files.return_value.list.return_value.execute.return_value = {
        "files": [{"id": "a1", "name": "audio1.mp3"}, {"id": "t1", "name": "transcript1.txt"}]
    }
    client = make_client(service, page_size=1000)

    files = await client.list_files()

    assert [(f.id, f.name) for f in files] == [("a1", "audio1.mp3"), ("t1", "transcript1.txt")]
    kwargs = service.files.return_value.list.call_args.kwargs
    assert kwargs["q"] == "'folder-1' in parents and trashed = false"
    assert kwargs["pageSize"] == 1000
    assert kwargs["fields"] == "files(id, name)"


@pytest.mark.asyncio
async def test_list_files_by_exact_name_escapes_quotes():
    service = MagicMock()
    service.files.return_value.list.return_value.execute.return_value = {}
    client = make_client(service)

    files = await client.list_files(name="it's.txt")

    assert files == []
    q = service.files.return_value.list.call_args.kwargs["q"]
    assert q.endswith("and name = 'it\\'s.txt'")


@pytest.mark.asyncio
async def test_fetch_text_decodes_utf8():
    service = MagicMock()
    service.files.return_value.get_media.return_value.execute.return_value = (
        "Привет, мир".encode("utf-8")
    )
    client = make_client(service)

    assert await client.fetch_text("t1") == "Привет, мир"
    service.files.return_value.get_media.assert_called_with(fileId="t1")


@pytest.mark.asyncio
async def test_http_error_becomes_storage_error():
    service = MagicMock()
    service.files.return_value.list.return_value.execute.side_effect = http_error(403)
    client = make_client(service)

    with pytest.raises(StorageError, match="listing failed"):
        await client.list_files()


@pytest.mark.asyncio
async def test_missing_credentials_surface_as_configuration_error():
    client = DriveClient(credentials_json=None, folder_id="folder-1",
                         service_factory=lambda credentials: MagicMock())

    with pytest.raises(ConfigurationError):
        await client.list_files()


class FakeDownloader:
    """Имитирует MediaIoBaseDownload: пишет по куску в fd за вызов"""
    parts = [b"ID3", b"\x00\x01", b"\xff"]

    def __init__(self, fd, request, chunksize):
        self.fd = fd
        self.index = 0
        FakeDownloader.chunksize = chunksize

    def next_chunk(self):
        self.fd.write(self.parts[self.index])
        self.index += 1
        return None, self.index == len(self.parts)


@pytest.mark.asyncio
async def test_open_stream_yields_chunks_lazily(monkeypatch):
    monkeypatch.setattr(drive_module, "MediaIoBaseDownload", FakeDownloader)
    service = MagicMock()
    service.files.return_value.get.return_value.execute.return_value = {
        "mimeType": "audio/mpeg", "size": "6"
    }
    client = make_client(service, chunk_size=2048)

    stream = await client.open_stream("a1")

    assert stream.mime_type == "audio/mpeg"
    assert stream.size == 6
    # скачивание ещё не начиналось
    service.files.return_value.get_media.assert_not_called()
    assert list(stream.chunks) == FakeDownloader.parts
    assert FakeDownloader.chunksize == 2048


@pytest.mark.asyncio
async def test_open_stream_defaults_mime_type(monkeypatch):
    monkeypatch.setattr(drive_module, "MediaIoBaseDownload", FakeDownloader)
    service = MagicMock()
    service.files.return_value.get.return_value.execute.return_value = {}
    client = make_client(service)

    stream = await client.open_stream("a1")

    assert stream.mime_type == DEFAULT_MIME_TYPE
    assert stream.size is None


@pytest.mark.asyncio
async def test_open_stream_missing_file_fails_before_streaming():
    service = MagicMock()
    service.files.return_value.get.return_value.execute.side_effect = http_error(404)
    client = make_client(service)

    with pytest.raises(StorageError, match="metadata failed"):
        await client.open_stream("nope")


@pytest.mark.asyncio
async def test_network_error_becomes_storage_error():
    service = MagicMock()
    service.files.return_value.list.return_value.execute.side_effect = (
        httplib2.ServerNotFoundError("Unable to find the server at www.googleapis.com")
    )
    client = make_client(service)

    with pytest.raises(StorageError, match="listing failed"):
        await client.list_files()


@pytest.mark.asyncio
async def test_fetch_text_replaces_invalid_utf8():
    service = MagicMock()
    service.files.return_value.get_media.return_value.execute.return_value = b"ok \xff end"
    client = make_client(service)

    assert await client.fetch_text("t1") == "ok � end"
